# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""``pipeline-runner`` command-line entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import httpx
import yaml

from pipeline_runner import __version__
from pipeline_runner.core.pipelines.exceptions import PipelineDomainError
from pipeline_runner.core.pipelines.repositories import (
    InteractiveUI,
    JobDirectory,
    OutputSink,
    ParameterStore,
)
from pipeline_runner.core.pipelines.value_objects import (
    BuildStatus,
    JobName,
    PipelineOptions,
    SourceDocument,
)
from pipeline_runner.infra.jenkins_client import JenkinsClient
from pipeline_runner.infra.logging_config import setup_logging
from pipeline_runner.infra.param_file_store import JsonParameterStore
from pipeline_runner.infra.settings import Settings
from pipeline_runner.orchestrator.pipelines.dtos import BuildResult, CommandDescriptor
from pipeline_runner.orchestrator.pipelines.use_cases import (
    LogRelayUseCase,
    PipelineCommands,
    PipelineOrchestrator,
    ResolveParametersUseCase,
    SharedLibraryBrowser,
)

from .console_ui import ConsoleUI, StdoutSink

logger = logging.getLogger(__name__)

QUIT_COMMAND = CommandDescriptor(name="quit", label="Quit", description="Leave the session.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipeline-runner",
        description="Run Jenkins scripted pipelines from local Groovy files",
    )
    parser.add_argument("--config", help="Settings YAML file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (default: LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    execute = subparsers.add_parser("execute", help="Execute a groovy file as a pipeline job")
    execute.add_argument("file", type=Path, help="Pipeline script; its base name is the job name")

    update = subparsers.add_parser("update", help="Update a pipeline job without building it")
    update.add_argument("file", type=Path, help="Pipeline script; its base name is the job name")

    reference = subparsers.add_parser("reference", help="Browse the Shared Library reference")
    reference.add_argument("--job", help="Include this job's Shared Libraries")

    subparsers.add_parser("download-log", help="Select a job and build to download the log")

    session = subparsers.add_parser("session", help="Interactive menu for a groovy file")
    session.add_argument("file", type=Path, help="Pipeline script; its base name is the job name")
    return parser


def build_commands(
    directory: JobDirectory,
    ui: InteractiveUI,
    sink: OutputSink,
    options: PipelineOptions,
    store: Optional[ParameterStore] = None,
) -> PipelineCommands:
    """Wire the use cases behind the command menu."""
    resolver = ResolveParametersUseCase(store or JsonParameterStore(), ui)
    return PipelineCommands(
        orchestrator=PipelineOrchestrator(directory, ui, resolver),
        relay=LogRelayUseCase(directory),
        browser=SharedLibraryBrowser(directory, ui),
        ui=ui,
        sink=sink,
        options=options,
    )


def exit_code(result: BuildResult) -> int:
    """Map a workflow result to a process exit status; declines are not failures."""
    if result.status.is_success() or result.status is BuildStatus.DECLINED:
        return 0
    return 1


async def execute(commands: PipelineCommands, document: SourceDocument) -> int:
    """Build and stream; an interrupt while streaming aborts the build."""
    result = await commands.start(document)
    if result.status is not BuildStatus.STARTED:
        return exit_code(result)
    try:
        await commands.stream(result.job)
    except (asyncio.CancelledError, KeyboardInterrupt):
        logger.warning("Interrupted, aborting %s", result.job_name)
        await commands.abort()
        raise
    return 0


async def session(commands: PipelineCommands, ui: InteractiveUI, path: Path) -> int:
    """Offer the commands available in the current state until the user quits.

    Logs of started builds stream in the background so Abort stays reachable.
    """
    streaming: Optional[asyncio.Task] = None
    while True:
        menu = commands.available_commands() + [QUIT_COMMAND]
        choice = await ui.pick(menu, title=f"Pipeline Runner: {path.name}")
        if choice is None or choice is QUIT_COMMAND:
            break
        try:
            if choice.name == "execute":
                result = await commands.start(SourceDocument.from_path(path))
                if result.status is BuildStatus.STARTED:
                    streaming = asyncio.create_task(commands.stream(result.job))
                    streaming.add_done_callback(lambda task: _report_stream_end(task, ui))
            elif choice.name == "update":
                await commands.update(SourceDocument.from_path(path))
            elif choice.name == "abort":
                await commands.abort()
            elif choice.name == "reference":
                await commands.reference()
            elif choice.name == "download-log":
                await commands.download_log()
        except PipelineDomainError as exc:
            logger.error("%s failed: %s", choice.name, exc.message)
            ui.show_warning(exc.message)
        except OSError as exc:
            logger.error("%s failed: %s", choice.name, exc)
            ui.show_warning(str(exc))

    if streaming is not None and not streaming.done():
        streaming.cancel()
        await asyncio.gather(streaming, return_exceptions=True)
    return 0


def _report_stream_end(task: asyncio.Task, ui: InteractiveUI) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if isinstance(exc, PipelineDomainError):
        ui.show_warning(exc.message)
    elif exc is not None:
        logger.error("Log streaming failed: %s", exc)
        ui.show_warning(f"Log streaming failed: {exc}")


async def run(args: argparse.Namespace, settings: Settings, ui: ConsoleUI, sink: OutputSink) -> int:
    async with JenkinsClient.from_settings(settings) as client:
        commands = build_commands(client, ui, sink, settings.pipeline_options())
        if args.command == "execute":
            return await execute(commands, SourceDocument.from_path(args.file))
        if args.command == "update":
            return exit_code(await commands.update(SourceDocument.from_path(args.file)))
        if args.command == "reference":
            await commands.reference(JobName(args.job) if args.job else None)
            return 0
        if args.command == "download-log":
            await commands.download_log()
            return 0
        return await session(commands, ui, args.file)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    ui = ConsoleUI()

    try:
        settings = Settings.load(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Invalid settings: %s", exc)
        ui.show_warning(f"Invalid settings: {exc}")
        return 2

    try:
        return asyncio.run(run(args, settings, ui, StdoutSink()))
    except PipelineDomainError as exc:
        logger.error("%s failed: %s", args.command, exc.message)
        ui.show_warning(exc.message)
        return 1
    except httpx.HTTPError as exc:
        logger.error("%s failed: %s", args.command, exc)
        ui.show_warning(f"Jenkins request failed: {exc}")
        return 1
    except OSError as exc:
        logger.error("%s failed: %s", args.command, exc)
        ui.show_warning(str(exc))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
