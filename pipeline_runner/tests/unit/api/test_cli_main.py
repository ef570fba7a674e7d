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


"""Unit tests for the pipeline-runner command line."""

import asyncio
import logging

import pytest

from pipeline_runner.api.cli.main import (
    build_commands,
    build_parser,
    execute,
    exit_code,
    main,
    session,
)
from pipeline_runner.core.pipelines.exceptions import BuildReadyTimeoutError
from pipeline_runner.core.pipelines.value_objects import (
    BuildStatus,
    PipelineOptions,
    SourceDocument,
)
from pipeline_runner.orchestrator.pipelines.dtos import BuildResult
from pipeline_runner.tests.mocks.fake_ports import (
    SCRIPT,
    FakeJobDirectory,
    ListSink,
    ScriptedUI,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def script_path(tmp_path):
    path = tmp_path / "demo.groovy"
    path.write_text(SCRIPT, encoding="utf-8")
    return path


def wire(directory, ui, sink=None):
    return build_commands(directory, ui, sink or ListSink(), PipelineOptions())


class TestParser:
    """Tests for argument parsing."""

    def test_execute(self):
        """execute takes a file."""
        args = build_parser().parse_args(["--log-level", "debug", "execute", "demo.groovy"])
        assert args.command == "execute"
        assert str(args.file) == "demo.groovy"
        assert args.log_level == "DEBUG"

    def test_reference_job(self):
        """reference accepts an optional job."""
        args = build_parser().parse_args(["reference", "--job", "team/api"])
        assert args.job == "team/api"

    def test_command_required(self):
        """A command is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestExitCode:
    """Tests for mapping results to exit codes."""

    @pytest.mark.parametrize(
        "status, code",
        [
            (BuildStatus.STARTED, 0),
            (BuildStatus.UPDATED, 0),
            (BuildStatus.DECLINED, 0),
            (BuildStatus.BUSY, 1),
            (BuildStatus.CANCELLED, 1),
            (BuildStatus.PARAMETERS_FAILED, 1),
            (BuildStatus.TIMED_OUT, 1),
        ],
    )
    def test_exit_code(self, status, code):
        """Only failures exit non-zero."""
        assert exit_code(BuildResult(status=status, job_name="demo")) == code


class TestExecute:
    """Tests for the execute command."""

    @pytest.mark.asyncio
    async def test_execute_streams_log(self, script_path):
        """Execute builds and streams the log."""
        directory = FakeJobDirectory()
        directory.add_job("demo", next_build_number=3)
        directory.logs[("demo", 3)] = ["Finished: SUCCESS\n"]
        sink = ListSink()

        code = await execute(wire(directory, ScriptedUI(), sink), SourceDocument.from_path(script_path))

        assert code == 0
        assert sink.text == "Finished: SUCCESS\n"

    @pytest.mark.asyncio
    async def test_interrupt_while_streaming_aborts(self, script_path):
        """Interrupt during streaming stops the remote build."""
        directory = FakeJobDirectory()
        directory.add_job("demo", next_build_number=3)

        async def interrupted(name, build_number):
            yield "Started\n"
            raise asyncio.CancelledError()

        directory.stream_log = interrupted

        with pytest.raises(asyncio.CancelledError):
            await execute(wire(directory, ScriptedUI()), SourceDocument.from_path(script_path))
        assert directory.stopped == [("demo", 3)]

    @pytest.mark.asyncio
    async def test_timeout_exit_code(self, script_path):
        """Timed out builds exit non-zero without streaming."""
        directory = FakeJobDirectory()
        directory.add_job("demo", next_build_number=3)
        directory.ready_error = BuildReadyTimeoutError("demo", 3)

        code = await execute(wire(directory, ScriptedUI()), SourceDocument.from_path(script_path))

        assert code == 1
        assert "stream_log" not in directory.calls


class TestSession:
    """Tests for the interactive session."""

    @pytest.mark.asyncio
    async def test_abort_offered_while_streaming(self, script_path):
        """After execute the menu offers abort, which stops the build."""
        directory = FakeJobDirectory()
        directory.add_job("demo", next_build_number=2)
        ui = ScriptedUI(picks=[0, 0, None])

        code = await session(wire(directory, ui), ui, script_path)

        assert code == 0
        assert ui.pick_requests[0][0][:2] == [
            "Pipeline: Execute  Executes the current groovy file as a pipeline job.",
            "Pipeline: Update  Updates the current view's associated pipeline job configuration.",
        ]
        assert ui.pick_requests[1][0][0].startswith("Pipeline: Abort")
        assert directory.stopped == [("demo", 2)]

    @pytest.mark.asyncio
    async def test_domain_errors_are_warned(self, tmp_path):
        """Command failures are shown and the session continues."""
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")
        directory = FakeJobDirectory()
        ui = ScriptedUI(picks=[1, None])

        await session(wire(directory, ui), ui, path)

        assert ui.warnings == ["notes.txt is not a groovy pipeline script."]
        assert len(ui.pick_requests) == 2
        assert directory.calls == []

    @pytest.mark.asyncio
    async def test_deleted_source_file(self, tmp_path):
        """A source file that disappeared is reported and the session continues."""
        directory = FakeJobDirectory()
        ui = ScriptedUI(picks=[1, None])

        code = await session(wire(directory, ui), ui, tmp_path / "demo.groovy")

        assert code == 0
        assert len(ui.warnings) == 1
        assert ui.warnings[0].startswith("Unable to read")
        assert len(ui.pick_requests) == 2
        assert directory.calls == []

    @pytest.mark.asyncio
    async def test_editor_failure_is_warned(self, script_path):
        """An editor that cannot be started is reported and the session continues."""
        directory = FakeJobDirectory()
        directory.add_job("demo", parameters={"BRANCH": "main"})

        def missing_editor(path):
            raise FileNotFoundError(2, "No such file or directory", "vi")

        ui = ScriptedUI(picks=[0, None], on_edit=missing_editor)

        await session(wire(directory, ui), ui, script_path)

        assert ui.warnings == ["[Errno 2] No such file or directory: 'vi'"]
        assert len(ui.pick_requests) == 2
        assert directory.triggered == []


class TestMain:
    """Tests for the main entry point."""

    def test_missing_settings_file(self, tmp_path, capsys):
        """Unreadable settings exit with status 2."""
        code = main(["--config", str(tmp_path / "missing.yaml"), "download-log"])

        assert code == 2
        assert "Invalid settings" in capsys.readouterr().err

    def test_missing_source_file(self, tmp_path, monkeypatch, capsys):
        """Missing source file exits with status 1 before any request."""
        monkeypatch.setenv("PIPELINE_RUNNER_CONFIG", "")
        monkeypatch.setenv("HOME", str(tmp_path))

        code = main(["execute", str(tmp_path / "missing.groovy")])

        assert code == 1
        assert "missing.groovy" in capsys.readouterr().err

    def test_malformed_settings_yaml(self, tmp_path, capsys):
        """Settings that are not valid YAML exit with status 2."""
        config = tmp_path / "settings.yaml"
        config.write_text("jenkins: [url: \n", encoding="utf-8")

        code = main(["--config", str(config), "reference"])

        assert code == 2
        assert "Invalid settings" in capsys.readouterr().err

    def test_binary_source_file(self, tmp_path, monkeypatch, capsys):
        """A source file that is not UTF-8 exits with status 1."""
        monkeypatch.setenv("PIPELINE_RUNNER_CONFIG", "")
        monkeypatch.setenv("HOME", str(tmp_path))
        script = tmp_path / "binary.groovy"
        script.write_bytes(b"\xff\xfe\x00node")

        code = main(["execute", str(script)])

        assert code == 1
        assert "binary.groovy is not UTF-8 text." in capsys.readouterr().err
