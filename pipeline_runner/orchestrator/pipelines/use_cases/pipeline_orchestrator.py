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


"""Pipeline orchestrator: create/update a job, then build it."""

import logging
from typing import List, Optional

from pipeline_runner.core.pipelines.entities import JobHandle
from pipeline_runner.core.pipelines.exceptions import (
    AlreadyBuildingError,
    BuildReadyTimeoutError,
    JenkinsApiError,
    NoActiveDocumentError,
    ParameterFileError,
)
from pipeline_runner.core.pipelines.repositories import (
    InteractiveUI,
    JobDirectory,
    ProgressReporter,
)
from pipeline_runner.core.pipelines.services import JobConfigCodec
from pipeline_runner.core.pipelines.value_objects import (
    ActiveBuild,
    BuildStatus,
    JobName,
    NotApplicable,
    ParameterResolution,
    PipelineOptions,
)

from ..commands import RunPipelineCommand
from ..dtos import BuildResult, CommandDescriptor
from .resolve_parameters import ResolveParametersUseCase

logger = logging.getLogger(__name__)

EXECUTE_COMMAND = CommandDescriptor(
    name="execute",
    label="Pipeline: Execute",
    description="Executes the current groovy file as a pipeline job.",
)
UPDATE_COMMAND = CommandDescriptor(
    name="update",
    label="Pipeline: Update",
    description="Updates the current view's associated pipeline job configuration.",
)
ABORT_COMMAND = CommandDescriptor(
    name="abort",
    label="Pipeline: Abort",
    description="Aborts the active pipeline job initiated by Execute.",
)
REFERENCE_COMMAND = CommandDescriptor(
    name="reference",
    label="Pipeline: Shared Library Reference",
    description="Provides a list of steps from the Shared Library and global variables.",
)
DOWNLOAD_COMMAND = CommandDescriptor(
    name="download-log",
    label="Build Log: Download",
    description="Select a job and build to download the log.",
)


class PipelineOrchestrator:
    """Runs the create/update, parameters, trigger and readiness workflow.

    At most one build is active per orchestrator. A second call while a
    build is active, or while another workflow is still running, is rejected
    with ``BUSY`` and performs no remote call.

    Attributes:
        active_build: Build started by ``trigger_build`` and not yet completed.
        last_build: Job of the most recently completed build.
    """

    BUILD_CANCELED_MESSAGE = "User canceled pipeline build."
    UPDATE_CANCELED_MESSAGE = "User canceled pipeline update."

    def __init__(
        self,
        directory: JobDirectory,
        ui: InteractiveUI,
        resolver: ResolveParametersUseCase,
    ) -> None:
        """Initialize orchestrator with its ports.

        Args:
            directory: Remote job directory implementation.
            ui: Interactive UI implementation.
            resolver: Parameter negotiation use case.
        """
        self._directory = directory
        self._ui = ui
        self._resolver = resolver
        self._active_build: Optional[ActiveBuild] = None
        self._last_build: Optional[JobHandle] = None
        self._in_flight: Optional[JobName] = None

    @property
    def active_build(self) -> Optional[ActiveBuild]:
        return self._active_build

    @property
    def last_build(self) -> Optional[JobHandle]:
        return self._last_build

    @property
    def is_busy(self) -> bool:
        """Check if a build is active or a workflow is running."""
        return self._active_build is not None or self._in_flight is not None

    async def trigger_build(
        self,
        command: RunPipelineCommand,
        options: PipelineOptions,
    ) -> BuildResult:
        """Push the script, resolve parameters, trigger and await the build.

        Args:
            command: Script source, job name and source document.
            options: Settings snapshot for this build.

        Returns:
            BuildResult; ``STARTED`` carries the job whose
            ``next_build_number`` is the triggered build.

        Raises:
            JenkinsApiError: If a remote call fails.
            JobConfigParseError: If the job's configuration is malformed.
        """
        busy = self._reject_if_busy(command.job_name)
        if busy is not None:
            return busy

        self._in_flight = command.job_name
        try:
            async with self._ui.progress(f"Pipeline {command.job_name}") as progress:
                return await self._build(command, options, progress)
        finally:
            self._in_flight = None

    async def update_only(self, command: RunPipelineCommand) -> BuildResult:
        """Push the script to the job without building it.

        Args:
            command: Script source and job name.

        Returns:
            BuildResult with ``UPDATED``, ``DECLINED``, ``CANCELLED`` or ``BUSY``.
        """
        busy = self._reject_if_busy(command.job_name)
        if busy is not None:
            return busy

        self._in_flight = command.job_name
        try:
            async with self._ui.progress(f"Updating {command.job_name}") as progress:
                self._warn_on_cancel(progress, self.UPDATE_CANCELED_MESSAGE)
                progress.report(increment=50)
                job = await self.create_or_update(command.source, command.job_name)
                if job is None:
                    return BuildResult.of(BuildStatus.DECLINED, command.job_name)
                if progress.token.is_cancellation_requested:
                    return self._cancelled(command.job_name, self.UPDATE_CANCELED_MESSAGE, job)
                return BuildResult.of(BuildStatus.UPDATED, command.job_name, job=job)
        finally:
            self._in_flight = None

    async def create_or_update(self, source: str, job_name: JobName) -> Optional[JobHandle]:
        """Inject ``source`` into the job, creating the job after confirmation.

        Args:
            source: Scripted pipeline source.
            job_name: Target job.

        Returns:
            Handle of the created or updated job, None when creation was declined.

        Raises:
            JenkinsApiError: If a remote call fails.
            JobConfigParseError: If the job's configuration is malformed.
        """
        name = str(job_name)
        job = await self._directory.get_job(name)
        existing_xml = await self._directory.get_config(name) if job is not None else None
        xml = JobConfigCodec.build_or_update_config(existing_xml, source)

        if job is None:
            confirmed = await self._ui.confirm(
                f'"{name}" doesn\'t exist. Do you want us to create it?', "Yes"
            )
            if not confirmed:
                logger.info("Creation of %s declined", name)
                return None
            logger.info("%s doesn't exist. Creating...", name)
            job = await self._directory.create_job(name, xml)
        else:
            logger.info("%s already exists. Updating...", name)
            await self._directory.set_config(name, xml)

        logger.info("Successfully updated Pipeline: %s", name)
        return job

    async def abort_active(self) -> Optional[ActiveBuild]:
        """Stop the active build, if any.

        The active build is cleared even when the stop request fails.

        Returns:
            The build that was stopped, None when nothing was active.

        Raises:
            JenkinsApiError: If the stop request fails.
        """
        active = self._active_build
        if active is None:
            return None

        try:
            await self._directory.stop_build(str(active.job_name), int(active.build_number))
            logger.info("Aborted %s", active)
        except JenkinsApiError as exc:
            logger.error("Failed to abort %s: %s", active, exc.message)
            raise
        finally:
            self._active_build = None
        return active

    def complete(self, job: JobHandle) -> None:
        """Record the end of log streaming for ``job``'s build."""
        self._last_build = job
        if self._active_build == job.as_active_build():
            self._active_build = None

    def available_commands(self) -> List[CommandDescriptor]:
        """Commands offered in the current state."""
        if self._active_build is None:
            commands = [EXECUTE_COMMAND, UPDATE_COMMAND]
        else:
            commands = [ABORT_COMMAND]
        return commands + [REFERENCE_COMMAND, DOWNLOAD_COMMAND]

    async def _build(
        self,
        command: RunPipelineCommand,
        options: PipelineOptions,
        progress: ProgressReporter,
    ) -> BuildResult:
        self._warn_on_cancel(progress, self.BUILD_CANCELED_MESSAGE)
        progress.report(increment=0, message="Creating/updating Pipeline job.")
        job = await self.create_or_update(command.source, command.job_name)
        if job is None:
            return BuildResult.of(BuildStatus.DECLINED, command.job_name)

        if progress.token.is_cancellation_requested:
            return self._cancelled(command.job_name, self.BUILD_CANCELED_MESSAGE, job)

        progress.report(increment=20, message="Waiting on build parameter input...")
        try:
            resolution = await self._resolver.execute(
                job, command.document, options.params_enabled, progress
            )
        except (NoActiveDocumentError, ParameterFileError) as exc:
            logger.warning("Parameter input failed for %s: %s", job.name, exc.message)
            self._ui.show_warning(exc.message)
            return BuildResult.of(
                BuildStatus.PARAMETERS_FAILED, command.job_name, job=job, message=exc.message
            )

        if progress.token.is_cancellation_requested:
            return self._cancelled(command.job_name, self.BUILD_CANCELED_MESSAGE, job)

        name = str(job.name)
        build_number = int(job.next_build_number)
        progress.report(increment=20, message=f'Building "{name} #{build_number}"')
        await self._directory.trigger_build(name, self._parameters_argument(resolution))

        if progress.token.is_cancellation_requested:
            return self._cancelled(command.job_name, self.BUILD_CANCELED_MESSAGE, job)

        progress.report(increment=30, message="Waiting for build to be ready...")
        try:
            await self._directory.await_ready(name, build_number)
        except BuildReadyTimeoutError as exc:
            logger.warning(exc.message)
            self._ui.show_warning(exc.message)
            return BuildResult.of(
                BuildStatus.TIMED_OUT, command.job_name, job=job, message=exc.message
            )

        if progress.token.is_cancellation_requested:
            return self._cancelled(command.job_name, self.BUILD_CANCELED_MESSAGE, job)

        progress.report(increment=30, message="Build is ready!")

        self._active_build = job.as_active_build()
        logger.info("Build %s is ready", self._active_build)
        return BuildResult.of(BuildStatus.STARTED, command.job_name, job=job)

    def _reject_if_busy(self, job_name: JobName) -> Optional[BuildResult]:
        """Return a BUSY result when a build is active or a workflow runs."""
        if self._active_build is not None:
            error = AlreadyBuildingError(
                str(self._active_build.job_name), int(self._active_build.build_number)
            )
        elif self._in_flight is not None:
            error = AlreadyBuildingError(str(self._in_flight))
        else:
            return None

        logger.warning("Rejected request for %s: %s", job_name, error.message)
        self._ui.show_warning(error.message)
        return BuildResult.of(BuildStatus.BUSY, job_name, message=error.message)

    def _warn_on_cancel(self, progress: ProgressReporter, message: str) -> None:
        """Show ``message`` as soon as the user cancels the workflow."""
        progress.token.on_cancellation_requested(lambda: self._ui.show_warning(message))

    def _cancelled(self, job_name: JobName, message: str, job: JobHandle) -> BuildResult:
        logger.warning("%s (%s)", message, job_name)
        return BuildResult.of(BuildStatus.CANCELLED, job_name, job=job, message=message)

    @staticmethod
    def _parameters_argument(resolution: ParameterResolution) -> Optional[dict]:
        """Map the resolution to the trigger's parameters argument."""
        if isinstance(resolution, NotApplicable):
            return None
        return dict(resolution.values)
