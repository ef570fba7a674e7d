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


"""Log relay use case: stream a build log into the output panel."""

import logging
from typing import Any, Dict, Optional

from pipeline_runner.core.pipelines.repositories import (
    InteractiveUI,
    JobDirectory,
    OutputSink,
)
from pipeline_runner.core.pipelines.value_objects import BuildNumber, JobName

logger = logging.getLogger(__name__)


class LogRelayUseCase:
    """Relays build log chunks from the job directory to an output sink.

    Transport errors end the relay; nothing is retried.
    """

    def __init__(self, directory: JobDirectory) -> None:
        self._directory = directory

    async def relay(self, job_name: JobName, build_number: BuildNumber, sink: OutputSink) -> int:
        """Write every log chunk of the build to ``sink`` in order.

        Args:
            job_name: Job of the build.
            build_number: Build to stream.
            sink: Output panel.

        Returns:
            Number of characters relayed.

        Raises:
            JenkinsApiError: If the log stream fails.
        """
        logger.info("Streaming log of %s #%s", job_name, build_number)
        relayed = 0
        async for chunk in self._directory.stream_log(str(job_name), int(build_number)):
            sink.write(chunk)
            relayed += len(chunk)
        logger.debug("Log of %s #%s finished after %d characters", job_name, build_number, relayed)
        return relayed

    async def download(self, ui: InteractiveUI, sink: OutputSink) -> Optional[int]:
        """Ask for a job and build number, then relay that build's log.

        Returns:
            Number of characters relayed, None when nothing was selected.
        """
        jobs = await self._directory.list_jobs()
        job = await ui.pick(jobs, title="Select a job", label=_job_label)
        if job is None:
            return None

        build_numbers = await self._directory.list_build_numbers(job["url"])
        selected = await ui.pick(build_numbers, title="Select a build")
        if selected is None:
            return None

        sink.show()
        return await self.relay(JobName(_job_label(job)), BuildNumber(int(selected)), sink)


def _job_label(job: Dict[str, Any]) -> str:
    return job.get("fullName") or job["name"]
