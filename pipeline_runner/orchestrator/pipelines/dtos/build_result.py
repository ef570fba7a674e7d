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


"""Build result and command descriptor DTOs."""

from dataclasses import dataclass
from typing import Optional

from pipeline_runner.core.pipelines.entities import JobHandle
from pipeline_runner.core.pipelines.value_objects import BuildStatus, JobName


@dataclass(frozen=True)
class BuildResult:
    """Result DTO for build and update workflows.

    Attributes:
        status: How the workflow ended.
        job_name: Target job.
        job: Job handle, set once the job was created or updated.
        message: Warning shown to the user, empty for silent outcomes.
    """

    status: BuildStatus
    job_name: str
    job: Optional[JobHandle] = None
    message: str = ""

    @property
    def build_number(self) -> Optional[int]:
        """Number of the triggered build, when the job is known."""
        if self.job is None:
            return None
        return int(self.job.next_build_number)

    @staticmethod
    def of(
        status: BuildStatus,
        job_name: JobName,
        job: Optional[JobHandle] = None,
        message: str = "",
    ) -> "BuildResult":
        """Create a result for a job name value object."""
        return BuildResult(status=status, job_name=str(job_name), job=job, message=message)


@dataclass(frozen=True)
class CommandDescriptor:
    """User-invocable command offered by the command menu.

    Attributes:
        name: Command identifier used by the CLI.
        label: Menu label.
        description: One line help text.
    """

    name: str
    label: str
    description: str

    def __str__(self) -> str:
        return f"{self.label}  {self.description}"
