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


"""Pipeline command DTOs."""

from dataclasses import dataclass
from typing import Optional

from pipeline_runner.core.pipelines.value_objects import JobName, SourceDocument


@dataclass(frozen=True)
class RunPipelineCommand:
    """Command to push a pipeline script to a job, optionally building it.

    Immutable command object shared by the execute and update workflows.
    Document validation is performed before the command is built.

    Attributes:
        source: Scripted pipeline source.
        job_name: Target job.
        document: Document the source came from; the parameters file is
            derived from it. None when no document context is available.
    """

    source: str
    job_name: JobName
    document: Optional[SourceDocument] = None

    @classmethod
    def from_document(cls, document: SourceDocument) -> "RunPipelineCommand":
        """Build a command for a validated source document."""
        return cls(source=document.text, job_name=document.job_name, document=document)
