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

"""Pipeline domain module for Pipeline Runner."""

from .cancellation import CancellationToken
from .entities import DEFAULT_PIPELINE_CONFIG, JobConfigDocument, JobHandle
from .exceptions import (
    PipelineDomainError,
    AlreadyBuildingError,
    InvalidSourceDocumentError,
    NoActiveDocumentError,
    ParameterFileError,
    JobConfigParseError,
    JenkinsApiError,
    JobNotFoundError,
    BuildReadyTimeoutError,
)
from .repositories import (
    JobDirectory,
    ParameterStore,
    ProgressReporter,
    OutputSink,
    InteractiveUI,
)
from .services import JobConfigCodec
from .value_objects import (
    JobName,
    BuildNumber,
    ParameterDefinition,
    ActiveBuild,
    SharedLibraryEntry,
    BuildStatus,
    NotApplicable,
    Empty,
    Resolved,
    ParameterResolution,
    SourceDocument,
    PipelineOptions,
)

__all__ = [
    "CancellationToken",
    "DEFAULT_PIPELINE_CONFIG",
    "JobConfigDocument",
    "JobHandle",
    "PipelineDomainError",
    "AlreadyBuildingError",
    "InvalidSourceDocumentError",
    "NoActiveDocumentError",
    "ParameterFileError",
    "JobConfigParseError",
    "JenkinsApiError",
    "JobNotFoundError",
    "BuildReadyTimeoutError",
    "JobDirectory",
    "ParameterStore",
    "ProgressReporter",
    "OutputSink",
    "InteractiveUI",
    "JobConfigCodec",
    "JobName",
    "BuildNumber",
    "ParameterDefinition",
    "ActiveBuild",
    "SharedLibraryEntry",
    "BuildStatus",
    "NotApplicable",
    "Empty",
    "Resolved",
    "ParameterResolution",
    "SourceDocument",
    "PipelineOptions",
]
