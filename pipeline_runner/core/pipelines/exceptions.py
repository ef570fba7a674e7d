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

"""Domain exceptions for pipeline jobs."""

from typing import Optional


class PipelineDomainError(Exception):
    """Base exception for all pipeline domain errors."""

    def __init__(self, message: str, job_name: Optional[str] = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error description.
            job_name: Optional name of the job the error relates to.
        """
        super().__init__(message)
        self.message = message
        self.job_name = job_name


class AlreadyBuildingError(PipelineDomainError):
    """A build is already in flight for this orchestrator."""

    def __init__(self, job_name: str, build_number: Optional[int] = None) -> None:
        """Initialize already building error.

        Args:
            job_name: Name of the job currently building.
            build_number: Build number, when the build was already triggered.
        """
        target = job_name if build_number is None else f"{job_name}: #{build_number}"
        super().__init__(
            f"Already building/streaming - {target}",
            job_name=job_name
        )
        self.build_number = build_number


class InvalidSourceDocumentError(PipelineDomainError):
    """The source document cannot be used as a pipeline script."""


class NoActiveDocumentError(PipelineDomainError):
    """No document is available to derive the parameters file path from."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__(
            "No active editor to grab document path.",
            job_name=job_name
        )


class JobConfigParseError(PipelineDomainError):
    """Job configuration XML could not be parsed or lacks a pipeline definition."""


class JenkinsApiError(PipelineDomainError):
    """Remote Jenkins call failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        job_name: Optional[str] = None,
    ) -> None:
        """Initialize remote API error.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code, if a response was received.
            url: Requested URL.
            job_name: Optional job the call targeted.
        """
        super().__init__(message, job_name=job_name)
        self.status_code = status_code
        self.url = url


class JobNotFoundError(JenkinsApiError):
    """Job does not exist on the Jenkins server."""

    def __init__(self, job_name: str, url: Optional[str] = None) -> None:
        super().__init__(
            f"Job not found: {job_name}",
            status_code=404,
            url=url,
            job_name=job_name,
        )


class BuildReadyTimeoutError(PipelineDomainError):
    """Triggered build did not become ready before the timeout elapsed."""

    def __init__(self, job_name: str, build_number: int) -> None:
        """Initialize build ready timeout error.

        Args:
            job_name: Name of the job that was triggered.
            build_number: Build number that never became ready.
        """
        super().__init__(
            f"Timed out waiting for build: {job_name} #{build_number}",
            job_name=job_name
        )
        self.build_number = build_number


class ParameterFileError(PipelineDomainError):
    """Parameters file could not be read or written."""

    def __init__(self, path: str, reason: str, job_name: Optional[str] = None) -> None:
        super().__init__(
            f"Unable to use parameters file {path}: {reason}",
            job_name=job_name
        )
        self.path = path
