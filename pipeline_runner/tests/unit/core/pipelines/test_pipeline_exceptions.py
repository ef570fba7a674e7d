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


"""Unit tests for pipeline domain exceptions."""

import pytest

from pipeline_runner.core.pipelines.exceptions import (
    AlreadyBuildingError,
    BuildReadyTimeoutError,
    InvalidSourceDocumentError,
    JenkinsApiError,
    JobConfigParseError,
    JobNotFoundError,
    NoActiveDocumentError,
    ParameterFileError,
    PipelineDomainError,
)


class TestPipelineDomainError:
    """Tests for the base domain error."""

    def test_message_and_job_name(self):
        """Base error carries message and job name."""
        error = PipelineDomainError("boom", job_name="demo")
        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.job_name == "demo"

    @pytest.mark.parametrize(
        "error",
        [
            AlreadyBuildingError("demo"),
            InvalidSourceDocumentError("bad"),
            NoActiveDocumentError(),
            JobConfigParseError("bad xml"),
            JenkinsApiError("down"),
            JobNotFoundError("demo"),
            BuildReadyTimeoutError("demo", 3),
            ParameterFileError("demo.params.json", "bad json"),
        ],
    )
    def test_hierarchy(self, error):
        """Every domain error derives from PipelineDomainError."""
        assert isinstance(error, PipelineDomainError)


class TestAlreadyBuildingError:
    """Tests for AlreadyBuildingError."""

    def test_message_with_build_number(self):
        """Active build is named with its number."""
        error = AlreadyBuildingError("demo", 12)
        assert error.message == "Already building/streaming - demo: #12"
        assert error.build_number == 12

    def test_message_without_build_number(self):
        """Workflow still in flight is named by job only."""
        assert AlreadyBuildingError("demo").message == "Already building/streaming - demo"


class TestJenkinsApiErrors:
    """Tests for remote API errors."""

    def test_api_error_context(self):
        """Status code and URL are kept on the error."""
        error = JenkinsApiError("failed", status_code=500, url="http://j/job/demo", job_name="demo")
        assert error.status_code == 500
        assert error.url == "http://j/job/demo"
        assert error.job_name == "demo"

    def test_job_not_found(self):
        """JobNotFoundError is a 404 JenkinsApiError."""
        error = JobNotFoundError("demo", url="http://j/job/demo/api/json")
        assert isinstance(error, JenkinsApiError)
        assert error.status_code == 404
        assert error.message == "Job not found: demo"


class TestOtherErrors:
    """Tests for message formatting of the remaining errors."""

    def test_build_ready_timeout(self):
        """Timeout message names job and build."""
        error = BuildReadyTimeoutError("demo", 4)
        assert error.message == "Timed out waiting for build: demo #4"
        assert error.build_number == 4

    def test_no_active_document(self):
        """Missing document message matches the user-facing text."""
        assert NoActiveDocumentError("demo").message == "No active editor to grab document path."

    def test_parameter_file_error(self):
        """Parameter file error names the file and reason."""
        error = ParameterFileError("/w/demo.params.json", "Expecting value")
        assert error.path == "/w/demo.params.json"
        assert "Expecting value" in error.message
