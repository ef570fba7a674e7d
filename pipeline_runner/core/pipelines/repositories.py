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

"""Port interfaces (Protocols) for the pipeline domain.

These define the contracts that infrastructure and host implementations
must satisfy.
"""

from pathlib import Path
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterator,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
)

from .cancellation import CancellationToken
from .entities import JobHandle
from .value_objects import SharedLibraryEntry

T = TypeVar("T")


class JobDirectory(Protocol):
    """Remote Jenkins job and build API."""

    async def list_jobs(
        self,
        predicate: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ) -> List[Dict[str, Any]]:
        """List jobs, folders expanded, optionally filtered.

        Args:
            predicate: Keeps a job JSON item when it returns True.

        Returns:
            Job JSON items carrying at least ``fullName`` and ``url``.
        """
        ...

    async def get_job(self, name: str) -> Optional[JobHandle]:
        """Retrieve a job.

        Args:
            name: Full job name.

        Returns:
            JobHandle if the job exists, None otherwise.
        """
        ...

    async def get_config(self, name: str) -> str:
        """Fetch the job's ``config.xml``.

        Raises:
            JenkinsApiError: If the request fails.
        """
        ...

    async def set_config(self, name: str, xml: str) -> None:
        """Replace the job's ``config.xml``.

        Raises:
            JenkinsApiError: If the request fails.
        """
        ...

    async def create_job(self, name: str, xml: str) -> JobHandle:
        """Create a job from ``config.xml`` and return the created job.

        Raises:
            JenkinsApiError: If the request fails.
        """
        ...

    async def trigger_build(
        self,
        name: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Queue a build; a None ``parameters`` omits the argument entirely.

        Raises:
            JenkinsApiError: If the request fails.
        """
        ...

    async def stop_build(self, name: str, build_number: int) -> None:
        """Request the remote system stop a running build.

        Raises:
            JenkinsApiError: If the request fails.
        """
        ...

    async def await_ready(self, name: str, build_number: int) -> None:
        """Wait until the build has started and its log can be streamed.

        Raises:
            BuildReadyTimeoutError: If the build does not start in time.
        """
        ...

    def stream_log(self, name: str, build_number: int) -> AsyncIterator[str]:
        """Yield log chunks in order until the build completes.

        Raises:
            JenkinsApiError: If the transport fails; not retried.
        """
        ...

    async def list_build_numbers(self, job_url: str) -> List[str]:
        """List build numbers of a job, newest first."""
        ...

    async def get_shared_library(
        self,
        job_name: Optional[str] = None,
    ) -> List[SharedLibraryEntry]:
        """Fetch Shared Library step and variable documentation.

        Args:
            job_name: Scope the reference to a job's libraries when given.
        """
        ...

    def url_for(self, path: str) -> str:
        """Absolute server URL for a path relative to the server root."""
        ...


class ParameterStore(Protocol):
    """Local JSON store for parameter override files."""

    async def exists(self, path: Path) -> bool:
        """Check if an override file exists."""
        ...

    async def read(self, path: Path) -> Dict[str, Any]:
        """Load an override mapping."""
        ...

    async def write(self, path: Path, values: Mapping[str, Any]) -> None:
        """Persist an override mapping."""
        ...


class ProgressReporter(Protocol):
    """Progress notification of a running workflow."""

    token: CancellationToken

    def report(self, message: Optional[str] = None, increment: Optional[int] = None) -> None:
        """Advance the progress indicator and/or update its message."""
        ...


class OutputSink(Protocol):
    """Output panel receiving build log text."""

    def write(self, text: str) -> None:
        """Append text to the panel."""
        ...

    def clear(self) -> None:
        """Remove all text from the panel."""
        ...

    def show(self) -> None:
        """Bring the panel into view."""
        ...


class InteractiveUI(Protocol):
    """Host user interface."""

    async def pick(
        self,
        items: Sequence[T],
        title: str = "",
        label: Callable[[T], str] = str,
    ) -> Optional[T]:
        """Present a selectable list, each item shown as ``label(item)``.

        Returns:
            The chosen item, None when nothing was selected.
        """
        ...

    async def confirm(self, message: str, action: str) -> bool:
        """Show a modal confirmation with a named affirmative action."""
        ...

    async def edit_document(self, path: Path) -> None:
        """Open a file for editing; resolves once the user closes it."""
        ...

    def progress(self, title: str) -> AsyncContextManager[ProgressReporter]:
        """Open a cancellable progress notification."""
        ...

    async def show_html(self, title: str, html: str) -> None:
        """Render content inline."""
        ...

    async def open_url(self, url: str) -> None:
        """Open a URL in the browser."""
        ...

    def show_info(self, message: str) -> None:
        """Report an informational message."""
        ...

    def show_warning(self, message: str) -> None:
        """Report a warning message."""
        ...
