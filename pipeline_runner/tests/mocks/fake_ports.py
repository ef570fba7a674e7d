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


"""In-memory fakes of the pipeline ports for unit tests."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pipeline_runner.core.pipelines.cancellation import CancellationToken
from pipeline_runner.core.pipelines.entities import DEFAULT_PIPELINE_CONFIG, JobHandle
from pipeline_runner.core.pipelines.entities.job import PARAMETERS_PROPERTY_CLASS
from pipeline_runner.core.pipelines.value_objects import SharedLibraryEntry

SERVER_URL = "http://jenkins.test/"
SCRIPT = "node { echo 'hello' }"


def job_payload(
    name: str,
    next_build_number: int = 1,
    parameters: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a Jenkins job JSON payload.

    ``parameters`` maps parameter names to defaults; None means the job has
    no parameters property at all.
    """
    properties: List[Dict[str, Any]] = [{"_class": "jenkins.model.BuildDiscarderProperty"}]
    if parameters is not None:
        properties.append({
            "_class": PARAMETERS_PROPERTY_CLASS,
            "parameterDefinitions": [
                {"name": key, "defaultParameterValue": {"value": value}}
                for key, value in parameters.items()
            ],
        })
    return {
        "_class": "org.jenkinsci.plugins.workflow.job.WorkflowJob",
        "name": name.rsplit("/", 1)[-1],
        "fullName": name,
        "url": f"{SERVER_URL}job/{name}/",
        "nextBuildNumber": next_build_number,
        "property": properties,
    }


class FakeJobDirectory:
    """In-memory fake implementation of JobDirectory recording every call."""

    def __init__(self) -> None:
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.configs: Dict[str, str] = {}
        self.calls: List[str] = []
        self.created: List[Tuple[str, str]] = []
        self.config_updates: List[Tuple[str, str]] = []
        self.triggered: List[Tuple[str, Optional[Dict[str, Any]]]] = []
        self.stopped: List[Tuple[str, int]] = []
        self.awaited: List[Tuple[str, int]] = []
        self.logs: Dict[Tuple[str, int], List[str]] = {}
        self.build_numbers: Dict[str, List[str]] = {}
        self.shared_library: List[SharedLibraryEntry] = []
        self.shared_library_scopes: List[Optional[str]] = []
        self.ready_error: Optional[Exception] = None
        self.stop_error: Optional[Exception] = None
        self.created_next_build_number = 1

    def add_job(
        self,
        name: str,
        next_build_number: int = 1,
        parameters: Optional[Mapping[str, Any]] = None,
        config: str = DEFAULT_PIPELINE_CONFIG,
    ) -> JobHandle:
        """Register an existing job."""
        self.jobs[name] = job_payload(name, next_build_number, parameters)
        self.configs[name] = config
        return JobHandle.from_api(self.jobs[name])

    async def list_jobs(
        self,
        predicate: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ) -> List[Dict[str, Any]]:
        self.calls.append("list_jobs")
        jobs = list(self.jobs.values())
        return [job for job in jobs if predicate is None or predicate(job)]

    async def get_job(self, name: str) -> Optional[JobHandle]:
        self.calls.append("get_job")
        payload = self.jobs.get(name)
        return JobHandle.from_api(payload) if payload is not None else None

    async def get_config(self, name: str) -> str:
        self.calls.append("get_config")
        return self.configs[name]

    async def set_config(self, name: str, xml: str) -> None:
        self.calls.append("set_config")
        self.config_updates.append((name, xml))
        self.configs[name] = xml

    async def create_job(self, name: str, xml: str) -> JobHandle:
        self.calls.append("create_job")
        self.created.append((name, xml))
        return self.add_job(name, next_build_number=self.created_next_build_number, config=xml)

    async def trigger_build(
        self,
        name: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.calls.append("trigger_build")
        self.triggered.append((name, dict(parameters) if parameters is not None else None))

    async def stop_build(self, name: str, build_number: int) -> None:
        self.calls.append("stop_build")
        self.stopped.append((name, build_number))
        if self.stop_error is not None:
            raise self.stop_error

    async def await_ready(self, name: str, build_number: int) -> None:
        self.calls.append("await_ready")
        self.awaited.append((name, build_number))
        if self.ready_error is not None:
            raise self.ready_error

    async def stream_log(self, name: str, build_number: int) -> AsyncIterator[str]:
        self.calls.append("stream_log")
        for chunk in self.logs.get((name, build_number), []):
            yield chunk

    async def list_build_numbers(self, job_url: str) -> List[str]:
        self.calls.append("list_build_numbers")
        return self.build_numbers.get(job_url, [])

    async def get_shared_library(self, job_name: Optional[str] = None) -> List[SharedLibraryEntry]:
        self.calls.append("get_shared_library")
        self.shared_library_scopes.append(job_name)
        return list(self.shared_library)

    def url_for(self, path: str) -> str:
        return SERVER_URL + path


class FakeProgress:
    """Progress reporter that can cancel itself when a message is reported."""

    def __init__(self, title: str, cancel_on: Optional[str] = None) -> None:
        self.title = title
        self.token = CancellationToken()
        self.reports: List[Tuple[Optional[str], Optional[int]]] = []
        self._cancel_on = cancel_on

    def report(self, message: Optional[str] = None, increment: Optional[int] = None) -> None:
        self.reports.append((message, increment))
        if self._cancel_on and message and message.startswith(self._cancel_on):
            self.token.cancel()

    @property
    def messages(self) -> List[str]:
        return [message for message, _ in self.reports if message]


class ScriptedUI:
    """Interactive UI answering from a script and recording what it showed."""

    def __init__(
        self,
        confirm: bool = True,
        picks: Optional[Sequence[Optional[int]]] = None,
        cancel_on: Optional[str] = None,
        on_edit: Optional[Callable[[Path], None]] = None,
    ) -> None:
        self.confirm_answer = confirm
        self.picks = list(picks or [])
        self.cancel_on = cancel_on
        self.on_edit = on_edit
        self.confirmations: List[Tuple[str, str]] = []
        self.pick_requests: List[Tuple[List[str], str]] = []
        self.edited: List[Path] = []
        self.progresses: List[FakeProgress] = []
        self.html: List[Tuple[str, str]] = []
        self.urls: List[str] = []
        self.infos: List[str] = []
        self.warnings: List[str] = []

    async def pick(self, items, title="", label=str):
        self.pick_requests.append(([label(item) for item in items], title))
        choice = self.picks.pop(0) if self.picks else None
        return None if choice is None else items[choice]

    async def confirm(self, message: str, action: str) -> bool:
        self.confirmations.append((message, action))
        return self.confirm_answer

    async def edit_document(self, path: Path) -> None:
        self.edited.append(path)
        if self.on_edit is not None:
            self.on_edit(path)

    @asynccontextmanager
    async def progress(self, title: str):
        progress = FakeProgress(title, cancel_on=self.cancel_on)
        self.progresses.append(progress)
        yield progress

    async def show_html(self, title: str, html: str) -> None:
        self.html.append((title, html))

    async def open_url(self, url: str) -> None:
        self.urls.append(url)

    def show_info(self, message: str) -> None:
        self.infos.append(message)

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)


class ListSink:
    """Output sink collecting written text."""

    def __init__(self) -> None:
        self.chunks: List[str] = []
        self.cleared = 0
        self.shown = 0

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def clear(self) -> None:
        self.cleared += 1
        self.chunks.clear()

    def show(self) -> None:
        self.shown += 1

    @property
    def text(self) -> str:
        return "".join(self.chunks)
