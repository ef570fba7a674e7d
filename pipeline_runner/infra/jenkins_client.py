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


"""Jenkins HTTP API client implementing the job directory port."""

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Dict, List, Mapping, Optional

import httpx
from bs4 import BeautifulSoup

from pipeline_runner.core.pipelines.entities import JobHandle
from pipeline_runner.core.pipelines.exceptions import (
    BuildReadyTimeoutError,
    JenkinsApiError,
    JobNotFoundError,
)
from pipeline_runner.core.pipelines.value_objects import JobName, SharedLibraryEntry

from .settings import Settings

logger = logging.getLogger(__name__)

FOLDER_CLASS = "com.cloudbees.hudson.plugins.folder.Folder"
JOBS_TREE = "jobs[_class,name,fullName,url]"
BUILDS_TREE = "builds[number]"
XML_HEADERS = {"Content-Type": "application/xml; charset=utf-8"}


class JenkinsClient:
    """Async Jenkins REST client.

    Job names may contain ``/`` for jobs nested in folders. POST requests
    carry a CSRF crumb when the server issues one.

    Usage::

        async with JenkinsClient("http://localhost:8080", "alice", "token") as client:
            job = await client.get_job("demo")
    """

    def __init__(
        self,
        base_url: str,
        username: str = "",
        api_token: str = "",
        verify: bool = True,
        timeout: float = 30.0,
        build_ready_timeout: float = 30.0,
        poll_interval: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Jenkins server root URL.
            username: User for basic auth; anonymous when empty.
            api_token: API token or password of ``username``.
            verify: Verify the server's TLS certificate.
            timeout: Timeout of a single request, in seconds.
            build_ready_timeout: Seconds ``await_ready`` waits for a build.
            poll_interval: Seconds between readiness and log polls.
            transport: Optional transport, used by tests.
        """
        self._base_url = base_url.rstrip("/") + "/"
        self._build_ready_timeout = build_ready_timeout
        self._poll_interval = poll_interval
        self._crumb: Optional[Dict[str, str]] = None
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            auth=(username, api_token) if username else None,
            verify=verify,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "JenkinsClient":
        """Create a client from a ``Settings`` snapshot."""
        return cls(
            settings.jenkins_url,
            username=settings.username,
            api_token=settings.api_token,
            verify=settings.verify_ssl,
            timeout=settings.request_timeout,
            build_ready_timeout=settings.build_ready_timeout,
            poll_interval=settings.poll_interval,
            transport=transport,
        )

    async def __aenter__(self) -> "JenkinsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        """Absolute URL of ``path`` relative to the server root."""
        return self._base_url + path.lstrip("/")

    async def list_jobs(
        self,
        predicate: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ) -> List[Dict[str, Any]]:
        """List all jobs, descending into folders.

        Args:
            predicate: Keeps a job item when it returns True.

        Returns:
            Job items with ``fullName`` and ``url``; folders are not listed.
        """
        jobs = await self._list_jobs_under("")
        if predicate is not None:
            jobs = [job for job in jobs if predicate(job)]
        return jobs

    async def get_job(self, name: str) -> Optional[JobHandle]:
        """Fetch a job, None when it does not exist."""
        job_name = JobName(name)
        try:
            response = await self._request(
                "GET", f"{job_name.url_path}/api/json", job_name=name
            )
        except JobNotFoundError:
            logger.debug("Job %s does not exist", name)
            return None
        return JobHandle.from_api(self._json(response))

    async def get_config(self, name: str) -> str:
        response = await self._request(
            "GET", f"{JobName(name).url_path}/config.xml", job_name=name
        )
        return response.text

    async def set_config(self, name: str, xml: str) -> None:
        await self._request(
            "POST",
            f"{JobName(name).url_path}/config.xml",
            job_name=name,
            content=xml.encode("utf-8"),
            headers=XML_HEADERS,
        )
        logger.debug("Updated config.xml of %s", name)

    async def create_job(self, name: str, xml: str) -> JobHandle:
        """Create a job, inside its parent folder for nested names.

        Raises:
            JenkinsApiError: If creation fails.
            JobNotFoundError: If the job cannot be read back.
        """
        job_name = JobName(name)
        parent = "/".join(f"job/{segment}" for segment in job_name.segments[:-1])
        path = f"{parent}/createItem" if parent else "createItem"
        await self._request(
            "POST",
            path,
            job_name=name,
            params={"name": job_name.segments[-1]},
            content=xml.encode("utf-8"),
            headers=XML_HEADERS,
        )
        logger.info("Created job %s", name)

        job = await self.get_job(name)
        if job is None:
            raise JobNotFoundError(name, url=self.url_for(job_name.url_path))
        return job

    async def trigger_build(
        self,
        name: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Queue a build; ``buildWithParameters`` when parameters are given."""
        url_path = JobName(name).url_path
        if parameters is None:
            await self._request("POST", f"{url_path}/build", job_name=name)
        else:
            await self._request(
                "POST",
                f"{url_path}/buildWithParameters",
                job_name=name,
                data={key: _form_value(value) for key, value in parameters.items()},
            )
        logger.info("Triggered build of %s", name)

    async def stop_build(self, name: str, build_number: int) -> None:
        await self._request(
            "POST", f"{JobName(name).url_path}/{build_number}/stop", job_name=name
        )

    async def await_ready(self, name: str, build_number: int) -> None:
        """Poll the build until it exists.

        Raises:
            BuildReadyTimeoutError: If the build does not start in time.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._build_ready_timeout
        path = f"{JobName(name).url_path}/{build_number}/api/json"
        while True:
            try:
                await self._request("GET", path, job_name=name)
                return
            except JobNotFoundError:
                logger.debug("Build %s #%d not ready yet", name, build_number)
            if loop.time() + self._poll_interval > deadline:
                raise BuildReadyTimeoutError(name, build_number)
            await asyncio.sleep(self._poll_interval)

    async def stream_log(self, name: str, build_number: int) -> AsyncIterator[str]:
        """Yield the build's console output until the build completes.

        Raises:
            JenkinsApiError: If a request fails.
        """
        path = f"{JobName(name).url_path}/{build_number}/logText/progressiveText"
        start = 0
        while True:
            response = await self._request("GET", path, job_name=name, params={"start": start})
            if response.text:
                yield response.text
            start = int(response.headers.get("X-Text-Size", start))
            if response.headers.get("X-More-Data", "").lower() != "true":
                return
            await asyncio.sleep(self._poll_interval)

    async def list_build_numbers(self, job_url: str) -> List[str]:
        """List build numbers of the job at ``job_url``, newest first."""
        response = await self._request(
            "GET", job_url.rstrip("/") + "/api/json", params={"tree": BUILDS_TREE}
        )
        return [str(build["number"]) for build in self._json(response).get("builds") or []]

    async def get_shared_library(self, job_name: Optional[str] = None) -> List[SharedLibraryEntry]:
        """Scrape the global variable reference page.

        Args:
            job_name: Include the job's own Shared Libraries when given.
        """
        path = "pipeline-syntax/globals"
        if job_name is not None:
            path = f"{JobName(job_name).url_path}/{path}"
        response = await self._request("GET", path, job_name=job_name)
        return parse_globals_page(response.text)

    async def _list_jobs_under(self, folder_path: str) -> List[Dict[str, Any]]:
        prefix = f"{folder_path}/" if folder_path else ""
        response = await self._request(
            "GET", f"{prefix}api/json", params={"tree": JOBS_TREE}
        )
        jobs: List[Dict[str, Any]] = []
        for item in self._json(response).get("jobs") or []:
            if item.get("_class") == FOLDER_CLASS:
                full_name = item.get("fullName") or item["name"]
                jobs.extend(await self._list_jobs_under(JobName(full_name).url_path))
            else:
                jobs.append(item)
        return jobs

    async def _crumb_headers(self) -> Dict[str, str]:
        """Fetch and cache the CSRF crumb header; empty when crumbs are off."""
        if self._crumb is None:
            response = await self._send("GET", "crumbIssuer/api/json")
            if response.status_code == 404:
                self._crumb = {}
            else:
                self._raise_for_status(response)
                data = self._json(response)
                try:
                    self._crumb = {data["crumbRequestField"]: data["crumb"]}
                except KeyError as exc:
                    raise JenkinsApiError(
                        f"Jenkins returned a crumb without {exc}",
                        status_code=response.status_code,
                        url=str(response.request.url),
                    ) from exc
        return self._crumb

    async def _request(
        self,
        method: str,
        path: str,
        job_name: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, mapping failures to domain exceptions.

        Raises:
            JobNotFoundError: On a 404 for a job-scoped request.
            JenkinsApiError: On any other failure.
        """
        if method == "POST":
            headers = dict(kwargs.pop("headers", None) or {})
            headers.update(await self._crumb_headers())
            kwargs["headers"] = headers

        response = await self._send(method, path, **kwargs)
        if response.status_code == 404 and job_name is not None:
            raise JobNotFoundError(job_name, url=str(response.request.url))
        self._raise_for_status(response, job_name)
        return response

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise JenkinsApiError(
                f"Request to Jenkins failed: {exc}", url=self.url_for(path)
            ) from exc

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        """Decode a JSON object body; anything else is a remote failure."""
        url = str(response.request.url)
        try:
            data = response.json()
        except ValueError as exc:
            logger.error("%s returned a non-JSON body", url)
            raise JenkinsApiError(
                f"Jenkins returned an invalid JSON response for {url}",
                status_code=response.status_code,
                url=url,
            ) from exc
        if not isinstance(data, dict):
            raise JenkinsApiError(
                f"Jenkins returned an unexpected JSON response for {url}",
                status_code=response.status_code,
                url=url,
            )
        return data

    @staticmethod
    def _raise_for_status(response: httpx.Response, job_name: Optional[str] = None) -> None:
        if response.is_success or response.is_redirect:
            return
        url = str(response.request.url)
        logger.error("%s %s returned %d", response.request.method, url, response.status_code)
        raise JenkinsApiError(
            f"Jenkins returned {response.status_code} for {url}",
            status_code=response.status_code,
            url=url,
            job_name=job_name,
        )


def parse_globals_page(html: str) -> List[SharedLibraryEntry]:
    """Extract step and variable entries from ``pipeline-syntax/globals``.

    Each entry is a ``<dt id="label">`` followed by its ``<dd>`` description.
    """
    soup = BeautifulSoup(html, "html.parser")
    entries = []
    for dt in soup.find_all("dt"):
        label = dt.get("id") or dt.get_text(strip=True)
        if not label:
            continue
        dd = dt.find_next_sibling("dd")
        entries.append(
            SharedLibraryEntry(
                label=label,
                description=dd.get_text(" ", strip=True) if dd is not None else "",
                description_html=dd.decode_contents().strip() if dd is not None else "",
            )
        )
    return entries


def _form_value(value: Any) -> str:
    """Format a parameter value the way Jenkins form fields expect."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
