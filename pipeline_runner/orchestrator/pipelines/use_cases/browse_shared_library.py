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


"""Shared Library reference browser."""

import logging
from typing import List, Optional

from pipeline_runner.core.pipelines.repositories import InteractiveUI, JobDirectory
from pipeline_runner.core.pipelines.value_objects import (
    JobName,
    PipelineOptions,
    SharedLibraryEntry,
)

logger = logging.getLogger(__name__)

GLOBALS_PATH = "pipeline-syntax/globals"


class SharedLibraryBrowser:
    """Lists Shared Library steps and variables and presents their docs.

    Only the most recently fetched entries are kept.
    """

    def __init__(self, directory: JobDirectory, ui: InteractiveUI) -> None:
        self._directory = directory
        self._ui = ui
        self._entries: List[SharedLibraryEntry] = []

    @property
    def entries(self) -> List[SharedLibraryEntry]:
        """Entries returned by the last ``list_entries`` call."""
        return list(self._entries)

    async def list_entries(self, job_name: Optional[JobName] = None) -> List[SharedLibraryEntry]:
        """Fetch the reference, scoped to ``job_name``'s libraries when given."""
        self._entries = await self._directory.get_shared_library(
            str(job_name) if job_name is not None else None
        )
        logger.debug("Fetched %d shared library entries", len(self._entries))
        return self.entries

    async def present(
        self,
        entry: SharedLibraryEntry,
        display_inline: bool,
        job_name: Optional[JobName] = None,
    ) -> None:
        """Render ``entry`` inline or open its documentation in the browser.

        Args:
            entry: Selected step or variable.
            display_inline: Render the HTML description through the UI.
            job_name: Job whose syntax page the browser link targets.
        """
        if display_inline:
            await self._ui.show_html(entry.label, f"<html>{entry.description_html}</html>")
            return
        await self._ui.open_url(self._directory.url_for(self.reference_path(entry, job_name)))

    async def show_reference(
        self,
        options: PipelineOptions,
        last_job: Optional[JobName] = None,
    ) -> Optional[SharedLibraryEntry]:
        """List the reference, let the user pick an entry and present it.

        Returns:
            The presented entry, None when nothing was selected.
        """
        entries = await self.list_entries(last_job)
        entry = await self._ui.pick(entries, title="Shared Library", label=lambda e: e.label)
        if entry is None:
            return None
        await self.present(
            entry,
            display_inline=not options.browser_shared_library_ref,
            job_name=last_job,
        )
        return entry

    @staticmethod
    def reference_path(entry: SharedLibraryEntry, job_name: Optional[JobName] = None) -> str:
        """Path of the entry's documentation relative to the server root.

        Example:
            >>> SharedLibraryBrowser.reference_path(SharedLibraryEntry("echo"))
            'pipeline-syntax/globals#echo'
        """
        if job_name is None:
            return f"{GLOBALS_PATH}#{entry.label}"
        return f"{job_name.url_path}/{GLOBALS_PATH}#{entry.label}"
