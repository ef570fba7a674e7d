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


"""Terminal implementation of the interactive UI and output ports."""

import asyncio
import logging
import os
import shlex
import signal
import sys
import tempfile
import webbrowser
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional, Sequence, TextIO, TypeVar

from pipeline_runner.core.pipelines.cancellation import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConsoleProgress:
    """Progress line written to stderr, with a cancellation token."""

    def __init__(self, title: str, stream: TextIO) -> None:
        self.token = CancellationToken()
        self.title = title
        self.percent = 0
        self._stream = stream

    def report(self, message: Optional[str] = None, increment: Optional[int] = None) -> None:
        if increment:
            self.percent = min(100, self.percent + increment)
        line = f"[{self.percent:3d}%] {self.title}"
        if message:
            line = f"{line}: {message}"
        print(line, file=self._stream, flush=True)


class ConsoleUI:
    """Interactive UI over the terminal.

    Selections and confirmations are read from stdin, documents are edited
    with ``$VISUAL`` or ``$EDITOR`` and Ctrl-C during a progress workflow
    requests cancellation instead of killing the process.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        out: Optional[TextIO] = None,
        editor: Optional[str] = None,
    ) -> None:
        self._input = input_func
        self._out = out if out is not None else sys.stderr
        self._editor = editor

    async def pick(
        self,
        items: Sequence[T],
        title: str = "",
        label: Callable[[T], str] = str,
    ) -> Optional[T]:
        """Print a numbered list and read the selection; blank cancels."""
        if not items:
            self.show_info(f"{title}: nothing to select." if title else "Nothing to select.")
            return None

        if title:
            print(title, file=self._out)
        for index, item in enumerate(items, start=1):
            print(f"  {index:>3}) {label(item)}", file=self._out)

        while True:
            answer = (await self._prompt(f"Select 1-{len(items)} (blank to cancel): ")).strip()
            if not answer:
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(items):
                return items[int(answer) - 1]
            self.show_warning(f"Invalid selection: {answer}")

    async def confirm(self, message: str, action: str) -> bool:
        answer = (await self._prompt(f"{message} [{action}/No]: ")).strip().lower()
        return answer in {action.lower(), action[:1].lower()}

    async def edit_document(self, path: Path) -> None:
        """Open ``path`` in the user's editor and wait for it to exit."""
        editor = self._editor or os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"
        command = shlex.split(editor) + [str(path)]
        logger.debug("Opening %s with %s", path, command[0])
        process = await asyncio.create_subprocess_exec(*command)
        return_code = await process.wait()
        if return_code != 0:
            logger.warning("Editor %s exited with status %d", command[0], return_code)

    @asynccontextmanager
    async def progress(self, title: str) -> AsyncIterator[ConsoleProgress]:
        """Progress workflow; Ctrl-C cancels its token while it runs."""
        progress = ConsoleProgress(title, self._out)
        loop = asyncio.get_running_loop()
        previous = signal.getsignal(signal.SIGINT)

        def _on_interrupt(signum, frame):
            loop.call_soon_threadsafe(progress.token.cancel)

        signal.signal(signal.SIGINT, _on_interrupt)
        try:
            yield progress
        finally:
            signal.signal(signal.SIGINT, previous)

    async def show_html(self, title: str, html: str) -> None:
        """Write ``html`` to a temporary file and open it in the browser."""
        with tempfile.NamedTemporaryFile(
            "w", suffix=".html", prefix="pipeline-runner-", delete=False, encoding="utf-8"
        ) as f:
            f.write(html)
        logger.debug("Rendered %s to %s", title, f.name)
        await self.open_url(Path(f.name).as_uri())

    async def open_url(self, url: str) -> None:
        print(f"Opening {url}", file=self._out)
        await asyncio.to_thread(webbrowser.open, url)

    def show_info(self, message: str) -> None:
        print(message, file=self._out, flush=True)

    def show_warning(self, message: str) -> None:
        print(f"warning: {message}", file=self._out, flush=True)

    async def _prompt(self, text: str) -> str:
        try:
            return await asyncio.to_thread(self._input, text)
        except EOFError:
            return ""


class StdoutSink:
    """Output panel writing build logs to stdout."""

    CLEAR_SCREEN = "\033[2J\033[H"

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def clear(self) -> None:
        """Clear the screen; a no-op when stdout is not a terminal."""
        if self._stream.isatty():
            self.write(self.CLEAR_SCREEN)

    def show(self) -> None:
        """Stdout is always visible."""
