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

"""Cooperative cancellation of pipeline workflows."""

from typing import Callable, List


class CancellationToken:
    """Flag set by the host when the user cancels a workflow.

    Workflows poll ``is_cancellation_requested`` at their own checkpoints;
    nothing already sent to the remote system is rolled back.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation; callbacks run once, on the first request."""
        if self._cancelled:
            return
        self._cancelled = True
        for callback in self._callbacks:
            callback()

    def on_cancellation_requested(self, callback: Callable[[], None]) -> None:
        """Register a callback run when cancellation is requested."""
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)
