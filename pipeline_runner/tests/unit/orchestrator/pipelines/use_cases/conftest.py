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


"""Shared fixtures for pipeline use case tests."""

from pathlib import Path

import pytest

from pipeline_runner.core.pipelines.value_objects import PipelineOptions, SourceDocument
from pipeline_runner.infra.param_file_store import JsonParameterStore
from pipeline_runner.orchestrator.pipelines.use_cases import (
    LogRelayUseCase,
    PipelineCommands,
    PipelineOrchestrator,
    ResolveParametersUseCase,
    SharedLibraryBrowser,
)
from pipeline_runner.tests.mocks.fake_ports import SCRIPT, FakeJobDirectory, ListSink, ScriptedUI


@pytest.fixture
def directory():
    """Empty in-memory job directory."""
    return FakeJobDirectory()


@pytest.fixture
def ui():
    """UI confirming every prompt and selecting nothing."""
    return ScriptedUI()


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def store():
    return JsonParameterStore()


@pytest.fixture
def document(tmp_path: Path) -> SourceDocument:
    """Saved groovy document named after the ``demo`` job."""
    path = tmp_path / "demo.groovy"
    path.write_text(SCRIPT, encoding="utf-8")
    return SourceDocument.from_path(path)


@pytest.fixture
def options():
    return PipelineOptions()


@pytest.fixture
def resolver(store, ui):
    return ResolveParametersUseCase(store, ui)


@pytest.fixture
def orchestrator(directory, ui, resolver):
    return PipelineOrchestrator(directory, ui, resolver)


@pytest.fixture
def commands(orchestrator, directory, ui, sink, options):
    """Command facade wired to the fakes."""
    return PipelineCommands(
        orchestrator=orchestrator,
        relay=LogRelayUseCase(directory),
        browser=SharedLibraryBrowser(directory, ui),
        ui=ui,
        sink=sink,
        options=options,
    )
