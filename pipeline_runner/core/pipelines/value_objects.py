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

"""Value objects for the pipeline domain.

All value objects are immutable and defined by their values, not identity.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Union

from .exceptions import InvalidSourceDocumentError


@dataclass(frozen=True)
class JobName:
    """Jenkins job name, optionally nested in folders with ``/``.

    Attributes:
        value: Full job name, e.g. ``demo`` or ``team/demo``.

    Raises:
        ValueError: If value is empty, exceeds length or has empty segments.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 255

    def __post_init__(self) -> None:
        """Validate name is not empty and every folder segment is named."""
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"JobName length cannot exceed {self.MAX_LENGTH} characters, "
                f"got {len(self.value)}"
            )
        if not self.value or not self.value.strip():
            raise ValueError("Job name cannot be empty")
        if any(not segment.strip() for segment in self.value.split("/")):
            raise ValueError(f"Invalid job name: {self.value}")

    @property
    def segments(self) -> tuple:
        """Folder path segments followed by the short name."""
        return tuple(self.value.split("/"))

    @property
    def url_path(self) -> str:
        """Path of the job relative to the server root, e.g. ``job/team/job/demo``."""
        return "/".join(f"job/{segment}" for segment in self.segments)

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class BuildNumber:
    """Jenkins build number.

    Raises:
        ValueError: If value is not a positive integer.
    """

    value: int

    def __post_init__(self) -> None:
        """Validate build number is positive."""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Build number must be an integer, got {self.value!r}")
        if self.value < 1:
            raise ValueError(f"Build number must be positive, got {self.value}")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


@dataclass(frozen=True)
class ParameterDefinition:
    """Build parameter declared by a job.

    Attributes:
        name: Parameter name.
        default: Remote default value (string, bool, number or None).
    """

    name: str
    default: Any = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "ParameterDefinition":
        """Create a definition from a Jenkins ``parameterDefinitions`` item."""
        default_value = payload.get("defaultParameterValue") or {}
        return cls(name=payload["name"], default=default_value.get("value"))


@dataclass(frozen=True)
class ActiveBuild:
    """In-flight job name and build number."""

    job_name: JobName
    build_number: BuildNumber

    def __str__(self) -> str:
        return f"{self.job_name}: #{self.build_number}"


@dataclass(frozen=True)
class SharedLibraryEntry:
    """Shared Library step or global variable documentation.

    Attributes:
        label: Step or variable name.
        description: Plain-text documentation.
        description_html: Rendered documentation markup.
    """

    label: str
    description: str = ""
    description_html: str = ""


class BuildStatus(str, Enum):
    """Outcome of a build or update workflow."""

    STARTED = "STARTED"
    UPDATED = "UPDATED"
    BUSY = "BUSY"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"
    PARAMETERS_FAILED = "PARAMETERS_FAILED"
    TIMED_OUT = "TIMED_OUT"

    def is_success(self) -> bool:
        """Check if the workflow reached its goal.

        Returns:
            True if status is STARTED or UPDATED.
        """
        return self in {BuildStatus.STARTED, BuildStatus.UPDATED}


@dataclass(frozen=True)
class NotApplicable:
    """The job declares no parameters; trigger without a parameters argument."""


@dataclass(frozen=True)
class Empty:
    """Trigger with an empty parameter mapping."""

    @property
    def values(self) -> Mapping[str, Any]:
        return MappingProxyType({})


@dataclass(frozen=True)
class Resolved:
    """Trigger with the resolved name to value mapping."""

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


ParameterResolution = Union[NotApplicable, Empty, Resolved]


@dataclass(frozen=True)
class SourceDocument:
    """Pipeline script file standing in for the active editor document.

    Attributes:
        path: Location of the file on disk.
        text: Current contents of the document.
        saved: False for untitled buffers that have no file yet.
    """

    path: Path
    text: str
    saved: bool = True

    GROOVY_SUFFIXES: ClassVar[frozenset] = frozenset({".groovy", ".gvy", ".jenkinsfile"})
    PARAMS_SUFFIX: ClassVar[str] = ".params.json"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceDocument":
        """Read a document from disk.

        Raises:
            InvalidSourceDocumentError: If the file cannot be read as UTF-8 text.
        """
        source_path = Path(path)
        try:
            text = source_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidSourceDocumentError(f"{source_path.name} is not UTF-8 text.") from exc
        except OSError as exc:
            raise InvalidSourceDocumentError(
                f"Unable to read {source_path}: {exc.strerror or exc}"
            ) from exc
        return cls(path=source_path, text=text)

    @property
    def language_id(self) -> str:
        """Language of the document, ``groovy`` for pipeline scripts."""
        if self.path.name == "Jenkinsfile" or self.path.suffix.lower() in self.GROOVY_SUFFIXES:
            return "groovy"
        return self.path.suffix.lstrip(".").lower() or "plaintext"

    @property
    def job_name(self) -> JobName:
        """Job name derived from the file's base name without extension."""
        return JobName(self.path.stem)

    @property
    def params_path(self) -> Path:
        """Companion parameters file, ``<base>.params.json`` beside the source."""
        return self.path.with_name(f"{self.path.stem}{self.PARAMS_SUFFIX}")

    def validate(self) -> None:
        """Check the document can be pushed as a pipeline script.

        Raises:
            InvalidSourceDocumentError: If not groovy, unsaved or empty.
        """
        if self.language_id != "groovy":
            raise InvalidSourceDocumentError(
                f"{self.path.name} is not a groovy pipeline script."
            )
        if not self.saved:
            raise InvalidSourceDocumentError("Must save the document before you run.")
        if self.text == "":
            raise InvalidSourceDocumentError(f"{self.path.name} is empty.")



@dataclass(frozen=True)
class PipelineOptions:
    """Pipeline behaviour settings, snapshotted per command.

    Attributes:
        params_enabled: Resolve build parameters through the parameters file.
        browser_shared_library_ref: Open Shared Library docs in the browser
            instead of rendering them inline.
    """

    params_enabled: bool = True
    browser_shared_library_ref: bool = False
