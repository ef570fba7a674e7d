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

"""Remote pipeline job entity."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..value_objects import ActiveBuild, BuildNumber, JobName, ParameterDefinition

PARAMETERS_PROPERTY_CLASS = "hudson.model.ParametersDefinitionProperty"


@dataclass(frozen=True)
class JobHandle:
    """Snapshot of a Jenkins job as returned by its JSON API.

    Attributes:
        name: Full job name (folders included).
        url: Absolute job URL, with trailing slash.
        next_build_number: Number the next triggered build will receive.
        parameter_definitions: Declared build parameters, None when the job
            has no parameters property at all.
    """

    name: JobName
    url: str
    next_build_number: BuildNumber
    parameter_definitions: Optional[Tuple[ParameterDefinition, ...]] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "JobHandle":
        """Create a handle from ``job/<name>/api/json``.

        Args:
            payload: Decoded job JSON.

        Returns:
            JobHandle for the job.
        """
        definitions = None
        for prop in payload.get("property") or []:
            if prop.get("_class") == PARAMETERS_PROPERTY_CLASS:
                definitions = tuple(
                    ParameterDefinition.from_api(item)
                    for item in prop.get("parameterDefinitions") or []
                )
                break

        return cls(
            name=JobName(payload.get("fullName") or payload["name"]),
            url=payload.get("url", ""),
            next_build_number=BuildNumber(int(payload.get("nextBuildNumber") or 1)),
            parameter_definitions=definitions,
        )

    @property
    def has_parameters(self) -> bool:
        """Check if the job declares a parameters property."""
        return self.parameter_definitions is not None

    def default_parameters(self) -> dict:
        """Map each declared parameter to its remote default."""
        return {
            definition.name: definition.default
            for definition in self.parameter_definitions or ()
        }

    def as_active_build(self) -> ActiveBuild:
        """Active build handle for the next build of this job."""
        return ActiveBuild(job_name=self.name, build_number=self.next_build_number)
