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

"""Domain services for the pipeline domain."""

from typing import Optional

from .entities import DEFAULT_PIPELINE_CONFIG, JobConfigDocument


class JobConfigCodec:
    """Domain service injecting a pipeline script into a job configuration.

    Builds are triggered from the editor and must start immediately, so the
    quiet period is always forced to zero.
    """

    QUIET_PERIOD: int = 0

    @staticmethod
    def build_or_update_config(existing_xml: Optional[str], script_source: str) -> str:
        """Return ``existing_xml`` with the script replaced.

        Args:
            existing_xml: Current ``config.xml`` of the job, or None for the
                default configuration of a new pipeline job.
            script_source: Scripted pipeline source, stored verbatim.

        Returns:
            Serialized configuration; all other fields unchanged.

        Raises:
            JobConfigParseError: If ``existing_xml`` is malformed.

        Example:
            >>> xml = JobConfigCodec.build_or_update_config(None, "node {}")
            >>> "<quietPeriod>0</quietPeriod>" in xml
            True
        """
        document = JobConfigDocument.parse(
            DEFAULT_PIPELINE_CONFIG if existing_xml is None else existing_xml
        )
        document.script = script_source
        document.quiet_period = JobConfigCodec.QUIET_PERIOD
        return document.to_xml()
