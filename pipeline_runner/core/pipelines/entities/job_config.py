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

"""Pipeline job configuration document."""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

from ..exceptions import JobConfigParseError

ROOT_TAG = "flow-definition"
DEFAULT_DECLARATION = "<?xml version='1.1' encoding='UTF-8'?>"

# expat only understands XML 1.0 declarations; Jenkins writes 1.1.
_DECLARATION_PATTERN = re.compile(r"^\s*(<\?xml[^>]*\?>)\s*")

DEFAULT_PIPELINE_CONFIG = """<?xml version='1.1' encoding='UTF-8'?>
<flow-definition plugin="workflow-job">
  <actions/>
  <description></description>
  <keepDependencies>false</keepDependencies>
  <properties/>
  <definition class="org.jenkinsci.plugins.workflow.cps.CpsFlowDefinition" plugin="workflow-cps">
    <script></script>
    <sandbox>true</sandbox>
  </definition>
  <triggers/>
  <disabled>false</disabled>
</flow-definition>
"""


@dataclass
class JobConfigDocument:
    """Parsed ``config.xml`` of a pipeline job.

    Only the script and the quiet period are ever modified; every other
    element, attribute and comment is written back as it was read.

    Attributes:
        root: The ``flow-definition`` element.
        declaration: XML declaration to emit in front of the serialized root.
    """

    root: ET.Element
    declaration: str = DEFAULT_DECLARATION

    @classmethod
    def parse(cls, xml_text: str) -> "JobConfigDocument":
        """Parse a job configuration.

        Args:
            xml_text: Raw ``config.xml`` contents.

        Returns:
            Parsed document.

        Raises:
            JobConfigParseError: If the XML is malformed or not a pipeline job.
        """
        declaration = DEFAULT_DECLARATION
        match = _DECLARATION_PATTERN.match(xml_text)
        if match:
            declaration = match.group(1)
            xml_text = xml_text[match.end():]

        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            root = ET.fromstring(xml_text, parser=parser)
        except ET.ParseError as exc:
            raise JobConfigParseError(f"Malformed job configuration: {exc}") from exc

        if root.tag != ROOT_TAG:
            raise JobConfigParseError(
                f"Expected <{ROOT_TAG}> root element, got <{root.tag}>"
            )
        if root.find("definition") is None:
            raise JobConfigParseError("Job configuration has no pipeline <definition>")
        return cls(root=root, declaration=declaration)

    @classmethod
    def default(cls) -> "JobConfigDocument":
        """Configuration used for jobs that do not exist yet."""
        return cls.parse(DEFAULT_PIPELINE_CONFIG)

    @property
    def definition(self) -> ET.Element:
        return self.root.find("definition")

    @property
    def script(self) -> Optional[str]:
        """Current pipeline script, None when the element is absent."""
        node = self.definition.find("script")
        if node is None:
            return None
        return node.text or ""

    @script.setter
    def script(self, source: str) -> None:
        node = self.definition.find("script")
        if node is None:
            node = ET.SubElement(self.definition, "script")
        node.text = source

    @property
    def quiet_period(self) -> Optional[int]:
        """Quiet period in seconds, None when the job uses the server default."""
        node = self.root.find("quietPeriod")
        if node is None or not (node.text or "").strip():
            return None
        return int(node.text)

    @quiet_period.setter
    def quiet_period(self, seconds: int) -> None:
        node = self.root.find("quietPeriod")
        if node is None:
            node = ET.SubElement(self.root, "quietPeriod")
        node.text = str(seconds)

    def to_xml(self) -> str:
        """Serialize the document, declaration first."""
        body = ET.tostring(self.root, encoding="unicode")
        return f"{self.declaration}\n{body}"
