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


"""Settings for the Jenkins connection and pipeline behaviour.

Values come from an optional YAML file, then environment variables, which
override the file.

Example ``settings.yaml``::

    jenkins:
      url: https://jenkins.example.com
      username: alice
      token: 11aa22bb
    pipeline:
      params:
        enabled: true
      browser_shared_library_ref: false
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

import yaml

from pipeline_runner.core.pipelines.value_objects import PipelineOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PIPELINE_RUNNER_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/pipeline-runner/settings.yaml")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: Any) -> bool:
    """Parse a boolean from YAML or an environment variable.

    Raises:
        ValueError: If the value is not a recognised boolean.
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass(frozen=True)
class Settings:
    """Immutable settings snapshot.

    Attributes:
        jenkins_url: Jenkins server root URL.
        username: Jenkins user for basic auth; empty for anonymous access.
        api_token: API token or password of ``username``.
        verify_ssl: Verify the server's TLS certificate.
        request_timeout: Timeout of a single HTTP request, in seconds.
        params_enabled: Resolve build parameters through ``*.params.json``.
        browser_shared_library_ref: Open Shared Library docs in the browser.
        build_ready_timeout: Seconds to wait for a triggered build to start.
        poll_interval: Seconds between readiness and log polls.
    """

    jenkins_url: str = "http://127.0.0.1:8080"
    username: str = ""
    api_token: str = ""
    verify_ssl: bool = True
    request_timeout: float = 30.0
    params_enabled: bool = True
    browser_shared_library_ref: bool = False
    build_ready_timeout: float = 30.0
    poll_interval: float = 1.0

    # field -> (environment variable, YAML key path, converter)
    SOURCES: ClassVar[Dict[str, Tuple[str, Tuple[str, ...], Callable[[Any], Any]]]] = {
        "jenkins_url": ("JENKINS_URL", ("jenkins", "url"), str),
        "username": ("JENKINS_USER", ("jenkins", "username"), str),
        "api_token": ("JENKINS_TOKEN", ("jenkins", "token"), str),
        "verify_ssl": ("JENKINS_VERIFY_SSL", ("jenkins", "verify_ssl"), parse_bool),
        "request_timeout": ("JENKINS_REQUEST_TIMEOUT", ("jenkins", "timeout"), float),
        "params_enabled": (
            "PIPELINE_PARAMS_ENABLED", ("pipeline", "params", "enabled"), parse_bool
        ),
        "browser_shared_library_ref": (
            "PIPELINE_BROWSER_SHARED_LIBRARY_REF",
            ("pipeline", "browser_shared_library_ref"),
            parse_bool,
        ),
        "build_ready_timeout": (
            "PIPELINE_BUILD_READY_TIMEOUT", ("pipeline", "build_ready_timeout"), float
        ),
        "poll_interval": ("PIPELINE_POLL_INTERVAL", ("pipeline", "poll_interval"), float),
    }

    def __post_init__(self) -> None:
        """Validate URL and timing values."""
        parsed = urlparse(self.jenkins_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid Jenkins URL: {self.jenkins_url!r}")
        for name in ("request_timeout", "build_ready_timeout", "poll_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_env(cls, base: Optional["Settings"] = None) -> "Settings":
        """Overlay environment variables on ``base`` (defaults when None).

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        overrides: Dict[str, Any] = {}
        for name, (env_var, _, convert) in cls.SOURCES.items():
            raw = os.environ.get(env_var)
            if raw is not None:
                overrides[name] = cls._convert(name, raw, convert)
        return replace(base or cls(), **overrides)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Create settings from a parsed YAML document.

        Raises:
            ValueError: If a key holds an invalid value.
        """
        values: Dict[str, Any] = {}
        for name, (_, key_path, convert) in cls.SOURCES.items():
            raw = _lookup(data, key_path)
            if raw is not None:
                values[name] = cls._convert(name, raw, convert)
        return cls(**values)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "Settings":
        """Load the YAML file, then apply environment overrides.

        Args:
            path: Settings file. Defaults to ``PIPELINE_RUNNER_CONFIG`` or
                ``~/.config/pipeline-runner/settings.yaml`` when present.

        Raises:
            FileNotFoundError: If an explicitly named file does not exist.
            ValueError: If the file or a variable holds an invalid value.
            yaml.YAMLError: If the file is not valid YAML.
        """
        explicit = path or os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(explicit or DEFAULT_CONFIG_PATH).expanduser()

        base = None
        if explicit or config_path.is_file():
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Settings file {config_path} must hold a mapping")
            base = cls.from_mapping(data)
            logger.debug("Loaded settings from %s", config_path)
        return cls.from_env(base)

    def pipeline_options(self) -> PipelineOptions:
        return PipelineOptions(
            params_enabled=self.params_enabled,
            browser_shared_library_ref=self.browser_shared_library_ref,
        )

    def __repr__(self) -> str:
        shown = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "api_token" and value:
                value = "***"
            shown.append(f"{f.name}={value!r}")
        return f"Settings({', '.join(shown)})"

    @staticmethod
    def _convert(name: str, raw: Any, convert: Callable[[Any], Any]) -> Any:
        try:
            return convert(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def _lookup(data: Mapping[str, Any], key_path: Tuple[str, ...]) -> Any:
    """Return the value at a nested key path, None when any key is missing."""
    current: Any = data
    for key in key_path:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current
