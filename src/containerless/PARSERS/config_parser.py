# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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

"""
Parsers for deployer configuration from YAML files and the environment.
"""
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values
from pydantic import ValidationError

from ..MODELS.deployer_config import DeployerConfiguration
from ..errors import ConfigurationError

# Accepted spellings of each setting
_ALIASES = {
    'containerlessDocker': 'containerless_docker',
    'containerless_docker': 'containerless_docker',
    'embeddedPort': 'embedded_port',
    'embedded_port': 'embedded_port',
    'buildDirectoryCleanup': 'build_directory_cleanup',
    'build_directory_cleanup': 'build_directory_cleanup',
}

_ENV_KEYS = {
    'CONTAINERLESS_DOCKER': 'containerless_docker',
    'CONTAINERLESS_EMBEDDED_PORT': 'embedded_port',
    'CONTAINERLESS_CLEANUP': 'build_directory_cleanup',
}


class ConfigParser:
    """
    Builds a DeployerConfiguration from YAML or environment variables.
    """
    def parse(self, config_path: str) -> DeployerConfiguration:
        """
        Parses a configuration file from a path.

        :param config_path: Path to the YAML file.
        :return: Parsed configuration.
        """
        with open(config_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> DeployerConfiguration:
        """
        Parses configuration from YAML text. Settings may sit at the top level
        or under a ``containerless`` section.

        :param content: YAML content.
        :return: Parsed configuration.
        :raises ConfigurationError: If the content is not valid YAML, not a mapping or a setting is invalid.
        """
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Containerless configuration is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("Containerless configuration must be a mapping")
        section = data.get('containerless', data)
        if not isinstance(section, dict):
            raise ConfigurationError("Containerless configuration section must be a mapping")

        values = {_ALIASES[k]: v for k, v in section.items() if k in _ALIASES}
        return self._build(values)

    def from_environment(self,
                         env_file: Optional[str] = None,
                         environ: Optional[Dict[str, str]] = None) -> DeployerConfiguration:
        """
        Reads CONTAINERLESS_* variables. Values from the process environment
        override those of the optional .env file.

        :param env_file: Optional path to a .env file.
        :param environ: Environment to read. Defaults to os.environ.
        :return: Parsed configuration.
        """
        merged: Dict[str, Any] = {}
        if env_file and os.path.exists(env_file):
            merged.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        merged.update(os.environ if environ is None else environ)

        values = {field: merged[key] for key, field in _ENV_KEYS.items() if key in merged}
        return self._build(values)

    @staticmethod
    def _build(values: Dict[str, Any]) -> DeployerConfiguration:
        try:
            return DeployerConfiguration(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid containerless configuration: {e}") from e
