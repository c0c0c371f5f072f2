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
Error types raised while deploying or undeploying a containerless Docker container.
"""


class ContainerlessError(Exception):
    """
    Base class for every error raised by the deployer.
    """


class ConfigurationError(ContainerlessError, ValueError):
    """
    A configuration problem. Never retried, always reported to the caller.
    """


class CubeNotFoundError(ConfigurationError):
    """
    No container definition is registered under the requested id.
    """

    def __init__(self, name: str):
        super().__init__(
            f"No Containerless Docker container configured in extension with id {name}"
        )
        self.name = name


class MissingBuildConfigError(ConfigurationError):
    """
    The container definition is not built from a Dockerfile.
    """


class InvalidBuildLocationError(ConfigurationError):
    """
    The dockerfileLocation does not point to a directory.
    """


class TemplateNotFoundError(ConfigurationError):
    """
    The build directory holds no Dockerfile template.
    """


class UnsupportedDeploymentError(ContainerlessError, NotImplementedError):
    """
    Raised for deployment kinds the deployer does not handle (descriptors).
    """


class EndpointResolutionError(ContainerlessError):
    """
    The started container exposes no network binding to build an endpoint from.
    """
