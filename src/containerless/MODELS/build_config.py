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
Model for the Dockerfile build section of a cube configuration.
"""
from pathlib import Path
from pydantic import BaseModel

from .cube import Cube
from ..errors import MissingBuildConfigError, InvalidBuildLocationError

BUILD_IMAGE_KEY = "buildImage"
DOCKERFILE_LOCATION_KEY = "dockerfileLocation"


class BuildConfig(BaseModel):
    """
    The validated ``buildImage`` section of a cube.
    """
    dockerfile_location: Path

    @classmethod
    def from_cube(cls, cube: Cube) -> "BuildConfig":
        """
        Extracts the build section of a cube, failing when the cube is not
        built from a Dockerfile kept in a directory.

        :param cube: The container definition.
        :return: The build configuration.
        :raises MissingBuildConfigError: If buildImage or dockerfileLocation is absent.
        :raises InvalidBuildLocationError: If dockerfileLocation is not a directory.
        """
        params = cube.configuration.get(BUILD_IMAGE_KEY)
        if params is None:
            raise MissingBuildConfigError(
                "Containerless Docker container should be built in Dockerfile, "
                "and buildImage property not found."
            )
        if not isinstance(params, dict):
            raise MissingBuildConfigError(
                "Containerless Docker container buildImage property must be a mapping."
            )

        location = params.get(DOCKERFILE_LOCATION_KEY)
        if location is None:
            raise MissingBuildConfigError(
                "Containerless Docker container should be built in Dockerfile, "
                "and dockerfileLocation property not found."
            )

        # An empty path would resolve to the working directory
        if not isinstance(location, str) or not location.strip() or not Path(location).is_dir():
            raise InvalidBuildLocationError(
                "Dockerfile Template of containerless Docker container must be in a directory."
            )

        return cls(dockerfile_location=Path(location))
