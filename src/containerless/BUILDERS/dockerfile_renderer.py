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
Renders the Dockerfile of a build context from its DockerfileTemplate.
"""
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from ..UTILS.placeholder_interpolation import PlaceholderInterpolator
from ..UTILS.file_cleanup import delete_on_exit
from ..errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

DOCKERFILE_TEMPLATE = "DockerfileTemplate"
DOCKERFILE = "Dockerfile"
DOCKERFILE_BACKUP = "Dockerfile.old"
DEPLOYABLE_FILENAME = "deployableFilename"


class DockerfileRenderer:
    """
    Turns a DockerfileTemplate into the Dockerfile used by the image build.

    The deployable archive name changes from one test to another, so the
    template refers to it as ${deployableFilename}.
    """
    def __init__(self, cleanup: bool = True, log: Optional[logging.Logger] = None):
        """
        Initializes the renderer.

        :param cleanup: Whether written Dockerfiles are deleted at interpreter exit.
        :param log: Logger to report to. Defaults to the module logger.
        """
        self.cleanup = cleanup
        self.log = log or logger

    def render(self, template_path: str, context: Dict[str, str]) -> str:
        """
        Reads a template, keeping its line endings untouched, and replaces its placeholders.

        :param template_path: Path to the template file.
        :param context: Placeholder values by name.
        :return: The rendered text.
        :raises TemplateNotFoundError: If the template file does not exist.
        """
        try:
            with open(template_path, 'rb') as f:
                content = f.read().decode('utf-8', errors='surrogateescape')
        except (FileNotFoundError, IsADirectoryError):
            raise TemplateNotFoundError(
                f"Containerless Docker container requires a file named {DOCKERFILE_TEMPLATE}"
            ) from None

        unresolved = PlaceholderInterpolator.unresolved(content, context)
        if unresolved:
            self.log.debug("Leaving unresolved placeholders in %s: %s", template_path, ", ".join(unresolved))
        return PlaceholderInterpolator.interpolate(content, context)

    def write(self, directory: str, content: str) -> Path:
        """
        Writes the Dockerfile, moving an existing one aside to Dockerfile.old.

        :param directory: The build context directory.
        :param content: The Dockerfile content.
        :return: Path to the written Dockerfile.
        """
        dockerfile = Path(directory) / DOCKERFILE
        if dockerfile.exists():
            self.log.debug(
                "Dockerfile file is already found in current build directory "
                "and is going to be renamed to Dockerfile.old."
            )
            os.replace(dockerfile, Path(directory) / DOCKERFILE_BACKUP)

        with open(dockerfile, 'wb') as f:
            f.write(content.encode('utf-8', errors='surrogateescape'))

        if self.cleanup:
            delete_on_exit(str(dockerfile))
        return dockerfile

    def create_from_template(self, directory: str, context: Dict[str, str]) -> Path:
        """
        Renders the DockerfileTemplate of a build directory into its Dockerfile.

        :param directory: The build context directory.
        :param context: Placeholder values by name.
        :return: Path to the written Dockerfile.
        """
        content = self.render(os.path.join(directory, DOCKERFILE_TEMPLATE), context)
        return self.write(directory, content)
