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
Exports deployable archives into a build context.
"""
import logging
import zipfile
from pathlib import Path
from typing import Optional

from ..MODELS.archive import Archive
from ..UTILS.file_cleanup import delete_on_exit

logger = logging.getLogger(__name__)


class ArtifactPackager:
    """
    Writes an archive as a zip file next to the Dockerfile so the image build can copy it.
    """
    def __init__(self, cleanup: bool = True, log: Optional[logging.Logger] = None):
        self.cleanup = cleanup
        self.log = log or logger

    def package(self, archive: Archive, directory: str) -> Path:
        """
        Exports the archive to <directory>/<archive name>, overwriting any existing file.

        :param archive: The archive to export.
        :param directory: The build context directory.
        :return: Path to the written file.
        """
        output = Path(directory) / archive.name
        if self.cleanup:
            delete_on_exit(str(output))

        with zipfile.ZipFile(output, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(archive.entries):
                zf.writestr(path, archive.entries[path])

        self.log.debug("Exported %s (%d entries) to %s", archive.name, len(archive.entries), output)
        return output
