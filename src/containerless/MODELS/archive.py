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
Models for deployable archives and the deployment kinds accepted by the deployer.
"""
import os
import zipfile
from pathlib import Path
from typing import Dict, Union
from pydantic import BaseModel


class Archive(BaseModel):
    """
    An in-memory deployable unit, e.g. ``test.war``.

    Entries map a path inside the archive to its content.
    """
    name: str
    entries: Dict[str, bytes] = {}

    def add(self, path: str, content: Union[str, bytes]) -> "Archive":
        """
        Adds or replaces an entry.

        :param path: Path of the entry inside the archive.
        :param content: Entry content; text is stored as UTF-8.
        :return: The archive itself, for chaining.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.entries[path.lstrip("/")] = content
        return self

    @classmethod
    def from_zip(cls, zip_path: str) -> "Archive":
        """
        Loads an archive from an existing zip file, keeping its file name.
        """
        archive = cls(name=os.path.basename(zip_path))
        with zipfile.ZipFile(zip_path, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                archive.entries[info.filename] = zf.read(info)
        return archive

    @classmethod
    def from_directory(cls, directory: str, name: str) -> "Archive":
        """
        Loads every file under a directory as an archive entry.
        """
        root = Path(directory)
        archive = cls(name=name)
        for path in sorted(root.rglob("*")):
            if path.is_file():
                archive.entries[path.relative_to(root).as_posix()] = path.read_bytes()
        return archive


class ArchiveDeployment(BaseModel):
    """
    Deployment of an archive into the containerless Docker container.
    """
    archive: Archive


class DescriptorDeployment(BaseModel):
    """
    Deployment of a descriptor. Not supported by the containerless container.
    """
    descriptor_name: str
    content: str = ""


Deployment = Union[Archive, ArchiveDeployment, DescriptorDeployment]
