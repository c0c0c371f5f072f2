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
Configuration of the containerless Docker deployer.
"""
from pydantic import BaseModel, Field, field_validator


class DeployerConfiguration(BaseModel):
    """
    Settings for a containerless Docker deployer.
    """
    # Registry id of the cube that receives the deployment
    containerless_docker: str
    # Port reported in the endpoint; a metadata updater may remap it later
    embedded_port: int = Field(default=8080, ge=1, le=65535)
    build_directory_cleanup: bool = True

    @field_validator("containerless_docker")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("containerlessDocker must not be empty")
        return value.strip()
