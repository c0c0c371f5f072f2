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
Models for container definitions (cubes) and their runtime network binding.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class PortBinding(BaseModel):
    """
    A container port and the host port it is published on.
    """
    exposed_port: int
    bound_port: Optional[int] = None


class Binding(BaseModel):
    """
    Network information of a running container, filled in by the runtime.
    """
    ip: str
    port_bindings: List[PortBinding] = []


class Cube(BaseModel):
    """
    A named container definition owned by the cube registry.

    The configuration is an arbitrary nested mapping; the deployer only reads it.
    """
    name: str
    configuration: Dict[str, Any] = Field(default_factory=dict)
    binding: Optional[Binding] = None
