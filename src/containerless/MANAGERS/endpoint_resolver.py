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
Resolution of the endpoint a deployed service is reachable on.
"""
from ..MODELS.cube import Cube
from ..MODELS.endpoint_info import EndpointInfo, DEFAULT_PROTOCOL
from ..errors import EndpointResolutionError


class EndpointResolver:
    """
    Combines the address bound by the runtime with a statically configured port.
    """
    def __init__(self, port: int, protocol: str = DEFAULT_PROTOCOL):
        self.port = port
        self.protocol = protocol

    def resolve(self, cube: Cube) -> EndpointInfo:
        """
        Builds the endpoint of a started cube. Reachability is not checked, and
        the port may later be remapped to the exposed one by the caller.

        :param cube: A started cube.
        :return: The endpoint.
        :raises EndpointResolutionError: If the cube has no binding.
        """
        if cube.binding is None:
            raise EndpointResolutionError(f"Cube {cube.name} has no network binding")
        return EndpointInfo(host=cube.binding.ip, port=self.port, protocol=self.protocol)
