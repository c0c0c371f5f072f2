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
Model describing how to reach a deployed service.
"""
from pydantic import BaseModel, ConfigDict

DEFAULT_PROTOCOL = "Servlet 3.0"


class EndpointInfo(BaseModel):
    """
    Address and port of a deployed service. Immutable once created.
    """
    model_config = ConfigDict(frozen=True)

    host: str
    port: int
    protocol: str = DEFAULT_PROTOCOL

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"
