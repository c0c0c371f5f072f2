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
Cube registry lookup.

The registry itself belongs to the container runtime; the deployer only reads
container definitions from it by name.
"""
from typing import Any, Dict, List, Optional, Protocol

import yaml

from ..MODELS.cube import Cube, Binding, PortBinding
from ..errors import ConfigurationError, CubeNotFoundError


class CubeRegistry(Protocol):
    """
    Anything able to resolve a cube by its id.
    """

    def get_cube(self, name: str) -> Optional[Cube]:
        ...


class InMemoryCubeRegistry:
    """
    A registry keeping cubes in a dictionary.
    """

    def __init__(self, cubes: Optional[List[Cube]] = None):
        self._cubes: Dict[str, Cube] = {}
        for cube in cubes or []:
            self.add_cube(cube)

    def add_cube(self, cube: Cube) -> None:
        self._cubes[cube.name] = cube

    def get_cube(self, name: str) -> Optional[Cube]:
        return self._cubes.get(name)

    def list_cubes(self) -> List[str]:
        return sorted(self._cubes)


class YamlCubeRegistry(InMemoryCubeRegistry):
    """
    A registry loaded from a YAML document.

    Example::

        cubes:
          tomcat:
            buildImage:
              dockerfileLocation: src/test/resources/tomcat
            binding:
              ip: 192.168.99.100
              ports:
                8080: 32768
    """

    @classmethod
    def from_file(cls, path: str) -> "YamlCubeRegistry":
        """
        Loads cube definitions from a YAML file.

        :param path: Path to the YAML file.
        :return: The populated registry.
        """
        with open(path, 'r') as f:
            content = f.read()
        return cls.from_string(content)

    @classmethod
    def from_string(cls, content: str) -> "YamlCubeRegistry":
        """
        Loads cube definitions from YAML text.

        :param content: YAML content.
        :return: The populated registry.
        :raises ConfigurationError: If the document is not valid YAML or not a mapping of cubes.
        """
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cube registry is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("Cube registry document must be a mapping")

        cubes = data.get('cubes', data)
        if not isinstance(cubes, dict):
            raise ConfigurationError("Cube registry 'cubes' entry must be a mapping")

        registry = cls()
        for name, spec in cubes.items():
            registry.add_cube(cls._parse_cube(str(name), spec or {}))
        return registry

    @staticmethod
    def _parse_cube(name: str, spec: Dict[str, Any]) -> Cube:
        if not isinstance(spec, dict):
            raise ConfigurationError(f"Cube {name} definition must be a mapping")

        configuration = dict(spec)
        binding_spec = configuration.pop('binding', None)

        binding = None
        if binding_spec:
            try:
                ports = binding_spec.get('ports', {}) or {}
                binding = Binding(
                    ip=str(binding_spec['ip']),
                    port_bindings=[
                        PortBinding(exposed_port=int(exposed), bound_port=int(bound) if bound is not None else None)
                        for exposed, bound in ports.items()
                    ],
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise ConfigurationError(f"Cube {name} has an invalid binding: {e!r}") from e

        return Cube(name=name, configuration=configuration, binding=binding)


def lookup_cube(registry: CubeRegistry, name: str) -> Cube:
    """
    Resolves a cube or fails; a deployment cannot proceed without its target.

    :param registry: The registry to search.
    :param name: The cube id.
    :return: The registered cube.
    :raises CubeNotFoundError: If no cube has that id.
    """
    cube = registry.get_cube(name)
    if cube is None:
        raise CubeNotFoundError(name)
    return cube
