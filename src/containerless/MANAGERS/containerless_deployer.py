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
Deployment of archives into a containerless Docker container.

A containerless container is a cube whose image is built from a Dockerfile
template. Deploying writes the Dockerfile and the archive into the build
directory and asks the runtime to create and start the cube; undeploying asks
it to stop and destroy the cube.
"""
import logging
from enum import Enum
from typing import Optional

from ..MODELS.archive import Archive, ArchiveDeployment, DescriptorDeployment, Deployment
from ..MODELS.build_config import BuildConfig
from ..MODELS.cube import Cube
from ..MODELS.deployer_config import DeployerConfiguration
from ..MODELS.endpoint_info import EndpointInfo, DEFAULT_PROTOCOL
from ..REGISTRY.cube_registry import CubeRegistry, lookup_cube
from ..BUILDERS.dockerfile_renderer import DockerfileRenderer, DEPLOYABLE_FILENAME
from ..BUILDERS.artifact_packager import ArtifactPackager
from .lifecycle_dispatcher import CommandEmitter, LifecycleCommand, LifecycleDispatcher
from .endpoint_resolver import EndpointResolver
from ..errors import UnsupportedDeploymentError

logger = logging.getLogger(__name__)


class DeploymentState(str, Enum):
    """
    Progress of the last deploy or undeploy call.
    """
    UNDEPLOYED = "undeployed"
    LOOKUP_OK = "lookup_ok"
    BUILD_CONTEXT_READY = "build_context_ready"
    CREATED = "created"
    STARTED = "started"
    ENDPOINT_READY = "endpoint_ready"
    FAILED = "failed"
    STOPPED = "stopped"
    DESTROYED = "destroyed"


_STATE_AFTER = {
    LifecycleCommand.CREATE: DeploymentState.CREATED,
    LifecycleCommand.START: DeploymentState.STARTED,
    LifecycleCommand.STOP: DeploymentState.STOPPED,
    LifecycleCommand.DESTROY: DeploymentState.DESTROYED,
}

class ContainerlessDeployer:
    """
    Deploys archives into the cube named by the configuration.

    Callers are expected to serialize deployments targeting the same cube, as
    they share the build directory.
    """
    def __init__(self,
                 config: DeployerConfiguration,
                 registry: CubeRegistry,
                 emitter: CommandEmitter,
                 log: Optional[logging.Logger] = None):
        """
        Initializes the deployer.

        :param config: Deployer settings.
        :param registry: Registry holding the cube definitions.
        :param emitter: Channel to the container runtime.
        :param log: Logger to report to. Defaults to the module logger.
        """
        self.config = config
        self.registry = registry
        self.log = log or logger
        self.dispatcher = LifecycleDispatcher(emitter, self.log)
        self.resolver = EndpointResolver(config.embedded_port, DEFAULT_PROTOCOL)
        self.renderer = DockerfileRenderer(cleanup=config.build_directory_cleanup, log=self.log)
        self.packager = ArtifactPackager(cleanup=config.build_directory_cleanup, log=self.log)
        self.state = DeploymentState.UNDEPLOYED

    @property
    def default_protocol(self) -> str:
        return DEFAULT_PROTOCOL

    def deploy(self, deployment: Deployment) -> EndpointInfo:
        """
        Deploys an archive and returns the endpoint of the started cube.

        :param deployment: An Archive, or an ArchiveDeployment wrapping one.
        :return: The endpoint of the deployed service.
        :raises ConfigurationError: If the cube or its build configuration is unusable.
            No lifecycle command is emitted in that case.
        :raises UnsupportedDeploymentError: For descriptor deployments.
        """
        archive = self._archive_of(deployment)
        try:
            return self._deploy(archive)
        except Exception:
            self.state = DeploymentState.FAILED
            raise

    def _deploy(self, archive: Archive) -> EndpointInfo:
        cube = lookup_cube(self.registry, self.config.containerless_docker)
        self.state = DeploymentState.LOOKUP_OK

        build_config = BuildConfig.from_cube(cube)
        directory = str(build_config.dockerfile_location)

        # The archive name differs between tests, the template refers to it by placeholder
        context = {DEPLOYABLE_FILENAME: archive.name}
        self.renderer.create_from_template(directory, context)
        self.packager.package(archive, directory)
        self.state = DeploymentState.BUILD_CONTEXT_READY
        self.log.info("Build context for %s ready in %s", cube.name, directory)

        self.dispatcher.create_and_start(cube, self._track)

        endpoint = self.resolver.resolve(self._refresh(cube))
        self.state = DeploymentState.ENDPOINT_READY
        self.log.info("Cube %s deployed at %s:%d", cube.name, endpoint.host, endpoint.port)
        return endpoint

    def undeploy(self, deployment: Deployment) -> None:
        """
        Stops and destroys the cube. Does nothing when the cube is not registered.

        :param deployment: An Archive, or an ArchiveDeployment wrapping one.
        :raises UnsupportedDeploymentError: For descriptor deployments.
        """
        self._archive_of(deployment)
        cube = self.registry.get_cube(self.config.containerless_docker)
        if cube is None:
            self.log.debug("No cube %s registered, nothing to undeploy", self.config.containerless_docker)
            self.state = DeploymentState.UNDEPLOYED
            return

        self.dispatcher.stop_and_destroy(cube, self._track)

    def _track(self, command: LifecycleCommand) -> None:
        self.state = _STATE_AFTER[command]

    def _refresh(self, cube: Cube) -> Cube:
        # The runtime fills in the binding on start; registries may hand out copies
        return self.registry.get_cube(cube.name) or cube

    @staticmethod
    def _archive_of(deployment: Deployment) -> Archive:
        if isinstance(deployment, DescriptorDeployment):
            raise UnsupportedDeploymentError("Descriptor deployments are not implemented")
        if isinstance(deployment, ArchiveDeployment):
            return deployment.archive
        if isinstance(deployment, Archive):
            return deployment
        raise UnsupportedDeploymentError(f"Cannot deploy {type(deployment).__name__}")
