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
Dispatch of container lifecycle commands to the external runtime.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional, Protocol, Set, Tuple

from ..MODELS.cube import Cube

logger = logging.getLogger(__name__)


class LifecycleCommand(str, Enum):
    """
    Commands understood by the container runtime.
    """
    CREATE = "create"
    START = "start"
    STOP = "stop"
    DESTROY = "destroy"


class CommandEmitter(Protocol):
    """
    Sends a lifecycle command for a cube to the runtime.

    Returning means the command completed; failures are raised.
    """

    def emit(self, command: LifecycleCommand, cube: Cube) -> None:
        ...


class RecordingCommandEmitter:
    """
    Emitter that only records commands. Used for dry runs and tests.
    """
    def __init__(self, fail_on: Optional[Set[LifecycleCommand]] = None):
        """
        :param fail_on: Commands that should raise a RuntimeError instead of being recorded.
        """
        self.fail_on = set(fail_on or ())
        self.commands: List[Tuple[LifecycleCommand, str]] = []

    def emit(self, command: LifecycleCommand, cube: Cube) -> None:
        if command in self.fail_on:
            raise RuntimeError(f"Runtime failed to {command.value} cube {cube.name}")
        self.commands.append((command, cube.name))


class LifecycleDispatcher:
    """
    Emits lifecycle commands in order, one at a time.

    Nothing is retried here; runtime errors reach the caller unchanged.
    """
    def __init__(self, emitter: CommandEmitter, log: Optional[logging.Logger] = None):
        self.emitter = emitter
        self.log = log or logger

    def create_and_start(self, cube: Cube, on_emitted: Optional[Callable[[LifecycleCommand], None]] = None) -> None:
        """
        Creates then starts the cube.

        :param cube: The cube to bring up.
        :param on_emitted: Called after each command completes.
        """
        self._dispatch(cube, on_emitted, LifecycleCommand.CREATE, LifecycleCommand.START)

    def stop_and_destroy(self, cube: Cube, on_emitted: Optional[Callable[[LifecycleCommand], None]] = None) -> None:
        """
        Stops then destroys the cube.
        """
        self._dispatch(cube, on_emitted, LifecycleCommand.STOP, LifecycleCommand.DESTROY)

    def _dispatch(self, cube: Cube, on_emitted, *commands: LifecycleCommand) -> None:
        for command in commands:
            self.log.info("Emitting %s for cube %s", command.value, cube.name)
            try:
                self.emitter.emit(command, cube)
            except Exception:
                self.log.error("Command %s failed for cube %s", command.value, cube.name)
                raise
            if on_emitted is not None:
                on_emitted(command)
