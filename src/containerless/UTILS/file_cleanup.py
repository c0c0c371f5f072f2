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
Best-effort deletion of generated files when the interpreter exits.
"""
import atexit
import logging
import os
import threading
from typing import Set

logger = logging.getLogger(__name__)

_pending: Set[str] = set()
_lock = threading.Lock()
_registered = False


def delete_on_exit(path: str) -> None:
    """
    Schedules a file for deletion at interpreter exit.

    :param path: The file to delete.
    """
    global _registered
    with _lock:
        _pending.add(os.path.abspath(path))
        if not _registered:
            atexit.register(_cleanup)
            _registered = True


def _cleanup() -> None:
    with _lock:
        paths = list(_pending)
        _pending.clear()
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete %s at exit: %s", path, e)
