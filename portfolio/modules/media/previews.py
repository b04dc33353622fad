"""
Preview Store
=============

Temporary on-disk copies of selected images, shown to the cropper while a
crop is in progress. Every handle must be released explicitly.
"""

import logging
import os
import threading
from dataclasses import dataclass

from portfolio.core.storage import base36_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewHandle:
    token: str
    path: str


class PreviewStore:

    def __init__(self, directory):
        self.directory = directory
        self._active = {}
        self._lock = threading.Lock()

    def open(self, data, extension='img'):
        """Write ``data`` to a new temp file and return its handle"""
        os.makedirs(self.directory, exist_ok=True)
        token = base36_token()
        path = os.path.join(self.directory, f"{token}.{extension}")
        with open(path, 'wb') as f:
            f.write(data)
        handle = PreviewHandle(token=token, path=path)
        with self._lock:
            self._active[token] = handle
        return handle

    def release(self, handle):
        with self._lock:
            self._active.pop(handle.token, None)
        try:
            os.unlink(handle.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove preview %s: %s", handle.path, e)

    def get(self, token):
        with self._lock:
            return self._active.get(token)

    @property
    def active_count(self):
        with self._lock:
            return len(self._active)
