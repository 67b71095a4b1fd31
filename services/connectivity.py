# -*- coding: utf-8 -*-
"""
Connectivity Monitor.

Single source of truth for whether remote operations may be attempted.
Other services ask `is_online` before reaching the remote store and flip
the monitor offline when a transport error shows the backend is gone.
"""

from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from app.config import Config
from services.exceptions import ConnectivityError
from services.translation_manager import tr
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectivityMonitor(QObject):
    """Tracks online/offline transitions; emits connectivity_changed(bool) on each one."""

    connectivity_changed = pyqtSignal(bool)

    def __init__(self, probe: Optional[Callable[[], bool]] = None,
                 online: bool = True, parent=None):
        super().__init__(parent)
        self._probe = probe
        self._online = online
        self._timer: Optional[QTimer] = None

    @property
    def is_online(self) -> bool:
        return self._online

    def set_online(self, online: bool):
        online = bool(online)
        if online == self._online:
            return
        self._online = online
        logger.info(f"Connectivity changed: {'online' if online else 'offline'}")
        self.connectivity_changed.emit(online)

    def check_now(self) -> bool:
        """Probe the backend once and record the result."""
        if self._probe is None:
            return self._online
        try:
            reachable = bool(self._probe())
        except OSError as e:
            logger.warning(f"Connectivity probe failed: {e}")
            reachable = False
        self.set_online(reachable)
        return reachable

    def start(self, interval_ms: int = None):
        """Probe periodically; needs a running Qt event loop."""
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.timeout.connect(self.check_now)
        self._timer.start(interval_ms or Config.CONNECTIVITY_PROBE_INTERVAL_MS)
        self.check_now()

    def stop(self):
        if self._timer is not None:
            self._timer.stop()

    def require_online(self, operation: str = ""):
        """Raise ConnectivityError unless online."""
        if not self._online:
            logger.warning(f"Blocked while offline: {operation}")
            raise ConnectivityError(tr("connectivity.offline"), context=operation or None)
