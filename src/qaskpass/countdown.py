"""One-second countdown ticks delivered on the Qt event loop."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class CountdownTimer(QObject):
    """Emits ``tick`` once per second until canceled.

    Single use: once canceled it can't be started again. The canceled flag
    is checked before every delivery, so no tick is emitted after cancel().
    """

    tick = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timer: QTimer | None = None
        self._canceled = False

    @property
    def active(self) -> bool:
        return self._timer is not None and not self._canceled

    @property
    def canceled(self) -> bool:
        return self._canceled

    def start(self) -> None:
        if self._canceled:
            raise RuntimeError("Countdown was canceled and cannot be restarted")
        if self._timer is not None:
            return

        timer = QTimer(self)
        timer.setInterval(TICK_INTERVAL_MS)
        timer.timeout.connect(self._on_timeout)
        timer.start()
        self._timer = timer

    def cancel(self) -> None:
        """Stop delivering ticks. Safe to call any number of times."""
        if self._canceled:
            return
        self._canceled = True
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        logger.debug("Countdown canceled")

    def _on_timeout(self) -> None:
        if self._canceled:
            return
        self.tick.emit()
