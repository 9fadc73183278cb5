"""
Service: deterrent.py
Rôle:
- Interface de la séquence dissuasive jouée avant de revoir une carte (son, vibration,
  flash… selon l'appareil). Le moteur ne connaît que "lancer, puis rappeler".

Implémentations:
- `SilentDeterrent` : rappelle immédiatement (tests, appareils sans effet).
- `TimedDeterrent` : attend la durée demandée puis rappelle (CLI).
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class DeterrentProvider(Protocol):
    def run(self, duration: float, on_done: Callable[[], None]) -> None:
        """Joue la séquence pendant `duration` secondes puis appelle `on_done`."""
        ...


class SilentDeterrent:
    def run(self, duration: float, on_done: Callable[[], None]) -> None:
        on_done()


class TimedDeterrent:
    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self._sleep = sleep

    def run(self, duration: float, on_done: Callable[[], None]) -> None:
        logger.debug("Deterrent running", extra={"duration": duration})
        self._sleep(duration)
        on_done()
