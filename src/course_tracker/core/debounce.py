"""Escritura diferida (debounce de flanco final)."""

from __future__ import annotations

import threading
from typing import Callable

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class Debouncer:
    """Agrupa llamadas rápidas en una sola ejecución tras ``delay`` segundos.

    Solo puede haber una ejecución pendiente a la vez. El callback se ejecuta
    en el hilo del timer o, con ``flush``, en el hilo que llama.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self.delay = delay
        self.callback = callback
        self.timer_factory = timer_factory
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self) -> None:
        """Programar la ejecución, reiniciando la espera si ya había una."""
        with self._lock:
            self._cancel_timer()

            def fire() -> None:
                self._fire(timer)

            timer = self.timer_factory(self.delay, fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def flush(self) -> None:
        """Ejecutar ya la llamada pendiente, si existe."""
        with self._lock:
            if self._timer is None:
                return
            self._cancel_timer()
        self.callback()

    def cancel(self) -> None:
        """Descartar la llamada pendiente."""
        with self._lock:
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, timer: threading.Timer) -> None:
        # Un timer reemplazado o cancelado ya no es el vigente
        with self._lock:
            if self._timer is not timer:
                return
            self._timer = None
        self.callback()
