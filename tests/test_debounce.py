"""Tests para Debouncer."""

from course_tracker.core.debounce import Debouncer


class TestDebouncer:
    """Tests para la ejecución diferida."""

    def test_trigger_schedules_daemon_timer(self, timers, timer_factory) -> None:
        """Test programar un timer."""
        calls = []
        debouncer = Debouncer(0.5, lambda: calls.append(1), timer_factory)

        debouncer.trigger()

        assert debouncer.pending
        assert timers[0].delay == 0.5
        assert timers[0].daemon is True
        timers[0].fire()
        assert calls == [1]
        assert not debouncer.pending

    def test_flush_runs_once(self, timers, timer_factory) -> None:
        """Test flush ejecuta y cancela el timer."""
        calls = []
        debouncer = Debouncer(1.0, lambda: calls.append(1), timer_factory)
        debouncer.trigger()

        debouncer.flush()
        debouncer.flush()
        timers[0].fire()

        assert calls == [1]
        assert timers[0].cancelled is True

    def test_replaced_timer_does_not_drop_pending_call(self, timers, timer_factory) -> None:
        """Test un timer ya reemplazado que dispara tarde."""
        calls = []
        debouncer = Debouncer(1.0, lambda: calls.append(1), timer_factory)
        debouncer.trigger()
        debouncer.trigger()

        # El hilo del primer timer ya había pasado su comprobación de cancelación
        timers[0].function()

        assert calls == []
        assert debouncer.pending
        debouncer.flush()
        assert calls == [1]

    def test_cancel(self, timers, timer_factory) -> None:
        """Test cancelar descarta la llamada."""
        calls = []
        debouncer = Debouncer(1.0, lambda: calls.append(1), timer_factory)
        debouncer.trigger()

        debouncer.cancel()
        debouncer.flush()

        assert calls == []
        assert not debouncer.pending
