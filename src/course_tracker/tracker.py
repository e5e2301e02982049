"""
ProgressTracker - Motor de progreso y quiz.

Combina el catálogo, el estado en memoria, la persistencia y la navegación:
- Aplica cada transición sobre ``ProgressState``
- Persiste el resultado (las notas con debounce)
- Notifica a los suscriptores antes de retornar
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from .core.course import CourseCatalog, Lesson, Module
from .core.debounce import Debouncer, TimerFactory
from .core.navigation import AdjacentLessons, LessonRef, NavigationCursor
from .core.persistence import ProgressPersistence
from .core.state import ProgressState, QuizResult
from .export_import.manager import ImportReport, SnapshotManager
from .quiz.evaluator import Verdict, evaluate, quiz_summary

logger = logging.getLogger(__name__)

Listener = Callable[[ProgressState], None]


class ProgressTracker:
    """API del motor para la capa de presentación."""

    def __init__(
        self,
        catalog: CourseCatalog,
        persistence: ProgressPersistence,
        note_save_delay: float = 1.0,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        """
        Inicializar el motor y rehidratar el estado persistido.

        Args:
            catalog: Catálogo del curso (no se modifica)
            persistence: Persistencia del progreso
            note_save_delay: Espera (segundos) antes de guardar notas
            timer_factory: Fábrica de timers para el guardado diferido
        """
        self.catalog = catalog
        self.persistence = persistence
        self.navigator = NavigationCursor(catalog)
        self.snapshots = SnapshotManager(catalog)
        self.state = persistence.load()
        self.navigator.ensure_default_selection(self.state.cursor)
        self._listeners: list[Listener] = []
        self._note_saver = Debouncer(note_save_delay, self._save_notes, timer_factory)

    # ------------------------------------------------------------------
    # Suscripción y efectos
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registrar un suscriptor; retorna la función para darse de baja."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("Progress listener failed")

    def _commit(self) -> None:
        self.persistence.save(self.state)
        self._notify()

    def _commit_progress(self) -> None:
        self.persistence.save_progress(self.state)
        self._notify()

    def _save_notes(self) -> None:
        self.persistence.save_notes(self.state)

    def flush_notes(self) -> None:
        """Forzar el guardado pendiente de notas."""
        self._note_saver.flush()

    def close(self) -> None:
        """Guardar lo pendiente antes de salir."""
        self.flush_notes()

    # ------------------------------------------------------------------
    # Lecciones completadas
    # ------------------------------------------------------------------

    def mark_complete(self, lesson_id: str) -> None:
        self.state.mark_complete(lesson_id)
        self._commit_progress()

    def unmark_complete(self, lesson_id: str) -> None:
        self.state.unmark_complete(lesson_id)
        self._commit_progress()

    def is_complete(self, lesson_id: str) -> bool:
        return self.state.is_complete(lesson_id)

    def percent_complete(self, total_lessons: int | None = None) -> int:
        """Porcentaje completado.

        Sin argumento se usa el total del catálogo y solo cuentan las
        lecciones que existen en él.
        """
        if total_lessons is not None:
            return self.state.percent_complete(total_lessons)
        return self.state.percent_complete(
            self.navigator.total_lessons,
            within=self.catalog.lesson_ids(),
        )

    # ------------------------------------------------------------------
    # Notas
    # ------------------------------------------------------------------

    def set_note(self, lesson_id: str, text: str) -> None:
        """Actualizar nota; el guardado a disco se difiere."""
        self.state.set_note(lesson_id, text)
        self._note_saver.trigger()
        self._notify()

    def note(self, lesson_id: str) -> str | None:
        return self.state.get_note(lesson_id)

    # ------------------------------------------------------------------
    # Quiz
    # ------------------------------------------------------------------

    def record_quiz_result(
        self,
        question_id: str,
        result: QuizResult,
        lesson_id: str | None = None,
    ) -> None:
        self.state.record_quiz_result(question_id, result, lesson_id)
        self._commit_progress()

    def quiz_result(self, question_id: str, lesson_id: str | None = None) -> QuizResult | None:
        return self.state.get_quiz_result(question_id, lesson_id)

    def check_answer(self, lesson_id: str, question_id: str, submission: Any) -> Verdict | None:
        """
        Evaluar y guardar una respuesta.

        Returns:
            Veredicto, o None si no hubo respuesta (no se guarda nada)

        Raises:
            KeyError: si la pregunta no existe en la lección
        """
        lesson = self.catalog.get_lesson(lesson_id)
        question = lesson.get_question(question_id) if lesson else None
        if question is None:
            raise KeyError(f"Pregunta no encontrada: {lesson_id}/{question_id}")

        verdict = evaluate(question, submission)
        if verdict is not None:
            self.record_quiz_result(question_id, verdict.to_result(), lesson_id)
        return verdict

    def quiz_summary(self, lesson_id: str) -> dict[str, int]:
        lesson = self.catalog.get_lesson(lesson_id)
        if lesson is None:
            return {"answered": 0, "correct": 0, "total": 0}
        return quiz_summary(lesson, self.state)

    # ------------------------------------------------------------------
    # Navegación
    # ------------------------------------------------------------------

    @property
    def current_module(self) -> Module | None:
        module_id = self.state.cursor.module_id
        return self.catalog.get_module(module_id) if module_id else None

    @property
    def current_lesson(self) -> Lesson | None:
        lesson_id = self.state.cursor.lesson_id
        return self.catalog.get_lesson(lesson_id) if lesson_id else None

    @property
    def current_tab(self) -> str:
        return self.state.cursor.tab

    def select_lesson(self, module_id: str, lesson_id: str, preserve_tab: bool = False) -> bool:
        if not self.navigator.select_lesson(self.state.cursor, module_id, lesson_id, preserve_tab):
            return False
        self._commit_progress()
        return True

    def select_tab(self, tab: str) -> bool:
        if not self.navigator.select_tab(self.state.cursor, tab):
            return False
        self._commit_progress()
        return True

    def adjacent_lessons(self, module_id: str, lesson_id: str) -> AdjacentLessons:
        return self.navigator.adjacent_lessons(module_id, lesson_id)

    def select_next(self) -> LessonRef | None:
        """Avanzar a la siguiente lección; None si ya es la última."""
        target = self.navigator.next_lesson(self.state.cursor)
        if target is not None:
            self.select_lesson(target.module_id, target.lesson_id)
        return target

    def select_previous(self) -> LessonRef | None:
        """Retroceder a la lección anterior; None si ya es la primera."""
        target = self.navigator.previous_lesson(self.state.cursor)
        if target is not None:
            self.select_lesson(target.module_id, target.lesson_id)
        return target

    # ------------------------------------------------------------------
    # Import / export / reset
    # ------------------------------------------------------------------

    def export_snapshot(self) -> dict[str, Any]:
        return self.snapshots.build_export(self.state)

    def export_to_file(self, output_path: Path) -> Path:
        return self.snapshots.export_to_file(self.state, output_path)

    def import_snapshot(self, raw: Any) -> ImportReport:
        """
        Importar un snapshot externo.

        Raises:
            SnapshotImportError: si la entrada no se puede interpretar; el
                estado queda intacto
        """
        merged, report = self.snapshots.merge(self.state, raw)
        self.navigator.ensure_default_selection(merged.cursor)
        self._note_saver.cancel()
        self.state = merged
        self._commit()
        logger.info("Imported snapshot (applied=%s, skipped=%s)", report.applied, report.skipped)
        return report

    def import_from_file(self, input_path: Path) -> ImportReport:
        return self.import_snapshot(self.snapshots.read_file(input_path))

    def reset_all(self) -> None:
        """Borrar todo el progreso (el llamador debe confirmar antes)."""
        self._note_saver.cancel()
        self.state.reset()
        self.navigator.ensure_default_selection(self.state.cursor)
        self._commit()

    # ------------------------------------------------------------------
    # Reporte
    # ------------------------------------------------------------------

    def progress_report(self) -> dict[str, Any]:
        """Reporte de progreso por módulo."""
        catalog_ids = self.catalog.lesson_ids()
        completed_ids = sorted(self.state.completed_lessons & catalog_ids)

        modules = []
        for module in self.catalog.modules:
            done = sum(1 for lesson in module.lessons if self.state.is_complete(lesson.id))
            modules.append({
                "id": module.id,
                "title": module.title,
                "completed": bool(module.lessons) and done == len(module.lessons),
                "completedLessons": done,
                "totalLessons": len(module.lessons),
            })

        return {
            "progress": {
                "completedLessons": len(completed_ids),
                "totalLessons": self.navigator.total_lessons,
                "percentage": self.percent_complete(),
                "completedLessonIds": completed_ids,
            },
            "modules": modules,
            "lastUpdated": datetime.now().isoformat(),
        }

    def export_report(self, output_path: Path) -> Path:
        """Escribir el reporte de progreso en un archivo JSON."""
        import json

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(self.progress_report(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        return output_path
