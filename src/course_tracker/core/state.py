"""Estado del progreso del estudiante."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)

TAB_OVERVIEW = "overview"
TAB_EXAMPLES = "examples"
TAB_QUIZ = "quiz"
TAB_NOTES = "notes"
TABS = (TAB_OVERVIEW, TAB_EXAMPLES, TAB_QUIZ, TAB_NOTES)
DEFAULT_TAB = TAB_OVERVIEW


def quiz_key(question_id: str, lesson_id: str | None = None) -> str:
    """Clave de un resultado de quiz, acotada a la lección si se conoce."""
    if lesson_id:
        return f"{lesson_id}/{question_id}"
    return question_id


def parse_timestamp(value: str) -> datetime:
    """Leer una fecha ISO-8601, incluido el sufijo ``Z`` de JavaScript."""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def percent(completed: int, total: int) -> int:
    """Porcentaje entero redondeado (mitad hacia arriba) en [0, 100]."""
    if total <= 0:
        return 0
    completed = max(0, completed)
    value = (200 * completed + total) // (2 * total)
    return min(100, value)


@dataclass
class QuizResult:
    """Resultado de una pregunta de quiz."""

    is_correct: bool
    checked_at: datetime = field(default_factory=datetime.now)
    selected_index: int | None = None
    answer_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        data: dict[str, Any] = {
            "isCorrect": self.is_correct,
            "checkedAt": self.checked_at.isoformat(),
        }
        if self.selected_index is not None:
            data["selectedIndex"] = self.selected_index
        if self.answer_text is not None:
            data["answer"] = self.answer_text
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuizResult:
        """Crear desde diccionario.

        Lanza ``ValueError`` si el diccionario no tiene la forma esperada.
        """
        if not isinstance(data, dict):
            raise ValueError("quiz result must be a mapping")

        is_correct = data.get("isCorrect")
        if not isinstance(is_correct, bool):
            raise ValueError("isCorrect must be a boolean")

        checked = data.get("checkedAt")
        checked_at = parse_timestamp(checked) if isinstance(checked, str) else datetime.now()

        selected = data.get("selectedIndex")
        if selected is not None and (isinstance(selected, bool) or not isinstance(selected, int)):
            raise ValueError("selectedIndex must be an integer")

        answer = data.get("answer", data.get("answerText"))
        if answer is not None and not isinstance(answer, str):
            raise ValueError("answer must be a string")

        return cls(
            is_correct=is_correct,
            checked_at=checked_at,
            selected_index=selected,
            answer_text=answer,
        )


@dataclass
class Cursor:
    """Posición actual: (módulo, lección, pestaña)."""

    module_id: str | None = None
    lesson_id: str | None = None
    tab: str = DEFAULT_TAB

    @property
    def is_welcome(self) -> bool:
        return self.module_id is None and self.lesson_id is None

    def clear(self) -> None:
        """Volver al estado de bienvenida (sin lección seleccionada)."""
        self.module_id = None
        self.lesson_id = None


@dataclass
class ProgressState:
    """Estado completo del progreso del estudiante.

    Solo contiene transiciones en memoria; la escritura a disco la hace
    ``ProgressPersistence``.
    """

    completed_lessons: set[str] = field(default_factory=set)
    notes: dict[str, str] = field(default_factory=dict)
    quiz_answers: dict[str, QuizResult] = field(default_factory=dict)
    cursor: Cursor = field(default_factory=Cursor)

    def to_dict(self, timestamp: datetime | None = None) -> dict[str, Any]:
        """Convertir a diccionario (documento de progreso, sin notas)."""
        return {
            "completedLessons": sorted(self.completed_lessons),
            "currentModuleId": self.cursor.module_id,
            "currentLessonId": self.cursor.lesson_id,
            "currentTab": self.cursor.tab,
            "quizAnswers": {k: v.to_dict() for k, v in self.quiz_answers.items()},
            "timestamp": (timestamp or datetime.now()).isoformat(),
        }

    def notes_to_dict(self) -> dict[str, str]:
        """Documento de notas."""
        return dict(self.notes)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any] | None,
        notes: dict[str, Any] | None = None,
    ) -> ProgressState:
        """Crear desde diccionario.

        Campos ausentes o con forma inválida quedan vacíos; nunca lanza.
        """
        state = cls()
        if isinstance(data, dict):
            state.completed_lessons = parse_completed(data.get("completedLessons")) or set()
            state.quiz_answers = parse_quiz_answers(data.get("quizAnswers")) or {}

            tab = data.get("currentTab")
            if tab in TABS:
                state.cursor.tab = tab

            module_id = data.get("currentModuleId")
            lesson_id = data.get("currentLessonId")
            state.cursor.module_id = module_id if isinstance(module_id, str) else None
            state.cursor.lesson_id = lesson_id if isinstance(lesson_id, str) else None

        state.notes = parse_notes(notes) or {}
        return state

    def copy(self) -> ProgressState:
        """Copia independiente del estado."""
        return ProgressState(
            completed_lessons=set(self.completed_lessons),
            notes=dict(self.notes),
            quiz_answers=dict(self.quiz_answers),
            cursor=Cursor(
                module_id=self.cursor.module_id,
                lesson_id=self.cursor.lesson_id,
                tab=self.cursor.tab,
            ),
        )

    def mark_complete(self, lesson_id: str) -> bool:
        """Marcar lección como completada. Retorna True si hubo cambio."""
        if lesson_id in self.completed_lessons:
            return False
        self.completed_lessons.add(lesson_id)
        return True

    def unmark_complete(self, lesson_id: str) -> bool:
        """Desmarcar lección. Retorna True si hubo cambio."""
        if lesson_id not in self.completed_lessons:
            return False
        self.completed_lessons.discard(lesson_id)
        return True

    def is_complete(self, lesson_id: str) -> bool:
        return lesson_id in self.completed_lessons

    def set_note(self, lesson_id: str, text: str) -> None:
        self.notes[lesson_id] = text

    def get_note(self, lesson_id: str) -> str | None:
        return self.notes.get(lesson_id)

    def record_quiz_result(
        self,
        question_id: str,
        result: QuizResult,
        lesson_id: str | None = None,
    ) -> None:
        """Guardar resultado (el último gana)."""
        self.quiz_answers[quiz_key(question_id, lesson_id)] = result

    def get_quiz_result(self, question_id: str, lesson_id: str | None = None) -> QuizResult | None:
        """Obtener resultado; cae a la clave sin lección (snapshots antiguos)."""
        if lesson_id:
            scoped = self.quiz_answers.get(quiz_key(question_id, lesson_id))
            if scoped is not None:
                return scoped
        return self.quiz_answers.get(question_id)

    def percent_complete(self, total_lessons: int, within: set[str] | None = None) -> int:
        """Porcentaje de lecciones completadas.

        Si se pasa ``within``, solo cuentan las lecciones de ese conjunto.
        """
        completed = self.completed_lessons if within is None else self.completed_lessons & within
        return percent(len(completed), total_lessons)

    def reset(self) -> None:
        """Borrar todo el progreso."""
        self.completed_lessons.clear()
        self.notes.clear()
        self.quiz_answers.clear()
        self.cursor = Cursor()


def parse_completed(value: Any) -> set[str] | None:
    """Validar ``completedLessons``: lista de strings o None si no lo es."""
    if not isinstance(value, (list, tuple)):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return set(value)


def parse_notes(value: Any) -> dict[str, str] | None:
    """Validar el documento de notas; descarta entradas que no son texto."""
    if not isinstance(value, dict):
        return None
    notes = {}
    for lesson_id, text in value.items():
        if isinstance(lesson_id, str) and isinstance(text, str):
            notes[lesson_id] = text
        else:
            logger.debug("Skipping malformed note entry for %r", lesson_id)
    return notes


def parse_quiz_answers(value: Any) -> dict[str, QuizResult] | None:
    """Validar ``quizAnswers``; descarta resultados mal formados."""
    if not isinstance(value, dict):
        return None
    answers = {}
    for key, raw in value.items():
        if not isinstance(key, str):
            continue
        try:
            answers[key] = QuizResult.from_dict(raw)
        except (ValueError, TypeError) as e:
            logger.debug("Skipping malformed quiz result %r: %s", key, e)
    return answers
