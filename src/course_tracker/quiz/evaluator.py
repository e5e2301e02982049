"""Evaluador de respuestas de quiz."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..core.course import MULTIPLE_CHOICE, SHORT_ANSWER, Question
from ..core.state import QuizResult

if TYPE_CHECKING:
    from ..core.course import Lesson
    from ..core.state import ProgressState


@dataclass(frozen=True)
class Verdict:
    """Resultado de evaluar una respuesta."""

    is_correct: bool
    explanation: str | None = None
    selected_index: int | None = None
    answer_text: str | None = None

    def to_result(self, checked_at: datetime | None = None) -> QuizResult:
        """Convertir a QuizResult para guardarlo en el progreso."""
        return QuizResult(
            is_correct=self.is_correct,
            checked_at=checked_at or datetime.now(),
            selected_index=self.selected_index,
            answer_text=self.answer_text,
        )


def normalize_answer(text: str) -> str:
    """Normalizar respuesta corta: sin espacios extremos y sin mayúsculas."""
    return text.strip().casefold()


def evaluate(question: Question, submission: Any) -> Verdict | None:
    """Evaluar una respuesta.

    Retorna None cuando no hay respuesta (nada seleccionado o texto vacío);
    ese caso no es un veredicto y no debe guardarse.
    """
    if question.type == MULTIPLE_CHOICE:
        if isinstance(submission, bool) or not isinstance(submission, int):
            return None
        return Verdict(
            is_correct=submission == question.correct_index,
            explanation=question.explanation,
            selected_index=submission,
        )

    if question.type == SHORT_ANSWER:
        if not isinstance(submission, str) or not submission.strip():
            return None
        given = normalize_answer(submission)
        is_correct = any(given == normalize_answer(a) for a in question.acceptable_answers)
        return Verdict(
            is_correct=is_correct,
            explanation=question.explanation,
            answer_text=submission,
        )

    raise ValueError(f"Tipo de pregunta desconocido: {question.type}")


def quiz_summary(lesson: Lesson, state: ProgressState) -> dict[str, int]:
    """Resumen del quiz de una lección: respondidas, correctas y total."""
    answered = 0
    correct = 0
    for question in lesson.quiz:
        result = state.get_quiz_result(question.id, lesson.id)
        if result is None:
            continue
        answered += 1
        if result.is_correct:
            correct += 1
    return {"answered": answered, "correct": correct, "total": len(lesson.quiz)}
