"""Modelos de datos del catálogo: módulos, lecciones y preguntas."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

MULTIPLE_CHOICE = "multipleChoice"
SHORT_ANSWER = "shortAnswer"
QUESTION_TYPES = (MULTIPLE_CHOICE, SHORT_ANSWER)


@dataclass(frozen=True)
class Resource:
    """Recurso externo de una lección."""

    title: str
    url: str
    type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Resource:
        """Crear desde diccionario."""
        return cls(title=data["title"], url=data["url"], type=data.get("type"))


@dataclass(frozen=True)
class Example:
    """Ejemplo de código de una lección."""

    title: str
    code: str
    language: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Example:
        """Crear desde diccionario."""
        return cls(title=data["title"], code=data["code"], language=data.get("language"))


@dataclass(frozen=True)
class Question:
    """Una pregunta de quiz.

    Las preguntas ``multipleChoice`` usan ``choices`` y ``correct_index``;
    las ``shortAnswer`` usan ``acceptable_answers``.
    """

    id: str
    type: str
    prompt: str
    explanation: str | None = None
    choices: tuple[str, ...] = ()
    correct_index: int | None = None
    acceptable_answers: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        """Crear desde diccionario."""
        correct = data.get("correctIndex")
        return cls(
            id=str(data["id"]),
            type=data["type"],
            prompt=data.get("prompt", ""),
            explanation=data.get("explanation"),
            choices=tuple(data.get("choices", [])),
            correct_index=int(correct) if correct is not None else None,
            acceptable_answers=tuple(data.get("acceptableAnswers", [])),
        )


@dataclass(frozen=True)
class Lesson:
    """Una lección del curso."""

    id: str
    title: str
    estimated_minutes: int = 0
    learning_objectives: tuple[str, ...] = ()
    resources: tuple[Resource, ...] = ()
    content_html: str = ""
    examples: tuple[Example, ...] = ()
    quiz: tuple[Question, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lesson:
        """Crear desde diccionario."""
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            estimated_minutes=data.get("estimatedMinutes", 0),
            learning_objectives=tuple(data.get("learningObjectives", [])),
            resources=tuple(Resource.from_dict(r) for r in data.get("resources", [])),
            content_html=data.get("contentHtml", ""),
            examples=tuple(Example.from_dict(e) for e in data.get("examples", [])),
            quiz=tuple(Question.from_dict(q) for q in data.get("quiz", [])),
        )

    def get_question(self, question_id: str) -> Question | None:
        """Obtener pregunta por id."""
        for question in self.quiz:
            if question.id == question_id:
                return question
        return None


@dataclass(frozen=True)
class Module:
    """Un módulo del curso."""

    id: str
    title: str
    description: str = ""
    icon: str = ""
    lessons: tuple[Lesson, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Module:
        """Crear desde diccionario."""
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            lessons=tuple(Lesson.from_dict(lesson) for lesson in data.get("lessons", [])),
        )

    def has_lesson(self, lesson_id: str) -> bool:
        """Verificar si la lección pertenece al módulo."""
        return any(lesson.id == lesson_id for lesson in self.lessons)

    @property
    def first_lesson(self) -> Lesson | None:
        return self.lessons[0] if self.lessons else None


@dataclass
class CourseCatalog:
    """Catálogo completo del curso (solo lectura para el motor)."""

    modules: list[Module] = field(default_factory=list)
    title: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CourseCatalog:
        """Crear desde diccionario."""
        return cls(
            modules=[Module.from_dict(m) for m in data.get("modules", [])],
            title=data.get("title", ""),
        )

    @classmethod
    def load(cls, path: Path) -> CourseCatalog:
        """Cargar catálogo desde un archivo YAML o JSON."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid catalog document: {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid catalog document: {path}")

        try:
            return cls.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid catalog document: {path}: {e}") from e

    def get_module(self, module_id: str) -> Module | None:
        """Obtener módulo por id."""
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def get_lesson(self, lesson_id: str) -> Lesson | None:
        """Obtener lección por id (en todo el catálogo)."""
        for module in self.modules:
            for lesson in module.lessons:
                if lesson.id == lesson_id:
                    return lesson
        return None

    def find_module_for_lesson(self, lesson_id: str) -> Module | None:
        """Obtener el módulo que contiene una lección."""
        for module in self.modules:
            if module.has_lesson(lesson_id):
                return module
        return None

    def flatten(self) -> list[tuple[str, str]]:
        """Orden total de lecciones: orden de módulos y luego de lecciones."""
        return [
            (module.id, lesson.id)
            for module in self.modules
            for lesson in module.lessons
        ]

    def lesson_ids(self) -> set[str]:
        return {lesson_id for _, lesson_id in self.flatten()}

    @property
    def total_lessons(self) -> int:
        return len(self.flatten())
