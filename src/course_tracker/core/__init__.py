"""Core: estado, persistencia, navegación y modelos."""

from .course import CourseCatalog, Example, Lesson, Module, Question, Resource
from .navigation import AdjacentLessons, LessonRef, NavigationCursor
from .persistence import JsonFileStorage, KeyValueStorage, MemoryStorage, ProgressPersistence
from .state import Cursor, ProgressState, QuizResult

__all__ = [
    "CourseCatalog",
    "Module",
    "Lesson",
    "Question",
    "Resource",
    "Example",
    "NavigationCursor",
    "AdjacentLessons",
    "LessonRef",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "ProgressPersistence",
    "ProgressState",
    "Cursor",
    "QuizResult",
]
