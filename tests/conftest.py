"""Fixtures compartidas."""

import pytest

from course_tracker.core.course import CourseCatalog
from course_tracker.core.persistence import MemoryStorage, ProgressPersistence
from course_tracker.tracker import ProgressTracker

CATALOG_DATA = {
    "title": "API Documentation Course",
    "modules": [
        {
            "id": "m1",
            "title": "Introduction",
            "icon": "📘",
            "lessons": [
                {"id": "l1", "title": "What is an API"},
                {"id": "l2", "title": "Reading docs"},
            ],
        },
        {
            "id": "m2",
            "title": "REST API Basics",
            "lessons": [
                {
                    "id": "l3",
                    "title": "HTTP methods",
                    "estimatedMinutes": 15,
                    "quiz": [
                        {
                            "id": "q1",
                            "type": "multipleChoice",
                            "prompt": "Which letter?",
                            "choices": ["A", "B", "C"],
                            "correctIndex": 1,
                            "explanation": "B is right.",
                        },
                        {
                            "id": "q2",
                            "type": "shortAnswer",
                            "prompt": "Method to read a resource?",
                            "acceptableAnswers": ["GET", "get request"],
                        },
                    ],
                },
                {
                    "id": "l4",
                    "title": "Status codes",
                    "quiz": [
                        {
                            "id": "q1",
                            "type": "shortAnswer",
                            "prompt": "Code for Not Found?",
                            "acceptableAnswers": ["404"],
                        },
                    ],
                },
            ],
        },
        {
            "id": "m3",
            "title": "OpenAPI Specification",
            "lessons": [
                {"id": "l5", "title": "Paths"},
                {"id": "l6", "title": "Schemas"},
                {"id": "l7", "title": "Components"},
            ],
        },
    ],
}


class FakeTimer:
    """Timer manual para probar el guardado diferido."""

    def __init__(self, delay, function):
        self.delay = delay
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function()


@pytest.fixture
def catalog():
    return CourseCatalog.from_dict(CATALOG_DATA)


@pytest.fixture
def timers():
    return []


@pytest.fixture
def timer_factory(timers):
    def factory(delay, function):
        timer = FakeTimer(delay, function)
        timers.append(timer)
        return timer

    return factory


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def tracker(catalog, storage, timer_factory):
    return ProgressTracker(
        catalog,
        ProgressPersistence(storage),
        timer_factory=timer_factory,
    )
