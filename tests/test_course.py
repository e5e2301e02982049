"""Tests para modelos del catálogo."""

import json

import pytest

from course_tracker.core.course import CourseCatalog, Lesson, Module, Question


class TestCourseModels:
    """Tests para modelos de datos."""

    def test_question_from_dict(self) -> None:
        """Test pregunta de opción múltiple desde diccionario."""
        question = Question.from_dict({
            "id": "q1",
            "type": "multipleChoice",
            "prompt": "Pick one",
            "choices": ["A", "B"],
            "correctIndex": "0",
        })

        assert question == Question(
            id="q1",
            type="multipleChoice",
            prompt="Pick one",
            choices=("A", "B"),
            correct_index=0,
        )

    def test_lesson_defaults(self) -> None:
        """Test lección con campos mínimos."""
        lesson = Lesson.from_dict({"id": "intro", "title": "Intro"})

        assert lesson.quiz == ()
        assert lesson.estimated_minutes == 0
        assert lesson.get_question("q1") is None

    def test_module_from_dict(self) -> None:
        """Test módulo desde diccionario."""
        module = Module.from_dict({
            "id": "m1",
            "title": "Module 1",
            "lessons": [{"id": "l1", "title": "Lesson 1"}],
        })

        assert module.id == "m1"
        assert module.has_lesson("l1")
        assert module.first_lesson.id == "l1"
        assert Module(id="m2", title="Empty").first_lesson is None


class TestCatalogLookups:
    """Tests para búsquedas en el catálogo."""

    def test_flatten_order(self, catalog) -> None:
        """Test orden total de lecciones."""
        assert catalog.flatten() == [
            ("m1", "l1"), ("m1", "l2"),
            ("m2", "l3"), ("m2", "l4"),
            ("m3", "l5"), ("m3", "l6"), ("m3", "l7"),
        ]
        assert catalog.total_lessons == 7

    def test_find_module_for_lesson(self, catalog) -> None:
        """Test resolver el módulo dueño de una lección."""
        assert catalog.find_module_for_lesson("l7").id == "m3"
        assert catalog.find_module_for_lesson("missing") is None

    def test_question_lookup_scoped_by_lesson(self, catalog) -> None:
        """Test ids de pregunta repetidos en lecciones distintas."""
        q_l3 = catalog.get_lesson("l3").get_question("q1")
        q_l4 = catalog.get_lesson("l4").get_question("q1")

        assert q_l3.type == "multipleChoice"
        assert q_l4.type == "shortAnswer"

    def test_empty_catalog(self) -> None:
        """Test catálogo vacío."""
        catalog = CourseCatalog.from_dict({})

        assert catalog.flatten() == []
        assert catalog.total_lessons == 0


class TestCatalogFiles:
    """Tests para carga de catálogos desde disco."""

    def test_load_yaml(self, tmp_path) -> None:
        """Test cargar catálogo YAML."""
        path = tmp_path / "course.yaml"
        path.write_text(
            "title: API Course\n"
            "modules:\n"
            "  - id: m1\n"
            "    title: Introduction\n"
            "    lessons:\n"
            "      - id: l1\n"
            "        title: What is an API\n"
            "        quiz:\n"
            "          - id: q1\n"
            "            type: shortAnswer\n"
            "            prompt: Method to read?\n"
            "            acceptableAnswers: [GET]\n",
            encoding="utf-8",
        )

        loaded = CourseCatalog.load(path)

        assert loaded.title == "API Course"
        assert loaded.flatten() == [("m1", "l1")]
        assert loaded.get_lesson("l1").get_question("q1").acceptable_answers == ("GET",)

    def test_load_json(self, tmp_path) -> None:
        """Test cargar catálogo JSON (subconjunto de YAML)."""
        path = tmp_path / "course.json"
        path.write_text(json.dumps({"modules": [{"id": "m", "title": "M"}]}), encoding="utf-8")

        loaded = CourseCatalog.load(path)

        assert loaded.get_module("m").title == "M"

    def test_load_missing_file(self, tmp_path) -> None:
        """Test archivo inexistente."""
        with pytest.raises(FileNotFoundError):
            CourseCatalog.load(tmp_path / "missing.yaml")

    def test_load_invalid_document(self, tmp_path) -> None:
        """Test documento que no es un objeto."""
        path = tmp_path / "course.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError):
            CourseCatalog.load(path)

    def test_load_missing_required_key(self, tmp_path) -> None:
        """Test lección sin id."""
        path = tmp_path / "course.yaml"
        path.write_text("modules:\n  - title: No id\n", encoding="utf-8")

        with pytest.raises(ValueError):
            CourseCatalog.load(path)
