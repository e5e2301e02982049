"""Tests para persistencia."""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from course_tracker.core.persistence import (
    NOTES_KEY,
    PROGRESS_KEY,
    JsonFileStorage,
    MemoryStorage,
    ProgressPersistence,
    StorageError,
)
from course_tracker.core.state import ProgressState, QuizResult


class FailingStorage(MemoryStorage):
    """Almacenamiento que falla al escribir (cuota llena)."""

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")


class TestJsonFileStorage:
    """Tests para almacenamiento en archivos."""

    def test_set_get_delete(self) -> None:
        """Test ciclo básico clave-valor."""
        with tempfile.TemporaryDirectory() as tmpdir:
            storage = JsonFileStorage(Path(tmpdir))

            assert storage.get("progress") is None
            storage.set("progress", '{"a": 1}')
            assert storage.get("progress") == '{"a": 1}'
            assert (Path(tmpdir) / "progress.json").exists()

            storage.delete("progress")
            assert storage.get("progress") is None

    def test_rejects_path_like_keys(self, tmp_path) -> None:
        """Test claves que escapan del directorio."""
        storage = JsonFileStorage(tmp_path)

        with pytest.raises(StorageError):
            storage.path_for("../outside")


class TestProgressPersistence:
    """Tests para ProgressPersistence."""

    def test_save_and_load(self, tmp_path) -> None:
        """Test guardar y cargar estado."""
        persistence = ProgressPersistence(JsonFileStorage(tmp_path))
        state = ProgressState()
        state.mark_complete("l1")
        state.set_note("l1", "nota")
        state.record_quiz_result("q1", QuizResult(is_correct=True), "l3")

        assert persistence.save(state) is True
        loaded = persistence.load()

        assert loaded.completed_lessons == {"l1"}
        assert loaded.notes == {"l1": "nota"}
        assert loaded.get_quiz_result("q1", "l3").is_correct is True

    def test_notes_are_a_separate_document(self) -> None:
        """Test progreso y notas se guardan en claves distintas."""
        storage = MemoryStorage()
        state = ProgressState()
        state.set_note("l1", "nota")

        ProgressPersistence(storage).save(state)

        assert json.loads(storage.get(NOTES_KEY)) == {"l1": "nota"}
        assert "notes" not in json.loads(storage.get(PROGRESS_KEY))

    def test_load_empty_storage(self) -> None:
        """Test almacenamiento vacío da estado por defecto."""
        assert ProgressPersistence(MemoryStorage()).load() == ProgressState()

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2, 3]", "null", ""])
    def test_corrupt_progress_falls_back_to_default(self, payload, caplog) -> None:
        """Test datos corruptos no rompen el arranque."""
        storage = MemoryStorage({PROGRESS_KEY: payload, NOTES_KEY: "{broken"})

        with caplog.at_level(logging.WARNING):
            state = ProgressPersistence(storage).load()

        assert state == ProgressState()
        assert "Discarding" in caplog.text

    def test_non_utf8_file_falls_back_to_default(self, tmp_path, caplog) -> None:
        """Test archivo con bytes que no son UTF-8."""
        (tmp_path / "course-progress.json").write_bytes(b"\xff\xfe\x00garbage")

        with caplog.at_level(logging.WARNING):
            state = ProgressPersistence(JsonFileStorage(tmp_path)).load()

        assert state == ProgressState()
        assert "Could not read course-progress" in caplog.text

    def test_deeply_nested_document_falls_back_to_default(self, caplog) -> None:
        """Test documento con anidamiento excesivo."""
        nested = "[" * 100000 + "]" * 100000
        storage = MemoryStorage({PROGRESS_KEY: nested, NOTES_KEY: nested})

        with caplog.at_level(logging.WARNING):
            state = ProgressPersistence(storage).load()

        assert state == ProgressState()
        assert "Discarding corrupt document" in caplog.text

    def test_write_failure_is_logged_not_raised(self, caplog) -> None:
        """Test fallo de escritura no es fatal."""
        persistence = ProgressPersistence(FailingStorage())
        state = ProgressState()
        state.mark_complete("l1")

        with caplog.at_level(logging.WARNING):
            assert persistence.save(state) is False

        assert "quota exceeded" in caplog.text
        assert state.completed_lessons == {"l1"}

    def test_custom_keys(self) -> None:
        """Test claves configurables."""
        storage = MemoryStorage()
        persistence = ProgressPersistence(storage, progress_key="p", notes_key="n")

        persistence.save(ProgressState())

        assert set(storage.data) == {"p", "n"}

    def test_clear(self) -> None:
        """Test eliminar documentos."""
        storage = MemoryStorage()
        persistence = ProgressPersistence(storage)
        persistence.save(ProgressState())

        persistence.clear()

        assert storage.data == {}
