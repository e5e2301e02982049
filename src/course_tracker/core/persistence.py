"""Capa de persistencia para el progreso y las notas."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .state import ProgressState

logger = logging.getLogger(__name__)

PROGRESS_KEY = "course-progress"
NOTES_KEY = "course-notes"


class StorageError(Exception):
    """Error del almacenamiento clave-valor."""

    pass


class KeyValueStorage(ABC):
    """Interfaz base para almacenamientos clave-valor."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Leer valor; None si no existe."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Escribir valor."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Eliminar valor si existe."""
        pass


class MemoryStorage(KeyValueStorage):
    """Almacenamiento en memoria."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """Almacenamiento en disco: un archivo ``<key>.json`` por clave."""

    def __init__(self, base_path: Path) -> None:
        """Inicializar con ruta base."""
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._write_lock = threading.Lock()

    def path_for(self, key: str) -> Path:
        """Obtener ruta del archivo de una clave."""
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Clave inválida: {key!r}")
        return self.base_path / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        # Las notas diferidas se escriben desde el hilo del timer
        with self._write_lock:
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()


class ProgressPersistence:
    """Lee y escribe los documentos de progreso y notas.

    Los fallos de lectura degradan al estado vacío y los de escritura se
    registran en el log; ninguno se propaga.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        progress_key: str = PROGRESS_KEY,
        notes_key: str = NOTES_KEY,
    ) -> None:
        self.storage = storage
        self.progress_key = progress_key
        self.notes_key = notes_key

    def load(self) -> ProgressState:
        """Cargar estado; documentos corruptos se tratan como vacíos."""
        progress = self._read_document(self.progress_key)
        notes = self._read_document(self.notes_key)
        return ProgressState.from_dict(progress, notes)

    def save(self, state: ProgressState) -> bool:
        """Guardar progreso y notas. Retorna False si alguna escritura falló."""
        saved_progress = self.save_progress(state)
        saved_notes = self.save_notes(state)
        return saved_progress and saved_notes

    def save_progress(self, state: ProgressState) -> bool:
        """Guardar documento de progreso."""
        return self._write_document(self.progress_key, state.to_dict())

    def save_notes(self, state: ProgressState) -> bool:
        """Guardar documento de notas."""
        return self._write_document(self.notes_key, state.notes_to_dict())

    def clear(self) -> None:
        """Eliminar los documentos persistidos."""
        for key in (self.progress_key, self.notes_key):
            try:
                self.storage.delete(key)
            except (OSError, StorageError) as e:
                logger.warning("Could not delete %s: %s", key, e)

    def _read_document(self, key: str) -> dict[str, Any] | None:
        try:
            raw = self.storage.get(key)
        except (OSError, StorageError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", key, e)
            return None

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError, RecursionError) as e:
            logger.warning("Discarding corrupt document %s: %s", key, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Discarding document %s: expected an object", key)
            return None
        return data

    def _write_document(self, key: str, data: dict[str, Any]) -> bool:
        try:
            self.storage.set(key, json.dumps(data, indent=2, ensure_ascii=False))
        except (OSError, StorageError, TypeError, ValueError) as e:
            logger.warning("Could not save %s: %s", key, e)
            return False
        return True
