"""Gestión de export/import de snapshots de progreso."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.course import CourseCatalog
from ..core.state import (
    TABS,
    ProgressState,
    parse_completed,
    parse_notes,
    parse_quiz_answers,
)

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

_MISSING = object()

# Claves aceptadas para el cursor, en orden de preferencia.
# ``currentSection`` es la clave de lección de la versión de una sola capa.
LESSON_KEYS = ("currentLesson", "currentLessonId", "currentSection")
MODULE_KEYS = ("currentModule", "currentModuleId")


class ExportImportError(Exception):
    """Error en operación de export/import."""

    pass


class SnapshotImportError(ExportImportError):
    """El snapshot no es un documento estructurado válido."""

    pass


@dataclass
class ImportReport:
    """Resumen de una importación."""

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


class SnapshotManager:
    """Construye documentos de export y fusiona snapshots importados."""

    def __init__(self, catalog: CourseCatalog) -> None:
        self.catalog = catalog

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def build_export(self, state: ProgressState, export_date: datetime | None = None) -> dict[str, Any]:
        """Documento de export: progreso + versión, fecha y notas."""
        export_date = export_date or datetime.now()
        data = state.to_dict(timestamp=export_date)
        data["version"] = EXPORT_VERSION
        data["exportDate"] = export_date.isoformat()
        data["notes"] = state.notes_to_dict()
        return data

    def export_to_file(self, state: ProgressState, output_path: Path) -> Path:
        """Escribir el documento de export en un archivo JSON."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            output_path.write_text(
                json.dumps(self.build_export(state), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise ExportImportError(f"No se pudo escribir {output_path}: {e}") from e
        return output_path

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def parse(self, raw: Any) -> dict[str, Any]:
        """Convertir la entrada en un diccionario o lanzar SnapshotImportError."""
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SnapshotImportError(f"Snapshot no es UTF-8: {e}") from e

        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except (json.JSONDecodeError, RecursionError) as e:
                raise SnapshotImportError(f"Snapshot inválido: {e}") from e

        if not isinstance(raw, dict):
            raise SnapshotImportError("El snapshot debe ser un objeto JSON")
        return raw

    def read_file(self, input_path: Path) -> str:
        """Leer un archivo de export."""
        input_path = Path(input_path)
        if not input_path.exists():
            raise SnapshotImportError(f"Archivo no encontrado: {input_path}")
        try:
            return input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotImportError(f"No se pudo leer {input_path}: {e}") from e

    def merge(self, state: ProgressState, raw: Any) -> tuple[ProgressState, ImportReport]:
        """
        Fusionar un snapshot campo a campo.

        Retorna un estado nuevo; ``state`` no se modifica. Los campos ausentes
        se conservan y los campos con forma inválida se omiten.

        Raises:
            SnapshotImportError: si la entrada no es un documento estructurado.
        """
        data = self.parse(raw)
        merged = state.copy()
        report = ImportReport()

        if "completedLessons" in data:
            completed = parse_completed(data["completedLessons"])
            if completed is None:
                report.skipped.append("completedLessons")
            else:
                merged.completed_lessons = completed
                report.applied.append("completedLessons")

        if "notes" in data:
            notes = parse_notes(data["notes"])
            if notes is None:
                report.skipped.append("notes")
            else:
                merged.notes = notes
                report.applied.append("notes")

        if "quizAnswers" in data:
            answers = parse_quiz_answers(data["quizAnswers"])
            if answers is None:
                report.skipped.append("quizAnswers")
            else:
                merged.quiz_answers = answers
                report.applied.append("quizAnswers")

        if "currentTab" in data:
            if data["currentTab"] in TABS:
                merged.cursor.tab = data["currentTab"]
                report.applied.append("currentTab")
            else:
                report.skipped.append("currentTab")

        self._merge_cursor(merged, data, report)

        for name in report.skipped:
            logger.debug("Import skipped malformed field %s", name)
        return merged, report

    def _merge_cursor(self, state: ProgressState, data: dict[str, Any], report: ImportReport) -> None:
        lesson_id = self._pick(data, LESSON_KEYS, report)
        module_id = self._pick(data, MODULE_KEYS, report)
        if lesson_id is _MISSING and module_id is _MISSING:
            return

        cursor = state.cursor
        report.applied.append("cursor")

        if isinstance(lesson_id, str):
            owner = self.catalog.find_module_for_lesson(lesson_id)
            if owner is None:
                cursor.clear()
            else:
                cursor.module_id = owner.id
                cursor.lesson_id = lesson_id
            return

        if isinstance(module_id, str):
            module = self.catalog.get_module(module_id)
            if module is None or module.first_lesson is None:
                cursor.clear()
            else:
                cursor.module_id = module.id
                cursor.lesson_id = module.first_lesson.id
            return

        # Ids explícitamente nulos: estado de bienvenida
        cursor.clear()

    def _pick(self, data: dict[str, Any], keys: tuple[str, ...], report: ImportReport) -> Any:
        """Primer valor válido (str o None) entre ``keys``; _MISSING si no hay."""
        for key in keys:
            if key not in data:
                continue
            value = data[key]
            if value is None or isinstance(value, str):
                return value
            report.skipped.append(key)
        return _MISSING
