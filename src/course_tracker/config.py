"""Configuración global de la aplicación."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_data_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _default_data_dir() -> Path:
    return Path(user_data_dir("course-tracker", "course-tracker"))


@dataclass(frozen=True)
class Config:
    """Configuración inmutable de la aplicación."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    progress_dir: Path = field(init=False)
    exports_dir: Path = field(init=False)
    catalog_path: Path | None = None

    # Persistencia
    progress_key: str = "course-progress"
    notes_key: str = "course-notes"
    note_save_delay: float = 1.0  # segundos

    # App
    app_name: str = "Course Tracker"
    version: str = "0.1.0"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        object.__setattr__(self, "progress_dir", self.data_dir / "progress")
        object.__setattr__(self, "exports_dir", self.data_dir / "exports")

    @classmethod
    def from_env(cls) -> Config:
        """Crear configuración desde variables de entorno."""
        data_dir = os.getenv("COURSE_TRACKER_DATA_DIR")
        catalog = os.getenv("COURSE_TRACKER_CATALOG")

        return cls(
            data_dir=Path(data_dir) if data_dir else _default_data_dir(),
            catalog_path=Path(catalog) if catalog else None,
            note_save_delay=float(os.getenv("COURSE_TRACKER_NOTE_DELAY", "1.0")),
            log_level=os.getenv("COURSE_TRACKER_LOG_LEVEL", "WARNING").upper(),
        )

    def ensure_dirs(self) -> None:
        """Crear directorios necesarios si no existen."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.progress_dir.mkdir(parents=True, exist_ok=True)
        self.exports_dir.mkdir(parents=True, exist_ok=True)


def setup_logging(level: str = "WARNING") -> None:
    """Configurar logging del proceso (solo desde el punto de entrada)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )


# Instancia global
_config: Config | None = None


def get_config() -> Config:
    """Obtener instancia de configuración (singleton)."""
    global _config
    if _config is None:
        _config = Config.from_env()
        _config.ensure_dirs()
    return _config


def set_config(config: Config) -> None:
    """Establecer configuración (para tests)."""
    global _config
    _config = config
    _config.ensure_dirs()
