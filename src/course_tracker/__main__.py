"""Punto de entrada principal."""

import sys
from pathlib import Path

from .config import get_config, setup_logging


def main(argv: list[str] | None = None) -> int:
    """Ejecutar aplicación."""
    from .core.course import CourseCatalog
    from .tui.app import TrackerApp

    args = sys.argv[1:] if argv is None else argv
    config = get_config()
    setup_logging(config.log_level)

    catalog_path = Path(args[0]) if args else config.catalog_path
    if catalog_path is None:
        print("Uso: course-tracker <catalogo.yaml>  (o define COURSE_TRACKER_CATALOG)")
        return 2

    try:
        catalog = CourseCatalog.load(catalog_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error cargando catálogo: {e}")
        return 1

    app = TrackerApp(catalog, config)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
