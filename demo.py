#!/usr/bin/env python3
"""Script de demo para probar el sistema sin la consola interactiva."""

import sys
import tempfile
from pathlib import Path

CATALOG = {
    "title": "API Documentation Course",
    "modules": [
        {
            "id": "intro",
            "title": "Introduction",
            "icon": "📘",
            "lessons": [
                {"id": "what-is-api", "title": "What is an API", "estimatedMinutes": 10},
                {"id": "reading-docs", "title": "Reading API docs", "estimatedMinutes": 15},
            ],
        },
        {
            "id": "rest",
            "title": "REST API Basics",
            "icon": "🌐",
            "lessons": [
                {
                    "id": "http-methods",
                    "title": "HTTP methods",
                    "quiz": [
                        {
                            "id": "q1",
                            "type": "multipleChoice",
                            "prompt": "Which method creates a resource?",
                            "choices": ["GET", "POST", "DELETE"],
                            "correctIndex": 1,
                            "explanation": "POST creates a new resource.",
                        },
                        {
                            "id": "q2",
                            "type": "shortAnswer",
                            "prompt": "Which method reads a resource?",
                            "acceptableAnswers": ["GET"],
                        },
                    ],
                },
            ],
        },
    ],
}


def build_tracker(tmpdir: Path):
    from course_tracker.core.course import CourseCatalog
    from course_tracker.core.persistence import JsonFileStorage, ProgressPersistence
    from course_tracker.tracker import ProgressTracker

    catalog = CourseCatalog.from_dict(CATALOG)
    persistence = ProgressPersistence(JsonFileStorage(tmpdir / "progress"))
    return ProgressTracker(catalog, persistence, note_save_delay=0.1)


def demo_progress(tmpdir: Path):
    """Demo de progreso y navegación."""
    print("="*60)
    print("DEMO: Progreso y navegación")
    print("="*60)

    tracker = build_tracker(tmpdir)
    print(f"Lección actual: {tracker.current_lesson.title}")

    tracker.mark_complete("what-is-api")
    tracker.select_next()
    tracker.set_note("reading-docs", "Revisar la sección de autenticación")
    tracker.close()
    print(f"✓ Completado: {tracker.percent_complete()}%")
    print(f"✓ Lección actual: {tracker.current_lesson.title}")

    # Reabrir desde disco
    reopened = build_tracker(tmpdir)
    assert reopened.is_complete("what-is-api")
    assert reopened.note("reading-docs") == "Revisar la sección de autenticación"
    print("✓ Estado restaurado desde disco")

    return True


def demo_quiz(tmpdir: Path):
    """Demo del evaluador de quiz."""
    print("\n" + "="*60)
    print("DEMO: Quiz")
    print("="*60)

    tracker = build_tracker(tmpdir)
    first = tracker.check_answer("http-methods", "q1", 1)
    second = tracker.check_answer("http-methods", "q2", "  get ")
    print(f"Q1: {'Correcto' if first.is_correct else 'Incorrecto'} - {first.explanation}")
    print(f"Q2: {'Correcto' if second.is_correct else 'Incorrecto'}")

    summary = tracker.quiz_summary("http-methods")
    print(f"Resumen: {summary['correct']}/{summary['total']} correctas")

    return summary["correct"] == 2


def demo_export_import(tmpdir: Path):
    """Demo de export/import."""
    print("\n" + "="*60)
    print("DEMO: Export/Import")
    print("="*60)

    tracker = build_tracker(tmpdir)
    export_path = tracker.export_to_file(tmpdir / "exports" / "progress.json")
    print(f"✓ Exportado a: {export_path.name}")

    tracker.reset_all()
    print(f"✓ Progreso borrado ({tracker.percent_complete()}%)")

    report = tracker.import_from_file(export_path)
    print(f"✓ Campos importados: {', '.join(report.applied)}")

    assert tracker.is_complete("what-is-api")
    print("✓ Verificación exitosa")

    return True


def main():
    """Ejecutar todas las demos."""
    print("\n")
    print("╔" + "═"*58 + "╗")
    print("║" + " "*17 + "COURSE TRACKER - DEMO" + " "*20 + "║")
    print("╚" + "═"*58 + "╝")
    print()

    with tempfile.TemporaryDirectory() as tmp:
        tmpdir = Path(tmp)
        try:
            result1 = demo_progress(tmpdir)
            result2 = demo_quiz(tmpdir)
            result3 = demo_export_import(tmpdir)

            print("\n" + "="*60)
            print("RESUMEN DE DEMOS")
            print("="*60)
            print(f"✓ Progreso: {'OK' if result1 else 'FALLIDO'}")
            print(f"✓ Quiz: {'OK' if result2 else 'FALLIDO'}")
            print(f"✓ Export/Import: {'OK' if result3 else 'FALLIDO'}")
            print()
            print("Para ejecutar la consola completa:")
            print("  pip install -e .")
            print("  course-tracker catalogo.yaml")
            print()

        except Exception as e:
            print(f"\n✗ Error en demo: {e}")
            import traceback
            traceback.print_exc()
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
