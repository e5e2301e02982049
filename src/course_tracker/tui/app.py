"""Aplicación de consola - Course Tracker."""

import sys
from datetime import datetime
from pathlib import Path

from ..config import Config, get_config
from ..core.course import MULTIPLE_CHOICE, CourseCatalog
from ..core.persistence import JsonFileStorage, ProgressPersistence
from ..core.state import TABS
from ..export_import.manager import ExportImportError
from ..tracker import ProgressTracker

if sys.platform == "win32":
    import colorama
    colorama.init()


class TrackerApp:
    """Consola simple sobre ProgressTracker."""

    def __init__(self, catalog: CourseCatalog, config: Config | None = None) -> None:
        self.config = config or get_config()
        persistence = ProgressPersistence(
            JsonFileStorage(self.config.progress_dir),
            progress_key=self.config.progress_key,
            notes_key=self.config.notes_key,
        )
        self.tracker = ProgressTracker(
            catalog,
            persistence,
            note_save_delay=self.config.note_save_delay,
        )
        self.running = True

    def print_header(self) -> None:
        """Imprimir encabezado."""
        title = self.tracker.catalog.title or self.config.app_name
        print("\033[33m" + "=" * 50 + "\033[0m")
        print("\033[33m" + f"  {title}" + "\033[0m")
        print("\033[33m" + "=" * 50 + "\033[0m")
        print()

    def print_info(self, message: str) -> None:
        """Imprimir mensaje informativo."""
        print(f"\033[38;5;208mℹ {message}\033[0m")

    def print_success(self, message: str) -> None:
        """Imprimir mensaje de éxito."""
        print(f"\033[32m✓ {message}\033[0m")

    def print_error(self, message: str) -> None:
        """Imprimir mensaje de error."""
        print(f"\033[31m✗ {message}\033[0m")

    def get_input(self, prompt: str = "> ") -> str:
        """Obtener input del usuario."""
        try:
            return input(f"\033[38;5;208m{prompt}\033[0m").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\033[33m¡Hasta luego!\033[0m")
            self.running = False
            return ""

    def show_welcome(self) -> None:
        """Mostrar mensaje de bienvenida."""
        self.print_header()
        self.print_info("Escribe 'status' para ver dónde te quedaste")
        self.print_info("Escribe 'help' para ver todos los comandos")
        print()

    def run(self) -> None:
        """Ejecutar la aplicación."""
        self.show_welcome()

        while self.running:
            command = self.get_input()
            if not command:
                continue
            self.process_command(command)

        self.tracker.close()

    def process_command(self, command: str) -> None:
        """Procesar comando del usuario."""
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower().lstrip("/")
        arg = parts[1] if len(parts) > 1 else ""

        handlers = {
            "help": self.cmd_help,
            "status": self.cmd_status,
            "list": self.cmd_list,
            "open": self.cmd_open,
            "tab": self.cmd_tab,
            "next": self.cmd_next,
            "prev": self.cmd_prev,
            "done": self.cmd_done,
            "undone": self.cmd_undone,
            "note": self.cmd_note,
            "quiz": self.cmd_quiz,
            "export": self.cmd_export,
            "import": self.cmd_import,
            "report": self.cmd_report,
            "reset": self.cmd_reset,
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
            "q": self.cmd_quit,
        }

        handler = handlers.get(cmd)
        if handler:
            handler(arg)
        else:
            self.print_error(f"Comando desconocido: {cmd}")
            self.print_info("Escribe 'help' para ver los comandos disponibles")

    def cmd_help(self, arg: str) -> None:
        """Mostrar ayuda."""
        print("\033[36mComandos disponibles:\033[0m")
        print("  status            - Lección actual y progreso")
        print("  list              - Módulos y lecciones")
        print("  open <lección>    - Abrir una lección")
        print(f"  tab <pestaña>     - Cambiar pestaña ({', '.join(TABS)})")
        print("  next / prev       - Lección siguiente / anterior")
        print("  done / undone     - Marcar / desmarcar la lección actual")
        print("  note [texto]      - Ver o reemplazar la nota de la lección")
        print("  quiz              - Responder el quiz de la lección")
        print("  export [ruta]     - Exportar progreso a JSON")
        print("  import <ruta>     - Importar progreso desde JSON")
        print("  report [ruta]     - Exportar reporte de progreso")
        print("  reset             - Borrar todo el progreso")
        print("  quit              - Salir")

    def cmd_status(self, arg: str) -> None:
        """Mostrar estado actual."""
        module = self.tracker.current_module
        lesson = self.tracker.current_lesson
        if module is None or lesson is None:
            self.print_info("El catálogo está vacío.")
            return

        index, total = self.tracker.navigator.position(lesson.id)
        mark = "✓" if self.tracker.is_complete(lesson.id) else "○"
        print(f"\033[36m{module.icon} {module.title}\033[0m")
        print(f"  {mark} {lesson.title} ({index}/{total}) - pestaña: {self.tracker.current_tab}")
        print(f"  Progreso: {self.tracker.percent_complete()}%")

    def cmd_list(self, arg: str) -> None:
        """Listar módulos y lecciones."""
        current = self.tracker.state.cursor.lesson_id
        for module in self.tracker.catalog.modules:
            print(f"\033[36m{module.icon} {module.title}\033[0m")
            for lesson in module.lessons:
                if lesson.id == current:
                    mark = "→"
                elif self.tracker.is_complete(lesson.id):
                    mark = "✓"
                else:
                    mark = "○"
                print(f"  {mark} {lesson.id}: {lesson.title}")

    def cmd_open(self, arg: str) -> None:
        """Abrir una lección por id."""
        if not arg:
            self.print_error("Especifica el id de la lección. Ejemplo: open intro")
            return
        module = self.tracker.catalog.find_module_for_lesson(arg)
        if module is None or not self.tracker.select_lesson(module.id, arg):
            self.print_error(f"Lección no encontrada: {arg}")
            return
        self.cmd_status("")

    def cmd_tab(self, arg: str) -> None:
        """Cambiar pestaña."""
        if not self.tracker.select_tab(arg.lower()):
            self.print_error(f"Pestaña inválida. Usa una de: {', '.join(TABS)}")
            return
        self.print_success(f"Pestaña: {arg.lower()}")

    def cmd_next(self, arg: str) -> None:
        """Ir a la lección siguiente."""
        if self.tracker.select_next() is None:
            self.print_info("Ya estás en la última lección.")
            return
        self.cmd_status("")

    def cmd_prev(self, arg: str) -> None:
        """Ir a la lección anterior."""
        if self.tracker.select_previous() is None:
            self.print_info("Ya estás en la primera lección.")
            return
        self.cmd_status("")

    def cmd_done(self, arg: str) -> None:
        """Marcar la lección actual como completada."""
        lesson = self.tracker.current_lesson
        if lesson is None:
            self.print_error("No hay lección seleccionada.")
            return
        self.tracker.mark_complete(lesson.id)
        self.print_success(f"Lección completada ({self.tracker.percent_complete()}%)")

    def cmd_undone(self, arg: str) -> None:
        """Desmarcar la lección actual."""
        lesson = self.tracker.current_lesson
        if lesson is None:
            self.print_error("No hay lección seleccionada.")
            return
        self.tracker.unmark_complete(lesson.id)
        self.print_success(f"Lección desmarcada ({self.tracker.percent_complete()}%)")

    def cmd_note(self, arg: str) -> None:
        """Ver o reemplazar la nota de la lección actual."""
        lesson = self.tracker.current_lesson
        if lesson is None:
            self.print_error("No hay lección seleccionada.")
            return
        if not arg:
            note = self.tracker.note(lesson.id)
            self.print_info(note if note else "Sin notas.")
            return
        self.tracker.set_note(lesson.id, arg)
        self.tracker.flush_notes()
        self.print_success("Nota guardada")

    def cmd_quiz(self, arg: str) -> None:
        """Responder el quiz de la lección actual."""
        lesson = self.tracker.current_lesson
        if lesson is None:
            self.print_error("No hay lección seleccionada.")
            return
        if not lesson.quiz:
            self.print_info("Esta lección no tiene quiz.")
            return

        self.tracker.select_tab("quiz")
        for idx, question in enumerate(lesson.quiz, 1):
            print(f"\033[36mQ{idx}: {question.prompt}\033[0m")
            submission: object = None
            if question.type == MULTIPLE_CHOICE:
                for opt_idx, choice in enumerate(question.choices, 1):
                    print(f"  {opt_idx}. {choice}")
                raw = self.get_input("Respuesta: ")
                if raw.isdigit():
                    submission = int(raw) - 1
            else:
                submission = self.get_input("Respuesta: ")

            verdict = self.tracker.check_answer(lesson.id, question.id, submission)
            if verdict is None:
                self.print_info("Sin respuesta, pregunta omitida.")
                continue
            if verdict.is_correct:
                print("\033[32m✓ Correcto\033[0m")
            else:
                print("\033[31m✗ Incorrecto\033[0m")
            if verdict.explanation:
                print(verdict.explanation)

        summary = self.tracker.quiz_summary(lesson.id)
        self.print_success(f"Quiz: {summary['correct']}/{summary['total']} correctas")

    def cmd_export(self, arg: str) -> None:
        """Exportar progreso a JSON."""
        if arg:
            output_path = Path(arg)
        else:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = self.config.exports_dir / f"progress_{timestamp}.json"

        try:
            path = self.tracker.export_to_file(output_path)
            self.print_success(f"Progreso exportado: {path}")
        except ExportImportError as e:
            self.print_error(f"Error exportando progreso: {e}")

    def cmd_import(self, arg: str) -> None:
        """Importar progreso desde JSON."""
        if not arg:
            self.print_error("Especifica la ruta del archivo. Ejemplo: import progreso.json")
            return

        try:
            report = self.tracker.import_from_file(Path(arg))
        except ExportImportError as e:
            self.print_error(f"Error importando progreso: {e}")
            return

        self.print_success("Progreso importado")
        if report.skipped:
            self.print_info(f"Campos omitidos: {', '.join(report.skipped)}")

    def cmd_report(self, arg: str) -> None:
        """Exportar reporte de progreso."""
        output_path = Path(arg) if arg else self.config.exports_dir / "progress-report.json"
        try:
            path = self.tracker.export_report(output_path)
            self.print_success(f"Reporte exportado: {path}")
        except OSError as e:
            self.print_error(f"Error exportando reporte: {e}")

    def cmd_reset(self, arg: str) -> None:
        """Borrar todo el progreso tras confirmación."""
        answer = self.get_input("¿Borrar todo el progreso? (s/N): ").lower()
        if answer not in ("s", "si", "sí", "y", "yes"):
            self.print_info("Operación cancelada.")
            return
        self.tracker.reset_all()
        self.print_success("Progreso borrado")

    def cmd_quit(self, arg: str) -> None:
        """Salir."""
        self.running = False
        print("\033[33m¡Hasta luego!\033[0m")
