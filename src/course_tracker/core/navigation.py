"""
Navegación por el catálogo.

Provee:
- Orden total de lecciones (módulos y luego lecciones)
- Lección anterior/siguiente
- Selección de lección y pestaña con reparación del cursor
"""

from __future__ import annotations

from dataclasses import dataclass

from .course import CourseCatalog
from .state import DEFAULT_TAB, TABS, Cursor


@dataclass(frozen=True)
class LessonRef:
    """Referencia (módulo, lección) dentro del catálogo."""

    module_id: str
    lesson_id: str


@dataclass(frozen=True)
class AdjacentLessons:
    """Vecinos de una lección en el orden del catálogo."""

    previous: LessonRef | None = None
    next: LessonRef | None = None


class NavigationCursor:
    """Transiciones del cursor contra un catálogo fijo.

    Es el único lugar donde se define el orden del catálogo; el cursor se
    recibe como argumento para que las transiciones no dependan de un estado
    global.
    """

    def __init__(self, catalog: CourseCatalog) -> None:
        self.catalog = catalog
        self._order: list[LessonRef] = []
        self._index: dict[tuple[str, str], int] = {}
        self._refresh_order()

    def _refresh_order(self) -> None:
        """Construir la lista ordenada de lecciones."""
        self._order = [LessonRef(m, l) for m, l in self.catalog.flatten()]
        self._index = {}
        for idx, ref in enumerate(self._order):
            self._index.setdefault((ref.module_id, ref.lesson_id), idx)

    @property
    def order(self) -> list[LessonRef]:
        return list(self._order)

    @property
    def total_lessons(self) -> int:
        return len(self._order)

    def first_lesson(self) -> LessonRef | None:
        return self._order[0] if self._order else None

    def position(self, lesson_id: str) -> tuple[int, int]:
        """Posición 1-based de la lección; (0, total) si no existe."""
        for idx, ref in enumerate(self._order):
            if ref.lesson_id == lesson_id:
                return (idx + 1, len(self._order))
        return (0, len(self._order))

    # ------------------------------------------------------------------
    # Adyacencia
    # ------------------------------------------------------------------

    def adjacent_lessons(self, module_id: str, lesson_id: str) -> AdjacentLessons:
        """Lección anterior y siguiente; ambas ausentes si el par no existe."""
        idx = self._index.get((module_id, lesson_id))
        if idx is None:
            return AdjacentLessons()
        previous = self._order[idx - 1] if idx > 0 else None
        following = self._order[idx + 1] if idx + 1 < len(self._order) else None
        return AdjacentLessons(previous=previous, next=following)

    def next_lesson(self, cursor: Cursor) -> LessonRef | None:
        if cursor.module_id is None or cursor.lesson_id is None:
            return None
        return self.adjacent_lessons(cursor.module_id, cursor.lesson_id).next

    def previous_lesson(self, cursor: Cursor) -> LessonRef | None:
        if cursor.module_id is None or cursor.lesson_id is None:
            return None
        return self.adjacent_lessons(cursor.module_id, cursor.lesson_id).previous

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------

    def select_lesson(
        self,
        cursor: Cursor,
        module_id: str,
        lesson_id: str,
        preserve_tab: bool = False,
    ) -> bool:
        """
        Seleccionar una lección.

        Retorna False (sin tocar el cursor) si la lección no pertenece al
        módulo. Por defecto vuelve a la pestaña ``overview``.
        """
        module = self.catalog.get_module(module_id)
        if module is None or not module.has_lesson(lesson_id):
            return False

        cursor.module_id = module_id
        cursor.lesson_id = lesson_id
        if not preserve_tab:
            cursor.tab = DEFAULT_TAB
        return True

    def select_tab(self, cursor: Cursor, tab: str) -> bool:
        """Cambiar pestaña; válido también en el estado de bienvenida."""
        if tab not in TABS:
            return False
        cursor.tab = tab
        return True

    def set_lesson(self, cursor: Cursor, lesson_id: str | None) -> None:
        """Fijar la lección y derivar su módulo."""
        if lesson_id is None:
            cursor.clear()
            return
        module = self.catalog.find_module_for_lesson(lesson_id)
        if module is None:
            cursor.clear()
            return
        cursor.module_id = module.id
        cursor.lesson_id = lesson_id

    def set_module(self, cursor: Cursor, module_id: str | None) -> None:
        """Fijar el módulo, conservando la lección si le pertenece."""
        if module_id is None:
            cursor.clear()
            return
        module = self.catalog.get_module(module_id)
        if module is None or module.first_lesson is None:
            cursor.clear()
            return
        cursor.module_id = module.id
        if cursor.lesson_id is None or not module.has_lesson(cursor.lesson_id):
            cursor.lesson_id = module.first_lesson.id

    def ensure_default_selection(self, cursor: Cursor) -> None:
        """
        Dejar el cursor en un estado consistente.

        Orden de preferencia:
        1. La lección actual (re-derivando su módulo)
        2. La primera lección del módulo actual
        3. La primera lección del catálogo
        4. Estado de bienvenida si el catálogo está vacío
        """
        if cursor.lesson_id is not None:
            module = self.catalog.find_module_for_lesson(cursor.lesson_id)
            if module is not None:
                cursor.module_id = module.id
                return

        if cursor.module_id is not None:
            module = self.catalog.get_module(cursor.module_id)
            if module is not None and module.first_lesson is not None:
                cursor.lesson_id = module.first_lesson.id
                return

        first = self.first_lesson()
        if first is None:
            cursor.clear()
            return
        cursor.module_id = first.module_id
        cursor.lesson_id = first.lesson_id
