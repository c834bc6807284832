import logging
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from elftree.core.builder import DependencyGraph
from elftree.views import DETAIL_VIEWS, detail_view
from elftree.views.base import DetailMode
from elftree.views.navigator import (
    PaintedRow,
    TreeItem,
    Viewport,
    ViewportState,
    make_dependency_items,
)


class Command(Enum):
    STEP_DOWN = auto()
    STEP_UP = auto()
    STEP_LEFT = auto()
    STEP_RIGHT = auto()
    PAGE_DOWN = auto()
    PAGE_UP = auto()
    HOME = auto()
    END = auto()
    TOGGLE = auto()
    SWITCH_MODE = auto()
    RESIZE = auto()
    QUIT = auto()


class Pane(Enum):
    DEPENDENCIES = "dependencies"
    DETAIL = "detail"


# Commands that can move the dependency cursor to another library
CURSOR_COMMANDS = {
    Command.STEP_DOWN,
    Command.STEP_UP,
    Command.PAGE_DOWN,
    Command.PAGE_UP,
    Command.HOME,
    Command.END,
}

DetailKey = Tuple[str, DetailMode]


class ViewCoordinator:
    """
    Owns the dependency pane and the detail pane of one analysis.

    Detail trees are built once per (library, mode). The detail pane's
    scroll position is saved under the outgoing key and restored for the
    incoming one whenever the dependency cursor or the mode changes.
    """

    def __init__(self, graph: DependencyGraph, show_path: bool = False,
                 mode: DetailMode = DetailMode.FILE) -> None:
        self.graph = graph
        self.show_path = show_path
        self.mode = mode
        self.tree = Viewport(make_dependency_items(graph.root))

        self.details: Dict[DetailKey, TreeItem] = {}
        for name, info in graph.libraries.items():
            for view in DETAIL_VIEWS:
                self.details[(name, view.mode)] = view.build(name, info)
        logging.debug(f"Built {len(self.details)} detail trees")

        self.saved: Dict[DetailKey, ViewportState] = {}
        self.detail = Viewport(self.details[self.key])

    @property
    def current_name(self) -> str:
        return self.tree.curr.content.node.name

    @property
    def key(self) -> DetailKey:
        return (self.current_name, self.mode)

    def viewport(self, pane: Pane) -> Viewport:
        if pane is Pane.DETAIL:
            return self.detail
        return self.tree

    def handle(self, command: Command, pane: Pane = Pane.DEPENDENCIES,
               mode: Optional[DetailMode] = None, rows: Optional[int] = None,
               count: int = 1) -> bool:
        """Applies one command. Returns False when the session should end."""
        if command is Command.QUIT:
            return False

        if command is Command.RESIZE:
            self.viewport(pane).resize(rows or 1)
        elif command is Command.SWITCH_MODE:
            if mode is not None and mode is not self.mode:
                self._save_detail()
                self.mode = mode
                self._restore_detail()
        elif command is Command.TOGGLE:
            if pane is Pane.DEPENDENCIES:
                self.tree.toggle()
        elif pane is Pane.DEPENDENCIES and command in CURSOR_COMMANDS:
            self._save_detail()
            _apply(self.tree, command, count)
            self._restore_detail()
        else:
            _apply(self.viewport(pane), command, count)

        return True

    def paint(self, pane: Pane, width: int, height: int) -> List[PaintedRow]:
        if pane is Pane.DETAIL:
            return self.detail.paint(width, height)

        show_path = None
        if self.show_path:
            show_path = lambda name: self.graph.libraries[name].path
        return self.tree.paint(width, height, show_path)

    def detail_title(self) -> str:
        return detail_view(self.mode).title

    def status_line(self) -> str:
        return " > ".join(self.tree.curr.content.node.lineage())

    def _save_detail(self) -> None:
        self.saved[self.key] = self.detail.state

    def _restore_detail(self) -> None:
        viewport = Viewport(self.details[self.key], self.detail.rows)
        state = self.saved.get(self.key)
        if state is not None:
            viewport.restore(state)
        self.detail = viewport


def _apply(viewport: Viewport, command: Command, count: int) -> None:
    if command is Command.STEP_DOWN:
        for _ in range(count):
            viewport.down()
    elif command is Command.STEP_UP:
        for _ in range(count):
            viewport.up()
    elif command is Command.STEP_LEFT:
        viewport.left(count)
    elif command is Command.STEP_RIGHT:
        viewport.right(count)
    elif command is Command.PAGE_DOWN:
        viewport.page_down()
    elif command is Command.PAGE_UP:
        viewport.page_up()
    elif command is Command.HOME:
        viewport.home()
    elif command is Command.END:
        viewport.end()
