import logging

from rich.markup import escape
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Button, Footer, Header, Label, Markdown

from elftree.__version__ import __version__
from elftree.views.base import DetailMode
from elftree.views.coordinator import Command, Pane, ViewCoordinator

HELP_TEXT = """
# Keys

| Key | Action |
| --- | --- |
| `Up` / `Down`, `k` / `j` | Move one row |
| `Left` / `Right`, `h` / `l` | Scroll horizontally |
| `<` / `>` | Scroll horizontally by 3 columns |
| `PgUp` / `PgDn` | Move one page |
| `Home` / `End` | First / last row |
| `Enter` | Fold or expand the selected library |
| `Tab` | Switch between the dependency and detail panes |
| `f` `y` `d` `s` | File, symbol, dynamic and section details |
| `q` | Quit |
"""


class HelpScreen(ModalScreen):
    """Modal listing the key bindings."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
        background: rgba(0, 0, 0, 0.8);
    }
    #dialog {
        padding: 0 1;
        width: 70%;
        height: 70%;
        border: heavy $primary;
        background: $surface;
        layout: vertical;
    }
    #content-scroll {
        height: 1fr;
        margin: 1 0;
    }
    #close-btn {
        width: 100%;
        dock: bottom;
    }
    """

    def compose(self) -> ComposeResult:
        yield Vertical(
            VerticalScroll(Markdown(HELP_TEXT), id="content-scroll"),
            Button("Close (Esc)", variant="primary", id="close-btn"),
            id="dialog",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss()

    def key_escape(self) -> None:
        self.dismiss()


class PaneView(Widget):
    """Paints the rows of one coordinator pane."""

    SELECTED_STYLE = "bold yellow on blue"

    def __init__(self, coordinator: ViewCoordinator, pane: Pane, **kwargs) -> None:
        super().__init__(**kwargs)
        self.coordinator = coordinator
        self.pane = pane
        self.has_cursor = False

    def render(self) -> Text:
        width, height = self.size.width, self.size.height
        text = Text(no_wrap=True, overflow="crop")

        for i, row in enumerate(self.coordinator.paint(self.pane, width, height)):
            if i:
                text.append("\n")
            style = self.SELECTED_STYLE if row.selected and self.has_cursor else ""
            text.append(row.text, style=style)
        return text

    def on_resize(self, event: events.Resize) -> None:
        self.coordinator.handle(Command.RESIZE, pane=self.pane, rows=event.size.height)
        self.refresh()


class ElfTreeApp(App):
    TITLE = "ELF Tree"
    SUB_TITLE = f"v{__version__}"

    DEFAULT_CSS = """
    Screen { layout: vertical; }

    #panes { height: 1fr; }

    PaneView {
        height: 100%;
        border: round $primary-darken-2;
    }
    PaneView.active { border: round $accent; }

    #deps-pane { width: 3fr; }
    #detail-pane { width: 2fr; }

    #status-line {
        height: 1;
        width: 100%;
        background: $primary;
        color: $text;
        padding: 0 2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("down,j", "step_down", "Down", show=False),
        Binding("up,k", "step_up", "Up", show=False),
        Binding("left,h", "step_left", "Left", show=False),
        Binding("right,l", "step_right", "Right", show=False),
        Binding("less_than_sign", "step_left(3)", "Left", show=False),
        Binding("greater_than_sign", "step_right(3)", "Right", show=False),
        Binding("pagedown", "page_down", "Page Down", show=False),
        Binding("pageup", "page_up", "Page Up", show=False),
        Binding("home", "home", "Top", show=False),
        Binding("end", "end", "Bottom", show=False),
        Binding("enter", "toggle", "Fold"),
        Binding("tab", "switch_pane", "Pane", priority=True),
        Binding("f", "switch_mode('file')", "File"),
        Binding("y", "switch_mode('symbol')", "Symbols"),
        Binding("d", "switch_mode('dynamic')", "Dynamic"),
        Binding("s", "switch_mode('section')", "Sections"),
        Binding("question_mark", "show_help", "Help"),
    ]

    def __init__(self, coordinator: ViewCoordinator) -> None:
        super().__init__()
        self.coordinator = coordinator
        self.active_pane = Pane.DEPENDENCIES

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal(id="panes"):
            yield PaneView(self.coordinator, Pane.DEPENDENCIES, id="deps-pane")
            yield PaneView(self.coordinator, Pane.DETAIL, id="detail-pane")

        yield Label("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#deps-pane", PaneView).border_title = "ELF Tree"
        self.refresh_panes()

    # --- ACTIONS ---

    def action_step_down(self) -> None:
        self.apply_command(Command.STEP_DOWN)

    def action_step_up(self) -> None:
        self.apply_command(Command.STEP_UP)

    def action_step_left(self, count: int = 1) -> None:
        self.apply_command(Command.STEP_LEFT, count=count)

    def action_step_right(self, count: int = 1) -> None:
        self.apply_command(Command.STEP_RIGHT, count=count)

    def action_page_down(self) -> None:
        self.apply_command(Command.PAGE_DOWN)

    def action_page_up(self) -> None:
        self.apply_command(Command.PAGE_UP)

    def action_home(self) -> None:
        self.apply_command(Command.HOME)

    def action_end(self) -> None:
        self.apply_command(Command.END)

    def action_toggle(self) -> None:
        self.apply_command(Command.TOGGLE)

    def action_switch_mode(self, mode: str) -> None:
        self.apply_command(Command.SWITCH_MODE, mode=DetailMode(mode))

    def action_switch_pane(self) -> None:
        if self.active_pane is Pane.DEPENDENCIES:
            self.active_pane = Pane.DETAIL
        else:
            self.active_pane = Pane.DEPENDENCIES
        self.refresh_panes()

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())

    async def action_quit(self) -> None:
        self.apply_command(Command.QUIT)

    # --- LOGIC ---

    def apply_command(self, command: Command, **kwargs) -> None:
        if not self.coordinator.handle(command, pane=self.active_pane, **kwargs):
            logging.info("Quit requested.")
            self.exit()
            return

        self.refresh_panes()

    def refresh_panes(self) -> None:
        for view in self.query(PaneView):
            view.has_cursor = view.pane is self.active_pane
            view.set_class(view.has_cursor, "active")
            view.refresh()

        detail = self.query_one("#detail-pane", PaneView)
        detail.border_title = f"{self.coordinator.detail_title()}: {escape(self.coordinator.current_name)}"

        status = f"{self.coordinator.status_line()}  [{self.coordinator.detail_title()}]"
        self.query_one("#status-line", Label).update(escape(status))
