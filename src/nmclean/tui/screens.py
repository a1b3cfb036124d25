"""TUI screens for nmclean."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Static

from nmclean.display import format_bytes
from nmclean.tui.widgets import PathBar, StatusBar, TreeView


class MainScreen(Screen):
    """Tree of discovered folders with selection controls."""

    BINDINGS = [
        Binding("up,k", "cursor_up", "Up", show=False),
        Binding("down,j", "cursor_down", "Down", show=False),
        Binding("space", "toggle_select", "Select"),
        Binding("a", "toggle_all", "All"),
        Binding("e,tab", "toggle_expand", "Expand", priority=True),
        Binding("enter", "delete", "Delete"),
    ]

    def compose(self) -> ComposeResult:
        state = self.app.state
        yield Static(f" {state.target_name} cleaner ", id="title")
        yield Static(f"  {state.root}", id="subtitle")
        yield TreeView(state, id="tree")
        yield PathBar(state, id="path-bar")
        yield StatusBar(state, id="status-bar")

    def refresh_views(self) -> None:
        """Redraw everything after the state changed."""
        self.query_one(TreeView).refresh()
        self.query_one(PathBar).refresh()
        self.query_one(StatusBar).refresh()

    def advance(self) -> None:
        """Move the spinner and the path marquee on by one tick."""
        self.query_one(TreeView).tick += 1
        self.query_one(PathBar).tick += 1

    def action_cursor_up(self) -> None:
        self.app.state.move_up()
        self.refresh_views()

    def action_cursor_down(self) -> None:
        self.app.state.move_down()
        self.refresh_views()

    def action_toggle_select(self) -> None:
        if self.app.state.toggle_select():
            self.refresh_views()

    def action_toggle_all(self) -> None:
        if self.app.state.toggle_all():
            self.refresh_views()

    def action_toggle_expand(self) -> None:
        if self.app.state.toggle_expand():
            self.refresh_views()

    def action_delete(self) -> None:
        self.app.request_deletion()


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Confirmation before removing the selection."""

    BINDINGS = [
        Binding("y", "confirm", "Yes, Delete"),
        Binding("n", "cancel", "Cancel"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, count: int, size_bytes: int, dry_run: bool = False):
        super().__init__()
        self.count = count
        self.size_bytes = size_bytes
        self.dry_run = dry_run

    def compose(self) -> ComposeResult:
        with Container(id="confirm-container"):
            yield Static(
                f"[bold]Delete {self.count} folders ({format_bytes(self.size_bytes)})?[/bold]",
                id="confirm-title",
            )
            if self.dry_run:
                yield Static("[yellow]DRY RUN - No files will be deleted[/yellow]")
            with Horizontal(id="confirm-buttons"):
                yield Button("Delete", variant="error", id="btn-delete")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "btn-delete":
            self.action_confirm()
        elif event.button.id == "btn-cancel":
            self.action_cancel()

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
