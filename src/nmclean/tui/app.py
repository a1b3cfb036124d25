"""Main TUI application for nmclean."""

import logging

from rich.markup import escape
from textual.app import App
from textual.binding import Binding
from textual.message import Message

from nmclean.config import CleanerConfig
from nmclean.deleter import delete_paths
from nmclean.display import deletion_summary
from nmclean.models import DeletionBatch, ScanEvent, ScanFinished, TargetFound
from nmclean.scanner import Scanner
from nmclean.state import CleanerState
from nmclean.tui.screens import ConfirmDeleteScreen, MainScreen

logger = logging.getLogger(__name__)


class ScanEventReceived(Message):
    """A scanner event crossing from the scan thread to the app."""

    def __init__(self, event: ScanEvent) -> None:
        super().__init__()
        self.event = event


class DeletionFinished(Message):
    """A deletion batch has fully completed."""

    def __init__(self, batch: DeletionBatch) -> None:
        super().__init__()
        self.batch = batch


class CleanerApp(App):
    """Interactive selector for deleting target folders."""

    TITLE = "nmclean"

    CSS_PATH = "styles.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    SCREENS = {
        "main": MainScreen,
    }

    def __init__(self, config: CleanerConfig):
        super().__init__()
        self.run_config = config
        self.state = CleanerState(config.root, config.target_name)
        self.scanner = Scanner(
            config.root,
            config.target_name,
            on_event=lambda event: self.post_message(ScanEventReceived(event)),
            max_workers=config.max_workers,
            exclude=config.exclude,
        )

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self.push_screen("main")
        self.set_interval(0.1, self._tick)
        self.run_worker(self.scanner.run, thread=True, group="scan")

    def _tick(self) -> None:
        self.get_screen("main").advance()

    def _refresh_main(self) -> None:
        self.get_screen("main").refresh_views()

    def on_scan_event_received(self, message: ScanEventReceived) -> None:
        event = message.event
        if isinstance(event, TargetFound):
            self.state.on_target_found(event)
        elif isinstance(event, ScanFinished):
            self.state.on_scan_finished(event)
            if event.cancelled:
                self.notify("Scan stopped early", severity="warning")
        self._refresh_main()

    def request_deletion(self) -> None:
        """Start deleting the selection, asking first when configured to."""
        if self.state.busy:
            return

        stats = self.state.stats()
        if stats.selected_count == 0:
            self.notify("No folders selected", severity="warning")
            return

        if self.run_config.confirm_delete:
            self.push_screen(
                ConfirmDeleteScreen(stats.selected_count, stats.selected_bytes, self.run_config.dry_run),
                self._on_confirm,
            )
        else:
            self._start_deletion()

    def _on_confirm(self, confirmed: bool | None) -> None:
        if confirmed:
            self._start_deletion()

    def _start_deletion(self) -> None:
        paths = self.state.begin_deletion()
        if not paths:
            return
        self._refresh_main()
        self.run_worker(lambda: self._delete(paths), thread=True, group="delete")

    def _delete(self, paths: list[str]) -> None:
        """Remove paths in the background and report the whole batch."""
        batch = delete_paths(
            paths,
            self.run_config.root,
            self.run_config.target_name,
            max_workers=self.run_config.max_workers,
            dry_run=self.run_config.dry_run,
        )
        self.post_message(DeletionFinished(batch))

    def on_deletion_finished(self, message: DeletionFinished) -> None:
        batch = message.batch
        self.state.on_deletion_finished(batch)
        self._refresh_main()

        self.notify(deletion_summary(batch), timeout=5)
        for outcome in batch.failed:
            self.notify(escape(outcome.error or outcome.path), title="Delete failed", severity="error", timeout=8)

    def action_quit(self) -> None:
        """Stop the walk and leave; running deletions are left to finish."""
        self.scanner.cancel()
        self.exit()


def run_tui(config: CleanerConfig) -> None:
    """Run the interactive TUI.

    Args:
        config: Settings for this run
    """
    app = CleanerApp(config)
    app.run()
