"""Custom widgets for the nmclean TUI."""

from rich.console import Group
from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static

from nmclean.display import (
    COMMENT,
    GREEN,
    HELP_TEXT,
    ORANGE,
    PURPLE,
    SPINNER_FRAMES,
    render_row,
    scrolling_path,
    stats_line,
    visible_window,
)
from nmclean.state import CleanerState


class TreeView(Static):
    """Windowed view of the flattened rows, cursor kept near the middle."""

    tick: reactive[int] = reactive(0)

    def __init__(self, state: CleanerState, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.state = state

    def render(self) -> Group | Text:
        state = self.state

        if state.scanning:
            frame = SPINNER_FRAMES[self.tick % len(SPINNER_FRAMES)]
            return Text.assemble(
                (f"{frame} Scanning for {state.target_name}...\n\n", f"bold {GREEN}"),
                (f"{state.root}\n\n", f"italic {COMMENT}"),
                f"Found {len(state.flat)} items so far...\n\n",
                "Press q to quit",
            )

        if not state.flat:
            return Text.assemble(
                (f"No {state.target_name} folders found!\n\n", f"bold {GREEN}"),
                "Your directory is clean.\n\n",
                "Press q to quit",
            )

        top, bottom = visible_window(state.cursor, len(state.flat), self.size.height)
        return Group(
            *(render_row(state.flat[i], is_cursor=i == state.cursor) for i in range(top, bottom))
        )


class PathBar(Static):
    """Full path of the node under the cursor, sliding when too long."""

    tick: reactive[int] = reactive(0)

    def __init__(self, state: CleanerState, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.state = state

    def render(self) -> Text:
        node = self.state.current()
        if node is None:
            return Text("")
        return Text("📁 " + scrolling_path(node.path, self.app.size.width, self.tick), style=f"italic {ORANGE}")


class StatusBar(Static):
    """Selection statistics and key help."""

    def __init__(self, state: CleanerState, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.state = state

    def render(self) -> Text:
        text = Text(stats_line(self.state.stats()), style=f"bold {PURPLE}")
        if self.state.deleting:
            text.append("  deleting...", style=f"italic {COMMENT}")
        text.append("\n")
        text.append(HELP_TEXT, style=COMMENT)
        return text
