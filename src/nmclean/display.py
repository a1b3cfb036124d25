"""Rich terminal display for nmclean."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from nmclean.models import DeletionBatch, SelectionStats, TargetFound
from nmclean.tree import SelectionState, TreeNode

console = Console()

# Palette
PURPLE = "#BD93F9"
PINK = "#FF79C6"
GREEN = "#50FA7B"
ORANGE = "#FFB86C"
RED = "#FF5555"
COMMENT = "#6272A4"
FOREGROUND = "#F8F8F2"

LARGE_BYTES = 500 * 1024 * 1024
MEDIUM_BYTES = 50 * 1024 * 1024

SPINNER_FRAMES = ["⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷"]

HELP_TEXT = "SPACE: select │ a: all │ TAB: expand/collapse │ ENTER: delete │ q: quit"

CHECKBOXES = {
    SelectionState.SELECTED: ("●", f"bold {GREEN}"),
    SelectionState.PARTIAL: ("◐", f"bold {ORANGE}"),
    SelectionState.UNSELECTED: ("○", COMMENT),
    SelectionState.DELETED: ("✗", f"strike {RED}"),
}


def format_bytes(size_bytes: int) -> str:
    """Format bytes using binary (1024) units."""
    unit = 1024
    if size_bytes < unit:
        return f"{size_bytes} B"
    div, exp = unit, 0
    n = size_bytes // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size_bytes / div:.1f} {'KMGTPE'[exp]}B"


def size_style(size_bytes: int) -> str:
    """Colour for a size: red when huge, orange when big, green otherwise."""
    if size_bytes > LARGE_BYTES:
        return f"bold {RED}"
    elif size_bytes > MEDIUM_BYTES:
        return ORANGE
    return GREEN


def checkbox(node: TreeNode) -> Text:
    glyph, style = CHECKBOXES[node.selection_state()]
    return Text(glyph, style=style)


def tree_prefix(node: TreeNode) -> Text:
    """Connector lines drawn in front of a node."""
    prefix = Text()
    for ancestor in node.ancestors():
        prefix.append("   " if ancestor.is_last else "│  ", style=COMMENT)
    if node.depth > 0:
        prefix.append("└──" if node.is_last else "├──", style=COMMENT)
    return prefix


def render_row(node: TreeNode, is_cursor: bool = False) -> Text:
    """One line of the tree view."""
    line = Text()
    line.append("❯ " if is_cursor else "  ", style=f"bold {PINK}")
    line.append_text(tree_prefix(node))

    if node.children:
        line.append("▼" if node.expanded else "▶", style=COMMENT)
    else:
        line.append(" ")
    line.append(" ")
    line.append_text(checkbox(node))
    line.append(" ")

    if node.deleted:
        line.append(node.name, style=f"strike {RED}")
    elif node.size > 0:
        line.append(node.name, style=FOREGROUND)
    else:
        line.append(node.name, style=f"italic {COMMENT}")

    total = node.aggregate_size()
    if total > 0:
        line.append(" ")
        if node.children and node.size == 0:
            line.append("Σ ", style=f"italic {COMMENT}")
        line.append(format_bytes(total), style=size_style(total))

    if node.error:
        line.append(f"  ⚠ {node.error}", style=RED)

    if is_cursor:
        line.stylize("on #44475A")
    return line


def visible_window(cursor: int, length: int, height: int) -> tuple[int, int]:
    """Row range ``[top, bottom)`` that keeps the cursor near the middle."""
    window = max(5, height)
    top = cursor - window // 2 if cursor > window // 2 else 0
    bottom = top + window
    if bottom > length:
        bottom = length
        top = max(0, bottom - window)
    return top, bottom


def scrolling_path(path: str, width: int, offset: int) -> str:
    """Slice of a long path that slides along as ``offset`` ticks.

    The head is held for ten ticks, the tail for ten ticks, and the text
    moves one character per tick in between.
    """
    max_width = min(max(width - 10, 30), 80)
    if len(path) <= max_width:
        return path

    cycle = len(path) - max_width + 20
    pos = offset % cycle
    if pos < 10:
        return path[:max_width]
    elif pos >= cycle - 10:
        return path[len(path) - max_width:]
    start = pos - 10
    return path[start:start + max_width]


def stats_line(stats: SelectionStats) -> str:
    return (
        f"Items: {stats.visible_count} │ "
        f"Selected: {stats.selected_count} ({format_bytes(stats.selected_bytes)}) │ "
        f"Total: {format_bytes(stats.total_bytes)}"
    )


def deletion_summary(batch: DeletionBatch) -> str:
    """Short sentence describing a finished batch."""
    freed = format_bytes(batch.bytes_freed)
    dry_run = any(o.dry_run for o in batch.outcomes)
    if dry_run:
        summary = f"Dry run: {len(batch.succeeded)} folders, {freed} would be freed"
    else:
        summary = f"Removed {len(batch.succeeded)} folders, {freed} freed"
    if batch.failed:
        summary += f", {len(batch.failed)} failed"
    return summary


def show_scan_report(found: list[TargetFound], root: str, target_name: str) -> None:
    """Print discovered target directories, largest first."""
    if not found:
        console.print(f"[green]No {escape(target_name)} folders found in {escape(root)}[/green]")
        return

    table = Table(title=f"{escape(target_name)} under {escape(root)}", show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Files", justify="right")
    table.add_column("Size", justify="right")

    for item in sorted(found, key=lambda f: (-f.size_bytes, f.path)):
        table.add_row(
            item.path,
            str(item.file_count),
            Text(format_bytes(item.size_bytes), style=size_style(item.size_bytes)),
        )

    console.print(table)
    total = sum(f.size_bytes for f in found)
    console.print(f"\n[bold]{len(found)} folders, {format_bytes(total)} total[/bold]")
