"""Build help content for the footer and the help overlay."""

from __future__ import annotations

from typing import List

HELP_STRING = "[m]ake, [r]ename, [y/p] yank/paste, [e]dit, run [a]rgs, home [/], [g]oto, [s]hell, [?] help, [q]uit"


def build_help_lines(script_extension: str) -> List[str]:
    """Return the key bindings shown by the help overlay."""
    return [
        "↑↓ / k j     move cursor",
        "← / h        up to parent directory",
        "→ / l        into selected directory",
        f"Enter        open: descend, run .{script_extension}, or edit",
        "Home / End   first / last entry",
        "PgUp / PgDn  move a page",
        "Delete       delete selection (confirm needed)",
        "m            make file (end with / for a directory)",
        "r            rename selection (confirm needed)",
        "y / p        yank path / paste copy",
        "e            edit in $EDITOR",
        f"a            run .{script_extension} with arguments",
        "/            jump to home directory",
        "g            goto first name containing text",
        "s            run a shell command",
        "q            quit",
    ]


__all__ = ["HELP_STRING", "build_help_lines"]
