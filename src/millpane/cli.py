"""Command-line entry point for millpane.

Starting the browser happens in a few plain steps:

1. Read the command line, or fall back to the directory saved by the last run.
2. Check that the directory really exists.
3. Hand the terminal to the three-column browser.
4. Save where the user ended up, or write a crash report when something broke.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from datetime import datetime
from pathlib import Path

from millpane import ColumnBrowser, MillpaneError, __version__
from millpane.config import get_last_directory, get_logging_settings, load_config, save_last_directory
from millpane.logs import configure_logging

# Crash dump file location
CRASH_LOG_FILE = Path.home() / "millpane.crash.txt"


def validate_directory(path: Path, name: str) -> Path:
    """Check that a path exists and points to a directory the browser can open.

    A bad path (a typo, or a file instead of a folder) does not stop the
    program: the current working directory is used instead and a warning is
    printed.

    Args:
        path: Candidate path supplied by the user or the saved session.
        name: Description used in warning messages, e.g. ``"start"``.

    Returns:
        The resolved path when it checks out, otherwise ``Path.cwd()``.
    """
    try:
        resolved = path.resolve()
        if not resolved.exists():
            print(f"Warning: {name} directory does not exist: {path}", file=sys.stderr)
            print("   Using current directory instead", file=sys.stderr)
            return Path.cwd()
        if not resolved.is_dir():
            print(f"Warning: {name} path is not a directory: {path}", file=sys.stderr)
            print("   Using current directory instead", file=sys.stderr)
            return Path.cwd()
        return resolved
    except (OSError, RuntimeError) as e:
        print(f"Warning: Cannot access {name} directory: {path}", file=sys.stderr)
        print(f"   Error: {e}", file=sys.stderr)
        print("   Using current directory instead", file=sys.stderr)
        return Path.cwd()


def write_crash_log(exception: BaseException) -> None:
    """Append a crash report with the traceback to :data:`CRASH_LOG_FILE`."""
    try:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        crash_info = f"""
================================================================================
millpane Crash Report
================================================================================
Timestamp: {timestamp}
Version: {__version__}
Python: {sys.version}
Platform: {sys.platform}

Exception Type: {type(exception).__name__}
Exception Message: {str(exception)}

Traceback:
{traceback.format_exc()}
================================================================================
"""
        with open(CRASH_LOG_FILE, "a") as f:
            f.write(crash_info)

        print("\nmillpane crashed unexpectedly!", file=sys.stderr)
        print(f"   Crash details saved to: {CRASH_LOG_FILE}", file=sys.stderr)
        print("   Please report this issue with the crash log.", file=sys.stderr)
    except OSError:
        print("\nmillpane crashed and could not write crash log!", file=sys.stderr)
        traceback.print_exc()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the optional start directory and the ``--version`` flag."""
    parser = argparse.ArgumentParser(
        prog="millpane",
        description="Browse a directory tree as parent, current and preview columns.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version number and exit.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to start in (default: last used directory).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Launch the browser and remember the directory it ended in."""
    try:
        args = parse_args(argv)

        # curses needs a real terminal on stdout
        if not sys.stdout.isatty():
            print("millpane requires an interactive terminal.")
            return 1

        config = load_config()
        configure_logging(get_logging_settings(config))

        if args.directory is None:
            start = validate_directory(Path(get_last_directory()).expanduser(), "start (from session)")
        else:
            start = validate_directory(Path(args.directory).expanduser(), "start")

        browser = ColumnBrowser(start, config=config)
        final_directory = browser.browse()

        save_last_directory(str(final_directory))
        print(f"Final directory: {final_directory}")
        return 0

    except MillpaneError as err:
        print(f"Could not start browser: {err}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        # Ctrl+C outside the browser is a normal exit
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        write_crash_log(e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
