"""Tests for the commands that go through the command executor."""

import curses

from conftest import FakeFilesystem, RecordingExecutor, home_tree, make_browser
from millpane.events import KEY_ESCAPE, KeyEvent, ScriptedEventSource, keys
from millpane.executor import CommandResult, ShellExecutor
from millpane.filesystem import LocalFilesystem

ENTER = KeyEvent(10)
ESCAPE = KeyEvent(KEY_ESCAPE)
STATUS_ROW = 18


class StatusRecorder(ScriptedEventSource):
    """Scripted events that also remember the status line shown before each one."""

    def __init__(self, surface, events=()):
        super().__init__(events)
        self.surface = surface
        self.seen = []

    def next_event(self):
        self.seen.append(self.surface.row_text(STATUS_ROW).rstrip())
        return super().next_event()


def _press(browser, key, then=()):
    code = ord(key) if isinstance(key, str) else key
    browser.events.push(*then)
    browser.handle_event(KeyEvent(code))


def _commands(browser):
    return [command for command, _ in browser.executor.commands]


# Make ----------------------------------------------------------------


def test_make_file_appends_and_selects(browser):
    _press(browser, "m", [*keys("new.txt"), ENTER])
    assert browser.executor.commands == [("touch /home/new.txt", "/home")]
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua", "new.txt"]
    assert browser.state.selection == "new.txt"
    assert browser.surface.row_text(5, 11, 20).rstrip() == " new.txt"
    assert browser.surface.cell(12, 5).inverted


def test_make_directory(browser):
    _press(browser, "m", [*keys("docs/"), ENTER])
    assert _commands(browser) == ["mkdir -p /home/docs"]
    assert browser.state.selection == "docs/"


def test_make_nested_file_creates_parents(browser):
    _press(browser, "m", [*keys("deep/er.txt"), ENTER])
    assert _commands(browser) == ["mkdir -p /home/deep && touch /home/deep/er.txt"]
    assert browser.state.selection == "deep/"


def test_make_inside_existing_directory_selects_it(browser):
    _press(browser, "m", [*keys("sub/x.txt"), ENTER])
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua"]
    assert browser.state.selection == "sub/"


def test_make_outside_current_directory_refreshes(browser):
    browser.filesystem.list_calls.clear()
    _press(browser, "m", [*keys("../x.txt"), ENTER])
    assert _commands(browser) == ["mkdir -p / && touch /x.txt"]
    assert "/home" in browser.filesystem.list_calls
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua"]


def test_make_quotes_names(browser):
    _press(browser, "m", [*keys("my file"), ENTER])
    assert _commands(browser) == ["touch '/home/my file'"]


def test_prompt_backspace_edits_text(browser):
    _press(browser, "m", [*keys("abx"), KeyEvent(curses.KEY_BACKSPACE), *keys("c"), ENTER])
    assert _commands(browser) == ["touch /home/abc"]


def test_make_cancelled_with_escape(browser):
    _press(browser, "m", [*keys("abc"), ESCAPE])
    assert browser.executor.commands == []
    assert browser.status_message == "cancelled make"


def test_make_cancelled_with_empty_answer(browser):
    _press(browser, "m", [ENTER])
    assert browser.executor.commands == []
    assert browser.status_message == "cancelled make"


def test_make_failure_leaves_rows_alone(fs):
    executor = RecordingExecutor(CommandResult.failed("touch: Permission denied"))
    browser = make_browser(fs, executor=executor)
    _press(browser, "m", [*keys("x"), ENTER])
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua"]
    assert browser.status_message == "touch: Permission denied"


def test_make_prompt_is_drawn(browser):
    browser.events = StatusRecorder(browser.surface, [*keys("ab"), ENTER])
    _press(browser, "m")
    assert browser.events.seen[:3] == ["make file>", "make file> a", "make file> ab"]


def test_make_existing_directory_name_selects_it(browser):
    _press(browser, "m", [*keys("sub"), ENTER])
    assert _commands(browser) == ["touch /home/sub"]
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua"]
    assert browser.state.selection == "sub/"


def test_make_name_starting_with_dots_stays_in_directory(browser):
    browser.filesystem.list_calls.clear()
    _press(browser, "m", [*keys("..notes"), ENTER])
    assert _commands(browser) == ["touch /home/..notes"]
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua", "..notes"]
    assert browser.state.selection == "..notes"
    assert "/home" not in browser.filesystem.list_calls


# Rename --------------------------------------------------------------


def test_rename_directory_keeps_marker(browser):
    _press(browser, "j")
    _press(browser, "r", [*keys("renamed/"), ENTER, *keys("y")])
    assert _commands(browser) == ["mv /home/sub /home/renamed"]
    assert browser.state.mid.rows == ["a.txt", "renamed/", "b.lua"]
    assert browser.state.selection == "renamed/"
    assert browser.status_message == "done renaming"


def test_rename_confirmation_ignores_other_keys(browser):
    browser.events = StatusRecorder(browser.surface, [*keys("c.txt"), ENTER, *keys("xy")])
    _press(browser, "r")
    assert _commands(browser) == ["mv /home/a.txt /home/c.txt"]
    assert 'rename "a.txt" to "c.txt" ? [Y/n]' in browser.events.seen


def test_rename_declined(browser):
    _press(browser, "r", [*keys("c.txt"), ENTER, *keys("n")])
    assert browser.executor.commands == []
    assert browser.state.selection == "a.txt"
    assert browser.status_message == "cancelled rename"


def test_rename_to_existing_name(browser):
    _press(browser, "r", [*keys("b.lua"), ENTER])
    assert browser.executor.commands == []
    assert browser.status_message == '"b.lua" already exists'


def test_rename_rejects_path(browser):
    _press(browser, "r", [*keys("x/y"), ENTER])
    assert browser.executor.commands == []
    assert browser.status_message == '"x/y" is not a plain name'


def test_rename_redraws_single_row(browser):
    browser.events.push(*keys("c.txt"), ENTER, *keys("y"))
    _press(browser, "r")
    assert browser.surface.row_text(2, 11, 20).rstrip() == " c.txt"


def test_rename_onto_listed_directory_refused(browser):
    _press(browser, "r", [*keys("sub"), ENTER, *keys("y")])
    assert browser.executor.commands == []
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua"]
    assert browser.status_message == '"sub" already exists'


def test_rename_onto_unlisted_existing_entry_refused(fs):
    browser = make_browser(fs)
    fs.directories["/home/later"] = []
    _press(browser, "r", [*keys("later"), ENTER, *keys("y")])
    assert browser.executor.commands == []
    assert browser.status_message == '"later" already exists'


# Yank and paste ------------------------------------------------------


def test_yank_remembers_path(browser):
    _press(browser, "y")
    assert browser.state.clipboard == "/home/a.txt"
    assert browser.status_message == 'copied path of "a.txt"'


def test_paste_without_yank(browser):
    _press(browser, "p")
    assert browser.status_message == "nothing yanked"


def test_paste_into_other_directory(fs):
    browser = make_browser(fs)
    _press(browser, "y")
    _press(browser, "/")
    assert browser.state.nav.current_directory == "/tmp"

    fs.directories["/tmp"] = ["a.txt"]
    fs.files["/tmp/a.txt"] = "first line\n"
    _press(browser, "p", [ENTER])

    assert _commands(browser) == ["cp -r /home/a.txt /tmp/a.txt"]
    assert browser.state.selection == "a.txt"
    assert browser.state.clipboard == "/home/a.txt"


def test_paste_under_new_name(fs):
    browser = make_browser(fs)
    _press(browser, "y")
    fs.directories["/home"].append("copy.txt")
    fs.files["/home/copy.txt"] = ""
    _press(browser, "p", [KeyEvent(curses.KEY_BACKSPACE)] * 5 + [*keys("copy.txt"), ENTER])
    assert _commands(browser) == ["cp -r /home/a.txt /home/copy.txt"]
    assert browser.state.selection == "copy.txt"


def test_paste_over_existing_needs_confirmation(browser):
    _press(browser, "y")
    _press(browser, "p", [ENTER, *keys("n")])
    assert browser.executor.commands == []
    assert browser.status_message == "cancelled paste"


# External programs ---------------------------------------------------


def test_edit_hands_off_without_pause(browser):
    _press(browser, "e")
    assert browser.executor.interactive == [("vi /home/a.txt", "/home", False)]


def test_edit_refreshes_preview(fs):
    browser = make_browser(fs)
    fs.files["/home/a.txt"] = "changed\n"
    _press(browser, "e")
    assert browser.state.preview.lines == ["changed"]
    assert browser.surface.row_text(2, 32).rstrip() == " changed"


def test_run_with_arguments(browser):
    _press(browser, curses.KEY_END)
    _press(browser, "a", [*keys("-v x"), ENTER])
    assert browser.executor.interactive == [("lua /home/b.lua -v x", "/home", True)]


def test_run_with_empty_arguments_allowed(browser):
    _press(browser, curses.KEY_END)
    _press(browser, "a", [ENTER])
    assert browser.executor.interactive == [("lua /home/b.lua", "/home", True)]


def test_run_with_arguments_only_for_scripts(browser):
    _press(browser, "a")
    assert browser.executor.interactive == []
    assert browser.status_message == '"a.txt" is not a .lua script'


def test_run_without_interpreter(fs):
    browser = make_browser(fs, scripts={"interpreter": ""})
    _press(browser, curses.KEY_END)
    _press(browser, 10)
    assert browser.executor.interactive == [("/home/b.lua", "/home", True)]


def test_failed_hand_off_reports_status(fs):
    executor = RecordingExecutor(CommandResult.failed("vi exited with status 1"))
    browser = make_browser(fs, executor=executor)
    _press(browser, "e")
    assert browser.status_message == "vi exited with status 1"


def test_shell_command(browser):
    browser.events = StatusRecorder(browser.surface, [*keys("ls"), ENTER])
    _press(browser, "s")
    assert browser.events.seen[0] == "/home #"
    assert browser.executor.interactive == [("ls", "/home", True)]


def test_shell_command_cancelled(browser):
    _press(browser, "s", [ESCAPE])
    assert browser.executor.interactive == []
    assert browser.status_message == "cancelled shell command"


def test_hand_off_restores_screen(browser):
    before = [list(row) for row in browser.surface.cells]
    _press(browser, "s", [*keys("true"), ENTER])
    assert browser.surface.cells == before


# Navigation commands -------------------------------------------------


def test_jump_home(browser):
    _press(browser, "/")
    assert browser.state.nav.current_directory == "/tmp"
    assert browser.state.selection is None
    browser.state.check_invariants()


def test_goto_selects_first_match(browser):
    _press(browser, "g", [*keys("SUB"), ENTER])
    assert browser.state.selection == "sub/"


def test_goto_miss_reports_and_keeps_cursor(browser):
    _press(browser, "j")
    _press(browser, "g", [*keys("zzz"), ENTER])
    assert browser.state.nav.cursor_index == 2
    assert browser.status_message == 'could not find file containing "ZZZ"'


def test_goto_cancelled(browser):
    _press(browser, "g", [ESCAPE])
    assert browser.status_message == "cancelled goto"


# Delete --------------------------------------------------------------


def test_delete_file(browser):
    browser.events = StatusRecorder(browser.surface, keys("y"))
    _press(browser, curses.KEY_END)
    _press(browser, curses.KEY_DC)
    assert browser.events.seen[0] == 'delete "b.lua" ? [Y/n]'
    assert _commands(browser) == ["rm -r /home/b.lua"]
    assert browser.state.mid.rows == ["a.txt", "sub/"]
    assert browser.state.selection == "sub/"
    browser.state.check_invariants()


def test_delete_directory_warns(browser):
    browser.events = StatusRecorder(browser.surface, [ENTER])
    _press(browser, "j")
    _press(browser, curses.KEY_DC)
    assert browser.events.seen[0] == 'recursively delete directory!? "sub/" ? [Y/n]'
    assert _commands(browser) == ["rm -r /home/sub"]


def test_delete_declined(browser):
    _press(browser, curses.KEY_DC, [KeyEvent(curses.KEY_BACKSPACE)])
    assert browser.executor.commands == []
    assert browser.status_message == "cancelled delete"


def test_delete_failure_keeps_row(fs):
    executor = RecordingExecutor(CommandResult.failed("rm: Permission denied"))
    browser = make_browser(fs, executor=executor)
    _press(browser, curses.KEY_DC, keys("y"))
    assert browser.state.mid.rows == ["a.txt", "sub/", "b.lua"]
    assert browser.status_message == "rm: Permission denied"


def test_delete_only_entry_ascends():
    """Deleting the last entry moves up instead of leaving an empty column."""
    fs = FakeFilesystem(
        {"/": ["home/"], "/home": ["lonely/"], "/home/lonely": ["only.txt"]},
        files={"/home/lonely/only.txt": "x\n"},
    )
    browser = make_browser(fs, start="/home/lonely")
    _press(browser, curses.KEY_DC, keys("y"))
    assert browser.state.nav.current_directory == "/home"
    assert browser.state.selection == "lonely/"
    assert browser.surface.row_text(0).rstrip() == "/home"
    browser.state.check_invariants()


# Empty directory guards ----------------------------------------------


def test_commands_need_a_selection():
    browser = make_browser(home_tree(), start="/tmp")
    for key in ("r", "y", "e", "a", curses.KEY_DC):
        _press(browser, key)
        assert browser.status_message == "Nothing selected."
    assert browser.executor.commands == []
    assert browser.executor.interactive == []


# Real disk -----------------------------------------------------------


def _disk_browser(tmp_path):
    (tmp_path / "a.txt").write_text("first\n")
    (tmp_path / "sub").mkdir()
    return make_browser(LocalFilesystem(), start=str(tmp_path), executor=ShellExecutor())


def test_make_over_directory_matches_disk(tmp_path):
    browser = _disk_browser(tmp_path)
    _press(browser, "m", [*keys("sub"), ENTER])
    assert browser.state.mid.rows == LocalFilesystem().list(str(tmp_path))
    assert browser.state.selection == "sub/"


def test_rename_onto_directory_matches_disk(tmp_path):
    browser = _disk_browser(tmp_path)
    _press(browser, "r", [*keys("sub"), ENTER, *keys("y")])
    assert browser.state.mid.rows == LocalFilesystem().list(str(tmp_path))
    assert (tmp_path / "a.txt").is_file()
    assert list((tmp_path / "sub").iterdir()) == []
