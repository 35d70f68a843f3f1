import curses
import logging
import subprocess

from dashboard import Dashboard
from external_editor import EditorLauncher
from screen_layout import ScreenLayout
from table_pane import TablePane

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, config):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)
        self._init_colors()

        self.layout = ScreenLayout(stdscr)
        editor = EditorLauncher(
            self._run_interactive_in_terminal, config.get("EDITOR_COMMAND")
        )
        self.dashboard = Dashboard(config, editor=editor)

    @staticmethod
    def _init_colors():
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(TablePane.PAIR_HEADER, curses.COLOR_YELLOW, -1)
        except curses.error:
            pass

    # ---------------- helpers ----------------

    def _run_interactive_in_terminal(self, argv):
        if not argv:
            return 1
        try:
            curses.def_prog_mode()
        except curses.error:
            pass
        try:
            curses.endwin()
        except curses.error:
            pass

        try:
            result = subprocess.run(argv).returncode
        except FileNotFoundError:
            logger.warning("Editor not found: %s", argv[0])
            result = 127
        except OSError as exc:
            logger.warning("Editor failed to start: %s", exc)
            result = 127

        try:
            curses.reset_prog_mode()
        except curses.error:
            pass
        try:
            curses.raw()
            self.stdscr.nodelay(False)
            self.stdscr.timeout(100)
            curses.curs_set(0)
        except curses.error:
            pass
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()
        return result

    # ---------------- UI ----------------

    def redraw(self):
        self.dashboard.render(self.layout)

    def _resize(self):
        try:
            curses.update_lines_cols()
        except curses.error:
            pass
        self.stdscr.clear()
        self.stdscr.refresh()
        self.layout = ScreenLayout(self.stdscr)

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self.stdscr.getch()

            if ch == -1:
                self.dashboard.tick()
                self.redraw()
                continue

            if ch == curses.KEY_RESIZE:
                self._resize()
                self.redraw()
                continue

            if not self.dashboard.handle_key(ch):
                break

            self.dashboard.tick()
            self.redraw()
