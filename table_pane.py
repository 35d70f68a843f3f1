import curses
import logging

from md_table import TableGrid, load_table_grid
from text_width import color_attr, display_width, fit, safe_addstr

logger = logging.getLogger(__name__)

MISSING_FILE_TEXT = "文件不存在"
EMPTY_TABLE_TEXT = "暂无数据"
EDITOR_FAILED_TEXT = "编辑器启动失败"

# shell convention for "command not found"
EDITOR_NOT_FOUND_RC = 127


class TablePane:
    """A Markdown table bound to one file: cursor, scroll, edit and reload."""

    PAIR_HEADER = 1
    MAX_COL_WIDTH = 40

    HELP_TEXT = "j/k -- move, h/l -- column, e -- edit, r -- reload, q/Esc -- back"

    def __init__(self, path, title, editor=None):
        self.path = path
        self.title = title
        # editor(path, line) -> exit code, blocks until the editor exits
        self.editor = editor

        self.grid = TableGrid(source_path=path)
        self.curr_row = 0
        self.curr_col = 0
        self.row_offset = 0
        self.col_offset = 0

        self.reload()

    # ---------- state ----------
    @property
    def load_error(self) -> bool:
        return self.grid.load_error

    @property
    def cursor(self):
        if self.grid.load_error:
            return None
        return (self.curr_row, self.curr_col)

    def position_text(self) -> str:
        if self.grid.load_error or not self.grid.rows:
            return ""
        return f"{self.curr_row + 1}/{self.grid.row_count}"

    def _clamp_cursor(self):
        max_row = max(1, self.grid.row_count) - 1
        max_col = max(1, self.grid.col_count) - 1
        self.curr_row = max(0, min(self.curr_row, max_row))
        self.curr_col = max(0, min(self.curr_col, max_col))

    # ---------- operations ----------
    def move_cursor(self, direction):
        if self.grid.load_error:
            return
        if direction == "down":
            self.curr_row += 1
        elif direction == "up":
            self.curr_row -= 1
        elif direction == "right":
            self.curr_col += 1
        elif direction == "left":
            self.curr_col -= 1
        else:
            raise ValueError(f"unknown direction: {direction!r}")
        self._clamp_cursor()

    def reload(self):
        was_error = self.grid.load_error
        grid = load_table_grid(self.path)
        if grid.load_error:
            self.grid = grid
            self.curr_row = self.curr_col = 0
            self.row_offset = self.col_offset = 0
            return

        if was_error:
            self.curr_row = self.curr_col = 0
            self.row_offset = self.col_offset = 0
        self.grid = grid
        self._clamp_cursor()

    def edit(self):
        """Open the source file in the editor, then reload.

        Returns a status message for the help band, or None.
        """
        if self.grid.load_error:
            return MISSING_FILE_TEXT

        line = None
        if 0 <= self.curr_row < len(self.grid.line_numbers):
            line = self.grid.line_numbers[self.curr_row]

        msg = None
        rc = EDITOR_NOT_FOUND_RC
        if self.editor is not None:
            try:
                rc = self.editor(self.path, line)
            except (OSError, ValueError) as exc:
                # ValueError: unbalanced quotes in $VISUAL/$EDITOR
                logger.warning("Editor launch failed for %s: %s", self.path, exc)
        if rc == EDITOR_NOT_FOUND_RC:
            msg = EDITOR_FAILED_TEXT

        self.reload()
        return msg

    # ---------- rendering ----------
    def _col_widths(self):
        grid = self.grid
        widths = []
        for c in range(grid.col_count):
            max_len = display_width(grid.header[c]) if grid.header else 0
            for row in grid.rows:
                max_len = max(max_len, display_width(row[c]))
            widths.append(min(self.MAX_COL_WIDTH, max_len + 2))
        return widths

    def _adjust_viewport(self, visible_rows, widths, avail_w):
        if self.curr_row < self.row_offset:
            self.row_offset = self.curr_row
        elif self.curr_row >= self.row_offset + visible_rows:
            self.row_offset = self.curr_row - visible_rows + 1
        self.row_offset = max(0, self.row_offset)

        if self.curr_col < self.col_offset:
            self.col_offset = self.curr_col
        while self.col_offset < self.curr_col:
            used = sum(cw + 1 for cw in widths[self.col_offset : self.curr_col + 1])
            if used <= avail_w:
                break
            self.col_offset += 1
        self.col_offset = max(0, self.col_offset)

    def draw(self, win, active=True):
        win.erase()
        h, w = win.getmaxyx()
        try:
            win.box()
        except curses.error:
            pass
        safe_addstr(win, 0, 2, f" {self.title} ", w - 4, curses.A_BOLD)

        inner_h = max(0, h - 2)
        inner_w = max(0, w - 2)

        if self.grid.load_error:
            self._draw_centered(win, inner_h, inner_w, [MISSING_FILE_TEXT, str(self.path)])
            win.refresh()
            return
        if not self.grid.rows:
            self._draw_centered(win, inner_h, inner_w, [EMPTY_TABLE_TEXT])
            win.refresh()
            return

        widths = self._col_widths()
        visible_rows = max(1, inner_h - 2)
        self._adjust_viewport(visible_rows, widths, inner_w)

        visible_cols = []
        used = 0
        for c in range(self.col_offset, len(widths)):
            if visible_cols and used + widths[c] + 1 > inner_w:
                break
            visible_cols.append(c)
            used += widths[c] + 1

        aligns = self.grid.alignments
        header = self.grid.header or [""] * self.grid.col_count
        header_attr = curses.A_BOLD | color_attr(self.PAIR_HEADER)

        x = 1
        for c in visible_cols:
            safe_addstr(win, 1, x, " " + fit(header[c], widths[c] - 1), inner_w - (x - 1), header_attr)
            x += widths[c] + 1
        safe_addstr(win, 2, 1, "─" * inner_w, inner_w)

        end = min(self.grid.row_count, self.row_offset + visible_rows)
        for screen_y, r in enumerate(range(self.row_offset, end), start=3):
            row = self.grid.rows[r]
            is_cursor_row = r == self.curr_row
            x = 1
            for c in visible_cols:
                align = aligns[c] if c < len(aligns) else None
                text = " " + fit(row[c], widths[c] - 1, align)
                attr = curses.A_BOLD if is_cursor_row else 0
                if is_cursor_row and c == self.curr_col and active:
                    attr = curses.A_REVERSE
                safe_addstr(win, screen_y, x, text, inner_w - (x - 1), attr)
                x += widths[c] + 1

        win.refresh()

    @staticmethod
    def _draw_centered(win, inner_h, inner_w, lines):
        top = 1 + max(0, (inner_h - len(lines)) // 2)
        for i, line in enumerate(lines):
            safe_addstr(win, top + i, 1, fit(line, inner_w, "center"), inner_w)
