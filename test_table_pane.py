import os
import unittest
import tempfile
from pathlib import Path

from external_editor import EditorLauncher
from table_pane import EDITOR_FAILED_TEXT, MISSING_FILE_TEXT, TablePane


THREE_BY_TWO = "| a | b |\n|---|---|\n| 1 | x |\n| 2 | y |\n| 3 | z |\n"


class DummyWin:
    def __init__(self, h=12, w=60):
        self._h = h
        self._w = w
        self.writes = []

    def getmaxyx(self):
        return self._h, self._w

    def erase(self):
        self.writes = []

    def box(self):
        pass

    def addstr(self, y, x, text, attr=0):
        self.writes.append((y, x, text, attr))

    def refresh(self):
        pass

    def text(self):
        return "\n".join(t for _, _, t, _ in self.writes)


class TablePaneTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.path = self.dir / "TODO.md"

    def tearDown(self):
        self._tmp.cleanup()

    def _pane(self, text=None, editor=None):
        if text is not None:
            self.path.write_text(text, encoding="utf-8")
        return TablePane(str(self.path), "TODO", editor)


class MissingFileTests(TablePaneTestCase):
    def test_absent_file_reports_load_error_and_renders_message(self):
        pane = self._pane()
        self.assertTrue(pane.load_error)
        self.assertIsNone(pane.cursor)

        win = DummyWin()
        pane.draw(win)
        self.assertIn(MISSING_FILE_TEXT, win.text())

    def test_moves_and_edit_are_noops_while_missing(self):
        calls = []
        pane = self._pane(editor=lambda path, line: calls.append(path) or 0)
        pane.move_cursor("down")
        self.assertIsNone(pane.cursor)
        self.assertEqual(pane.edit(), MISSING_FILE_TEXT)
        self.assertEqual(calls, [])

    def test_reload_after_file_appears_resets_cursor(self):
        pane = self._pane()
        self.assertTrue(pane.load_error)
        self.path.write_text(THREE_BY_TWO, encoding="utf-8")
        pane.reload()
        self.assertFalse(pane.load_error)
        self.assertEqual(pane.cursor, (0, 0))

    def test_reload_after_file_removed_sets_load_error(self):
        pane = self._pane(THREE_BY_TWO)
        self.path.unlink()
        pane.reload()
        self.assertTrue(pane.load_error)
        self.assertEqual(pane.grid.rows, [])


class NavigationTests(TablePaneTestCase):
    def test_cursor_walks_down_and_clamps_at_last_row(self):
        pane = self._pane(THREE_BY_TWO)
        self.assertEqual(pane.cursor, (0, 0))
        pane.move_cursor("down")
        pane.move_cursor("down")
        self.assertEqual(pane.cursor, (2, 0))
        pane.move_cursor("down")
        self.assertEqual(pane.cursor, (2, 0))

    def test_cursor_clamps_at_first_row_and_columns(self):
        pane = self._pane(THREE_BY_TWO)
        pane.move_cursor("up")
        pane.move_cursor("left")
        self.assertEqual(pane.cursor, (0, 0))
        pane.move_cursor("right")
        pane.move_cursor("right")
        pane.move_cursor("right")
        self.assertEqual(pane.cursor, (0, 1))

    def test_cursor_stays_in_bounds_for_any_sequence(self):
        pane = self._pane(THREE_BY_TWO)
        moves = ["down", "right", "down", "down", "down", "left", "up", "right"] * 5
        for move in moves:
            pane.move_cursor(move)
            row, col = pane.cursor
            self.assertTrue(0 <= row < pane.grid.row_count)
            self.assertTrue(0 <= col < pane.grid.col_count)

    def test_empty_table_keeps_cursor_at_origin(self):
        pane = self._pane("| a | b |\n|---|---|\n")
        pane.move_cursor("down")
        pane.move_cursor("right")
        self.assertEqual(pane.cursor, (0, 1))
        self.assertEqual(pane.position_text(), "")

    def test_unknown_direction_raises(self):
        pane = self._pane(THREE_BY_TWO)
        with self.assertRaises(ValueError):
            pane.move_cursor("sideways")

    def test_reload_preserves_cursor_clamped_to_new_bounds(self):
        pane = self._pane(THREE_BY_TWO)
        pane.move_cursor("down")
        pane.move_cursor("down")
        pane.move_cursor("right")
        self.path.write_text("| a |\n|---|\n| 1 |\n| 2 |\n", encoding="utf-8")
        pane.reload()
        self.assertEqual(pane.cursor, (1, 0))


class EditTests(TablePaneTestCase):
    def test_edit_passes_source_line_and_reloads(self):
        calls = []

        def editor(path, line):
            calls.append((path, line))
            Path(path).write_text(THREE_BY_TWO + "| 4 | w |\n", encoding="utf-8")
            return 0

        pane = self._pane(THREE_BY_TWO, editor=editor)
        pane.move_cursor("down")
        self.assertIsNone(pane.edit())
        self.assertEqual(calls, [(str(self.path), 4)])
        self.assertEqual(pane.grid.row_count, 4)
        self.assertEqual(pane.cursor, (1, 0))

    def test_edit_ignores_nonzero_exit_code(self):
        pane = self._pane(THREE_BY_TWO, editor=lambda path, line: 1)
        self.assertIsNone(pane.edit())
        self.assertFalse(pane.load_error)

    def test_editor_launch_failure_still_reloads(self):
        def editor(path, line):
            Path(path).write_text("| a |\n|---|\n| only |\n", encoding="utf-8")
            raise FileNotFoundError("nvim")

        pane = self._pane(THREE_BY_TWO, editor=editor)
        self.assertEqual(pane.edit(), EDITOR_FAILED_TEXT)
        self.assertEqual(pane.grid.rows, [["only"]])

    def test_editor_not_found_code_reports_failure(self):
        pane = self._pane(THREE_BY_TWO, editor=lambda path, line: 127)
        self.assertEqual(pane.edit(), EDITOR_FAILED_TEXT)

    def test_unbalanced_quote_in_editor_env_reports_failure(self):
        saved = {key: os.environ.get(key) for key in ("VISUAL", "EDITOR")}
        os.environ.pop("VISUAL", None)
        os.environ["EDITOR"] = 'code --wait "'
        try:
            launched = []
            pane = self._pane(THREE_BY_TWO, editor=EditorLauncher(launched.append))
            self.path.write_text("| a |\n|---|\n| only |\n", encoding="utf-8")
            self.assertEqual(pane.edit(), EDITOR_FAILED_TEXT)
        finally:
            for key, value in saved.items():
                if value is None:
                    os.environ.pop(key, None)
                else:
                    os.environ[key] = value
        self.assertEqual(launched, [])
        self.assertEqual(pane.grid.rows, [["only"]])


class DrawTests(TablePaneTestCase):
    def test_draw_shows_header_and_rows(self):
        pane = self._pane(THREE_BY_TWO)
        win = DummyWin()
        pane.draw(win)
        text = win.text()
        self.assertIn("TODO", text)
        for cell in ("a", "b", "1", "x", "3", "z"):
            self.assertIn(cell, text)

    def test_draw_scrolls_to_keep_cursor_visible(self):
        body = "".join(f"| r{i} |\n" for i in range(30))
        pane = self._pane("| h |\n|---|\n" + body)
        for _ in range(25):
            pane.move_cursor("down")
        win = DummyWin(h=10, w=40)
        pane.draw(win)
        self.assertGreater(pane.row_offset, 0)
        self.assertIn("r25", win.text())
        self.assertNotIn("r0 ", win.text())

    def test_draw_empty_table_message(self):
        pane = self._pane("| a |\n|---|\n")
        win = DummyWin()
        pane.draw(win)
        self.assertIn("暂无数据", win.text())


if __name__ == "__main__":
    unittest.main()
