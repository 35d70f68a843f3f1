import curses
import logging

import pandas as pd

import bill_ledger
from text_width import fit, safe_addstr

logger = logging.getLogger(__name__)

NO_BILLS_TEXT = "暂无账单"
MISSING_DIR_TEXT = "目录不存在"


class BillPane:
    HELP_TEXT = "a -- analyze, o -- export, r -- reload, q/Esc -- back"

    def __init__(self, bill_dir, analyzer=None, exporter=None, title="BILL"):
        self.bill_dir = bill_dir
        self.title = title
        self.analyzer = analyzer or bill_ledger.analyze_bills
        self.exporter = exporter or bill_ledger.export_reports
        self.last_export = None
        self.summary = bill_ledger.compute_summary(bill_dir)

    def reload(self):
        self.summary = bill_ledger.compute_summary(self.bill_dir)

    def analyze(self):
        """Run the analyzer, then recompute the summary. Returns a status message."""
        try:
            written = self.analyzer(self.bill_dir)
        except (OSError, ValueError, pd.errors.ParserError) as exc:
            logger.warning("Bill analysis failed: %s", exc)
            self.reload()
            return f"分析失败: {exc}"
        self.reload()
        count = len(written or [])
        if count == 0:
            return "没有待分析的账单"
        return f"已分析 {count} 份账单"

    def export(self):
        try:
            path = self.exporter(self.bill_dir)
        except (OSError, ValueError, pd.errors.ParserError) as exc:
            logger.warning("Bill export failed: %s", exc)
            self.reload()
            return f"导出失败: {exc}"
        self.reload()
        if not path:
            return "没有可导出的报告"
        self.last_export = path
        return f"已导出: {path}"

    def draw(self, win, active=True):
        win.erase()
        h, w = win.getmaxyx()
        try:
            win.box()
        except curses.error:
            pass
        safe_addstr(win, 0, 2, f" {self.title} ", w - 4, curses.A_BOLD)
        inner_w = max(0, w - 2)

        if self.summary.is_empty:
            top = 1 + max(0, (h - 2 - 1) // 2)
            safe_addstr(win, top, 1, fit(NO_BILLS_TEXT, inner_w, "center"), inner_w)
            if self.summary.dir_missing:
                hint = f"{MISSING_DIR_TEXT}: {self.bill_dir}"
                safe_addstr(win, top + 1, 1, fit(hint, inner_w, "center"), inner_w)
            win.refresh()
            return

        lines = [
            f"未分析账单: {self.summary.unanalyzed}",
            f"可导出报告: {self.summary.exportable}",
            "",
            f"目录: {self.bill_dir}",
        ]
        if self.last_export:
            lines.append(f"最近导出: {self.last_export}")
        for i, line in enumerate(lines):
            attr = curses.A_BOLD if i < 2 else 0
            safe_addstr(win, 1 + i, 2, line, inner_w - 1, attr)
        win.refresh()
