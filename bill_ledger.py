import logging
import os
import time
from dataclasses import dataclass

import pandas as pd

logger = logging.getLogger(__name__)

RAW_DIR = "raw"
ANALYZED_DIR = "analyzed"
REPORTS_DIR = "reports"

AMOUNT_COLUMNS = ("amount", "金额", "金额(元)", "金额（元）")
CATEGORY_COLUMNS = ("category", "分类", "交易分类")
UNCATEGORIZED = "未分类"


@dataclass(frozen=True)
class BillSummary:
    unanalyzed: int = 0
    exportable: int = 0
    bill_dir: str = ""
    dir_missing: bool = False

    @property
    def is_empty(self) -> bool:
        return self.unanalyzed == 0 and self.exportable == 0


def _csv_stems(directory: str) -> list[str]:
    if not os.path.isdir(directory):
        return []
    stems = []
    for name in os.listdir(directory):
        stem, ext = os.path.splitext(name)
        if ext.lower() == ".csv" and os.path.isfile(os.path.join(directory, name)):
            stems.append(stem)
    return sorted(stems)


def unanalyzed_bills(bill_dir: str) -> list[str]:
    analyzed = set(_csv_stems(os.path.join(bill_dir, ANALYZED_DIR)))
    raw_dir = os.path.join(bill_dir, RAW_DIR)
    return [
        os.path.join(raw_dir, stem + ".csv")
        for stem in _csv_stems(raw_dir)
        if stem not in analyzed
    ]


def compute_summary(bill_dir: str) -> BillSummary:
    if not os.path.isdir(bill_dir):
        return BillSummary(bill_dir=bill_dir, dir_missing=True)
    return BillSummary(
        unanalyzed=len(unanalyzed_bills(bill_dir)),
        exportable=len(_csv_stems(os.path.join(bill_dir, ANALYZED_DIR))),
        bill_dir=bill_dir,
    )


def _pick_column(df: pd.DataFrame, candidates) -> str | None:
    normalized = {str(col).strip().lower(): col for col in df.columns}
    for name in candidates:
        col = normalized.get(name.lower())
        if col is not None:
            return col
    return None


def analyze_statement(df: pd.DataFrame) -> pd.DataFrame:
    """Per-category count and total of one statement."""
    amount_col = _pick_column(df, AMOUNT_COLUMNS)
    if amount_col is None:
        raise ValueError("statement has no amount column")

    amounts = pd.to_numeric(
        df[amount_col].astype(str).str.replace(r"[^0-9.\-]", "", regex=True),
        errors="coerce",
    )
    category_col = _pick_column(df, CATEGORY_COLUMNS)
    if category_col is None:
        categories = pd.Series(UNCATEGORIZED, index=df.index)
    else:
        categories = df[category_col].fillna(UNCATEGORIZED).astype(str).str.strip()
        categories = categories.replace("", UNCATEGORIZED)

    frame = pd.DataFrame({"category": categories, "amount": amounts}).dropna(
        subset=["amount"]
    )
    out = (
        frame.groupby("category", sort=True)["amount"]
        .agg(count="count", total="sum")
        .reset_index()
    )
    out["total"] = out["total"].round(2)
    return out


def analyze_bills(bill_dir: str) -> list[str]:
    """Analyze every statement that has no analysis yet; returns written paths."""
    pending = unanalyzed_bills(bill_dir)
    if not pending:
        return []

    out_dir = os.path.join(bill_dir, ANALYZED_DIR)
    os.makedirs(out_dir, exist_ok=True)

    written = []
    for path in pending:
        try:
            df = pd.read_csv(path)
            result = analyze_statement(df)
        except (OSError, ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            logger.warning("Skipping bill %s: %s", path, exc)
            continue
        stem = os.path.splitext(os.path.basename(path))[0]
        out_path = os.path.join(out_dir, stem + ".csv")
        result.to_csv(out_path, index=False)
        logger.info("Analyzed %s -> %s", path, out_path)
        written.append(out_path)
    return written


def export_reports(bill_dir: str) -> str | None:
    """Combine all analyses into one category x statement report."""
    analyzed_dir = os.path.join(bill_dir, ANALYZED_DIR)
    frames = []
    for stem in _csv_stems(analyzed_dir):
        path = os.path.join(analyzed_dir, stem + ".csv")
        try:
            df = pd.read_csv(path)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            logger.warning("Skipping analysis %s: %s", path, exc)
            continue
        if not {"category", "total"}.issubset(df.columns):
            logger.warning("Skipping analysis %s: missing columns", path)
            continue
        totals = pd.to_numeric(df["total"], errors="coerce")
        bad = int(totals.isna().sum())
        if bad:
            logger.warning("Dropping %d non-numeric totals from %s", bad, path)
        df = df.assign(total=totals).dropna(subset=["total"])
        if df.empty:
            continue
        frames.append(df.assign(bill=stem))

    if not frames:
        return None

    combined = pd.concat(frames, ignore_index=True)
    report = combined.pivot_table(
        index="category", columns="bill", values="total", aggfunc="sum", fill_value=0
    )
    report["total"] = report.sum(axis=1)
    report = report.sort_values("total", ascending=False).round(2)

    out_dir = os.path.join(bill_dir, REPORTS_DIR)
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, time.strftime("report-%Y%m%d-%H%M%S.csv"))
    report.to_csv(out_path)
    logger.info("Exported bill report %s", out_path)
    return out_path
