import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_SEPARATOR_CELL = re.compile(r"^:?-+:?$")


@dataclass
class TableGrid:
    header: list[str] | None = None
    rows: list[list[str]] = field(default_factory=list)
    alignments: list[str | None] = field(default_factory=list)
    # 1-based source line of each data row
    line_numbers: list[int] = field(default_factory=list)
    source_path: str | None = None
    load_error: bool = False

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        if self.header is not None:
            return len(self.header)
        return len(self.rows[0]) if self.rows else 0


def split_row(line: str) -> list[str] | None:
    """Split one pipe-table line into stripped cells.

    Returns None when the line is not a pipe row. A backslash-escaped pipe
    stays in the cell as a literal ``|``.
    """
    stripped = line.strip()
    if not stripped.startswith("|"):
        return None

    cells: list[str] = []
    current: list[str] = []
    i = 1
    n = len(stripped)
    while i < n:
        ch = stripped[i]
        if ch == "\\" and i + 1 < n and stripped[i + 1] == "|":
            current.append("|")
            i += 2
            continue
        if ch == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1

    tail = "".join(current).strip()
    if tail:
        # row without a closing pipe
        cells.append(tail)
    return cells


def _separator_alignments(cells: list[str] | None) -> list[str | None] | None:
    if not cells:
        return None
    aligns: list[str | None] = []
    for cell in cells:
        token = cell.replace(" ", "")
        if not _SEPARATOR_CELL.match(token):
            return None
        if token.startswith(":") and token.endswith(":"):
            aligns.append("center")
        elif token.endswith(":"):
            aligns.append("right")
        elif token.startswith(":"):
            aligns.append("left")
        else:
            aligns.append(None)
    return aligns


def _normalize(cells: list[str], width: int) -> list[str]:
    if len(cells) < width:
        return cells + [""] * (width - len(cells))
    return cells[:width]


def parse_markdown_table(text: str, source_path: str | None = None) -> TableGrid:
    lines = text.splitlines()

    start = None
    header = None
    aligns = None
    for i in range(len(lines) - 1):
        cells = split_row(lines[i])
        if not cells:
            continue
        aligns = _separator_alignments(split_row(lines[i + 1]))
        if aligns is None:
            continue
        header = cells
        start = i + 2
        break

    if start is None or header is None:
        return TableGrid(source_path=source_path)

    width = len(header)
    aligns = _normalize(aligns, width)

    rows: list[list[str]] = []
    line_numbers: list[int] = []
    dropped = 0
    for idx in range(start, len(lines)):
        cells = split_row(lines[idx])
        if cells is None:
            break
        if not cells or _separator_alignments(cells) is not None:
            dropped += 1
            continue
        rows.append(_normalize(cells, width))
        line_numbers.append(idx + 1)

    if dropped:
        logger.debug("Dropped %d malformed table rows from %s", dropped, source_path)

    return TableGrid(
        header=header,
        rows=rows,
        alignments=aligns,
        line_numbers=line_numbers,
        source_path=source_path,
    )


def load_table_grid(path: str) -> TableGrid:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as exc:
        logger.info("Table source unavailable %s: %s", path, exc)
        return TableGrid(source_path=path, load_error=True)
    return parse_markdown_table(text, source_path=path)


def _escape(cell: str) -> str:
    return cell.replace("|", "\\|")


def to_markdown(grid: TableGrid) -> str:
    if grid.header is None:
        return ""
    width = len(grid.header)
    aligns = _normalize(list(grid.alignments), width)

    seps = []
    for align in aligns:
        if align == "center":
            seps.append(":---:")
        elif align == "right":
            seps.append("---:")
        elif align == "left":
            seps.append(":---")
        else:
            seps.append("---")

    out = ["| " + " | ".join(_escape(c) for c in grid.header) + " |"]
    out.append("|" + "|".join(seps) + "|")
    for row in grid.rows:
        out.append("| " + " | ".join(_escape(c) for c in row) + " |")
    return "\n".join(out) + "\n"
