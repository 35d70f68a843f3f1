import pytest

from md_table import (
    TableGrid,
    load_table_grid,
    parse_markdown_table,
    split_row,
    to_markdown,
)


TODO_MD = """# TODO List

| 任务 | 状态 | 优先级 |
|------|------|--------|
| 学习 | 进行中 | 高 |
| 完成项目 | 未开始 | 中 |
| 整理文档 | 未开始 | 低 |
"""


@pytest.mark.parametrize(
    "line, expected",
    [
        ("| a | b |", ["a", "b"]),
        ("  |a|b|  ", ["a", "b"]),
        ("| a | b", ["a", "b"]),
        (r"| a \| b | c |", ["a | b", "c"]),
        ("| | x |", ["", "x"]),
        ("no pipes here", None),
        ("a | b |", None),
        ("", None),
    ],
)
def test_split_row(line, expected):
    assert split_row(line) == expected


def test_parse_basic_table():
    grid = parse_markdown_table(TODO_MD, source_path="TODO.md")
    assert grid.header == ["任务", "状态", "优先级"]
    assert grid.rows == [
        ["学习", "进行中", "高"],
        ["完成项目", "未开始", "中"],
        ["整理文档", "未开始", "低"],
    ]
    assert grid.row_count == 3
    assert grid.col_count == 3
    assert grid.line_numbers == [5, 6, 7]
    assert grid.source_path == "TODO.md"
    assert grid.load_error is False


def test_parse_pads_short_rows_and_truncates_long_rows():
    text = "| a | b | c |\n|---|---|---|\n| 1 |\n| 1 | 2 | 3 | 4 |\n"
    grid = parse_markdown_table(text)
    assert grid.rows == [["1", "", ""], ["1", "2", "3"]]
    assert all(len(row) == grid.col_count for row in grid.rows)


def test_parse_stops_at_first_non_table_line():
    text = "| a | b |\n|---|---|\n| 1 | 2 |\n\n| 3 | 4 |\n"
    grid = parse_markdown_table(text)
    assert grid.rows == [["1", "2"]]


def test_parse_drops_malformed_body_rows():
    text = "| a | b |\n|---|---|\n|\n| 1 | 2 |\n|---|---|\n| 3 | 4 |\n"
    grid = parse_markdown_table(text)
    assert grid.rows == [["1", "2"], ["3", "4"]]
    assert grid.line_numbers == [4, 6]


def test_parse_requires_separator_after_header():
    text = "| a | b |\n| 1 | 2 |\n"
    grid = parse_markdown_table(text)
    assert grid.header is None
    assert grid.rows == []
    assert grid.load_error is False


def test_parse_reads_alignment():
    text = "| a | b | c | d |\n|:---|---:|:-:|---|\n| 1 | 2 | 3 | 4 |\n"
    grid = parse_markdown_table(text)
    assert grid.alignments == ["left", "right", "center", None]


def test_parse_keeps_escaped_pipes_as_content():
    text = "| cmd | note |\n|---|---|\n| a \\| b | ok |\n"
    grid = parse_markdown_table(text)
    assert grid.rows == [["a | b", "ok"]]


def test_parse_is_deterministic():
    assert parse_markdown_table(TODO_MD) == parse_markdown_table(TODO_MD)


def test_to_markdown_round_trips_cells():
    grid = TableGrid(
        header=["name", "value"],
        rows=[["pipe | inside", "1"], ["", "空"]],
        alignments=["left", "right"],
    )
    parsed = parse_markdown_table(to_markdown(grid))
    assert parsed.header == grid.header
    assert parsed.rows == grid.rows
    assert parsed.alignments == grid.alignments


def test_to_markdown_of_empty_grid_is_empty():
    assert to_markdown(TableGrid()) == ""


def test_load_missing_file_sets_load_error(tmp_path):
    path = tmp_path / "absent.md"
    grid = load_table_grid(str(path))
    assert grid.load_error is True
    assert grid.rows == []
    assert grid.source_path == str(path)


def test_load_directory_sets_load_error(tmp_path):
    assert load_table_grid(str(tmp_path)).load_error is True


def test_load_reads_utf8_file(tmp_path):
    path = tmp_path / "TODO.md"
    path.write_text(TODO_MD, encoding="utf-8")
    grid = load_table_grid(str(path))
    assert grid.load_error is False
    assert grid.rows[0] == ["学习", "进行中", "高"]
