import curses

from wcwidth import wcwidth


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    # control characters report -1; render them as nothing
    return max(0, w)


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def truncate(text: str, width: int) -> str:
    """Cut text to at most `width` terminal columns, keeping whole glyphs."""
    if width <= 0:
        return ""
    out = []
    used = 0
    for ch in text:
        cw = char_width(ch)
        if used + cw > width:
            break
        out.append(ch)
        used += cw
    return "".join(out)


def fit(text: str, width: int, align: str | None = None) -> str:
    """Truncate then pad to exactly `width` columns."""
    text = truncate(text, width)
    gap = max(0, width - display_width(text))
    if align == "right":
        return " " * gap + text
    if align == "center":
        left = gap // 2
        return " " * left + text + " " * (gap - left)
    return text + " " * gap


def safe_addstr(win, y, x, text, width, attr=0):
    if width <= 0:
        return
    try:
        win.addstr(y, x, truncate(text, width), attr)
    except curses.error:
        pass


def color_attr(pair: int) -> int:
    # color_pair raises before initscr (tests, tiny terminals)
    try:
        return curses.color_pair(pair)
    except curses.error:
        return 0
