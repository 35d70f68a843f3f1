import curses
import functools
import logging
import time

import async_slot
from app_state import (
    BILL,
    CYBER,
    MENU,
    MENU_ITEMS,
    MENU_TITLES,
    TODO,
    BillView,
    CyberView,
    MainMenu,
    TodoView,
)
from async_slot import AsyncSlot
from bill_pane import BillPane
from status_bar import render_status
from table_pane import MISSING_FILE_TEXT, TablePane
from text_width import fit, safe_addstr
from weather import fetch_weather, format_report

logger = logging.getLogger(__name__)

APP_NAME = "Jeek!"
MOTTO = "Exist before meaning, feel yourself, embrace imperfection."

MENU_HELP_TEXT = "jk -- move, Enter -- select, q -- exit"
HELP_LINES = [
    "Menu:  j/k or arrows -- move, 1-5 -- jump, Enter -- open, q -- exit",
    "Table: j/k -- row, h/l -- column, e -- edit in editor, r -- reload",
    "Bill:  a -- analyze bills, o -- export report, r -- reload",
    "Sub-views: q or Esc -- back to menu; Ctrl+C / Ctrl+X -- exit anywhere",
]

WEATHER_NOT_FETCHED = "not fetched"
WEATHER_FETCHING = "fetching…"

_ARROWS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
}


def key_name(ch):
    if ch in (3, 24):  # Ctrl+C / Ctrl+X
        return "quit"
    if ch in (10, 13, curses.KEY_ENTER):
        return "enter"
    if ch == 27:
        return "esc"
    if ch in _ARROWS:
        return _ARROWS[ch]
    if isinstance(ch, int) and 32 <= ch < 127:
        return chr(ch)
    return None


def _build_routes():
    routes = {
        (MENU, "j"): ("menu_down", MENU),
        (MENU, "down"): ("menu_down", MENU),
        (MENU, "k"): ("menu_up", MENU),
        (MENU, "up"): ("menu_up", MENU),
        (MENU, "enter"): ("menu_confirm", None),
        (MENU, "q"): ("exit", None),
        (MENU, "esc"): ("exit", None),
    }
    for i in range(len(MENU_ITEMS)):
        routes[(MENU, str(i + 1))] = ("menu_select", MENU)

    for kind in (TODO, CYBER):
        for key, direction in (
            ("j", "down"),
            ("k", "up"),
            ("h", "left"),
            ("l", "right"),
            ("down", "down"),
            ("up", "up"),
            ("left", "left"),
            ("right", "right"),
        ):
            routes[(kind, key)] = (f"table_{direction}", kind)
        routes[(kind, "e")] = ("table_edit", kind)
        routes[(kind, "r")] = ("table_reload", kind)

    routes[(BILL, "a")] = ("bill_analyze", BILL)
    routes[(BILL, "o")] = ("bill_export", BILL)
    routes[(BILL, "r")] = ("bill_reload", BILL)

    for kind in (TODO, CYBER, BILL):
        routes[(kind, "q")] = ("back", MENU)
        routes[(kind, "esc")] = ("back", MENU)
    return routes


# (view kind, key name) -> (action, next view kind)
ROUTES = _build_routes()

# menu item -> (action, next view kind) for Enter
CONFIRM_ROUTES = {
    "Todo": ("enter_view", TODO),
    "Cyber": ("enter_view", CYBER),
    "Bill": ("enter_view", BILL),
    "Weather": ("weather_trigger", MENU),
    "Help": ("toggle_help", MENU),
}


def weather_text(slot: AsyncSlot) -> str:
    if slot.state == async_slot.PENDING:
        return WEATHER_FETCHING
    if slot.state == async_slot.READY:
        return format_report(slot.value)
    if slot.state == async_slot.FAILED:
        return f"error: {slot.error}"
    return WEATHER_NOT_FETCHED


class Dashboard:
    def __init__(
        self,
        config,
        editor=None,
        weather_fetch=None,
        bill_analyzer=None,
        bill_exporter=None,
    ):
        self.config = config
        self.editor = editor
        self.bill_analyzer = bill_analyzer
        self.bill_exporter = bill_exporter

        if weather_fetch is None:
            weather_fetch = functools.partial(
                fetch_weather,
                config.get("WEATHER_LOCATION", ""),
                config.get("WEATHER_TIMEOUT_SECONDS", 5.0),
            )
        # the menu and its weather slot live for the whole process
        self.menu = MainMenu(weather=AsyncSlot(weather_fetch, name="weather"))
        self.state = self.menu
        self._views = {MENU: self.menu}

        self.status_msg = None
        self.status_msg_until = 0

    # ---------------- state ----------------

    @property
    def kind(self) -> str:
        return self.state.kind

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _view_for(self, kind):
        view = self._views.get(kind)
        if view is not None:
            return view

        if kind == TODO:
            view = TodoView(
                TablePane(self.config["TODO_FILE_PATH"], MENU_TITLES["Todo"], self.editor)
            )
        elif kind == CYBER:
            view = CyberView(
                TablePane(self.config["CYBER_FILE_PATH"], MENU_TITLES["Cyber"], self.editor)
            )
        elif kind == BILL:
            view = BillView(
                BillPane(
                    self.config["BILL_DIR"],
                    analyzer=self.bill_analyzer,
                    exporter=self.bill_exporter,
                )
            )
        else:
            raise ValueError(f"unknown view kind: {kind!r}")
        self._views[kind] = view
        logger.debug("Constructed %s view", kind)
        return view

    # ---------------- input ----------------

    def handle_key(self, ch) -> bool:
        """Route one key. Returns False when the app should exit."""
        name = key_name(ch)
        if name is None:
            return True
        if name == "quit":
            return False

        route = ROUTES.get((self.state.kind, name))
        if route is None:
            return True

        action, next_kind = route
        if action == "menu_confirm":
            action, next_kind = CONFIRM_ROUTES[self.menu.selected_item]
        if action == "exit":
            return False

        handler = getattr(self, f"_do_{action}")
        handler(name)

        if next_kind is not None and next_kind != self.state.kind:
            self.state = self._view_for(next_kind)
        return True

    def tick(self):
        self.menu.weather.poll()

    # ---------------- actions ----------------

    def _do_menu_down(self, _key):
        self.menu.selected = (self.menu.selected + 1) % len(MENU_ITEMS)

    def _do_menu_up(self, _key):
        self.menu.selected = (self.menu.selected - 1) % len(MENU_ITEMS)

    def _do_menu_select(self, key):
        self.menu.selected = int(key) - 1

    def _do_enter_view(self, _key):
        self.menu.show_help = False

    def _do_weather_trigger(self, _key):
        if not self.menu.weather.trigger():
            self._set_status("Weather request already in flight", 2)

    def _do_toggle_help(self, _key):
        self.menu.show_help = not self.menu.show_help

    def _do_back(self, _key):
        pass

    def _table_move(self, direction):
        self.state.pane.move_cursor(direction)

    def _do_table_down(self, _key):
        self._table_move("down")

    def _do_table_up(self, _key):
        self._table_move("up")

    def _do_table_left(self, _key):
        self._table_move("left")

    def _do_table_right(self, _key):
        self._table_move("right")

    def _do_table_edit(self, _key):
        msg = self.state.pane.edit()
        if msg:
            self._set_status(msg, 3)

    def _do_table_reload(self, _key):
        pane = self.state.pane
        pane.reload()
        self._set_status(MISSING_FILE_TEXT if pane.load_error else "Reloaded", 2)

    def _do_bill_analyze(self, _key):
        self._set_status(self.state.pane.analyze(), 4)

    def _do_bill_export(self, _key):
        self._set_status(self.state.pane.export(), 6)

    def _do_bill_reload(self, _key):
        self.state.pane.reload()
        self._set_status("Reloaded", 2)

    # ---------------- rendering ----------------

    def _draw_header(self, win):
        win.erase()
        h, w = win.getmaxyx()
        try:
            win.box()
        except curses.error:
            pass
        inner_w = max(0, w - 2)
        y = min(1, h - 1)
        if self.state.kind == MENU:
            safe_addstr(win, 0, 2, " Hello ", w - 4)
            text = fit(f"{APP_NAME}  {MOTTO}", inner_w, "center")
            safe_addstr(win, y, 1, text, inner_w, curses.A_BOLD)
        else:
            title = self.state.pane.title
            safe_addstr(win, 0, 2, f" {title} ", w - 4)
            safe_addstr(win, y, 1, fit(f"{title} List", inner_w, "center"), inner_w, curses.A_BOLD)
        win.refresh()

    def _draw_menu(self, win):
        win.erase()
        h, w = win.getmaxyx()
        try:
            win.box()
        except curses.error:
            pass
        safe_addstr(win, 0, 2, " Menu ", w - 4)
        inner_w = max(0, w - 2)
        # last inner row is reserved for weather
        weather_y = max(1, h - 2)

        y = 1
        for i, item in enumerate(MENU_ITEMS):
            if y >= weather_y:
                break
            selected = i == self.menu.selected
            marker = "→ " if selected else "  "
            attr = curses.A_REVERSE | curses.A_BOLD if selected else 0
            safe_addstr(win, y, 1, f"{marker}{i + 1} : {MENU_TITLES[item]} ", inner_w, attr)
            y += 1

        if self.menu.show_help:
            y += 1
            for line in HELP_LINES:
                if y >= weather_y:
                    break
                safe_addstr(win, y, 2, line, inner_w - 1)
                y += 1

        safe_addstr(
            win, weather_y, 1, f"Weather: {weather_text(self.menu.weather)}", inner_w
        )
        win.refresh()

    def _draw_help(self, win):
        win.erase()
        h, w = win.getmaxyx()
        try:
            win.box()
        except curses.error:
            pass
        inner_w = max(0, w - 2)
        if self.state.kind == MENU:
            safe_addstr(win, 0, 2, " Message ", w - 4)
            context = {"help_text": MENU_HELP_TEXT}
        else:
            safe_addstr(win, 0, 2, " Help ", w - 4)
            pane = self.state.pane
            context = {"help_text": pane.HELP_TEXT}
            if isinstance(pane, TablePane):
                context["position"] = pane.position_text()
        context["status_msg"] = self.status_msg
        context["status_until"] = self.status_msg_until
        safe_addstr(win, min(1, h - 1), 1, render_status(context, inner_w), inner_w)
        win.refresh()

    def render(self, layout):
        self._draw_header(layout.header_win)
        if self.state.kind == MENU:
            self._draw_menu(layout.content_win)
        else:
            self.state.pane.draw(layout.content_win, active=True)
        self._draw_help(layout.help_win)
