from dataclasses import dataclass, field
from typing import Union

from async_slot import AsyncSlot
from bill_pane import BillPane
from table_pane import TablePane

MENU = "menu"
TODO = "todo"
CYBER = "cyber"
BILL = "bill"

MENU_ITEMS = ("Todo", "Cyber", "Bill", "Weather", "Help")
MENU_TITLES = {
    "Todo": "TODO",
    "Cyber": "CYBER RESOURCE",
    "Bill": "BILL",
    "Weather": "WEATHER",
    "Help": "HELP",
}


@dataclass
class MainMenu:
    weather: AsyncSlot
    selected: int = 0
    show_help: bool = False
    kind: str = field(default=MENU, init=False)

    @property
    def selected_item(self) -> str:
        return MENU_ITEMS[self.selected]


@dataclass
class TodoView:
    pane: TablePane
    kind: str = field(default=TODO, init=False)


@dataclass
class CyberView:
    pane: TablePane
    kind: str = field(default=CYBER, init=False)


@dataclass
class BillView:
    pane: BillPane
    kind: str = field(default=BILL, init=False)


AppState = Union[MainMenu, TodoView, CyberView, BillView]
