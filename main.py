import curses
import logging
import os
import sys

import config_paths
from bill_ledger import ANALYZED_DIR, RAW_DIR, REPORTS_DIR

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

__version__ = "0.1.0"

USAGE = (
    "jeek - terminal dashboard for todo, cyber resources, bills and weather\n\n"
    "Usage:\n  jeek\n  jeek --init\n  jeek -v\n"
)

DEFAULT_TODO = """# TODO List

| 任务 | 状态 | 优先级 |
|------|------|--------|
| 学习 | 进行中 | 高 |
| 完成项目 | 未开始 | 中 |
| 整理文档 | 未开始 | 低 |
"""

DEFAULT_CYBER = """# Cyber Resource

| 名称 | 链接 | 备注 |
|------|------|------|
| Python Docs | https://docs.python.org/3/ | 标准库 |
"""

logger = logging.getLogger("jeek")


def _setup_logging():
    try:
        config_paths.ensure_config_dirs()
    except OSError:
        return
    logging.basicConfig(
        filename=config_paths.LOG_PATH,
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _write_if_missing(path, content):
    if os.path.exists(path):
        print(f"exists  {path}")
        return
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    print(f"created {path}")


def init_workspace(cfg):
    written = config_paths.write_default_config()
    if written:
        print(f"created {written}")
    else:
        print(f"exists  {config_paths.CONFIG_JSON}")
    _write_if_missing(cfg["TODO_FILE_PATH"], DEFAULT_TODO)
    _write_if_missing(cfg["CYBER_FILE_PATH"], DEFAULT_CYBER)
    for sub in (RAW_DIR, ANALYZED_DIR, REPORTS_DIR):
        os.makedirs(os.path.join(cfg["BILL_DIR"], sub), exist_ok=True)
    print(f"bill dir {cfg['BILL_DIR']}")


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args or "--help" in args:
        print(USAGE)
        return

    _setup_logging()
    cfg = config_paths.load_config()

    if "--init" in args:
        try:
            init_workspace(cfg)
        except OSError as exc:
            print(f"Init failed: {exc}", file=sys.stderr)
            sys.exit(1)
        return

    def curses_main(stdscr):
        Orchestrator(stdscr, cfg).run()

    logger.info("Starting jeek %s", __version__)
    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
