import curses


class ScreenLayout:
    HEADER_H = 3
    HELP_H = 3

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: header band, content band (rest), help/status band
        self.header_h = min(self.HEADER_H, max(1, self.H // 3))
        self.help_h = min(self.HELP_H, max(1, self.H // 3))
        self.content_h = max(1, self.H - self.header_h - self.help_h)

        self.header_win = curses.newwin(self.header_h, self.W, 0, 0)
        self.header_win.leaveok(True)

        self.content_win = curses.newwin(self.content_h, self.W, self.header_h, 0)
        # content never owns the cursor
        self.content_win.leaveok(True)

        self.help_win = curses.newwin(
            self.help_h, self.W, self.header_h + self.content_h, 0
        )
        self.help_win.leaveok(True)
