"""
Working tree status pane and the bottom status bar
"""
from gitrail.config import UI_SETTINGS
from gitrail.utils.display import add_text, color_attr
from gitrail.utils.log import LEVEL_ERROR, LEVEL_SUCCESS, LEVEL_WARNING, Log
from gitrail.views.base_view import KEY_ENTER, BaseView, ScrollState

STATUS_MARKS = {
    'staged': ('+', 'green'),
    'modified': ('M', 'yellow'),
    'deleted': ('D', 'red'),
    'untracked': ('?', 'grey'),
}

LEVEL_COLORS = {
    LEVEL_ERROR: 'error',
    LEVEL_WARNING: 'warning',
    LEVEL_SUCCESS: 'success',
}


class StatusView(BaseView):
    """Changed files of the working tree"""

    title = "Git Status"

    def __init__(self, win):
        super().__init__(win)
        self.entries = []
        self.scroll = ScrollState()

    def set_entries(self, entries):
        self.entries = list(entries)
        self.scroll.move(0, len(self.entries), self.body_height)

    @property
    def selected_entry(self):
        if not self.entries:
            return None
        return self.entries[self.scroll.current_index]

    def _move(self, delta):
        self.scroll.move(delta, len(self.entries), self.body_height)

    def draw(self):
        self.draw_frame(f"{self.title} ({len(self.entries)})" if self.entries else None)
        if not self.entries:
            self.draw_line(0, "Working tree clean", color_attr('grey'))
            return
        self.scroll.ensure_visible(self.body_height)
        for row in range(self.body_height):
            idx = self.scroll.top_index + row
            if idx >= len(self.entries):
                break
            path, status = self.entries[idx]
            mark, color = STATUS_MARKS.get(status, (' ', 'white'))
            selected = self.focused and idx == self.scroll.current_index
            self.draw_line(row, f"{mark} {path}".ljust(self.body_width), color_attr(color, selected))

    def _handle_specific_key(self, key):
        if self.handle_navigation_keys(key, self._move):
            return True, False, None
        if key in KEY_ENTER and self.entries:
            return True, True, "file_diff"
        return True, False, None


class StatusBar(BaseView):
    """One line at the bottom: branch, upstream distance and transient messages"""

    def __init__(self, win):
        super().__init__(win)
        self.branch = ''
        self.ahead = 0
        self.behind = 0
        self.has_upstream = False
        self.user_name = None
        self.user_email = None

    def set_branch(self, branch, ahead=0, behind=0, has_upstream=False):
        self.branch = branch
        self.ahead = ahead
        self.behind = behind
        self.has_upstream = has_upstream

    def branch_text(self):
        text = f" {self.branch}"
        parts = []
        if self.ahead:
            parts.append(f"↑{self.ahead}")
        if self.behind:
            parts.append(f"↓{self.behind}")
        if parts:
            text += f" [{' '.join(parts)}]"
        elif self.has_upstream:
            text += " [synced]"
        return text

    def set_user(self, name, email):
        self.user_name = name
        self.user_email = email

    def user_text(self):
        """Configured commit author"""
        if not self.user_name and not self.user_email:
            return "user not set"
        name = self.user_name or "(no name)"
        return f"{name} <{self.user_email}>" if self.user_email else name

    def draw(self):
        message, level = Log.current_status(UI_SETTINGS['status_message_time'])
        if message:
            self.draw_status(f" {message}", color_attr(LEVEL_COLORS.get(level, 'header')))
            return
        self.draw_status(f"{self.branch_text()} | {self.user_text()}")
        hint = "Tab: focus  r: refresh  H: help  q: quit "
        add_text(self.win, self.max_lines - 1, max(0, self.max_cols - len(hint) - 1), hint,
                 color_attr('header'))

    def _handle_specific_key(self, key):
        return True, False, None
