"""
Popup dialogs: confirmation, text input and list selection
"""
import curses
import textwrap

from gitrail.utils.display import color_attr
from gitrail.views.base_view import KEY_BACKSPACE, KEY_ENTER, KEY_ESC, BaseView, ScrollState

DIALOG_WIDTH = 60


def centered_window(stdscr, height, width):
    max_y, max_x = stdscr.getmaxyx()
    height = max(3, min(height, max_y))
    width = max(10, min(width, max_x))
    return curses.newwin(height, width, max(0, (max_y - height) // 2), max(0, (max_x - width) // 2))


class DialogView(BaseView):
    """
    Base of the popups

    handle_key reports the outcome as view name 'dialog:ok' or
    'dialog:cancel', the result is in self.value.
    """

    def __init__(self, stdscr, title, body_lines, extra_lines=2):
        self.body_lines = []
        for line in body_lines:
            self.body_lines.extend(textwrap.wrap(line, DIALOG_WIDTH - 4) or [''])
        win = centered_window(stdscr, len(self.body_lines) + extra_lines + 2, DIALOG_WIDTH)
        super().__init__(win)
        self.title = title
        self.focused = True
        self.value = None

    def draw(self):
        self.draw_frame()
        for row, line in enumerate(self.body_lines):
            self.draw_line(row, ' ' + line, color_attr('white'))

    def _done(self, value):
        self.value = value
        return True, True, "dialog:ok"

    def _cancel(self):
        self.value = None
        return True, True, "dialog:cancel"


class ConfirmDialog(DialogView):
    """Yes/no question"""

    def __init__(self, stdscr, message, title="Confirm Action"):
        super().__init__(stdscr, title, message.split('\n'))

    def draw(self):
        super().draw()
        self.draw_line(len(self.body_lines) + 1, " y: confirm   n/Esc: cancel", color_attr('yellow', bold=True))

    def _handle_specific_key(self, key):
        if key in (ord('y'), ord('Y')) or key in KEY_ENTER:
            return self._done(True)
        if key in (ord('n'), ord('N'), KEY_ESC):
            return self._cancel()
        return True, False, None


class InputDialog(DialogView):
    """Single line text entry"""

    def __init__(self, stdscr, prompt, title=None, text=''):
        super().__init__(stdscr, title or prompt, [f"{prompt}:"])
        self.text = text

    def draw(self):
        super().draw()
        width = self.body_width - 3
        visible = self.text[-width:] if width > 0 else ''
        self.draw_line(len(self.body_lines), ' ' + visible + '_', color_attr('white', bold=True))
        self.draw_line(len(self.body_lines) + 1, " Enter: ok   Esc: cancel", color_attr('grey'))

    def _handle_specific_key(self, key):
        if key in KEY_ENTER:
            return self._done(self.text.strip()) if self.text.strip() else self._cancel()
        if key == KEY_ESC:
            return self._cancel()
        if key in KEY_BACKSPACE:
            self.text = self.text[:-1]
        elif 32 <= key <= 126 or key > 159:
            self.text += chr(key)
        return True, False, None


class SelectDialog(DialogView):
    """Pick one entry of a short list"""

    def __init__(self, stdscr, title, options):
        self.options = list(options)
        super().__init__(stdscr, title, [], extra_lines=min(len(self.options), 10) + 1)
        self.scroll = ScrollState()

    def draw(self):
        self.draw_frame()
        height = self.body_height - 1
        self.scroll.ensure_visible(height)
        for row in range(height):
            idx = self.scroll.top_index + row
            if idx >= len(self.options):
                break
            selected = idx == self.scroll.current_index
            prefix = '> ' if selected else '  '
            self.draw_line(row, f"{prefix}{self.options[idx]}".ljust(self.body_width),
                           color_attr('white', selected))
        self.draw_line(height, " Enter: select   Esc: cancel", color_attr('grey'))

    def _handle_specific_key(self, key):
        if self.handle_navigation_keys(key, lambda delta: self.scroll.move(delta, len(self.options),
                                                                           self.body_height - 1)):
            return True, False, None
        if key in KEY_ENTER and self.options:
            return self._done(self.options[self.scroll.current_index])
        if key == KEY_ESC:
            return self._cancel()
        return True, False, None
