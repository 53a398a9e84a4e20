"""
Full screen diff of one working tree file
"""
import curses

from gitrail.utils.display import DIFF_COLORS, color_attr
from gitrail.views.base_view import KEY_ENTER, KEY_ESC, BaseView


class FileDiffView(BaseView):
    """Scrollable diff opened from the status pane"""

    def __init__(self, win, path, status, lines):
        """
        Initialize file diff view

        Args:
            win: Curses window object
            path (str): File the diff belongs to
            status (str): Working tree status of the file
            lines (list): (kind, text) diff lines
        """
        super().__init__(win)
        self.title = f"{path} ({status})"
        self.lines = lines
        self.focused = True
        self.top_index = 0
        self.h_scroll = 0

    def _scroll(self, delta):
        self.top_index = max(0, min(self.top_index + delta, len(self.lines) - 1))

    def draw(self):
        self.draw_frame()
        if not self.lines:
            self.draw_line(0, "No changes to show", color_attr('white'))
            return
        for row in range(self.body_height):
            idx = self.top_index + row
            if idx >= len(self.lines):
                break
            kind, text = self.lines[idx]
            attr = color_attr(DIFF_COLORS.get(kind, 'white'), bold=kind == 'file')
            self.draw_line(row, text[self.h_scroll:], attr)

    def _handle_specific_key(self, key):
        if self.handle_navigation_keys(key, self._scroll):
            return True, False, None
        if key == KEY_ESC or key in KEY_ENTER:
            return True, True, "previous"
        elif key == ord('g'):
            self.top_index = 0
        elif key == ord('G'):
            self.top_index = max(0, len(self.lines) - self.body_height)
        elif key == ord('h') or key == curses.KEY_LEFT:
            self.h_scroll = max(0, self.h_scroll - 5)
        elif key == ord('l') or key == curses.KEY_RIGHT:
            self.h_scroll += 5
        return True, False, None
