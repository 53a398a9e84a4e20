"""
Commit details pane: header, message and diff of the selected commit
"""
import collections
import curses
import textwrap

from gitrail.config import UI_SETTINGS
from gitrail.utils.display import DIFF_COLORS, add_text, color_attr
from gitrail.views.base_view import KEY_BACKSPACE, KEY_ENTER, KEY_ESC, BaseView


class DetailsView(BaseView):
    """Scrollable text of the selected commit"""

    title = "Commit Details"

    def __init__(self, win, repository):
        """
        Initialize details view

        Args:
            win: Curses window object
            repository: Repository instance
        """
        super().__init__(win)
        self.repository = repository
        self.commit_id = None
        self.content = []
        self.top_index = 0
        self.h_scroll = 0
        self.expanded = False
        self.search_string = ""
        self.search_active = False
        self.search_results = []
        self._cache = collections.OrderedDict()

    def show_commit(self, commit_id):
        """Load details of a commit, the most recently shown commits stay cached"""
        if commit_id == self.commit_id:
            return
        self.commit_id = commit_id
        self.top_index = 0
        self.h_scroll = 0
        self.search_results = []
        if commit_id is None:
            self.content = []
            return
        if commit_id in self._cache:
            self._cache.move_to_end(commit_id)
        else:
            self._cache[commit_id] = self.repository.commit_details(commit_id) + \
                self.repository.commit_diff(commit_id)
            # least recently shown commits go first
            while len(self._cache) > UI_SETTINGS['details_cache_size']:
                self._cache.popitem(last=False)
        self.content = self._cache[commit_id]

    def clear_cache(self):
        self._cache.clear()
        self.commit_id = None

    def display_lines(self):
        """Content with message lines wrapped to the pane width"""
        width = max(10, self.body_width - 4)
        lines = []
        for kind, text in self.content:
            if kind == 'message' and text:
                lines.extend((kind, '    ' + part) for part in textwrap.wrap(text, width) or [''])
            elif kind == 'message':
                lines.append((kind, ''))
            else:
                lines.append((kind, text))
        return lines

    def draw(self):
        self.draw_frame(f"{self.title} (expanded)" if self.expanded else None)
        if not self.content:
            self.draw_line(0, "No commit selected", color_attr('white'))
            return

        lines = self.display_lines()
        self.top_index = max(0, min(self.top_index, len(lines) - 1))
        for row in range(self.body_height):
            idx = self.top_index + row
            if idx >= len(lines):
                break
            kind, text = lines[idx]
            attr = color_attr(DIFF_COLORS.get(kind, 'white'), bold=kind in ('commit', 'file'))
            if idx in self.search_results:
                attr |= curses.A_REVERSE
            self.draw_line(row, text[self.h_scroll:], attr)

        if self.search_active:
            add_text(self.win, self.max_lines - 1, 2, f" /{self.search_string} ", color_attr('header'),
                     self.max_cols - 1)

    def _scroll(self, delta):
        self.top_index = max(0, self.top_index + delta)

    def _perform_search(self):
        term = self.search_string.lower()
        lines = self.display_lines()
        self.search_results = [i for i, (_, text) in enumerate(lines) if term and term in text.lower()]
        self._next_search_result()

    def _next_search_result(self, backwards=False):
        if not self.search_results:
            return
        if backwards:
            candidates = [i for i in self.search_results if i < self.top_index]
            self.top_index = candidates[-1] if candidates else self.search_results[-1]
        else:
            candidates = [i for i in self.search_results if i > self.top_index]
            self.top_index = candidates[0] if candidates else self.search_results[0]

    def _handle_search_input(self, key):
        if key == KEY_ESC:
            self.search_active = False
        elif key in KEY_ENTER:
            self.search_active = False
            self._perform_search()
        elif key in KEY_BACKSPACE:
            self.search_string = self.search_string[:-1]
        elif 32 <= key <= 126:
            self.search_string += chr(key)
        return True, False, None

    def _handle_specific_key(self, key):
        if self.search_active:
            return self._handle_search_input(key)
        if self.handle_navigation_keys(key, self._scroll):
            return True, False, None
        if key in KEY_ENTER:
            self.expanded = not self.expanded
            return True, True, "layout"
        elif key == KEY_ESC and self.expanded:
            self.expanded = False
            return True, True, "layout"
        elif key == ord('g'):
            self.top_index = 0
        elif key == ord('G'):
            self.top_index = max(0, len(self.display_lines()) - self.body_height)
        elif key == ord('h') or key == curses.KEY_LEFT:
            self.h_scroll = max(0, self.h_scroll - 5)
        elif key == ord('l') or key == curses.KEY_RIGHT:
            self.h_scroll += 5
        elif key == ord('/'):
            self.search_active = True
            self.search_string = ""
        elif key == ord('n'):
            self._next_search_result()
        elif key == ord('N'):
            self._next_search_result(backwards=True)
        return True, False, None
