"""
Base abstract view class
"""
import curses
from abc import ABC, abstractmethod

from gitrail.utils.display import add_text, color_attr

KEY_ENTER = (10, 13, curses.KEY_ENTER)
KEY_ESC = 27
KEY_BACKSPACE = (8, 127, curses.KEY_BACKSPACE)


class BaseView(ABC):
    """Abstract base class for all views, each view draws into its own window"""

    title = ''

    def __init__(self, win):
        """
        Initialize a view

        Args:
            win: Curses window object
        """
        self.win = win
        self.max_lines, self.max_cols = win.getmaxyx()
        self.focused = False

    def resize(self, win):
        self.win = win
        self.max_lines, self.max_cols = win.getmaxyx()

    def refresh(self):
        """Redraw into the window, the caller flushes with curses.doupdate()"""
        self.max_lines, self.max_cols = self.win.getmaxyx()
        self.win.erase()
        self.draw()
        self.win.noutrefresh()

    @abstractmethod
    def draw(self):
        """Draw the view - must be implemented by subclasses"""
        pass

    def handle_key(self, key):
        """
        Handle key press

        Args:
            key: Key code

        Returns:
            tuple: (continue_program, switch_view, view_name)
        """
        return self._handle_specific_key(key)

    @abstractmethod
    def _handle_specific_key(self, key):
        """
        Handle view-specific keys - must be implemented by subclasses

        Args:
            key: Key code

        Returns:
            tuple: (continue_program, switch_view, view_name)
        """
        pass

    @property
    def body_height(self):
        """Lines inside the border"""
        return max(0, self.max_lines - 2)

    @property
    def body_width(self):
        return max(0, self.max_cols - 2)

    def handle_navigation_keys(self, key, move_function, page_size=None):
        """
        Handle common navigation keys

        Args:
            key: Key code
            move_function: Function to call for movement (takes delta as argument)
            page_size: Size of a page for page up/down (default: calculated from window)

        Returns:
            bool: True if key was handled, False otherwise
        """
        if page_size is None:
            page_size = max(1, self.body_height - 1)

        if key == ord('j') or key == curses.KEY_DOWN:
            move_function(1)
            return True
        elif key == ord('k') or key == curses.KEY_UP:
            move_function(-1)
            return True
        elif key == ord('d') or key == curses.KEY_NPAGE:
            move_function(page_size)
            return True
        elif key == ord('u') or key == curses.KEY_PPAGE:
            move_function(-page_size)
            return True

        return False

    def draw_frame(self, title=None):
        """Draw the border with the pane title, highlighted when focused"""
        attr = color_attr('cyan', bold=True) if self.focused else color_attr('white', dim=True)
        try:
            self.win.attron(attr)
            self.win.box()
            self.win.attroff(attr)
        except curses.error:
            # too small to draw a box
            pass
        title = title if title is not None else self.title
        if title:
            add_text(self.win, 0, 2, f" {title} ", attr, self.max_cols - 1)

    def draw_line(self, row, text, attr=0, x=0):
        """Write text on a body row inside the border"""
        if row < 0 or row >= self.body_height:
            return x + 1
        return add_text(self.win, row + 1, x + 1, text, attr, self.max_cols - 1)

    def draw_status(self, text, attr=None):
        """
        Draw status line at bottom of window

        Args:
            text: Status text
            attr: Curses attribute for styling
        """
        if attr is None:
            attr = color_attr('header')
        add_text(self.win, self.max_lines - 1, 0, text.ljust(self.max_cols), attr)


class ScrollState:
    """Cursor and scroll offset of a list shown in a pane"""

    def __init__(self):
        self.current_index = 0
        self.top_index = 0

    def move(self, delta, count, height):
        if count == 0:
            self.current_index = 0
            self.top_index = 0
            return
        self.current_index = max(0, min(count - 1, self.current_index + delta))
        self.ensure_visible(height)

    def ensure_visible(self, height):
        height = max(1, height)
        if self.current_index < self.top_index:
            self.top_index = self.current_index
        elif self.current_index >= self.top_index + height:
            self.top_index = self.current_index - height + 1
