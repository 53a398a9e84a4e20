"""
Loading view to display while loading commits
"""
from gitrail.utils.display import add_text, color_attr
from gitrail.views.base_view import BaseView


class LoadingView(BaseView):
    """View displayed while loading commits"""

    def __init__(self, win, message="Loading commits..."):
        """
        Initialize loading view

        Args:
            win: Curses window object
            message: Loading message to display
        """
        super().__init__(win)
        self.message = message

    def draw(self):
        """Draw the loading view"""
        x_pos = max(0, self.max_cols // 2 - len(self.message) // 2)
        add_text(self.win, self.max_lines // 2, x_pos, self.message, color_attr('white'))

    def _handle_specific_key(self, key):
        if key == ord('q'):
            return False, False, None
        # Ignore all other keys while loading
        return True, False, None
