"""
Help view for displaying keyboard shortcuts
"""
from gitrail.utils.display import add_text, color_attr
from gitrail.views.base_view import BaseView


class HelpView(BaseView):
    """View for displaying help information"""

    def __init__(self, win, sections):
        """
        Initialize help view

        Args:
            win: Curses window object
            sections (list): (title, {key: description}) pairs
        """
        super().__init__(win)
        self.help_text = self._generate_help_text(sections)

    def _generate_help_text(self, sections):
        """Generate help text content"""
        lines = ["GITRAIL HELP", ""]
        for title, keys in sections:
            lines.append(f"{title}:")
            for key, description in keys.items():
                lines.append(f"  {key.ljust(10)} : {description}")
            lines.append("")
        lines.append("Graph: ● on ancestry path of selection, ◉ HEAD, grey outside current branch")
        lines.append("")
        lines.append("Press any key to close help")
        return lines

    def draw(self):
        """Draw the help view"""
        for i, line in enumerate(self.help_text):
            if i >= self.max_lines:
                break
            attr = color_attr('header') if i == 0 else color_attr('white')
            add_text(self.win, i, 0, line.ljust(self.max_cols), attr)

    def _handle_specific_key(self, key):
        # Any key closes help and returns to previous view
        return True, True, "previous"
