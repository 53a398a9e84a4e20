"""
Actions pane listing the git commands
"""
from gitrail.models.commands import COMMANDS
from gitrail.utils.display import color_attr
from gitrail.views.base_view import KEY_ENTER, BaseView, ScrollState


class ActionsView(BaseView):
    """Command list, Enter runs the selected command on the selected commit"""

    title = "Git Commands"

    def __init__(self, win, commands=COMMANDS):
        super().__init__(win)
        self.commands = list(commands)
        self.scroll = ScrollState()

    @property
    def selected_command(self):
        if not self.commands:
            return None
        return self.commands[self.scroll.current_index]

    def _move(self, delta):
        self.scroll.move(delta, len(self.commands), self.body_height)

    def draw(self):
        self.draw_frame()
        self.scroll.ensure_visible(self.body_height)
        for row in range(self.body_height):
            idx = self.scroll.top_index + row
            if idx >= len(self.commands):
                break
            command = self.commands[idx]
            selected = idx == self.scroll.current_index
            prefix = '> ' if selected and self.focused else '  '
            suffix = ' ...' if command.needs_input else ''
            color = 'red' if command.key == 'reset_hard' else 'white'
            text = f"{prefix}{command.description}{suffix}".ljust(self.body_width)
            self.draw_line(row, text, color_attr(color, selected and self.focused))

    def _handle_specific_key(self, key):
        if self.handle_navigation_keys(key, self._move):
            return True, False, None
        if key in KEY_ENTER and self.selected_command:
            return True, True, f"execute:{self.selected_command.key}"
        return True, False, None
