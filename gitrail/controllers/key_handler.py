"""
Key handling functionality
"""
import curses

KEY_TAB = 9

PANES = ('graph', 'actions', 'details', 'status')


class KeyHandler:
    """Global key bindings and the descriptions shown in help"""

    @staticmethod
    def get_key_descriptions(view_type=None):
        """
        Get descriptions of key bindings for help display

        Args:
            view_type: Pane to get descriptions for ('graph', 'details', ...)

        Returns:
            dict: Mapping of key names to descriptions
        """
        common_keys = {
            'q': 'Quit',
            'H/F1': 'Show help',
            'Tab': 'Focus next pane',
            'r': 'Refresh (reload repository)',
            'j/DOWN': 'Move down',
            'k/UP': 'Move up',
            'd/PgDn': 'Page down',
            'u/PgUp': 'Page up',
        }

        if view_type == 'graph':
            extra_keys = {
                'g/Home': 'Go to newest commit',
                'G/End': 'Go to oldest commit',
                'ENTER': 'Focus git commands',
            }
            return {**common_keys, **extra_keys}

        elif view_type == 'actions':
            extra_keys = {
                'ENTER': 'Run command on selected commit',
            }
            return {**common_keys, **extra_keys}

        elif view_type == 'details':
            extra_keys = {
                'ENTER': 'Expand/collapse full screen',
                'h/l': 'Scroll left/right',
                'g/G': 'Go to top/bottom',
                '/': 'Search',
                'n/N': 'Next/previous match',
            }
            return {**common_keys, **extra_keys}

        elif view_type == 'status':
            extra_keys = {
                'ENTER': 'Show diff of the selected file',
                'Esc': 'Close the file diff',
            }
            return {**common_keys, **extra_keys}

        return common_keys

    @classmethod
    def help_sections(cls):
        """(title, keys) pairs for the help view, pane sections without the global keys"""
        common = cls.get_key_descriptions()
        sections = [('Global', common)]
        for title, view_type in (('Commit Graph', 'graph'), ('Git Commands', 'actions'),
                                 ('Commit Details', 'details'), ('Git Status', 'status')):
            keys = cls.get_key_descriptions(view_type)
            sections.append((title, {k: v for k, v in keys.items() if k not in common}))
        return sections

    @staticmethod
    def global_action(key):
        """
        Map keys that work in every pane

        Returns:
            str: Action name or None
        """
        if key == ord('q'):
            return 'quit'
        elif key == ord('H') or key == curses.KEY_F1:
            return 'help'
        elif key == KEY_TAB:
            return 'focus_next'
        elif key == curses.KEY_BTAB:
            return 'focus_previous'
        elif key == ord('r'):
            return 'refresh'
        elif key == curses.KEY_RESIZE:
            return 'resize'
        return None

    @staticmethod
    def next_pane(current, step=1):
        idx = PANES.index(current) if current in PANES else 0
        return PANES[(idx + step) % len(PANES)]
