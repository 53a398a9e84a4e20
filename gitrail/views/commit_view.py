"""
Commit graph pane
"""
import curses

from gitrail.config import GRAPH_SETTINGS
from gitrail.models.commit import SyncStatus
from gitrail.utils.display import add_segments, add_text, color_attr
from gitrail.views.base_view import KEY_ENTER, BaseView
from gitrail.views.graph_lines import build_graph_lines


def shorten_title(title, width=GRAPH_SETTINGS['message_width']):
    """Cut a commit title to width characters, ending with '...'"""
    if len(title) <= width:
        return title
    return title[:max(0, width - 3)] + "..."


class CommitView(BaseView):
    """Graph pane: one node line per commit with edge lines in between"""

    title = "Commit Graph"

    def __init__(self, win, renderer):
        """
        Initialize commit view

        Args:
            win: Curses window object
            renderer: Row renderer used to draw the graph
        """
        super().__init__(win)
        self.renderer = renderer
        self.layout = None
        self.sync_status_of = {}
        self.current_index = 0
        self.top_line = 0
        self._lines = None

    @property
    def commit_count(self):
        return len(self.layout) if self.layout else 0

    @property
    def selected_commit(self):
        if not self.commit_count:
            return None
        return self.layout.nodes[self.current_index].commit

    def set_layout(self, layout, sync_status_of=None, keep_commit_id=None):
        """
        Show a freshly built layout

        Args:
            layout (GraphLayout): New layout, replaces the old one
            sync_status_of (dict, optional): commit id -> SyncStatus
            keep_commit_id (str, optional): Commit to keep selected when still present
        """
        self.layout = layout
        self.sync_status_of = sync_status_of or {}
        row = layout.row_of(keep_commit_id) if keep_commit_id else None
        self.current_index = row if row is not None else 0
        self.top_line = 0
        self._select(self.current_index)

    def _select(self, index):
        if not self.commit_count:
            self.current_index = 0
            self._lines = None
            return
        self.current_index = max(0, min(self.commit_count - 1, index))
        self.layout.graph.trace_ancestry(self.selected_commit.id)
        self._lines = None
        self._ensure_visible()

    def move_selection(self, delta):
        self._select(self.current_index + delta)

    def graph_lines(self):
        """Rendered lines, rebuilt after a reload or selection change"""
        if self._lines is None:
            if self.layout is None:
                self._lines = []
            else:
                self._lines = build_graph_lines(self.layout, self.renderer,
                                                self.layout.graph.ancestry_path, self.sync_status_of)
        return self._lines

    def _ensure_visible(self):
        height = max(1, self.body_height)
        line = self.current_index * 2
        if line < self.top_line:
            self.top_line = line
        elif line >= self.top_line + height:
            self.top_line = line - height + 1

    def draw(self):
        self.draw_frame(f"{self.title} ({self.commit_count})" if self.commit_count else self.title)
        if not self.commit_count:
            message = "No commits to display"
            add_text(self.win, self.max_lines // 2, max(1, (self.max_cols - len(message)) // 2),
                     message, color_attr('white'))
            return

        self._ensure_visible()
        lines = self.graph_lines()
        graph_cols = self.layout.width * GRAPH_SETTINGS['lane_width']
        right = self.max_cols - 1

        for row in range(self.body_height):
            idx = self.top_line + row
            if idx >= len(lines):
                break
            line = lines[idx]
            selected = not line.is_edge and line.row == self.current_index
            x = add_segments(self.win, row + 1, 1, line.segments, selected, right)
            x = max(x, 1 + graph_cols)
            if line.is_edge:
                continue

            commit = line.node.commit
            dim = not line.node.in_current_branch
            sync = self.sync_status_of.get(commit.id, SyncStatus.SYNCED)
            id_color = 'grey' if dim else 'yellow'
            x = add_text(self.win, row + 1, x, ' ', color_attr('white', selected), right)
            x = add_text(self.win, row + 1, x, commit.short_id, color_attr(id_color, selected), right)
            text = ' ' + shorten_title(commit.title)
            if sync != SyncStatus.SYNCED:
                text += f" [{sync.replace('_', ' ')}]"
            x = add_text(self.win, row + 1, x, text, color_attr('grey' if dim else 'white', selected), right)
            if selected and x < right:
                add_text(self.win, row + 1, x, ' ' * (right - x), color_attr('white', selected), right)

    def _handle_specific_key(self, key):
        if self.handle_navigation_keys(key, self.move_selection, max(1, self.body_height // 2)):
            return True, False, None
        if key == ord('g') or key == curses.KEY_HOME:
            self._select(0)
        elif key == ord('G') or key == curses.KEY_END:
            self._select(self.commit_count - 1)
        elif key in KEY_ENTER:
            return True, True, "focus:actions"
        return True, False, None
