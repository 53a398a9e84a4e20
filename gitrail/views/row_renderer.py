"""
Row renderer for the commit graph

Turns laid out graph nodes into rows of styled text segments. Every lane
is two terminal cells wide. A cell is kept as a (left shape, right shape)
pair until the row is emitted, so composite glyphs can be split into
separately styled segments.
"""
import collections

from gitrail.config import GRAPH_SETTINGS
from gitrail.models.commit import SyncStatus

Segment = collections.namedtuple('Segment', ['text', 'style'])
Style = collections.namedtuple('Style', ['color', 'bold'])

SYNC_COLORS = {
    SyncStatus.SYNCED: 'white',
    SyncStatus.LOCAL_ONLY: 'green',
    SyncStatus.REMOTE_ONLY: 'red',
    SyncStatus.DIVERGED: 'yellow',
}

# Lane cells
VERT = ('vertical', None)
VERT_H = ('vertical', 'horizontal')
HORIZ = ('horizontal', 'horizontal')
TEE_H = ('tee_right', 'horizontal')
CURVE_H = ('top_left', 'horizontal')
CORNER = ('top_right', None)
BEND = ('bottom_right', None)
BEND_H = ('bottom_right', 'horizontal')

# cells drawn as two segments: (first part styled by lane, dash styled by source)
TEE_CELLS = (TEE_H, CURVE_H)
CROSS_CELLS = (BEND_H, VERT_H)


def select_glyph(shape, bold=False, charset=None):
    """
    Look up the character for a shape

    Args:
        shape (str): Shape tag, e.g. 'vertical' or 'tee_right'
        bold (bool): Use the heavy variant
        charset (str, optional): 'unicode' or 'ascii', configured charset by default

    Returns:
        str: Single character, a space for an unknown shape
    """
    table = GRAPH_SETTINGS['glyphs'][charset or GRAPH_SETTINGS['charset']]
    glyphs = table.get(shape)
    if glyphs is None:
        return ' '
    return glyphs[1] if bold else glyphs[0]


def _with_dash(cell):
    return cell is not None and cell[1] == 'horizontal'


class Renderer:
    """Renders node rows and edge rows of a GraphLayout"""

    def __init__(self, charset=None, head_commit_id=None):
        self.charset = charset or GRAPH_SETTINGS['charset']
        self.head_commit_id = head_commit_id

    def set_head_commit(self, commit_id):
        self.head_commit_id = commit_id

    def select_glyph(self, shape, bold=False):
        return select_glyph(shape, bold, self.charset)

    def commit_style(self, sync_status, not_in_current_branch):
        """Grey for commits outside the checked out branch, else by sync status"""
        if not_in_current_branch:
            return Style('grey', False)
        return Style(SYNC_COLORS.get(sync_status, 'white'), False)

    def _text(self, cell):
        if cell is None:
            return '  '
        return ''.join(self.select_glyph(shape) if shape else ' ' for shape in cell)

    def _lane_style(self, column, column_branch, sync_status, default):
        in_branch = column_branch.get(column)
        if in_branch is None:
            return default
        return self.commit_style(sync_status, not in_branch)

    def render_node_row(self, node, width, active_columns, column_branch,
                        on_ancestry_path, sync_status, not_in_current_branch):
        """
        Render the row holding a commit marker

        Args:
            node (GraphNode): Commit to draw
            width (int): Number of lanes
            active_columns: Lanes carrying a line through this row
            column_branch (dict): lane -> lane owner is in the current branch
            on_ancestry_path (bool): Draw a filled marker
            sync_status (str): SyncStatus of the commit
            not_in_current_branch (bool): Grey out the commit

        Returns:
            list: Segments covering exactly width lanes
        """
        current_style = self.commit_style(sync_status, not_in_current_branch)
        active = set(active_columns)
        sources = [c for c in node.merge_sources() if 0 <= c < width]
        right_sources = [c for c in sources if c > node.column]
        left_sources = [c for c in sources if c < node.column]
        span_end = min(right_sources) if right_sources else node.column
        span_start = max(left_sources) if left_sources else node.column

        if node.commit.id == self.head_commit_id:
            marker = self.select_glyph('commit_head', True)
        else:
            marker = self.select_glyph('commit', on_ancestry_path)

        segments = []
        for col in range(width):
            lane_style = self._lane_style(col, column_branch, sync_status, current_style)
            if col == node.column:
                tail = self.select_glyph('horizontal') if node.is_merge else ' '
                segments.append(Segment(marker + tail, current_style))
            elif col in sources:
                cell = CORNER if col > node.column else CURVE_H
                segments.append(Segment(self._text(cell), current_style))
            elif node.column < col < span_end or span_start < col < node.column:
                if col in active:
                    segments.append(Segment(self.select_glyph('vertical'), lane_style))
                    segments.append(Segment(self.select_glyph('horizontal'), current_style))
                else:
                    segments.append(Segment(self._text(HORIZ), current_style))
            elif col in active:
                segments.append(Segment(self._text(VERT), lane_style))
            else:
                segments.append(Segment('  ', current_style))
        return segments

    def render_edge_row(self, current, next_node, width, active_columns, column_branch,
                        on_ancestry_path, sync_status, layout, not_in_current_branch):
        """
        Render the connector row between a commit and the row below it

        Lines of the current commit bend toward its parent, and commits in
        other lanes whose parent is the next node bend toward that node. A
        horizontal run remembers the lane it comes from so the dash half of
        a composite glyph is styled by that lane while the other half keeps
        the style of the lane it sits in.

        Returns:
            list: Segments covering exactly width lanes
        """
        current_style = self.commit_style(sync_status, not_in_current_branch)
        cells = [None] * width
        in_range = [c for c in active_columns if 0 <= c < width]
        for col in in_range:
            cells[col] = VERT

        column = min(max(current.column, 0), max(width - 1, 0))
        next_column = min(max(next_node.column, 0), max(width - 1, 0))
        next_id = next_node.commit.id
        is_parent = next_id in current.commit.parents
        is_child = current.commit.id in next_node.commit.parents

        branch_targets = []
        if is_parent:
            branch_targets = [t for t in current.branch_targets() if t == next_node.column and 0 <= t < width]
        merge_sources = current.merge_sources()

        # other lanes whose commit has the next node as parent and is still waiting for it
        current_row = layout.row_of(current.commit.id)
        merging_lanes = set()
        if current_row is not None:
            for child_id in layout.children_of(next_id):
                child_row = layout.row_of(child_id)
                if child_row is None or child_row > current_row:
                    continue
                child = layout.nodes[child_row]
                parent_rows = [layout.row_of(p) for p in child.commit.parents]
                if all(row is not None and row > current_row for row in parent_rows):
                    merging_lanes.add(child.column)
        other_merging = [c for c in in_range if c != current.column and c in merging_lanes]

        current_branch_cols = set()
        leftward_sources = {}
        leftward_targets = set()

        if merge_sources:
            if width:
                cells[column] = VERT
            for source in merge_sources:
                if column < source < width:
                    cells[source] = VERT
        elif branch_targets:
            for target in branch_targets:
                if target > column:
                    cells[column] = TEE_H
                    for c in range(column + 1, target):
                        if cells[c] == VERT:
                            cells[c] = VERT_H
                        elif cells[c] == BEND:
                            cells[c] = BEND_H
                        else:
                            cells[c] = HORIZ
                        current_branch_cols.add(c)
                    cells[target] = CORNER
                elif target < column:
                    leftward_sources[target] = column
                    leftward_targets.add(target)
                    for c in range(target, column):
                        if c == target:
                            if cells[c] == VERT:
                                cells[c] = TEE_H
                            elif cells[c] == BEND:
                                cells[c] = BEND_H
                            else:
                                cells[c] = CURVE_H
                        elif cells[c] == VERT:
                            cells[c] = VERT_H
                        elif cells[c] == BEND:
                            cells[c] = BEND_H
                        else:
                            cells[c] = HORIZ
                        leftward_sources[c] = column
                    cells[column] = BEND_H if _with_dash(cells[column]) else BEND
        elif width:
            cells[column] = VERT

        if is_child and width and cells[column] is None:
            cells[column] = VERT

        merge_branch_cols = {}
        for merge_col in other_merging:
            if merge_col > next_column:
                for c in range(next_column + 1, merge_col):
                    if cells[c] == VERT:
                        cells[c] = VERT_H
                    elif cells[c] == BEND:
                        cells[c] = BEND_H
                    elif cells[c] is None:
                        cells[c] = HORIZ
                    merge_branch_cols[c] = merge_col
                    leftward_sources[c] = merge_col
                cells[merge_col] = BEND_H if _with_dash(cells[merge_col]) else BEND
                merge_branch_cols[merge_col] = merge_col

                if cells[next_column] == VERT:
                    cells[next_column] = TEE_H
                # the closest merging lane colours the dash at the merge point
                existing = leftward_sources.get(next_column)
                if existing is None or merge_col - next_column < abs(existing - next_column):
                    leftward_sources[next_column] = merge_col
            elif merge_col < next_column:
                for c in range(merge_col + 1, next_column):
                    if cells[c] == VERT:
                        cells[c] = VERT_H
                    elif cells[c] == BEND:
                        cells[c] = BEND_H
                    elif cells[c] is None:
                        cells[c] = HORIZ
                    merge_branch_cols[c] = merge_col
                    leftward_sources[c] = merge_col
                cells[merge_col] = TEE_H
                merge_branch_cols[merge_col] = merge_col
                leftward_sources[merge_col] = merge_col
                cells[next_column] = BEND_H if _with_dash(cells[next_column]) else BEND
                merge_branch_cols[next_column] = merge_col

        def lane_style(col):
            return self._lane_style(col, column_branch, sync_status, current_style)

        def column_style(col):
            if col in current_branch_cols:
                return current_style
            if col in merge_branch_cols:
                return lane_style(merge_branch_cols[col])
            return lane_style(col)

        def dash_style(col, fallback):
            source = leftward_sources.get(col)
            if source is None:
                return fallback
            return column_style(source)

        segments = []
        for col, cell in enumerate(cells):
            style = column_style(col)
            if cell in TEE_CELLS:
                if col in leftward_targets:
                    first_style = self.commit_style(sync_status, not next_node.in_current_branch)
                else:
                    first_style = style
                segments.append(Segment(self.select_glyph(cell[0]), first_style))
                segments.append(Segment(self.select_glyph(cell[1]), dash_style(col, style)))
            elif cell in CROSS_CELLS:
                segments.append(Segment(self.select_glyph(cell[0]), lane_style(col) if col in column_branch else style))
                segments.append(Segment(self.select_glyph(cell[1]), dash_style(col, style)))
            else:
                segments.append(Segment(self._text(cell), style))
        return segments


def row_text(segments):
    """Plain text of a rendered row"""
    return ''.join(segment.text for segment in segments)
