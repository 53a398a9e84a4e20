"""
Rendered lines of the whole graph pane
"""
import collections

from gitrail.models.commit import SyncStatus

GraphLine = collections.namedtuple('GraphLine', ['node', 'row', 'is_edge', 'segments'])


def build_graph_lines(layout, renderer, ancestry_path=frozenset(), sync_status_of=None):
    """
    Render every node row and the edge row below it

    Args:
        layout (GraphLayout): Laid out graph
        renderer (Renderer): Row renderer
        ancestry_path (set): Commit ids drawn with a filled marker
        sync_status_of (dict, optional): commit id -> SyncStatus, synced if missing

    Returns:
        list: GraphLine per drawn row, no edge row after the last commit
    """
    sync_status_of = sync_status_of or {}
    activity = layout.row_activity()
    lines = []

    for idx, node in enumerate(layout.nodes):
        commit_id = node.commit.id
        sync = sync_status_of.get(commit_id, SyncStatus.SYNCED)
        on_path = commit_id in ancestry_path
        row = activity[idx]

        segments = renderer.render_node_row(
            node, layout.width, row.node_columns, row.node_branch,
            on_path, sync, not node.in_current_branch)
        lines.append(GraphLine(node, idx, False, segments))

        if idx + 1 < len(layout.nodes):
            segments = renderer.render_edge_row(
                node, layout.nodes[idx + 1], layout.width, row.edge_columns, row.edge_branch,
                on_path, sync, layout, not node.in_current_branch)
            lines.append(GraphLine(node, idx, True, segments))

    return lines
