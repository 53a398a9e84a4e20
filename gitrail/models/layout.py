"""
Lane layout of the commit graph

Two passes over the commits in newest-first order: a greedy lane
assignment that keeps the main line in lane 0, followed by a compaction
that folds lanes with non-overlapping row extents onto lower lanes.
"""
import collections

VERTICAL = 'vertical'
BRANCH_TO = 'branch_to'
MERGE_FROM = 'merge_from'

MAIN_LANE = 0


class Connection:
    """Edge from a graph node toward one of its parents"""

    __slots__ = ('kind', 'column')

    def __init__(self, kind, column=None):
        self.kind = kind
        self.column = column

    @classmethod
    def vertical(cls):
        return cls(VERTICAL)

    @classmethod
    def branch_to(cls, column):
        return cls(BRANCH_TO, column)

    @classmethod
    def merge_from(cls, column):
        return cls(MERGE_FROM, column)

    def __eq__(self, other):
        if not isinstance(other, Connection):
            return NotImplemented
        return self.kind == other.kind and self.column == other.column

    def __hash__(self):
        return hash((self.kind, self.column))

    def __repr__(self):
        if self.kind == VERTICAL:
            return 'Vertical'
        name = 'BranchTo' if self.kind == BRANCH_TO else 'MergeFrom'
        return f'{name}({self.column})'


class GraphNode:
    """One commit placed in a lane"""

    def __init__(self, commit, column, connections=None, in_current_branch=True):
        self.commit = commit
        self.column = column
        self.connections = connections if connections is not None else []
        self.in_current_branch = in_current_branch

    def __repr__(self):
        return f'GraphNode({self.commit.short_id}, column={self.column}, {self.connections})'

    @property
    def is_merge(self):
        return any(c.kind == MERGE_FROM for c in self.connections)

    def merge_sources(self):
        return [c.column for c in self.connections if c.kind == MERGE_FROM]

    def branch_targets(self):
        return [c.column for c in self.connections if c.kind == BRANCH_TO]


class LaneState:
    """
    Bookkeeping of the assignment pass

    live maps a lane to the ids of commits seen in that lane whose parent
    has not been reached yet. Only lanes with an empty live set are reused.
    """

    def __init__(self):
        self.live = {MAIN_LANE: set()}
        self.next_free = MAIN_LANE + 1

    def is_empty(self, lane):
        return not self.live.get(lane)

    def allocate(self):
        """Get the lowest reusable side lane or open a new one"""
        for lane in range(MAIN_LANE + 1, self.next_free):
            if self.is_empty(lane):
                return lane
        lane = self.next_free
        self.next_free += 1
        return lane

    def mark_live(self, lane, commit_id):
        self.live.setdefault(lane, set()).add(commit_id)

    def release(self, lane, commit_id):
        live = self.live.get(lane)
        if live:
            live.discard(commit_id)


def _membership(classifier, commit_id):
    if classifier is None:
        return True
    return bool(classifier.get(commit_id, False))


def assign_lanes(graph, newest_first, main_tip=None, classifier=None):
    """
    First pass: give every commit a lane

    Args:
        graph: CommitGraph
        newest_first (list): Commit ids in reverse topological order
        main_tip (str, optional): Tip of the main branch, newest commit if unknown
        classifier (dict, optional): commit id -> reachable from checked out HEAD

    Returns:
        tuple: (list of GraphNode, dict commit id -> lane)
    """
    columns = {}
    rows = {commit_id: idx for idx, commit_id in enumerate(newest_first)}

    if main_tip not in graph and newest_first:
        main_tip = newest_first[0]
    for commit_id in graph.first_parent_chain(main_tip):
        columns[commit_id] = MAIN_LANE

    lanes = LaneState()
    nodes = []

    for idx, commit_id in enumerate(newest_first):
        commit = graph.get(commit_id)
        if commit is None:
            continue

        column = columns.get(commit_id)
        if column is None:
            column = lanes.allocate()
            columns[commit_id] = column
        lanes.mark_live(column, commit_id)

        connections = []
        if len(commit.parents) == 1:
            parent_id = commit.parents[0]
            parent_column = columns.get(parent_id)
            if parent_column is None:
                # carry the lane down to the parent
                columns[parent_id] = column
                connections.append(Connection.vertical())
            elif parent_column == column:
                connections.append(Connection.vertical())
            else:
                connections.append(Connection.branch_to(parent_column))

            # lane stays reserved until the parent row is reached
            if rows.get(parent_id, idx) < idx:
                lanes.release(column, commit_id)

        elif commit.parents:
            columns.setdefault(commit.parents[0], column)
            for parent_id in commit.parents[1:]:
                parent_column = columns.get(parent_id)
                if parent_column is None:
                    parent_column = lanes.allocate()
                    columns[parent_id] = parent_column
                    lanes.mark_live(parent_column, parent_id)
                connections.append(Connection.merge_from(parent_column))
            lanes.release(column, commit_id)

        else:
            lanes.release(column, commit_id)

        nodes.append(GraphNode(commit, column, connections, _membership(classifier, commit_id)))

    return nodes, columns


def compute_lane_extents(graph, newest_first, columns):
    """
    Row range [start, end) each lane is drawn over

    A commit occupies its lane from its own row down to one row past its
    furthest parent, which covers the edge row below that parent. A merge
    also opens the lane of every parent in another lane from the edge row
    right below the merge.

    Returns:
        dict: lane -> (start, end)
    """
    rows = {commit_id: idx for idx, commit_id in enumerate(newest_first)}
    extents = {}

    def widen(lane, start, end):
        if lane in extents:
            old_start, old_end = extents[lane]
            extents[lane] = (min(old_start, start), max(old_end, end))
        else:
            extents[lane] = (start, end)

    for idx, commit_id in enumerate(newest_first):
        lane = columns.get(commit_id)
        commit = graph.get(commit_id)
        if lane is None or commit is None:
            continue

        furthest = idx
        for parent_id in commit.parents:
            if parent_id in rows:
                furthest = max(furthest, rows[parent_id])
        widen(lane, idx, furthest + 1)

        if commit.is_merge:
            for parent_id in commit.parents:
                parent_lane = columns.get(parent_id)
                if parent_lane is not None and parent_lane != lane:
                    if parent_lane in extents:
                        start, end = extents[parent_lane]
                        extents[parent_lane] = (min(start, idx + 1), end)
                    else:
                        extents[parent_lane] = (idx + 1, idx + 1)

    return extents


def intervals_overlap(first, second):
    """Half-open intervals touching at a boundary don't overlap"""
    return not (first[1] <= second[0] or second[1] <= first[0])


def compact_lanes(columns, extents):
    """
    Second pass: fold side lanes onto the lowest lane they fit in

    Lanes are taken in ascending order. A lane that holds commits moves to
    the first lower side lane that holds no commits or whose extent doesn't
    overlap its own; the target extent then grows to cover the moved lane.
    First fit is a heuristic, the result is not guaranteed to be minimal.

    Args:
        columns (dict): commit id -> lane from the first pass
        extents (dict): lane -> (start, end), updated in place

    Returns:
        dict: old lane -> new lane for every lane up to the highest one
    """
    if not columns:
        return {}

    max_lane = max(columns.values())
    occupied = set(columns.values())
    mapping = {lane: lane for lane in range(max_lane + 1)}

    for source in range(MAIN_LANE + 1, max_lane + 1):
        if source not in occupied or source not in extents:
            continue

        source_extent = extents[source]
        target = source
        for candidate in range(MAIN_LANE + 1, source):
            if candidate not in occupied:
                target = candidate
                extents[candidate] = source_extent
                break
            candidate_extent = extents.get(candidate)
            if candidate_extent is not None and not intervals_overlap(source_extent, candidate_extent):
                target = candidate
                extents[candidate] = (min(candidate_extent[0], source_extent[0]),
                                      max(candidate_extent[1], source_extent[1]))
                break

        if target != source:
            occupied.discard(source)
            occupied.add(target)
        mapping[source] = target

    return mapping


def apply_lane_mapping(nodes, columns, mapping):
    """
    Move nodes and connection targets to their compacted lanes

    Returns:
        tuple: (graph width, sorted list of lanes in use)
    """
    for commit_id, lane in columns.items():
        columns[commit_id] = mapping.get(lane, lane)

    for node in nodes:
        node.column = mapping.get(node.column, node.column)
        for connection in node.connections:
            if connection.column is not None:
                connection.column = mapping.get(connection.column, connection.column)

    width = max(columns.values()) + 1 if columns else 0

    max_column = max(width - 1, 0)
    for node in nodes:
        node.column = min(max(node.column, 0), max_column)
        for connection in node.connections:
            if connection.column is not None:
                connection.column = min(max(connection.column, 0), max_column)

    active_columns = sorted(set(columns.values()))
    return width, active_columns


RowActivity = collections.namedtuple('RowActivity', ['node_columns', 'node_branch', 'edge_columns', 'edge_branch'])


class GraphLayout:
    """Finished layout: nodes newest first plus lookups used by the renderer"""

    def __init__(self, graph, nodes, width, active_columns, lane_mapping=None, lane_extents=None):
        self.graph = graph
        self.nodes = nodes
        self.width = width
        self.active_columns = active_columns
        self.lane_mapping = lane_mapping or {}
        self.lane_extents = lane_extents or {}
        self._rows = {node.commit.id: idx for idx, node in enumerate(nodes)}
        self._activity = None

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __getitem__(self, idx):
        return self.nodes[idx]

    def row_of(self, commit_id):
        """Row index of a commit, None when it isn't laid out"""
        return self._rows.get(commit_id)

    def node_for(self, commit_id):
        row = self._rows.get(commit_id)
        return self.nodes[row] if row is not None else None

    def children_of(self, commit_id):
        return self.graph.children_of(commit_id)

    def _parent_rows(self, node):
        return [self._rows.get(parent_id, -1) for parent_id in node.commit.parents]

    def row_activity(self):
        """
        Lanes that carry a line through each row

        A node row shows the lanes of earlier nodes that still wait for a
        parent further down, lanes that earlier merges opened for a parent
        further down, and the node's own lane. The edge row below node i
        shows the same set as seen from row i, except that a node bending
        into the next row drops out.

        Returns:
            list: RowActivity per node
        """
        if self._activity is not None:
            return self._activity

        # (owner row, kind, lane, until row, in current branch), insertion ordered
        open_entries = []
        activity = []

        for idx, node in enumerate(self.nodes):
            parent_rows = self._parent_rows(node)
            until = max(parent_rows) if parent_rows else -1
            open_entries.append((idx, 'live', node.column, until, node.in_current_branch))
            merge_index = 0
            for connection in node.connections:
                if connection.kind != MERGE_FROM:
                    continue
                merge_index += 1
                parent_row = parent_rows[merge_index] if merge_index < len(parent_rows) else -1
                open_entries.append((idx, 'merge', connection.column, parent_row, node.in_current_branch))

            open_entries = [entry for entry in open_entries if entry[3] > idx]

            node_columns = []
            node_branch = {}
            for owner, kind, lane, until_row, in_branch in open_entries:
                if kind == 'merge' and owner == idx:
                    continue
                if lane not in node_branch:
                    node_columns.append(lane)
                    node_branch[lane] = in_branch
            if node.column not in node_branch:
                node_columns.append(node.column)
            node_branch[node.column] = node.in_current_branch

            edge_columns = []
            edge_branch = {}
            if idx + 1 < len(self.nodes):
                next_node = self.nodes[idx + 1]
                bends_into_next = next_node.commit.id in node.commit.parents and node.column != next_node.column
                for owner, kind, lane, until_row, in_branch in open_entries:
                    if owner == idx and bends_into_next:
                        continue
                    if lane not in edge_branch:
                        edge_columns.append(lane)
                        edge_branch[lane] = in_branch

            activity.append(RowActivity(sorted(node_columns), node_branch, sorted(edge_columns), edge_branch))

        self._activity = activity
        return activity


def build_layout(graph, main_tip=None, classifier=None):
    """
    Lay out a commit graph

    Args:
        graph: CommitGraph with children built
        main_tip (str, optional): Tip of the main branch
        classifier (dict, optional): commit id -> in currently checked out branch

    Returns:
        GraphLayout
    """
    newest_first = graph.newest_first()
    nodes, columns = assign_lanes(graph, newest_first, main_tip, classifier)
    extents = compute_lane_extents(graph, newest_first, columns)
    mapping = compact_lanes(columns, extents)
    width, active_columns = apply_lane_mapping(nodes, columns, mapping)
    return GraphLayout(graph, nodes, width, active_columns, mapping, extents)
