"""
Tests for node and edge row rendering
"""
import pytest

from gitrail.models.commit import SyncStatus
from gitrail.models.graph import CommitGraph
from gitrail.models.layout import Connection, GraphLayout, GraphNode, build_layout
from gitrail.views.graph_lines import build_graph_lines
from gitrail.views.row_renderer import Renderer, Segment, Style, row_text, select_glyph

from helpers import cid, make_commit


@pytest.fixture
def merge_layout(merge_commits):
    return build_layout(CommitGraph.from_commits(merge_commits))


def text_lines(lines):
    return [row_text(line.segments) for line in lines]


class TestGlyphs:
    def test_unicode_and_ascii(self):
        assert select_glyph('vertical', charset='unicode') == '│'
        assert select_glyph('vertical', bold=True, charset='unicode') == '┃'
        assert select_glyph('vertical', charset='ascii') == '|'

    def test_unknown_shape_is_blank(self):
        assert select_glyph('spiral', charset='unicode') == ' '


class TestCommitStyle:
    def test_outside_branch_is_grey(self):
        assert Renderer('unicode').commit_style(SyncStatus.LOCAL_ONLY, True) == Style('grey', False)

    @pytest.mark.parametrize('status,color', [
        (SyncStatus.SYNCED, 'white'),
        (SyncStatus.LOCAL_ONLY, 'green'),
        (SyncStatus.REMOTE_ONLY, 'red'),
        (SyncStatus.DIVERGED, 'yellow'),
    ])
    def test_sync_colors(self, status, color):
        assert Renderer('unicode').commit_style(status, False) == Style(color, False)


class TestGraphLines:
    def test_node_and_edge_rows(self, merge_layout):
        lines = build_graph_lines(merge_layout, Renderer('unicode'))
        assert len(lines) == 2 * len(merge_layout) - 1
        assert [line.is_edge for line in lines[:3]] == [False, True, False]
        assert lines[-1].is_edge is False

    def test_row_width_is_two_cells_per_lane(self, merge_layout, reuse_commits):
        reuse_layout = build_layout(CommitGraph.from_commits(reuse_commits))
        for layout in (merge_layout, reuse_layout):
            for text in text_lines(build_graph_lines(layout, Renderer('unicode'))):
                assert len(text) == 2 * layout.width

    def test_merge_history_drawing(self, merge_layout):
        texts = text_lines(build_graph_lines(merge_layout, Renderer('unicode')))
        assert texts == [
            '○─╮ ',
            '│ │ ',
            '│ ○ ',
            '│ │ ',
            '○ │ ',
            '├─╯ ',
            '○   ',
        ]

    def test_ancestry_path_fills_markers(self, merge_layout):
        path = {cid('m'), cid('b'), cid('a')}
        texts = text_lines(build_graph_lines(merge_layout, Renderer('unicode'), path))
        assert texts[0].startswith('●')
        assert texts[2] == '│ ○ '
        assert texts[4].startswith('●')

    def test_head_marker(self, merge_layout):
        renderer = Renderer('unicode', head_commit_id=cid('b'))
        texts = text_lines(build_graph_lines(merge_layout, renderer))
        assert texts[4] == '◉ │ '

    def test_ascii_output(self, merge_layout, reuse_commits):
        reuse_layout = build_layout(CommitGraph.from_commits(reuse_commits))
        for layout in (merge_layout, reuse_layout):
            for text in text_lines(build_graph_lines(layout, Renderer('ascii'))):
                assert text.isascii()


class TestSplitGlyphs:
    def test_tee_split_into_two_segments(self, merge_layout):
        lines = build_graph_lines(merge_layout, Renderer('unicode'))
        segments = lines[5].segments
        assert [segment.text for segment in segments] == ['├', '─', '╯ ']

    def test_tee_halves_styled_by_their_lanes(self, merge_commits):
        membership = {cid('m'): True, cid('b'): True, cid('a'): True, cid('c'): False}
        layout = build_layout(CommitGraph.from_commits(merge_commits), classifier=membership)
        segments = build_graph_lines(layout, Renderer('unicode'))[5].segments
        assert segments[0] == Segment('├', Style('white', False))
        assert segments[1] == Segment('─', Style('grey', False))

    def test_sync_status_colors_marker(self, merge_layout):
        sync = {cid('m'): SyncStatus.LOCAL_ONLY}
        lines = build_graph_lines(merge_layout, Renderer('unicode'), sync_status_of=sync)
        assert lines[0].segments[0].style == Style('green', False)
        assert lines[2].segments[1].style == Style('white', False)


class TestRobustness:
    def test_out_of_range_columns_keep_row_width(self, merge_layout):
        renderer = Renderer('unicode')
        node = GraphNode(make_commit('z', ['a']), 1, [], True)
        segments = renderer.render_node_row(node, 2, [0, 1, 5, -1], {}, False, SyncStatus.SYNCED, False)
        assert len(row_text(segments)) == 4

    def test_merge_source_beyond_width_is_ignored(self, merge_layout):
        renderer = Renderer('unicode')
        node = merge_layout.node_for(cid('m'))
        segments = renderer.render_node_row(node, 1, [0], {}, False, SyncStatus.SYNCED, False)
        assert row_text(segments) == '○─'

    def test_edge_row_with_stale_columns(self, merge_layout):
        renderer = Renderer('unicode')
        current = merge_layout.node_for(cid('c'))
        following = merge_layout.node_for(cid('b'))
        segments = renderer.render_edge_row(current, following, 2, [0, 1, 7], {}, False,
                                            SyncStatus.SYNCED, merge_layout, False)
        assert row_text(segments) == '│ │ '


WHITE = Style('white', False)
GREY = Style('grey', False)


class TestMergeDash:
    def test_left_only_merge_source_keeps_the_dash(self):
        renderer = Renderer('unicode')
        node = GraphNode(make_commit('m', ['b', 'c']), 1, [Connection.merge_from(0)])
        segments = renderer.render_node_row(node, 2, [0, 1], {}, False, SyncStatus.SYNCED, False)
        assert row_text(segments) == '╭─○─'

    def test_plain_commit_has_no_dash(self, merge_layout):
        node = merge_layout.node_for(cid('b'))
        segments = Renderer('unicode').render_node_row(node, 2, [0, 1], {}, False, SyncStatus.SYNCED, False)
        assert row_text(segments) == '○ │ '


class TestEdgeBends:
    def test_own_branch_bends_right_across_foreign_lane(self):
        commits = [make_commit('x', timestamp=1), make_commit('q', ['x'], timestamp=2)]
        graph = CommitGraph.from_commits(commits)
        q_node = GraphNode(graph.commits[cid('q')], 0, [Connection.branch_to(2)])
        x_node = GraphNode(graph.commits[cid('x')], 2, [])
        layout = GraphLayout(graph, [q_node, x_node], 3, [0, 1, 2])

        segments = Renderer('unicode').render_edge_row(q_node, x_node, 3, [0, 1], {0: True, 1: False}, False,
                                                       SyncStatus.SYNCED, layout, False)
        assert segments == [
            Segment('├', WHITE),
            Segment('─', WHITE),
            Segment('│', GREY),
            Segment('─', WHITE),
            Segment('╮ ', WHITE),
        ]
        assert row_text(segments) == '├─│─╮ '

    def test_foreign_lanes_bend_into_next_node(self):
        commits = [
            make_commit('a', timestamp=1),
            make_commit('n', ['a'], timestamp=2),
            make_commit('u', ['a'], timestamp=3),
            make_commit('v', ['a'], timestamp=4),
        ]
        graph = CommitGraph.from_commits(commits)
        nodes = [
            GraphNode(graph.commits[cid('u')], 1, []),
            GraphNode(graph.commits[cid('v')], 2, []),
            GraphNode(graph.commits[cid('n')], 0, []),
            GraphNode(graph.commits[cid('a')], 0, []),
        ]
        layout = GraphLayout(graph, nodes, 3, [0, 1, 2])

        segments = Renderer('unicode').render_edge_row(nodes[2], nodes[3], 3, [0, 1, 2],
                                                       {0: True, 1: True, 2: False}, False,
                                                       SyncStatus.SYNCED, layout, False)
        # the bend of lane 1 keeps its own colour, the dash through it comes from lane 2
        assert segments == [
            Segment('├', WHITE),
            Segment('─', GREY),
            Segment('╯', WHITE),
            Segment('─', GREY),
            Segment('╯ ', GREY),
        ]

    def test_parent_edge_next_to_merged_foreign_branch(self):
        commits = [
            make_commit('a', timestamp=1),
            make_commit('b', ['a'], timestamp=2),
            make_commit('y', ['b'], timestamp=3),
            make_commit('c', ['b'], timestamp=4),
            make_commit('x', ['a'], timestamp=5),
            make_commit('o', ['c', 'x'], timestamp=6),
            make_commit('p', ['o', 'y'], timestamp=7),
        ]
        membership = {cid(name): name != 'x' for name in 'abycxop'}
        layout = build_layout(CommitGraph.from_commits(commits), classifier=membership)
        assert [node.commit.id for node in layout] == [cid(n) for n in 'poxcyba']

        lines = build_graph_lines(layout, Renderer('unicode'))
        b_to_a = lines[2 * layout.row_of(cid('b')) + 1]
        assert b_to_a.is_edge
        assert b_to_a.segments == [
            Segment('├', WHITE),
            Segment('─', GREY),
            Segment('──', GREY),
            Segment('╯ ', GREY),
        ]
