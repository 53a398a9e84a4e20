"""
Tests for CommitGraph: children index, topological order and ancestry
"""
import random

import pytest

from gitrail.models.commit import Commit
from gitrail.models.graph import CommitGraph

from helpers import cid, make_commit


class TestCommit:
    def test_short_id_defaults_to_seven_characters(self):
        commit = Commit('0123456789abcdef')
        assert commit.short_id == '0123456'

    def test_title_is_first_message_line(self):
        commit = Commit('abc', message='Fix parser\n\nLonger description')
        assert commit.title == 'Fix parser'

    def test_commit_is_immutable(self):
        commit = Commit('abc')
        with pytest.raises(AttributeError):
            commit.message = "changed"
        assert commit.message == ''

    def test_merge_and_root_flags(self):
        assert Commit('a').is_root
        assert Commit('m', parents=['a', 'b']).is_merge
        assert not Commit('b', parents=['a']).is_merge


class TestBuild:
    def test_children_index(self, merge_commits):
        graph = CommitGraph.from_commits(merge_commits)
        assert graph.children_of(cid('a')) == (cid('b'), cid('c'))
        assert graph.children_of(cid('m')) == ()

    def test_batch_order_does_not_matter(self, merge_commits):
        graph = CommitGraph.from_commits(reversed(merge_commits))
        assert sorted(graph.children_of(cid('a'))) == [cid('b'), cid('c')]

    def test_duplicate_id_keeps_first_record(self):
        first = make_commit('a', message='first')
        second = make_commit('a', message='second')
        graph = CommitGraph.from_commits([first, second])
        assert len(graph) == 1
        assert graph.get(cid('a')).message == 'first'

    def test_dangling_parent_has_no_children_entry(self):
        graph = CommitGraph.from_commits([make_commit('b', ['a'], timestamp=2)])
        assert cid('a') not in graph
        assert graph.children_of(cid('a')) == ()
        assert graph.loaded_parents(cid('b')) == ()


class TestTopologicalSort:
    def test_linear_history_oldest_first(self, linear_commits):
        graph = CommitGraph.from_commits(linear_commits)
        assert graph.topological_sort() == [cid('a'), cid('b'), cid('c')]

    def test_parents_after_children_newest_first(self, reuse_commits):
        graph = CommitGraph.from_commits(reuse_commits)
        order = graph.newest_first()
        index = {commit_id: i for i, commit_id in enumerate(order)}
        for commit in reuse_commits:
            for parent_id in commit.parents:
                assert index[parent_id] > index[commit.id]

    def test_every_commit_emitted_once(self, reuse_commits):
        graph = CommitGraph.from_commits(reuse_commits)
        order = graph.topological_sort()
        assert sorted(order) == sorted(c.id for c in reuse_commits)

    def test_deterministic_for_any_input_order(self, reuse_commits):
        expected = CommitGraph.from_commits(reuse_commits).topological_sort()
        rng = random.Random(7)
        for _ in range(10):
            shuffled = list(reuse_commits)
            rng.shuffle(shuffled)
            assert CommitGraph.from_commits(shuffled).topological_sort() == expected

    def test_timestamp_ties_broken_by_id(self):
        commits = [make_commit('a', timestamp=1), make_commit('c', ['a'], timestamp=5),
                   make_commit('b', ['a'], timestamp=5)]
        graph = CommitGraph.from_commits(commits)
        assert graph.newest_first() == [cid('b'), cid('c'), cid('a')]

    def test_dangling_parent_is_not_an_edge(self):
        commits = [make_commit('b', ['x'], timestamp=2), make_commit('c', ['b'], timestamp=3)]
        graph = CommitGraph.from_commits(commits)
        assert graph.topological_sort() == [cid('b'), cid('c')]


class TestAncestry:
    def test_trace_collects_all_ancestors(self, merge_commits):
        graph = CommitGraph.from_commits(merge_commits)
        path = graph.trace_ancestry(cid('m'))
        assert path == {cid('m'), cid('b'), cid('c'), cid('a')}
        assert graph.is_on_ancestry_path(cid('c'))

    def test_trace_is_idempotent(self, reuse_commits):
        graph = CommitGraph.from_commits(reuse_commits)
        first = graph.trace_ancestry(cid('g'))
        second = graph.trace_ancestry(cid('g'))
        assert first == second

    def test_root_traces_to_itself(self, merge_commits):
        graph = CommitGraph.from_commits(merge_commits)
        assert graph.trace_ancestry(cid('a')) == {cid('a')}

    def test_trace_replaces_previous_path(self, merge_commits):
        graph = CommitGraph.from_commits(merge_commits)
        graph.trace_ancestry(cid('m'))
        graph.trace_ancestry(cid('b'))
        assert not graph.is_on_ancestry_path(cid('c'))
        graph.clear_ancestry()
        assert graph.ancestry_path == frozenset()

    def test_first_parent_chain(self, reuse_commits):
        graph = CommitGraph.from_commits(reuse_commits)
        assert graph.first_parent_chain(cid('n')) == [cid('n'), cid('c'), cid('m'), cid('b'), cid('a')]
