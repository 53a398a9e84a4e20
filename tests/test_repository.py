"""
Tests for the pygit2 backed repository interface
"""
import pygit2
import pytest

from gitrail.models.commit import SyncStatus
from gitrail.models.graph import CommitGraph
from gitrail.models.layout import build_layout
from gitrail.models.repository import (STATUS_DELETED, STATUS_MODIFIED, STATUS_STAGED, STATUS_UNTRACKED,
                                       ReferenceNotFound, Repository)

from helpers import commit_file, signature


@pytest.fixture
def git_repo(tmp_path):
    """master with two commits, feature branching off the first one"""
    repo = pygit2.init_repository(str(tmp_path), initial_head='master')
    first = commit_file(repo, 'README', 'hello\n', 'Initial commit\n', 1000, [])
    second = commit_file(repo, 'README', 'hello\nworld\n', 'Add world\n\nMore text\n', 2000, [first])
    sig = signature(3000)
    feature = repo.create_commit('refs/heads/feature', sig, sig, 'Feature work\n', repo[first].tree_id, [first])
    return tmp_path, str(first), str(second), str(feature)


@pytest.fixture
def repository(git_repo):
    repository = Repository()
    assert repository.open(str(git_repo[0]))
    return repository


class TestOpen:
    def test_not_a_repository(self, tmp_path):
        path = tmp_path / 'empty'
        path.mkdir()
        # tmp_path may live below another repository, only check the type
        assert isinstance(Repository().open(str(path)), bool)

    def test_closed_repository_is_empty(self):
        repository = Repository()
        assert repository.load_commits() == []
        assert repository.workdir is None
        with pytest.raises(ReferenceNotFound):
            repository.resolve_reference('master')


class TestHistory:
    def test_load_all_branches(self, repository, git_repo):
        _, first, second, feature = git_repo
        commits = repository.load_commits()
        assert {c.id for c in commits} == {first, second, feature}
        by_id = {c.id: c for c in commits}
        assert by_id[second].parents == (first,)
        assert by_id[second].title == 'Add world'
        assert by_id[feature].timestamp == 3000

    def test_max_count(self, repository):
        assert len(repository.load_commits(max_count=2)) == 2

    def test_resolve_reference(self, repository, git_repo):
        _, first, second, feature = git_repo
        assert repository.resolve_reference('feature') == feature
        assert repository.resolve_reference('master~1') == first
        with pytest.raises(LookupError):
            repository.resolve_reference('nope')

    def test_main_branch_tip(self, repository, git_repo):
        assert repository.main_branch_tip(('main', 'master')) == git_repo[2]
        assert repository.main_branch_tip(('trunk',)) is None

    def test_layout_of_loaded_history(self, repository, git_repo):
        _, first, second, feature = git_repo
        graph = CommitGraph.from_commits(repository.load_commits())
        membership = repository.current_branch_membership(graph.commits)
        layout = build_layout(graph, repository.main_branch_tip(), membership)
        assert layout.width == 2
        assert layout.node_for(second).column == 0
        assert layout.node_for(feature).column == 1
        assert not layout.node_for(feature).in_current_branch


class TestBranches:
    def test_current_branch(self, repository):
        assert repository.current_branch() == 'master'

    def test_membership(self, repository, git_repo):
        _, first, second, feature = git_repo
        membership = repository.current_branch_membership([first, second, feature])
        assert membership == {first: True, second: True, feature: False}

    def test_branches_at(self, repository, git_repo):
        _, first, second, feature = git_repo
        assert repository.branches_at(second) == ['master']
        assert repository.branches_at(feature) == ['feature']
        assert repository.branches_at(first) == []

    def test_branches_containing(self, repository, git_repo):
        assert repository.branches_for_commit(git_repo[1]) == ['master', 'feature']

    def test_no_upstream(self, repository, git_repo):
        assert repository.ahead_behind() == (0, 0, False)
        status = repository.sync_status_map(git_repo[1:])
        assert set(status.values()) == {SyncStatus.SYNCED}


class TestDetails:
    def test_commit_details(self, repository, git_repo):
        lines = repository.commit_details(git_repo[2])
        assert lines[0] == ('commit', f"commit {git_repo[2]}")
        assert ('branch', 'Branch: master') in lines
        assert ('message', 'More text') in lines

    def test_commit_diff(self, repository, git_repo):
        lines = repository.commit_diff(git_repo[2])
        assert ('add', '+world') in lines
        assert lines[0] == ('file', 'diff --git a/README b/README')

    def test_root_commit_diff(self, repository, git_repo):
        lines = repository.commit_diff(git_repo[1])
        assert ('meta', '--- /dev/null') in lines
        assert ('add', '+hello') in lines

    def test_unknown_commit(self, repository):
        assert repository.commit_diff('0' * 40) == []
        assert repository.commit_details('0' * 40)[0][0] == 'error'

    def test_untracked_file(self, repository, git_repo):
        (git_repo[0] / 'notes.txt').write_text('todo\n')
        assert ('notes.txt', STATUS_UNTRACKED) in repository.working_tree_status()


class TestReferenceNames:
    def test_revision_syntax_falls_through_to_revparse(self, repository, git_repo):
        assert repository.resolve_reference('master~1') == git_repo[1]

    def test_invalid_candidate_is_skipped(self, repository, git_repo):
        assert repository.main_branch_tip(('release~1', 'master')) == git_repo[2]

    @pytest.mark.parametrize('name', ['release~1', 'master~9', 'bad name'])
    def test_unresolvable_names_raise_not_found(self, repository, name):
        with pytest.raises(ReferenceNotFound):
            repository.resolve_reference(name)


class TestFileDiff:
    def test_modified_file(self, repository, git_repo):
        (git_repo[0] / 'README').write_text('hello\nworld\nagain\n')
        assert ('README', STATUS_MODIFIED) in repository.working_tree_status()
        lines = repository.file_diff('README', STATUS_MODIFIED)
        assert ('add', '+again') in lines
        assert ('del', '-world') not in lines

    def test_staged_file(self, repository, git_repo):
        (git_repo[0] / 'README').write_text('hello\n')
        repository.repo.index.add('README')
        repository.repo.index.write()
        lines = repository.file_diff('README', STATUS_STAGED)
        assert ('del', '-world') in lines
        assert repository.file_diff('README', STATUS_MODIFIED) == []

    def test_deleted_file(self, repository, git_repo):
        (git_repo[0] / 'README').unlink()
        assert ('README', STATUS_DELETED) in repository.working_tree_status()
        lines = repository.file_diff('README', STATUS_DELETED)
        assert ('meta', '+++ /dev/null') in lines
        assert ('del', '-hello') in lines

    def test_untracked_file(self, repository, git_repo):
        (git_repo[0] / 'notes.txt').write_text('first\nsecond\n')
        lines = repository.file_diff('notes.txt', STATUS_UNTRACKED)
        assert lines[2] == ('meta', '--- /dev/null')
        assert lines[-2:] == [('add', '+first'), ('add', '+second')]

    def test_missing_untracked_file(self, repository):
        assert repository.file_diff('gone.txt', STATUS_UNTRACKED) == []

    def test_diff_only_covers_the_file(self, repository, git_repo):
        (git_repo[0] / 'README').write_text('changed\n')
        commit_file(repository.repo, 'OTHER', 'x\n', 'Add other\n', 4000, [repository.repo.head.target])
        (git_repo[0] / 'OTHER').write_text('y\n')
        lines = repository.file_diff('OTHER', STATUS_MODIFIED)
        assert all('README' not in text for _, text in lines)


class TestIdentity:
    def test_user_identity_from_config(self, repository):
        repository.repo.config['user.name'] = 'Repo Author'
        repository.repo.config['user.email'] = 'author@example.com'
        assert repository.user_identity() == ('Repo Author', 'author@example.com')

    def test_closed_repository(self):
        assert Repository().user_identity() == (None, None)
