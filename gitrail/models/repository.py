"""
Git repository interface
"""
import os
from datetime import datetime

import pygit2
from pygit2 import GIT_SORT_NONE, GIT_SORT_TOPOLOGICAL, GIT_SORT_TIME

from gitrail.config import DEFAULT_ARGS
from gitrail.models.commit import Commit, SyncStatus
from gitrail.utils.log import log_debug, log_error, log_info, log_warning

WALK_PREFIXES = ('refs/heads/', 'refs/remotes/', 'refs/tags/')

STATUS_STAGED = 'staged'
STATUS_MODIFIED = 'modified'
STATUS_DELETED = 'deleted'
STATUS_UNTRACKED = 'untracked'

GIT_ERRORS = (pygit2.GitError, pygit2.InvalidSpecError, KeyError, ValueError)


class ReferenceNotFound(LookupError):
    """A branch or revision name doesn't resolve to a commit"""


def _main_first(names, main_branches):
    return sorted(names, key=lambda name: (name not in main_branches, name))


class Repository:
    """Interface to the Git repository"""

    def __init__(self):
        """Initialize repository interface"""
        self.repo = None
        self.path = None

    def open(self, path=None):
        """
        Open Git repository at the given path or discover from current directory

        Args:
            path (str, optional): Path to repository directory

        Returns:
            bool: True if opened successfully, False otherwise
        """
        try:
            repo_path = pygit2.discover_repository(path or '.')
            if repo_path is None:
                log_error(f"Not a git repository: {path or '.'}")
                return False
            self.repo = pygit2.Repository(repo_path)
        except GIT_ERRORS as e:
            log_error(f"Cannot open repository: {e}")
            return False
        self.path = self.repo.workdir or self.repo.path
        log_info(f"Opened repository {self.path}")
        return True

    @property
    def workdir(self):
        return self.repo.workdir if self.repo else None

    def _peel_commit(self, obj):
        return obj.peel(pygit2.Commit)

    def _walk_starts(self):
        """Commit ids of every branch, remote branch and tag plus HEAD"""
        starts = []
        for ref_name in self.repo.references:
            if not ref_name.startswith(WALK_PREFIXES):
                continue
            try:
                target = self._peel_commit(self.repo.references[ref_name]).id
            except GIT_ERRORS as e:
                # tags of trees or blobs and broken symbolic refs
                log_debug(f"Skipping {ref_name}: {e}")
                continue
            if target not in starts:
                starts.append(target)

        head_id = self._head_oid()
        if head_id is not None and head_id not in starts:
            starts.append(head_id)
        return starts

    def _head_oid(self):
        if self.repo.head_is_unborn:
            return None
        try:
            return self._peel_commit(self.repo.head).id
        except GIT_ERRORS:
            return None

    def load_commits(self, max_count=None):
        """
        Load commit history using pygit2

        Args:
            max_count (int, optional): Stop after this many commits

        Returns:
            list: Commit objects, newest first as walked
        """
        if self.repo is None:
            return []

        starts = self._walk_starts()
        if not starts:
            log_warning("No branches, tags or HEAD to show")
            return []

        walker = self.repo.walk(starts[0], GIT_SORT_TOPOLOGICAL | GIT_SORT_TIME)
        for oid in starts[1:]:
            walker.push(oid)

        commits = []
        for pygit_commit in walker:
            commits.append(Commit(
                str(pygit_commit.id),
                parents=[str(parent_id) for parent_id in pygit_commit.parent_ids],
                message=pygit_commit.message or '',
                author=pygit_commit.author.name or 'Unknown',
                timestamp=pygit_commit.commit_time,
                short_id=pygit_commit.short_id,
            ))
            if max_count and len(commits) >= max_count:
                break

        log_debug(f"Loaded {len(commits)} commits from {len(starts)} references")
        return commits

    def resolve_reference(self, name):
        """
        Get the commit id a branch or revision points at

        Args:
            name (str): Local branch name or any revision git understands

        Returns:
            str: Commit id

        Raises:
            ReferenceNotFound: Name doesn't resolve to a commit
        """
        if self.repo is None:
            raise ReferenceNotFound(name)

        try:
            ref = self.repo.references.get(f'refs/heads/{name}')
        except GIT_ERRORS:
            # revision syntax like 'master~1' is not a valid reference name
            ref = None
        try:
            target = ref if ref is not None else self.repo.revparse_single(name)
            return str(self._peel_commit(target).id)
        except GIT_ERRORS as e:
            raise ReferenceNotFound(name) from e

    def main_branch_tip(self, candidates=DEFAULT_ARGS['main_branches']):
        """First of the candidate branches that exists, None otherwise"""
        for name in candidates:
            try:
                return self.resolve_reference(name)
            except ReferenceNotFound:
                continue
        log_warning(f"No main branch found among {', '.join(candidates)}")
        return None

    def head_commit_id(self):
        head_id = self._head_oid() if self.repo else None
        return str(head_id) if head_id is not None else None

    def current_branch(self):
        """Short name of the checked out branch"""
        if self.repo is None or self.repo.head_is_unborn:
            return 'HEAD'
        if self.repo.head_is_detached:
            return 'HEAD (detached)'
        return self.repo.head.shorthand

    def _reachable(self, start, hide=None):
        walker = self.repo.walk(start, GIT_SORT_NONE)
        if hide is not None:
            walker.hide(hide)
        return {str(commit.id) for commit in walker}

    def current_branch_membership(self, commit_ids):
        """
        Classify commits by reachability from HEAD

        Args:
            commit_ids: Ids to classify

        Returns:
            dict: commit id -> bool
        """
        head_id = self._head_oid() if self.repo else None
        if head_id is None:
            return {commit_id: True for commit_id in commit_ids}
        reachable = self._reachable(head_id)
        return {commit_id: commit_id in reachable for commit_id in commit_ids}

    def _upstream_oid(self):
        if self.repo is None or self.repo.head_is_unborn or self.repo.head_is_detached:
            return None
        branch = self.repo.branches.local.get(self.repo.head.shorthand)
        if branch is None:
            return None
        try:
            upstream = branch.upstream
        except GIT_ERRORS as e:
            log_debug(f"No upstream for {branch.branch_name}: {e}")
            return None
        if upstream is None:
            return None
        return self._peel_commit(upstream).id

    def ahead_behind(self):
        """
        Compare the current branch with its upstream

        Returns:
            tuple: (ahead, behind, has_upstream)
        """
        upstream_id = self._upstream_oid()
        head_id = self._head_oid() if self.repo else None
        if upstream_id is None or head_id is None:
            return 0, 0, False
        ahead, behind = self.repo.ahead_behind(head_id, upstream_id)
        return ahead, behind, True

    def sync_status_map(self, commit_ids):
        """
        Sync status of commits against the upstream of the current branch

        Commits only on the local side are local_only, or diverged when the
        upstream has commits of its own too. Commits only on the upstream
        side are remote_only. Everything else is synced.

        Returns:
            dict: commit id -> SyncStatus
        """
        status = {commit_id: SyncStatus.SYNCED for commit_id in commit_ids}
        upstream_id = self._upstream_oid()
        head_id = self._head_oid() if self.repo else None
        if upstream_id is None or head_id is None or upstream_id == head_id:
            return status

        local_only = self._reachable(head_id, hide=upstream_id)
        remote_only = self._reachable(upstream_id, hide=head_id)
        local_status = SyncStatus.DIVERGED if remote_only else SyncStatus.LOCAL_ONLY
        for commit_id in status:
            if commit_id in local_only:
                status[commit_id] = local_status
            elif commit_id in remote_only:
                status[commit_id] = SyncStatus.REMOTE_ONLY
        return status

    def _branch_tips(self):
        tips = {}
        for name in self.repo.branches.local:
            try:
                tips[name] = self._peel_commit(self.repo.branches.local[name]).id
            except GIT_ERRORS as e:
                log_debug(f"Skipping branch {name}: {e}")
        return tips

    def branches_at(self, commit_id, main_branches=DEFAULT_ARGS['main_branches']):
        """Local branches whose tip is the commit, main branches first"""
        if self.repo is None:
            return []
        try:
            oid = pygit2.Oid(hex=commit_id)
        except GIT_ERRORS:
            return []
        pointing = [name for name, tip in self._branch_tips().items() if tip == oid]
        return _main_first(pointing, main_branches)

    def branches_for_commit(self, commit_id, main_branches=DEFAULT_ARGS['main_branches']):
        """
        Local branches pointing at a commit, or containing it when none does

        Returns:
            list: Branch names, main branches first
        """
        pointing = self.branches_at(commit_id, main_branches)
        if pointing or self.repo is None:
            return pointing
        try:
            oid = pygit2.Oid(hex=commit_id)
        except GIT_ERRORS:
            return []
        containing = [name for name, tip in self._branch_tips().items() if self.repo.descendant_of(tip, oid)]
        return _main_first(containing, main_branches)

    def commit_details(self, commit_id):
        """
        Header lines of a commit for the details pane

        Returns:
            list: (kind, text) tuples
        """
        try:
            pygit_commit = self._peel_commit(self.repo.get(commit_id))
        except (AttributeError, *GIT_ERRORS):
            return [('error', f"Cannot read commit {commit_id}")]

        branches = self.branches_for_commit(commit_id)
        date = datetime.fromtimestamp(pygit_commit.commit_time).strftime('%a %b %d %H:%M:%S %Y')
        lines = [
            ('commit', f"commit {pygit_commit.id}"),
            ('branch', f"Branch: {', '.join(branches) if branches else '(unknown)'}"),
            ('context', f"Author: {pygit_commit.author.name} <{pygit_commit.author.email}>"),
            ('context', f"Date:   {date}"),
            ('context', ""),
        ]
        for line in pygit_commit.message.rstrip('\n').split('\n'):
            lines.append(('message', line))
        lines.append(('context', ""))
        return lines

    def commit_diff(self, commit_id):
        """
        Diff of a commit against its first parent

        Args:
            commit_id (str): ID of the commit to diff

        Returns:
            list: Formatted diff lines as (kind, text) tuples
        """
        if self.repo is None or not commit_id:
            return []
        try:
            pygit_commit = self._peel_commit(self.repo.get(commit_id))
            if pygit_commit.parents:
                diff = self.repo.diff(pygit_commit.parents[0], pygit_commit)
            else:
                # root commit, everything is added
                diff = pygit_commit.tree.diff_to_tree(swap=True)
        except (AttributeError, *GIT_ERRORS) as e:
            log_error(f"Cannot diff {commit_id[:7]}: {e}")
            return []

        diff_lines = []
        for patch in diff:
            diff_lines.extend(self._format_patch(patch))
        return diff_lines

    def _format_patch(self, patch):
        """Format a patch into diff lines"""
        diff_lines = []
        delta = patch.delta
        status = delta.status_char()

        if status == 'A':
            diff_lines.append(('file', f"diff --git a/{delta.new_file.path} b/{delta.new_file.path}"))
            diff_lines.append(('file', f"new file mode {delta.new_file.mode:06o}"))
            diff_lines.append(('meta', "--- /dev/null"))
            diff_lines.append(('meta', f"+++ b/{delta.new_file.path}"))
        elif status == 'D':
            diff_lines.append(('file', f"diff --git a/{delta.old_file.path} b/{delta.old_file.path}"))
            diff_lines.append(('file', f"deleted file mode {delta.old_file.mode:06o}"))
            diff_lines.append(('meta', f"--- a/{delta.old_file.path}"))
            diff_lines.append(('meta', "+++ /dev/null"))
        elif status == 'R':
            diff_lines.append(('file', f"diff --git a/{delta.old_file.path} b/{delta.new_file.path}"))
            diff_lines.append(('file', f"rename from {delta.old_file.path}"))
            diff_lines.append(('file', f"rename to {delta.new_file.path}"))
        else:
            diff_lines.append(('file', f"diff --git a/{delta.old_file.path} b/{delta.new_file.path}"))
            diff_lines.append(('meta', f"--- a/{delta.old_file.path}"))
            diff_lines.append(('meta', f"+++ b/{delta.new_file.path}"))

        if delta.is_binary:
            diff_lines.append(('meta', "Binary files differ"))
            return diff_lines

        for hunk in patch.hunks:
            diff_lines.append(('hunk', f"@@ -{hunk.old_start},{hunk.old_lines} +{hunk.new_start},{hunk.new_lines} @@"))
            for line in hunk.lines:
                content = line.origin + line.content.rstrip('\n')
                if line.origin == '+':
                    diff_lines.append(('add', content))
                elif line.origin == '-':
                    diff_lines.append(('del', content))
                else:
                    diff_lines.append(('context', content))
        return diff_lines

    def working_tree_status(self):
        """
        Changed files of the working tree

        Returns:
            list: (path, status) tuples sorted by path, a path can appear twice
                  when it has both staged and unstaged changes
        """
        if self.repo is None or self.repo.is_bare:
            return []
        try:
            statuses = self.repo.status()
        except GIT_ERRORS as e:
            log_error(f"Cannot read working tree status: {e}")
            return []

        staged_flags = pygit2.GIT_STATUS_INDEX_NEW | pygit2.GIT_STATUS_INDEX_MODIFIED | \
            pygit2.GIT_STATUS_INDEX_DELETED | pygit2.GIT_STATUS_INDEX_RENAMED
        entries = []
        for path, flags in sorted(statuses.items()):
            if flags & pygit2.GIT_STATUS_IGNORED:
                continue
            if flags & staged_flags:
                entries.append((path, STATUS_STAGED))
            if flags & pygit2.GIT_STATUS_WT_MODIFIED:
                entries.append((path, STATUS_MODIFIED))
            if flags & pygit2.GIT_STATUS_WT_DELETED:
                entries.append((path, STATUS_DELETED))
            if flags & pygit2.GIT_STATUS_WT_NEW:
                entries.append((path, STATUS_UNTRACKED))
        return entries

    def _added_file_lines(self, path, data):
        lines = [
            ('file', f"diff --git a/{path} b/{path}"),
            ('file', "new file"),
            ('meta', "--- /dev/null"),
            ('meta', f"+++ b/{path}"),
        ]
        if b'\0' in data:
            lines.append(('meta', "Binary files differ"))
            return lines
        text = data.decode('utf-8', errors='replace').splitlines()
        lines.append(('hunk', f"@@ -0,0 +1,{len(text)} @@"))
        lines.extend(('add', '+' + line) for line in text)
        return lines

    def file_diff(self, path, status):
        """
        Diff of one working tree entry

        Staged entries are diffed index against HEAD, modified and deleted
        ones working tree against index, untracked files show as all added.

        Args:
            path (str): Path relative to the working directory
            status (str): Status from working_tree_status

        Returns:
            list: Formatted diff lines as (kind, text) tuples
        """
        if self.repo is None or self.repo.is_bare:
            return []
        try:
            if status == STATUS_UNTRACKED:
                with open(os.path.join(self.repo.workdir, path), 'rb') as f:
                    return self._added_file_lines(path, f.read())
            if status == STATUS_STAGED:
                if self.repo.head_is_unborn:
                    return self._added_file_lines(path, self.repo[self.repo.index[path].id].data)
                diff = self.repo.diff('HEAD', cached=True)
            else:
                diff = self.repo.diff()
        except (OSError, *GIT_ERRORS) as e:
            log_error(f"Cannot diff {path}: {e}")
            return []

        diff_lines = []
        for patch in diff:
            if path in (patch.delta.new_file.path, patch.delta.old_file.path):
                diff_lines.extend(self._format_patch(patch))
        return diff_lines

    def user_identity(self):
        """
        Configured author identity

        Returns:
            tuple: (user.name, user.email), None for unset values
        """
        if self.repo is None:
            return None, None
        config = self.repo.config
        values = []
        for key in ('user.name', 'user.email'):
            try:
                values.append(config[key] if key in config else None)
            except GIT_ERRORS as e:
                log_debug(f"Cannot read {key}: {e}")
                values.append(None)
        return tuple(values)
