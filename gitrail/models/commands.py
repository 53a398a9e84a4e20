"""
Git commands offered in the actions pane
"""
import collections
import os
import subprocess

from gitrail.utils.log import log_error, log_info, log_success

CommandResult = collections.namedtuple('CommandResult', ['ok', 'message'])

# stderr fragment -> explanation shown instead of the raw git output
PUSH_HINTS = (
    ('fetch first', "Push rejected: remote has changes you don't have locally, pull first"),
    ('non-fast-forward', "Push rejected: non-fast-forward update, pull first"),
    ('has no upstream', "Push failed: no upstream branch set"),
    ('no upstream branch', "Push failed: no upstream branch set"),
    ('Authentication failed', "Push failed: authentication error"),
    ('Could not read from remote', "Push failed: authentication error"),
)


def run_git(args, cwd=None, timeout=None, git='git', env=None):
    """
    Run a git subcommand and capture its output

    Args:
        env (dict, optional): Variables added to the inherited environment

    Raises:
        OSError: git can't be started
        subprocess.TimeoutExpired: git didn't finish in time
    """
    cmd = [git] + list(args)
    log_info('Run job: ' + ' '.join(cmd))
    if env:
        env = {**os.environ, **env}
    return subprocess.run(cmd, capture_output=True, text=True, cwd=cwd, timeout=timeout, env=env)


# stderr fragments of an interactive rebase that stopped early
REBASE_HINTS = (
    ('uncommitted changes', "Working tree has uncommitted changes, commit or stash them first"),
    ('working tree', "Working tree has uncommitted changes, commit or stash them first"),
    ('could not detach HEAD', "Cannot rebase from this commit, it may not be on the current branch"),
)

# fetch refusals that only mean the local branch has its own work
PULL_ALL_SKIPPED = ('non-fast-forward', 'would clobber', 'refusing to fetch into')


def sequence_editor(actions):
    """
    GIT_SEQUENCE_EDITOR command rewriting 'pick' lines of a rebase todo list

    Args:
        actions (dict): commit id -> rebase action such as 'edit' or 'squash'

    Returns:
        str: sed invocation, git appends the todo file path
    """
    script = '; '.join(f"s/^pick {commit_id[:7]}/{action} {commit_id[:7]}/"
                       for commit_id, action in actions.items())
    return f"sed -i -e '{script}'"


class GitCommand:
    """
    One entry of the command catalogue

    Args:
        key (str): Identifier
        description (str): Text shown in the actions pane
        args (tuple): git arguments, '{commit}', '{text}' and '{ref}' are
            replaced by the selected commit, the entered text and the
            entered text falling back to the commit
        success (str): Message template on success
        confirm (str, optional): Question asked before running
        prompt (str, optional): Label of the text input the command needs
        needs_commit (bool): Command operates on the selected commit
        hints (tuple): (stderr fragment, message) pairs for known failures
        handler (str, optional): CommandRunner method for commands that
            take more than one git call, args are unused then
    """

    def __init__(self, key, description, args, success, confirm=None, prompt=None,
                 needs_commit=True, hints=(), handler=None):
        self.key = key
        self.description = description
        self.args = tuple(args)
        self.success = success
        self.confirm = confirm
        self.prompt = prompt
        self.needs_commit = needs_commit
        self.hints = hints
        self.handler = handler

    def __repr__(self):
        return f"GitCommand({self.key})"

    @property
    def needs_confirmation(self):
        return self.confirm is not None

    @property
    def needs_input(self):
        return self.prompt is not None

    @property
    def confirmation_message(self):
        return self.confirm or "Are you sure?"

    def _values(self, commit_id, text):
        short = (commit_id or '')[:7]
        return {
            'commit': commit_id or '',
            'short': short,
            'text': text or '',
            'ref': text or commit_id or '',
            'short_ref': text or short,
        }

    def build_args(self, commit_id=None, text=None):
        values = self._values(commit_id, text)
        return [arg.format(**values) for arg in self.args]

    def success_message(self, commit_id=None, text=None):
        return self.success.format(**self._values(commit_id, text))

    def failure_message(self, stderr):
        for fragment, message in self.hints:
            if fragment in stderr:
                return message
        stderr = stderr.strip()
        return f"{self.description} failed: {stderr}" if stderr else f"{self.description} failed"


COMMANDS = (
    GitCommand('checkout', "checkout", ('checkout', '{ref}'), "Checked out {short_ref}",
               confirm="Checkout this commit. Continue?"),
    GitCommand('create_branch', "create branch", ('checkout', '-b', '{text}', '{commit}'),
               "Created branch '{text}' at {short}", prompt="Branch name"),
    GitCommand('delete_branch', "force delete branch", ('branch', '-D', '{text}'),
               "Force deleted branch '{text}'",
               confirm="Force delete branch. This may orphan commits. Continue?"),
    GitCommand('reset', "reset --mixed", ('reset', '--mixed', '{commit}'), "Reset to {short}",
               confirm="Reset HEAD and unstage changes. Continue?"),
    GitCommand('reset_soft', "reset --soft", ('reset', '--soft', '{commit}'), "Soft reset to {short}",
               confirm="Reset HEAD but keep all changes staged. Continue?"),
    GitCommand('reset_hard', "reset --hard", ('reset', '--hard', '{commit}'), "Hard reset to {short}",
               confirm="WARNING: Reset HEAD and DISCARD ALL CHANGES. Continue?"),
    GitCommand('cherry_pick', "cherry-pick", ('cherry-pick', '{commit}'), "Cherry-picked {short}",
               confirm="Cherry-pick the selected commit onto current branch. Continue?"),
    GitCommand('revert', "revert", ('revert', '--no-edit', '{commit}'), "Reverted {short}",
               confirm="Revert the selected commit on current branch. Continue?"),
    GitCommand('rebase', "rebase", ('rebase', '{commit}'), "Rebased onto {short}",
               confirm="Rebase can rewrite history. Continue?"),
    GitCommand('merge', "merge", ('merge', '{commit}'), "Merged {short}",
               confirm="Merge the selected commit into current branch. Continue?"),
    GitCommand('squash', "squash last N commits", (), "Squashed {text} commits",
               prompt="Number of commits", hints=REBASE_HINTS, handler='squash_commits'),
    GitCommand('reword', "reword commit message", (), "Reworded commit message",
               prompt="New commit message", hints=REBASE_HINTS, handler='reword'),
    GitCommand('add', "add -A", ('add', '-A'), "Staged all changes", needs_commit=False),
    GitCommand('commit', "commit", ('commit', '-m', '{text}'), "Committed changes",
               prompt="Commit message", needs_commit=False),
    GitCommand('push', "push", ('push',), "Pushed to remote",
               confirm="Push changes to remote repository. Continue?", needs_commit=False, hints=PUSH_HINTS),
    GitCommand('pull', "pull", ('pull',), "Pulled from remote", needs_commit=False),
    GitCommand('pull_all', "fetch and sync all branches from remote", (), "Updated all branches",
               needs_commit=False, handler='pull_all'),
    GitCommand('set_user_name', "config user.name", ('config', 'user.name', '{text}'),
               "Set user.name to '{text}'", prompt="User name", needs_commit=False),
    GitCommand('set_user_email', "config user.email", ('config', 'user.email', '{text}'),
               "Set user.email to '{text}'", prompt="User email", needs_commit=False),
)

COMMANDS_BY_KEY = {command.key: command for command in COMMANDS}


class CommandRunner:
    """Runs catalogue commands in the repository working directory"""

    def __init__(self, workdir=None, timeout=None, git='git'):
        self.workdir = workdir
        self.timeout = timeout
        self.git = git

    def execute(self, command, commit_id=None, text=None):
        """
        Run a command, never raises for git failures

        Args:
            command (GitCommand): Command to run
            commit_id (str, optional): Selected commit
            text (str, optional): Branch name or message entered by the user

        Returns:
            CommandResult: ok flag and message for the status bar
        """
        if command.needs_commit and not commit_id:
            return self._fail(f"{command.description}: no commit selected")
        if command.needs_input and not (text and text.strip()):
            return self._fail(f"{command.description}: {command.prompt.lower()} is empty")
        if command.key == 'delete_branch' and not text:
            return self._fail("No branch at this commit")

        text = text.strip() if text else text
        try:
            if command.handler:
                return getattr(self, command.handler)(command, commit_id, text)
            proc = self._run(*command.build_args(commit_id, text))
        except (OSError, subprocess.TimeoutExpired) as e:
            return self._fail(f"Failed to execute git: {e}")

        if proc.returncode != 0:
            return self._fail(command.failure_message(proc.stderr or proc.stdout or ''))
        return self._succeed(command.success_message(commit_id, text))

    def _run(self, *args, env=None):
        return run_git(args, cwd=self.workdir, timeout=self.timeout, git=self.git, env=env)

    def _succeed(self, message):
        log_success(message)
        return CommandResult(True, message)

    def _fail(self, message):
        log_error(message)
        return CommandResult(False, message)

    def _check_rewritable(self, verb, commit_id):
        """
        Refuse to rewrite commits that aren't a branch tip on the current branch

        Returns:
            CommandResult: Failure, or None when the commit may be rewritten
        """
        short = commit_id[:7]
        proc = self._run('branch', '--points-at', commit_id, '--format=%(refname:short)')
        if proc.returncode != 0 or not proc.stdout.strip():
            return self._fail(f"Cannot {verb}: commit {short} is not at any branch tip")
        proc = self._run('merge-base', '--is-ancestor', commit_id, 'HEAD')
        if proc.returncode != 0:
            return self._fail(f"Cannot {verb}: commit {short} is not on the current branch, "
                              "checkout the branch containing it first")
        return None

    def _head(self):
        proc = self._run('rev-parse', 'HEAD')
        return proc.stdout.strip() if proc.returncode == 0 else None

    def _abort_rebase(self, command, proc):
        message = command.failure_message(proc.stderr or proc.stdout or '')
        self._run('rebase', '--abort')
        return self._fail(message)

    def reword(self, command, commit_id, text):
        """Amend HEAD, or stop an interactive rebase at the commit and amend it there"""
        refused = self._check_rewritable('reword', commit_id)
        if refused:
            return refused

        if commit_id == self._head():
            proc = self._run('commit', '--amend', '-m', text)
            if proc.returncode != 0:
                return self._fail(command.failure_message(proc.stderr))
            return self._succeed(command.success_message(commit_id, text))

        proc = self._run('rev-parse', f'{commit_id}^')
        if proc.returncode != 0:
            return self._fail("Cannot reword the initial commit")
        parent = proc.stdout.strip()

        proc = self._run('rebase', '-i', parent, env={'GIT_SEQUENCE_EDITOR': sequence_editor({commit_id: 'edit'})})
        if proc.returncode != 0:
            return self._abort_rebase(command, proc)
        proc = self._run('commit', '--amend', '-m', text)
        if proc.returncode != 0:
            return self._abort_rebase(command, proc)
        proc = self._run('rebase', '--continue', env={'GIT_EDITOR': 'true'})
        if proc.returncode != 0:
            return self._abort_rebase(command, proc)
        return self._succeed(command.success_message(commit_id, text))

    def squash_commits(self, command, commit_id, text):
        """Fold the commit and its count - 1 first-parent ancestors into one commit"""
        try:
            count = int(text)
        except ValueError:
            return self._fail(f"Number of commits must be a number, got '{text}'")
        if count < 2:
            return self._fail("Squash needs at least 2 commits")

        refused = self._check_rewritable('squash', commit_id)
        if refused:
            return refused

        proc = self._run('rev-parse', f'{commit_id}~{count}')
        if proc.returncode != 0:
            return self._fail("Not enough commits in history to squash")
        parent = proc.stdout.strip()

        if commit_id == self._head():
            proc = self._run('log', f'-{count}', '--first-parent', '--format=%B', commit_id)
            message = proc.stdout.strip()
            if proc.returncode != 0 or not message:
                return self._fail("Cannot read the commit messages to squash")
            proc = self._run('reset', '--soft', parent)
            if proc.returncode != 0:
                return self._fail(command.failure_message(proc.stderr))
            proc = self._run('commit', '-m', message)
            if proc.returncode != 0:
                return self._fail(command.failure_message(proc.stderr))
            return self._succeed(command.success_message(commit_id, str(count)))

        proc = self._run('log', f'-{count}', '--first-parent', '--format=%H', commit_id)
        oldest_first = list(reversed(proc.stdout.split()))
        if proc.returncode != 0 or len(oldest_first) < 2:
            return self._fail("Only one commit, cannot squash")

        editor = sequence_editor({squashed: 'squash' for squashed in oldest_first[1:]})
        proc = self._run('rebase', '-i', parent, env={'GIT_SEQUENCE_EDITOR': editor, 'GIT_EDITOR': 'true'})
        if proc.returncode != 0:
            return self._abort_rebase(command, proc)
        return self._succeed(command.success_message(commit_id, str(count)))

    def pull_all(self, command, commit_id, text):
        """Fetch every remote and fast-forward or create a local branch per origin branch"""
        proc = self._run('fetch', '--all')
        if proc.returncode != 0:
            return self._fail("Failed to fetch from remote")

        proc = self._run('branch', '-r', '--format=%(refname:short)')
        if proc.returncode != 0:
            return self._fail("Failed to list remote branches")
        remote_branches = [name.strip() for name in proc.stdout.splitlines()
                           if name.strip() and 'HEAD' not in name]

        proc = self._run('branch', '--format=%(refname:short)')
        local_branches = {name.strip() for name in proc.stdout.splitlines() if name.strip()}

        updated = created = skipped = 0
        errors = []
        for remote_branch in remote_branches:
            if not remote_branch.startswith('origin/'):
                continue
            name = remote_branch[len('origin/'):]
            proc = self._run('fetch', 'origin', f'{name}:{name}')
            if proc.returncode == 0:
                if name in local_branches:
                    updated += 1
                else:
                    created += 1
            elif any(fragment in proc.stderr for fragment in PULL_ALL_SKIPPED):
                skipped += 1
            elif proc.stderr.strip():
                errors.append(f"{name}: {proc.stderr.strip()}")

        message = f"Updated {updated + created} branches"
        if created:
            message += f" (created {created} new)"
        if skipped:
            message += f", skipped {skipped} (local changes)"
        if errors:
            message += f", {len(errors)} errors"
            for error in errors:
                log_error(error)
        return self._succeed(message)
