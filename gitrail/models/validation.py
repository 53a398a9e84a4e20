"""
Background check of the git installation
"""
import subprocess
import threading

from gitrail.models.commands import run_git
from gitrail.utils.log import log_debug

MIN_GIT_VERSION = (2, 23)
LOG_FORMAT = '%H|%h|%P|%s|%an|%at'
LOG_FIELDS = 6


def parse_git_version(output):
    """
    Get (major, minor) from 'git --version' output

    Returns:
        tuple: (version string, (major, minor)) or (None, None)
    """
    words = output.split()
    if len(words) < 3:
        return None, None
    version = words[2]
    parts = version.split('.')
    try:
        return version, (int(parts[0]), int(parts[1]))
    except (IndexError, ValueError):
        return version, None


class ValidationResult:
    """Outcome of the environment checks"""

    def __init__(self):
        self.git_version = None
        self.version_ok = False
        self.failed_commands = []
        self.warnings = []

    def has_issues(self):
        return not self.version_ok or bool(self.failed_commands)

    def summary(self):
        lines = []
        if self.git_version is None:
            lines.append("Could not detect git version")
        elif not self.version_ok:
            lines.append(f"Git version {self.git_version} may not be fully supported (recommend 2.23+)")
        if self.failed_commands:
            lines.append(f"{len(self.failed_commands)} git command(s) failed validation: "
                         + ', '.join(self.failed_commands))
        lines.extend(self.warnings)
        return '\n'.join(lines)


class EnvironmentValidator:
    """
    Runs the checks once in a daemon thread

    The UI loop calls poll() every frame; it gets the result exactly once.
    """

    def __init__(self, workdir=None, git='git', timeout=10):
        self.workdir = workdir
        self.git = git
        self.timeout = timeout
        self._lock = threading.Lock()
        self._result = None
        self._delivered = False
        self._thread = None

    def start(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def poll(self):
        """Get the result the first time it's ready, None otherwise"""
        with self._lock:
            if self._delivered or self._result is None:
                return None
            self._delivered = True
            return self._result

    def join(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self):
        result = self.validate()
        with self._lock:
            self._result = result
        log_debug('Git environment validation finished')

    def _git(self, *args):
        try:
            return run_git(args, cwd=self.workdir, timeout=self.timeout, git=self.git)
        except (OSError, subprocess.TimeoutExpired) as e:
            log_debug(f"git {' '.join(args)}: {e}")
            return None

    def validate(self):
        result = ValidationResult()

        proc = self._git('--version')
        if proc is None:
            result.warnings.append("Could not execute git command")
        elif proc.returncode == 0:
            version, major_minor = parse_git_version(proc.stdout)
            result.git_version = version
            result.version_ok = major_minor is not None and major_minor >= MIN_GIT_VERSION

        proc = self._git('log', f'--pretty=format:{LOG_FORMAT}', '-1')
        if proc is None or proc.returncode != 0 or not proc.stdout:
            result.failed_commands.append('git log --pretty=format:...')
        else:
            fields = proc.stdout.strip().split('|')
            if len(fields) != LOG_FIELDS:
                result.warnings.append(
                    f"git log format validation failed: expected {LOG_FIELDS} fields, got {len(fields)}")

        if self._git('status', '--porcelain') is None:
            result.failed_commands.append('git status --porcelain')

        proc = self._git('rev-parse', 'HEAD')
        if proc is None:
            result.failed_commands.append('git rev-parse HEAD')
        elif proc.returncode != 0:
            result.warnings.append("Could not get HEAD commit (empty repo?)")

        if self._git('branch', '--list') is None:
            result.failed_commands.append('git branch --list')

        return result
