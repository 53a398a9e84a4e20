"""
Git commit model class
"""

class Commit:
    """Immutable record of one commit as read from the repository"""

    __slots__ = ('id', 'short_id', 'parents', 'message', 'author', 'timestamp')

    def __init__(self, commit_id, parents=(), message='', author='', timestamp=0, short_id=None):
        """
        Initialize a new Commit object.

        Args:
            commit_id (str): Full commit hash
            parents (iterable): Parent commit IDs, first parent first
            message (str): Full commit message
            author (str): Author name
            timestamp (int): Commit time in seconds, only used for ordering
            short_id (str, optional): Display abbreviation, defaults to 7 characters
        """
        object.__setattr__(self, 'id', commit_id)
        object.__setattr__(self, 'short_id', short_id or commit_id[:7])
        object.__setattr__(self, 'parents', tuple(parents))
        object.__setattr__(self, 'message', message)
        object.__setattr__(self, 'author', author)
        object.__setattr__(self, 'timestamp', int(timestamp))

    def __setattr__(self, name, value):
        raise AttributeError(f"Commit is immutable, cannot set '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"Commit is immutable, cannot delete '{name}'")

    def __eq__(self, other):
        if not isinstance(other, Commit):
            return NotImplemented
        return (self.id, self.parents, self.message, self.author, self.timestamp) == \
               (other.id, other.parents, other.message, other.author, other.timestamp)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Commit({self.short_id}, parents={[p[:7] for p in self.parents]})"

    def __str__(self):
        """String representation of commit"""
        return f"{self.short_id} - {self.title}"

    @property
    def title(self):
        """First line of the message"""
        return self.message.split('\n', 1)[0] if self.message else ''

    @property
    def first_parent(self):
        return self.parents[0] if self.parents else None

    @property
    def is_merge(self):
        """Check if commit is a merge commit"""
        return len(self.parents) > 1

    @property
    def is_root(self):
        return not self.parents


class SyncStatus:
    """Where a commit lives relative to the upstream of the current branch"""

    SYNCED = 'synced'
    LOCAL_ONLY = 'local_only'
    REMOTE_ONLY = 'remote_only'
    DIVERGED = 'diverged'

    ALL = (SYNCED, LOCAL_ONLY, REMOTE_ONLY, DIVERGED)
