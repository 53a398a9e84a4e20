"""
Commit store: parent/child links, topological order and ancestry
"""


def _newest_first_key(commit):
    # newest timestamp first, commit id ascending on ties
    return (-commit.timestamp, commit.id)


class CommitGraph:
    """All loaded commits keyed by id, plus derived children index"""

    def __init__(self):
        self.commits = {}
        self._children = {}
        self.ancestry_path = frozenset()

    @classmethod
    def from_commits(cls, commits):
        """
        Build a graph from a raw, unordered batch of commits

        Ingests all records first, then derives the children index so that
        the order of the batch doesn't matter.

        Args:
            commits: Iterable of Commit objects

        Returns:
            CommitGraph: Graph with children back-links populated
        """
        graph = cls()
        for commit in commits:
            graph.add_commit(commit)
        graph.build_children()
        return graph

    def add_commit(self, commit):
        """Add a commit, the first record wins for duplicate ids"""
        if commit.id in self.commits:
            return False
        self.commits[commit.id] = commit
        return True

    def build_children(self):
        """Derive children lists from parent links of loaded commits"""
        children = {commit_id: [] for commit_id in self.commits}
        for commit in self.commits.values():
            for parent_id in commit.parents:
                siblings = children.get(parent_id)
                if siblings is not None and commit.id not in siblings:
                    siblings.append(commit.id)
        self._children = children

    def __len__(self):
        return len(self.commits)

    def __contains__(self, commit_id):
        return commit_id in self.commits

    def get(self, commit_id):
        return self.commits.get(commit_id)

    def children_of(self, commit_id):
        """Get ids of loaded commits that list commit_id as a parent"""
        return tuple(self._children.get(commit_id, ()))

    def loaded_parents(self, commit_id):
        commit = self.commits.get(commit_id)
        if not commit:
            return ()
        return tuple(p for p in commit.parents if p in self.commits)

    def topological_sort(self):
        """
        Order commits oldest to newest, every parent before its children

        Kahn's algorithm over parent -> child edges. Ready commits are sorted
        newest first and consumed from the end, so among equally ready
        commits the oldest is emitted first. Reversing the result puts the
        newest child of a commit right above it, which keeps that child in
        its parent's lane during lane assignment.

        Returns:
            list: Commit ids
        """
        in_degree = {commit_id: 0 for commit_id in self.commits}
        for commit_id in self.commits:
            for child_id in self._children.get(commit_id, ()):
                in_degree[child_id] += 1

        stack = [self.commits[commit_id] for commit_id, degree in in_degree.items() if degree == 0]
        stack.sort(key=_newest_first_key)

        result = []
        while stack:
            commit = stack.pop()
            result.append(commit.id)

            children = [self.commits[child_id] for child_id in self._children.get(commit.id, ())]
            children.sort(key=_newest_first_key)
            for child in children:
                in_degree[child.id] -= 1
                if in_degree[child.id] == 0:
                    stack.append(child)

        return result

    def newest_first(self):
        """Reverse topological order, every parent after all of its children"""
        order = self.topological_sort()
        order.reverse()
        return order

    def first_parent_chain(self, tip_id):
        """Follow first parents from tip_id while commits are loaded"""
        chain = []
        seen = set()
        current = tip_id
        while current in self.commits and current not in seen:
            seen.add(current)
            chain.append(current)
            current = self.commits[current].first_parent
        return chain

    def trace_ancestry(self, commit_id):
        """
        Replace the ancestry path with everything reachable from commit_id

        Iterative depth-first walk, parents that are not loaded end the walk.

        Args:
            commit_id (str): Starting commit

        Returns:
            frozenset: The new ancestry path
        """
        visited = set()
        stack = [commit_id]
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)

            commit = self.commits.get(current)
            if commit:
                stack.extend(commit.parents)

        self.ancestry_path = frozenset(visited)
        return self.ancestry_path

    def clear_ancestry(self):
        self.ancestry_path = frozenset()

    def is_on_ancestry_path(self, commit_id):
        return commit_id in self.ancestry_path
