"""
Builders for small commit histories used across the tests
"""
import pygit2

from gitrail.models.commit import Commit


def cid(name):
    """Full id of a commit created by make_commit"""
    return name * 8


def make_commit(name, parents=(), timestamp=0, message=None):
    return Commit(cid(name), parents=[cid(p) for p in parents], message=message or f"commit {name}",
                  author='Tester', timestamp=timestamp)


def signature(timestamp):
    return pygit2.Signature('Tester', 'tester@example.com', timestamp, 0)


def commit_file(repo, name, content, message, timestamp, parents):
    """Write a file, stage it and commit on HEAD with pygit2"""
    with open(f"{repo.workdir}/{name}", 'w') as f:
        f.write(content)
    repo.index.add(name)
    repo.index.write()
    tree = repo.index.write_tree()
    sig = signature(timestamp)
    return repo.create_commit('HEAD', sig, sig, message, tree, parents)
