"""
Shared fixtures: small commit histories built without a repository
"""
import pytest

from gitrail.utils.log import Log

from helpers import make_commit


@pytest.fixture
def linear_commits():
    return [
        make_commit('a', timestamp=1),
        make_commit('b', ['a'], timestamp=2),
        make_commit('c', ['b'], timestamp=3),
    ]


@pytest.fixture
def merge_commits():
    return [
        make_commit('a', timestamp=1),
        make_commit('b', ['a'], timestamp=2),
        make_commit('c', ['a'], timestamp=3),
        make_commit('m', ['b', 'c'], timestamp=4),
    ]


@pytest.fixture
def reuse_commits():
    """Two feature branches, the second one starts after the first is merged"""
    return [
        make_commit('a', timestamp=1),
        make_commit('b', ['a'], timestamp=2),
        make_commit('f', ['b'], timestamp=3),
        make_commit('m', ['b', 'f'], timestamp=4),
        make_commit('c', ['m'], timestamp=5),
        make_commit('g', ['c'], timestamp=6),
        make_commit('n', ['c', 'g'], timestamp=7),
    ]


@pytest.fixture(autouse=True)
def clean_log():
    Log.clear()
    yield
    Log.clear()
