"""
Models module exports
"""
from gitrail.models.commit import Commit, SyncStatus
from gitrail.models.graph import CommitGraph
from gitrail.models.layout import Connection, GraphLayout, GraphNode, build_layout

__all__ = [
    'Commit',
    'SyncStatus',
    'CommitGraph',
    'Connection',
    'GraphLayout',
    'GraphNode',
    'build_layout',
]
