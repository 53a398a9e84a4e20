"""
Views module exports
"""
from gitrail.views.base_view import BaseView
from gitrail.views.row_renderer import Renderer, Segment, Style
from gitrail.views.graph_lines import build_graph_lines
from gitrail.views.commit_view import CommitView
from gitrail.views.details_view import DetailsView
from gitrail.views.actions_view import ActionsView
from gitrail.views.status_view import StatusBar, StatusView
from gitrail.views.dialog_view import ConfirmDialog, InputDialog, SelectDialog
from gitrail.views.help_view import HelpView
from gitrail.views.loading_view import LoadingView
from gitrail.views.file_diff_view import FileDiffView

__all__ = [
    'BaseView',
    'Renderer',
    'Segment',
    'Style',
    'build_graph_lines',
    'CommitView',
    'DetailsView',
    'ActionsView',
    'StatusBar',
    'StatusView',
    'ConfirmDialog',
    'InputDialog',
    'SelectDialog',
    'HelpView',
    'LoadingView',
    'FileDiffView',
]
