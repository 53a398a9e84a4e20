"""
Utils module exports
"""
from gitrail.utils.display import add_segments, add_text, color_attr, setup_colors, style_attr
from gitrail.utils.log import log_debug, log_error, log_info, log_success, log_warning

__all__ = [
    'add_segments',
    'add_text',
    'color_attr',
    'setup_colors',
    'style_attr',
    'log_debug',
    'log_error',
    'log_info',
    'log_success',
    'log_warning',
]
