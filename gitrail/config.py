"""
Configuration settings for gitrail
"""

# Default CLI arguments
DEFAULT_ARGS = {
    'path': '.',                             # Repository discovery start
    'main_branches': ('master', 'main'),     # Candidates for the main lane
    'max_count': None,                       # No limit by default
    'ascii': False,                          # Use unicode box drawing
}

# Graph display settings
GRAPH_SETTINGS = {
    'charset': 'unicode',
    'lane_width': 2,      # Terminal cells per lane
    'message_width': 50,  # Commit title is cut after this many characters
    'glyphs': {
        # shape: (normal, bold)
        'unicode': {
            'commit':        ('○', '●'),
            'commit_head':   ('◉', '◉'),
            'vertical':      ('│', '┃'),
            'horizontal':    ('─', '━'),
            'top_right':     ('╮', '┓'),
            'bottom_right':  ('╯', '┛'),
            'top_left':      ('╭', '┏'),
            'bottom_left':   ('╰', '┗'),
            'tee_right':     ('├', '┣'),
            'tee_left':      ('┤', '┫'),
            'cross':         ('┼', '╋'),
        },
        'ascii': {
            'commit':        ('o', '*'),
            'commit_head':   ('@', '@'),
            'vertical':      ('|', '|'),
            'horizontal':    ('-', '='),
            'top_right':     ('\\', '\\'),
            'bottom_right':  ('/', '/'),
            'top_left':      ('/', '/'),
            'bottom_left':   ('\\', '\\'),
            'tee_right':     ('|', '|'),
            'tee_left':      ('|', '|'),
            'cross':         ('+', '+'),
        },
    },
}

# UI settings
UI_SETTINGS = {
    'input_timeout': 100,        # getch() timeout in milliseconds
    'status_message_time': 2,    # Seconds a transient message stays visible
    'graph_pane_ratio': 0.5,     # Share of screen width for the graph pane
    'top_pane_ratio': 0.7,       # Share of screen height for graph/details
    'details_cache_size': 64,    # Commits whose details and diff stay cached
}

# Logging settings
LOG_SETTINGS = {
    'level': 4,           # 0 off, 1 error, 2 warning, 3 success, 4 info, 5 debug
    'buffer_size': 1000,  # Number of log entries kept in memory
}
