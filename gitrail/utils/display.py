"""
Display utilities
"""
import curses

SELECTED_OFFSET = 100

# Color name -> pair number
COLORS = {
    'white': 1,
    'red': 2,
    'green': 3,
    'yellow': 4,
    'cyan': 5,
    'magenta': 6,
    'blue': 7,
    'grey': 8,
    'header': 10,
    'error': 11,
    'warning': 12,
    'success': 13,
}

DIFF_COLORS = {
    'commit': 'yellow',
    'branch': 'green',
    'file': 'blue',
    'meta': 'white',
    'hunk': 'cyan',
    'add': 'green',
    'del': 'red',
    'context': 'white',
    'message': 'white',
    'error': 'red',
}


def _grey():
    # 256 color grey, dimmed white otherwise
    return 245 if curses.COLORS >= 256 else curses.COLOR_WHITE


def setup_colors():
    """
    Set up color pairs for curses
    """
    curses.start_color()
    curses.use_default_colors()
    foregrounds = {
        'white': curses.COLOR_WHITE,
        'red': curses.COLOR_RED,
        'green': curses.COLOR_GREEN,
        'yellow': curses.COLOR_YELLOW,
        'cyan': curses.COLOR_CYAN,
        'magenta': curses.COLOR_MAGENTA,
        'blue': curses.COLOR_BLUE,
        'grey': _grey(),
    }
    for name, color in foregrounds.items():
        curses.init_pair(COLORS[name], color, -1)
        # Selected versions of colors (+100)
        curses.init_pair(SELECTED_OFFSET + COLORS[name], color, curses.COLOR_BLUE)

    curses.init_pair(COLORS['header'], curses.COLOR_BLACK, curses.COLOR_WHITE)
    curses.init_pair(COLORS['error'], curses.COLOR_WHITE, curses.COLOR_RED)
    curses.init_pair(COLORS['warning'], curses.COLOR_BLACK, curses.COLOR_YELLOW)
    curses.init_pair(COLORS['success'], curses.COLOR_BLACK, curses.COLOR_GREEN)


def color_attr(name, selected=False, bold=False, dim=False):
    """
    Curses attribute for a named color

    Args:
        name (str): Key of COLORS
        selected (bool): Use the selection background
        bold (bool): Add A_BOLD
        dim (bool): Add A_DIM

    Returns:
        int: Attribute for addstr
    """
    pair = COLORS.get(name, COLORS['white'])
    if selected and pair < COLORS['header']:
        pair += SELECTED_OFFSET
    attr = curses.color_pair(pair)
    if bold:
        attr |= curses.A_BOLD
    if dim or (name == 'grey' and curses.COLORS < 256):
        attr |= curses.A_DIM
    return attr


def style_attr(style, selected=False):
    """Curses attribute for a row renderer Style"""
    return color_attr(style.color, selected, bold=style.bold)


def add_text(win, y, x, text, attr=0, max_x=None):
    """
    Write text clipped to the window width

    Returns:
        int: Column after the written text
    """
    max_y, width = win.getmaxyx()
    limit = width if max_x is None else min(width, max_x)
    if y < 0 or y >= max_y or x >= limit:
        return x
    text = text[:limit - x]
    # the bottom-right cell raises after the cursor moves past it
    if y == max_y - 1 and x + len(text) >= width:
        text = text[:width - 1 - x]
    if not text:
        return x
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        pass
    return x + len(text)


def add_segments(win, y, x, segments, selected=False, max_x=None):
    """
    Write rendered row segments each with its own style

    Returns:
        int: Column after the last segment
    """
    for segment in segments:
        x = add_text(win, y, x, segment.text, style_attr(segment.style, selected), max_x)
    return x
