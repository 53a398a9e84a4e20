"""
Application log kept in memory and mirrored to the status bar
"""
import collections
import datetime
import time

from gitrail.config import LOG_SETTINGS

LEVEL_ERROR = 1
LEVEL_WARNING = 2
LEVEL_SUCCESS = 3
LEVEL_INFO = 4
LEVEL_DEBUG = 5


class Log:
    """Process wide log buffer, the curses UI reads it to draw the status bar"""

    level = LOG_SETTINGS['level']
    entries = collections.deque(maxlen=LOG_SETTINGS['buffer_size'])

    status_message = ''
    status_level = None
    status_time = 0.0

    @classmethod
    def add(cls, level, txt, to_status_bar=False):
        now = datetime.datetime.now()
        first_line = ''
        for line in str(txt).splitlines() or ['']:
            cls.entries.append((now, level, line))
            if not first_line:
                first_line = line
        if to_status_bar:
            cls.set_status(first_line, level)

    @classmethod
    def set_status(cls, message, level=LEVEL_INFO):
        cls.status_message = message
        cls.status_level = level
        cls.status_time = time.time()

    @classmethod
    def current_status(cls, timeout):
        """
        Get the transient status bar message

        Args:
            timeout (float): Seconds a message stays visible

        Returns:
            tuple: (message, level) or (None, None) when expired
        """
        if cls.status_message and time.time() - cls.status_time < timeout:
            return cls.status_message, cls.status_level
        cls.status_message = ''
        return None, None

    @classmethod
    def clear(cls):
        cls.entries.clear()
        cls.status_message = ''
        cls.status_level = None


def set_log_level(level):
    Log.level = max(0, min(LEVEL_DEBUG, int(level)))

def log_debug(txt):
    if Log.level >= LEVEL_DEBUG:
        Log.add(LEVEL_DEBUG, txt)

def log_info(txt):
    if Log.level >= LEVEL_INFO:
        Log.add(LEVEL_INFO, txt)

def log_success(txt):
    if Log.level >= LEVEL_SUCCESS:
        Log.add(LEVEL_SUCCESS, txt, to_status_bar=True)

def log_warning(txt):
    if Log.level >= LEVEL_WARNING:
        Log.add(LEVEL_WARNING, txt, to_status_bar=True)

def log_error(txt):
    if Log.level >= LEVEL_ERROR:
        Log.add(LEVEL_ERROR, txt, to_status_bar=True)
