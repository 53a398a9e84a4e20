"""
gitrail entry point
"""
import argparse
import curses
import sys

from gitrail.config import DEFAULT_ARGS, GRAPH_SETTINGS, LOG_SETTINGS
from gitrail.controllers.app_controller import AppController
from gitrail.utils.log import LEVEL_ERROR, Log, set_log_level


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Terminal git dashboard with a commit graph')
    parser.add_argument('--path', default=DEFAULT_ARGS['path'],
                        help='Repository to open, discovered upwards from this path')
    parser.add_argument('--main-branch', dest='main_branches', action='append',
                        help='Branch drawn in the leftmost lane, can be repeated (default: master, main)')
    parser.add_argument('--max-count', type=int, default=DEFAULT_ARGS['max_count'],
                        help='Load at most this many commits')
    parser.add_argument('--ascii', action='store_true', default=DEFAULT_ARGS['ascii'],
                        help='Draw the graph with ASCII characters')
    parser.add_argument('--log-level', type=int, default=LOG_SETTINGS['level'], choices=range(0, 6),
                        help='0 off, 1 error, 2 warning, 3 success, 4 info, 5 debug')
    return parser.parse_args(argv)


def launch_curses(stdscr, args):
    return AppController(stdscr, args).run()


def main(argv=None):
    args = parse_args(argv)
    set_log_level(args.log_level)
    if args.ascii:
        GRAPH_SETTINGS['charset'] = 'ascii'

    exit_code = curses.wrapper(lambda stdscr: launch_curses(stdscr, args))

    # errors are only on screen while curses runs, repeat them on exit
    if exit_code:
        for _, level, line in Log.entries:
            if level == LEVEL_ERROR:
                print(line, file=sys.stderr)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
