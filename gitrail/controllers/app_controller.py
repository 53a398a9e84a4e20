"""
Main application controller
"""
import curses

from gitrail.config import DEFAULT_ARGS, GRAPH_SETTINGS, UI_SETTINGS
from gitrail.controllers.key_handler import KeyHandler
from gitrail.models.commands import COMMANDS_BY_KEY, CommandRunner
from gitrail.models.graph import CommitGraph
from gitrail.models.layout import build_layout
from gitrail.models.repository import Repository
from gitrail.models.validation import EnvironmentValidator
from gitrail.utils.display import setup_colors
from gitrail.utils.log import log_debug, log_error, log_info, log_warning
from gitrail.views.actions_view import ActionsView
from gitrail.views.commit_view import CommitView
from gitrail.views.details_view import DetailsView
from gitrail.views.dialog_view import ConfirmDialog, InputDialog, SelectDialog
from gitrail.views.file_diff_view import FileDiffView
from gitrail.views.help_view import HelpView
from gitrail.views.loading_view import LoadingView
from gitrail.views.row_renderer import Renderer
from gitrail.views.status_view import StatusBar, StatusView

# commands that act on a branch at the selected commit
BRANCH_COMMANDS = ('checkout', 'delete_branch')

# commands whose input starts with the configured value
IDENTITY_COMMANDS = {'set_user_name': 0, 'set_user_email': 1}


class PendingCommand:
    """Command waiting for dialogs to be answered"""

    def __init__(self, command, commit_id):
        self.command = command
        self.commit_id = commit_id
        self.text = None
        self.default_text = ''
        self.options = []
        self.steps = []
        self.step = None


class AppController:
    """Main application controller"""

    def __init__(self, stdscr, options=None):
        """
        Initialize the application controller

        Args:
            stdscr: Curses window object
            options: Parsed command line arguments
        """
        self.stdscr = stdscr
        self.path = getattr(options, 'path', DEFAULT_ARGS['path'])
        self.main_branches = getattr(options, 'main_branches', None) or DEFAULT_ARGS['main_branches']
        self.max_count = getattr(options, 'max_count', DEFAULT_ARGS['max_count'])

        self.repository = Repository()
        self.runner = None
        self.validator = None
        self.renderer = Renderer(GRAPH_SETTINGS['charset'])
        self.running = True
        self.focus = 'graph'
        self.dialog = None
        self.pending = None
        self.help_view = None
        self.file_diff_view = None
        self.views_created = False

        self._setup_curses()
        self._create_views()

    def _setup_curses(self):
        """Set up curses environment"""
        curses.curs_set(0)
        setup_colors()
        self.stdscr.keypad(True)
        self.stdscr.timeout(UI_SETTINGS['input_timeout'])
        curses.set_escdelay(20)

    def _pane_geometry(self):
        """Window rectangles (height, width, y, x) of every pane"""
        max_y, max_x = self.stdscr.getmaxyx()
        top_h = max(3, int((max_y - 1) * UI_SETTINGS['top_pane_ratio']))
        bottom_h = max(3, max_y - 1 - top_h)
        left_w = max(10, int(max_x * UI_SETTINGS['graph_pane_ratio']))
        right_w = max(10, max_x - left_w)
        geometry = {
            'graph': (top_h, left_w, 0, 0),
            'actions': (bottom_h, left_w, top_h, 0),
            'details': (top_h, right_w, 0, left_w),
            'status': (bottom_h, right_w, top_h, left_w),
            'status_bar': (1, max_x, max_y - 1, 0),
        }
        if self.views_created and self.details_view.expanded:
            geometry['details'] = (max(3, max_y - 1), max_x, 0, 0)
        return geometry

    def _create_views(self):
        geometry = self._pane_geometry()
        self.commit_view = CommitView(curses.newwin(*geometry['graph']), self.renderer)
        self.actions_view = ActionsView(curses.newwin(*geometry['actions']))
        self.details_view = DetailsView(curses.newwin(*geometry['details']), self.repository)
        self.status_view = StatusView(curses.newwin(*geometry['status']))
        self.status_bar = StatusBar(curses.newwin(*geometry['status_bar']))
        self.views_created = True
        self._set_focus(self.focus)

    @property
    def panes(self):
        return {
            'graph': self.commit_view,
            'actions': self.actions_view,
            'details': self.details_view,
            'status': self.status_view,
        }

    def _relayout(self):
        """Recreate windows after a resize or when details expand"""
        curses.update_lines_cols()
        self.stdscr.clear()
        self.stdscr.noutrefresh()
        geometry = self._pane_geometry()
        for name, view in self.panes.items():
            view.resize(curses.newwin(*geometry[name]))
        self.status_bar.resize(curses.newwin(*geometry['status_bar']))
        if self.help_view:
            self.help_view = HelpView(self.stdscr, KeyHandler.help_sections())
        if self.file_diff_view:
            self.file_diff_view.resize(self.stdscr)

    def _set_focus(self, name):
        self.focus = name
        for pane_name, view in self.panes.items():
            view.focused = pane_name == name

    def run(self):
        """Run the application"""
        LoadingView(self.stdscr).refresh()
        curses.doupdate()

        if not self.repository.open(self.path):
            self._exit_with_message("Not in a git repository")
            return 1

        self.runner = CommandRunner(self.repository.workdir)
        self.validator = EnvironmentValidator(self.repository.workdir)
        self.validator.start()

        self.reload()

        while self.running:
            try:
                self._poll_validation()
                self._draw()
                key = self.stdscr.getch()
                if key != -1:
                    self._handle_key(key)
            except KeyboardInterrupt:
                self.running = False
            except curses.error as e:
                log_warning(f"Drawing failed: {e}")
        return 0

    def reload(self):
        """Load commits again and rebuild the graph, keeping the selection"""
        selected = self.commit_view.selected_commit
        keep_commit_id = selected.id if selected else None

        commits = self.repository.load_commits(self.max_count)
        graph = CommitGraph.from_commits(commits)
        main_tip = self.repository.main_branch_tip(self.main_branches)
        membership = self.repository.current_branch_membership(graph.commits)
        layout = build_layout(graph, main_tip, membership)
        sync_status = self.repository.sync_status_map(graph.commits)
        head_commit_id = self.repository.head_commit_id()

        self.renderer.set_head_commit(head_commit_id)
        self.commit_view.set_layout(layout, sync_status, keep_commit_id or head_commit_id)
        self.details_view.clear_cache()
        self.status_view.set_entries(self.repository.working_tree_status())
        self.status_bar.set_branch(self.repository.current_branch(), *self.repository.ahead_behind())
        self.status_bar.set_user(*self.repository.user_identity())

        if not commits:
            log_warning("No commits to display")
        else:
            log_info(f"Loaded {len(graph)} commits in {layout.width} lanes")

    def _poll_validation(self):
        result = self.validator.poll() if self.validator else None
        if result is None:
            return
        if result.has_issues() or result.warnings:
            log_warning(result.summary())
        else:
            log_debug(f"git {result.git_version} passed validation")

    def _draw(self):
        overlay = self.help_view or self.file_diff_view
        if overlay:
            overlay.refresh()
            curses.doupdate()
            return

        selected = self.commit_view.selected_commit
        self.details_view.show_commit(selected.id if selected else None)

        if self.details_view.expanded:
            self.details_view.refresh()
        else:
            for view in self.panes.values():
                view.refresh()
        self.status_bar.refresh()
        if self.dialog:
            self.dialog.refresh()
        curses.doupdate()

    def _handle_key(self, key):
        if self.dialog:
            self._handle_view_result(self.dialog.handle_key(key))
            return
        if self.help_view:
            self._handle_view_result(self.help_view.handle_key(key))
            return
        if self.file_diff_view and key != ord('q'):
            self._handle_view_result(self.file_diff_view.handle_key(key))
            return

        action = KeyHandler.global_action(key)
        if action == 'quit':
            self.running = False
        elif action == 'help':
            self.help_view = HelpView(self.stdscr, KeyHandler.help_sections())
        elif action == 'focus_next' and not self.details_view.expanded:
            self._set_focus(KeyHandler.next_pane(self.focus))
        elif action == 'focus_previous' and not self.details_view.expanded:
            self._set_focus(KeyHandler.next_pane(self.focus, -1))
        elif action == 'refresh':
            self.reload()
        elif action == 'resize':
            self._relayout()
        else:
            self._handle_view_result(self.panes[self.focus].handle_key(key))

    def _handle_view_result(self, result):
        """
        Act on the (continue_program, switch_view, view_name) tuple of a view

        Args:
            result (tuple): Value returned by handle_key
        """
        continue_program, switch_view, view_name = result
        if not continue_program:
            self.running = False
            return
        if not switch_view:
            return

        if view_name == "previous":
            self.help_view = None
            self.file_diff_view = None
            self.stdscr.clear()
            self.stdscr.noutrefresh()
        elif view_name == "file_diff":
            self._open_file_diff()
        elif view_name == "layout":
            self._set_focus('details')
            self._relayout()
        elif view_name.startswith("focus:"):
            self._set_focus(view_name[6:])
        elif view_name.startswith("execute:"):
            self._start_command(view_name[8:])
        elif view_name == "dialog:ok":
            self._dialog_answered(self.dialog.value)
        elif view_name == "dialog:cancel":
            self.dialog = None
            self.pending = None
            log_info("Cancelled")

    def _start_command(self, key):
        command = COMMANDS_BY_KEY.get(key)
        if command is None:
            log_error(f"Unknown command {key}")
            return
        selected = self.commit_view.selected_commit
        pending = PendingCommand(command, selected.id if selected else None)

        if command.needs_commit and pending.commit_id is None:
            log_error(f"{command.description}: no commit selected")
            return

        if key in BRANCH_COMMANDS:
            branches = self.repository.branches_at(pending.commit_id, self.main_branches)
            if key == 'delete_branch':
                current = self.repository.current_branch()
                branches = [name for name in branches if name != current]
                if not branches:
                    log_error("No branch to delete at this commit")
                    return
            if len(branches) == 1:
                pending.text = branches[0]
            elif len(branches) > 1:
                pending.options = branches
                pending.steps.append('branch')

        if command.needs_input:
            pending.default_text = self._input_default(key, selected)
            pending.steps.append('input')
        if command.needs_confirmation:
            pending.steps.append('confirm')

        self.pending = pending
        self._next_step()

    def _next_step(self):
        pending = self.pending
        if not pending.steps:
            self.dialog = None
            self.pending = None
            self._run_command(pending)
            return

        pending.step = pending.steps.pop(0)
        command = pending.command
        if pending.step == 'branch':
            self.dialog = SelectDialog(self.stdscr, f"Select branch to {command.description}", pending.options)
        elif pending.step == 'input':
            self.dialog = InputDialog(self.stdscr, command.prompt, title=command.description,
                                      text=pending.default_text)
        else:
            target = pending.text or (pending.commit_id or '')[:7]
            message = command.confirmation_message
            if command.needs_commit or pending.text:
                message += f"\n\n{command.description} {target}"
            self.dialog = ConfirmDialog(self.stdscr, message)

    def _dialog_answered(self, value):
        if self.pending is None:
            self.dialog = None
            return
        if self.pending.step in ('branch', 'input'):
            self.pending.text = value
        self._next_step()

    def _run_command(self, pending):
        result = self.runner.execute(pending.command, pending.commit_id, pending.text)
        if result.ok:
            self.reload()

    def _exit_with_message(self, message):
        """
        Show a message and stop the main loop

        Args:
            message: Message to display before exiting
        """
        log_error(message)
        view = LoadingView(self.stdscr, message)
        view.refresh()
        curses.doupdate()
        curses.napms(2000)
        self.running = False

    def _input_default(self, key, selected):
        """Text the input dialog of a command starts with"""
        if key in IDENTITY_COMMANDS:
            return self.repository.user_identity()[IDENTITY_COMMANDS[key]] or ''
        if key == 'reword' and selected:
            return selected.title
        return ''

    def _open_file_diff(self):
        entry = self.status_view.selected_entry
        if entry is None:
            return
        path, status = entry
        lines = self.repository.file_diff(path, status)
        self.file_diff_view = FileDiffView(self.stdscr, path, status, lines)
