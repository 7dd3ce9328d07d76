#!/usr/bin/env python3
"""taskflow CLI entrypoint."""

import sys
import logging
import argparse
from pathlib import Path

from taskflow.lib.config import load_project_config
from taskflow.lib.constants import COMMIT_TYPES, DEFAULT_SKILL, TASK_SKILLS
from taskflow.lib.errors import TaskflowError, format_error
from taskflow.lib.result import format_result
from taskflow.lib.tracking import NOTE_TYPES
from taskflow.commands import next as cmd_next_module
from taskflow.commands import start as cmd_start_module
from taskflow.commands import check as cmd_check_module
from taskflow.commands import skip as cmd_skip_module
from taskflow.commands import resume as cmd_resume_module
from taskflow.commands import status as cmd_status_module
from taskflow.commands import create as cmd_create_module
from taskflow.commands import subtask as cmd_subtask_module
from taskflow.commands import abort as cmd_abort_module
from taskflow.commands import back as cmd_back_module
from taskflow.commands import note as cmd_note_module
from taskflow.commands import time as cmd_time_module
from taskflow.commands import deps as cmd_deps_module
from taskflow.commands import commit as cmd_commit_module

logger = logging.getLogger(__name__)


def get_project_config(args):
    """Load taskflow.yaml from --root, or the current directory."""
    root = Path(args.root).resolve() if args.root else Path.cwd()
    return load_project_config(root)


def run_command(command, args) -> int:
    """Run a command function, print its result, map it to an exit code."""
    config = get_project_config(args)
    try:
        result = command(args, config)
    except TaskflowError as e:
        logger.debug(f"[CLI] {args.command} failed", exc_info=True)
        print(format_error(e), file=sys.stderr)
        return 1

    text = format_result(result)
    if text:
        print(text, file=sys.stdout if result.success else sys.stderr)
    return result.exit_code


def cmd_next(args):
    return run_command(cmd_next_module.cmd_next, args)


def cmd_start(args):
    return run_command(cmd_start_module.cmd_start, args)


def cmd_check(args):
    return run_command(cmd_check_module.cmd_check, args)


def cmd_skip(args):
    return run_command(cmd_skip_module.cmd_skip, args)


def cmd_resume(args):
    return run_command(cmd_resume_module.cmd_resume, args)


def cmd_status(args):
    return run_command(cmd_status_module.cmd_status, args)


def cmd_create(args):
    return run_command(cmd_create_module.cmd_create, args)


def cmd_subtask(args):
    return run_command(cmd_subtask_module.cmd_subtask, args)


def cmd_abort(args):
    return run_command(cmd_abort_module.cmd_abort, args)


def cmd_back(args):
    return run_command(cmd_back_module.cmd_back, args)


def cmd_note(args):
    return run_command(cmd_note_module.cmd_note, args)


def cmd_time(args):
    return run_command(cmd_time_module.cmd_time, args)


def cmd_deps(args):
    return run_command(cmd_deps_module.cmd_deps, args)


def cmd_commit(args):
    return run_command(cmd_commit_module.cmd_commit, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='taskflow', description='Feature/story/task workflow CLI')
    parser.add_argument('--root', '-C', help='Project root (default: current directory)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # taskflow next
    p_next = subparsers.add_parser('next', help='Show the next available task')
    p_next.set_defaults(func=cmd_next)

    # taskflow start
    p_start = subparsers.add_parser('start', help='Start a task session')
    p_start.add_argument('task_id', help='Task ID (e.g., 1.1.0)')
    p_start.set_defaults(func=cmd_start)

    # taskflow check
    p_check = subparsers.add_parser('check', help='Advance the active task to its next status')
    p_check.add_argument('--task', '-t', help='Active task ID (default: the task being worked on)')
    p_check.set_defaults(func=cmd_check)

    # taskflow back
    p_back = subparsers.add_parser('back', help='Return the active task to its previous status')
    p_back.add_argument('--task', '-t', help='Active task ID (default: the task being worked on)')
    p_back.set_defaults(func=cmd_back)

    # taskflow abort
    p_abort = subparsers.add_parser('abort', help='Abandon the active task (back to not-started)')
    p_abort.add_argument('--task', '-t', help='Active task ID (default: the task being worked on)')
    p_abort.set_defaults(func=cmd_abort)

    # taskflow commit
    p_commit = subparsers.add_parser('commit', help='Commit the task locally and complete it')
    p_commit.add_argument('message', nargs='*', help='Change bullets, or a full task commit message')
    p_commit.add_argument('--type', choices=COMMIT_TYPES, default='feat', help='Commit type (default: feat)')
    p_commit.add_argument('--task', '-t', help='Active task ID (default: the task being worked on)')
    p_commit.set_defaults(func=cmd_commit)

    # taskflow note
    p_note = subparsers.add_parser('note', help='Add a note to a task')
    p_note.add_argument('text', nargs='+', help='Note text')
    p_note.add_argument('--task', '-t', help='Task ID (default: the task being worked on)')
    p_note.add_argument('--type', choices=NOTE_TYPES, default='note', help='Kind of note (default: note)')
    p_note.set_defaults(func=cmd_note)

    # taskflow time
    p_time = subparsers.add_parser('time', help='Show or track time on a task')
    p_time.add_argument('task_id', nargs='?', help='Task ID (default: the task being worked on)')
    action = p_time.add_mutually_exclusive_group()
    action.add_argument('--start', action='store_true', help='Start a timer')
    action.add_argument('--stop', action='store_true', help='Stop the running timer')
    action.add_argument('--log', type=float, metavar='HOURS', help='Record hours without a timer')
    action.add_argument('--estimate', type=float, metavar='HOURS', help='Set the estimate')
    p_time.add_argument('--note', '-n', help='Note for the time entry')
    p_time.set_defaults(func=cmd_time)

    # taskflow deps
    p_deps = subparsers.add_parser('deps', help='Show dependencies of a task')
    p_deps.add_argument('task_id', help='Task ID (e.g., 1.1.0)')
    p_deps.set_defaults(func=cmd_deps)

    # taskflow skip
    p_skip = subparsers.add_parser('skip', help='Block the active task')
    p_skip.add_argument('reason', nargs='+', help='Why the task is blocked')
    p_skip.add_argument('--task', '-t', help='Active task ID (default: the task being worked on)')
    p_skip.set_defaults(func=cmd_skip)

    # taskflow resume
    p_resume = subparsers.add_parser('resume', help='Resume a blocked task')
    p_resume.add_argument('target_status', nargs='?', help='Status to resume at (default: status before block)')
    p_resume.add_argument('--task', '-t', help='Blocked task ID (default: first blocked task)')
    p_resume.set_defaults(func=cmd_resume)

    # taskflow status
    p_status = subparsers.add_parser('status', help='Show project, feature, or story status')
    p_status.add_argument('id', nargs='?', help='Feature ID (e.g., 1) or story ID (e.g., 1.2)')
    p_status.set_defaults(func=cmd_status)

    # taskflow create
    p_create = subparsers.add_parser('create', help='Create a task')
    p_create.add_argument('title', help='Task title')
    where = p_create.add_mutually_exclusive_group()
    where.add_argument('--story', '-s', help='Story ID to add the task to')
    where.add_argument('--intermittent', '-i', action='store_true', help='Create an intermittent task (story 0.1)')
    p_create.add_argument('--description', '-d', help='Task description')
    p_create.add_argument('--depends-on', nargs='*', default=[], help='Task IDs this task depends on')
    p_create.add_argument('--skill', choices=TASK_SKILLS, default=DEFAULT_SKILL, help='Skill tag for the task file')
    p_create.set_defaults(func=cmd_create)

    # taskflow subtask
    p_subtask = subparsers.add_parser('subtask', help='Mark a subtask of the active task completed')
    p_subtask.add_argument('subtask_id', help='Subtask ID')
    p_subtask.add_argument('--task', '-t', help='Active task ID (default: the task being worked on)')
    p_subtask.set_defaults(func=cmd_subtask)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
