#!/usr/bin/env python3
"""
git-together CLI Interface

This module is the ``git-together`` executable. It is meant to be aliased to
``git``: every invocation is classified and either handled here (``git with``),
run with the active authors injected (``git commit``, ``git merge``,
``git revert`` and configured aliases) or handed to git unchanged.

Usage:
    git-together with [--list | --clear | --version | INITIALS...]
    git-together [--global] <git arguments>

Options:
    --global             Read and write git-together state in the global config

Environment:
    GIT_TOGETHER_NO_SIGNOFF   Do not add --signoff or co-author trailers
    GIT_TOGETHER_DEBUG        Enable debug logging
    GIT_TOGETHER_GIT          Program to run instead of git
"""

import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from rich.markup import escape

from git_together import __version__
from git_together.classifier import (
    Invocation,
    SignoffCommand,
    Trigger,
    TriggerAction,
    classify,
    parse_invocation,
)
from git_together.config import Settings, default_settings
from git_together.errors import GitTogetherError
from git_together.git import ConfigScope
from git_together.message import MessageAugmenter
from git_together.together import GitTogether
from git_together.utils import SubprocessHandler, console, err_console, logger, setup_logging

SIGNOFF_FLAG = "--signoff"


def print_authors(pairs) -> None:
    for initials, author in pairs:
        console.print(f"{initials}: {author}", markup=False)


def handle_trigger(gt: GitTogether, trigger: Trigger) -> None:
    """Show or change the active authors."""
    if trigger.action is TriggerAction.SHOW:
        initials = gt.get_active()
        print_authors(zip(initials, gt.get_authors(initials)))
    elif trigger.action is TriggerAction.LIST:
        print_authors(sorted(gt.all_authors().items()))
    elif trigger.action is TriggerAction.CLEAR:
        gt.clear_active()
    elif trigger.action is TriggerAction.VERSION:
        console.print(f"git-together {__version__}", markup=False)
    else:
        authors = gt.set_active(trigger.initials)
        print_authors(zip(trigger.initials, authors))


def command_directory(global_args: Sequence[str], cwd: Optional[Path] = None) -> Path:
    """The directory git will run in, after applying any ``-C <path>`` options."""
    directory = cwd or Path.cwd()
    args = iter(global_args)
    for arg in args:
        if arg == "-C":
            directory = directory / next(args, "")
    return directory


def run_signoff(gt: GitTogether, command: SignoffCommand, settings: Settings,
                handler: SubprocessHandler, stdin: Optional[TextIO] = None) -> int:
    """Run a signoff-eligible git command as the active authors.

    Co-author mode (``git-together.co-authored``) takes precedence over
    ``--signoff``: when it is on, ``--signoff`` is never added. Merges,
    amends and ``$GIT_TOGETHER_NO_SIGNOFF`` suppress both.
    """
    suppressed = command.solo or bool(os.environ.get(settings.no_signoff_env))
    signoff = gt.signoff(no_signoff=suppressed)

    env = signoff.env
    if command.solo:
        env[settings.no_signoff_env] = "1"

    command_args: List[str] = list(command.command_args)
    base_dir = command_directory(command.global_args)
    with MessageAugmenter(stdin=stdin, base_dir=base_dir) as augmenter:
        if gt.is_co_authored():
            if not suppressed and gt.is_message_cmd(command.subcommand):
                _, command_args = augmenter.augment(command_args, signoff.co_authors)
        elif signoff.add_signoff_flag:
            command_args.insert(0, SIGNOFF_FLAG)

        code = handler.run_interactive(
            [settings.git_program, *command.global_args, command.subcommand, *command_args], env=env
        )

    if code == 0:
        gt.rotate_active()
    return code


def run(args: Sequence[str], settings: Settings = default_settings,
        handler: Optional[SubprocessHandler] = None, gt: Optional[GitTogether] = None,
        stdin: Optional[TextIO] = None) -> int:
    """Handle one git-together invocation and return the exit code.

    Args:
        args: The arguments after the program name.
        settings: Runtime settings.
        handler: Runs git; a default SubprocessHandler when omitted.
        gt: git-together state; opened from git config when omitted.
        stdin: Where ``-F -`` commit messages are read from.
    """
    handler = handler or SubprocessHandler()
    invocation: Invocation = parse_invocation(args)
    if gt is None:
        scope = ConfigScope.GLOBAL if invocation.use_global_scope else ConfigScope.LOCAL
        gt = GitTogether.open(scope, settings, handler=handler)

    command = classify(invocation, args, settings.triggers, gt.is_signoff_cmd)
    logger.debug("%s: %s", invocation.subcommand or "(none)", type(command).__name__)

    if isinstance(command, Trigger):
        handle_trigger(gt, command)
        return 0
    if isinstance(command, SignoffCommand):
        return run_signoff(gt, command, settings, handler, stdin)
    return handler.run_interactive([settings.git_program, *command.args])


def report_error(error: BaseException) -> None:
    """Print an error and each of its causes, one per line."""
    current: Optional[BaseException] = error
    while current is not None:
        err_console.print(f"[red]Error:[/red] {escape(str(current))}")
        current = current.__cause__


def main_cli(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        settings = default_settings
        setup_logging(settings.is_debug())
        return run(args, settings)
    except KeyboardInterrupt:
        return 130
    except GitTogetherError as e:
        report_error(e)
        return 1


if __name__ == "__main__":
    sys.exit(main_cli())
