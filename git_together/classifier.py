"""Decides what kind of git invocation git-together is looking at.

``parse_invocation`` finds the git subcommand in argv, skipping git's own
global options, and ``classify`` turns the result into one of three
outcomes: a trigger (``git with ...``), a signoff-eligible command such as
``git commit``, or a passthrough that is handed to git untouched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Sequence, Tuple, Union

__all__ = [
    "GLOBAL_SCOPE_FLAG",
    "Invocation",
    "TriggerAction",
    "Trigger",
    "SignoffCommand",
    "Passthrough",
    "Command",
    "parse_invocation",
    "classify",
]

GLOBAL_SCOPE_FLAG = "--global"

# git options that take their value as the following argument
_GLOBAL_OPTIONS_WITH_VALUE = frozenset(
    ["-c", "-C", "--exec-path", "--git-dir", "--work-tree", "--namespace",
     "--super-prefix", "--list-cmds", "--config-env"]
)

# git options that print something and exit, taking the place of a subcommand
_INFORMATIONAL_OPTIONS = frozenset(["--version", "-v", "--help", "-h"])

AMEND_FLAG = "--amend"
MERGE_COMMAND = "merge"


@dataclass(frozen=True)
class Invocation:
    """An argv split around the git subcommand."""

    global_args: Tuple[str, ...]
    subcommand: str
    command_args: Tuple[str, ...]
    use_global_scope: bool = False


class TriggerAction(Enum):
    SHOW = "show"
    LIST = "list"
    CLEAR = "clear"
    VERSION = "version"
    ACTIVATE = "activate"


@dataclass(frozen=True)
class Trigger:
    action: TriggerAction
    initials: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SignoffCommand:
    """A command that needs author/committer injection.

    ``solo`` is set for merges and amends, where the committer must not
    change, so neither ``--signoff`` nor co-author trailers are added.
    """

    global_args: Tuple[str, ...]
    subcommand: str
    command_args: Tuple[str, ...]
    solo: bool = False


@dataclass(frozen=True)
class Passthrough:
    args: Tuple[str, ...]


Command = Union[Trigger, SignoffCommand, Passthrough]

_TRIGGER_FLAGS = {
    "--list": TriggerAction.LIST,
    "--clear": TriggerAction.CLEAR,
    "--version": TriggerAction.VERSION,
}


def _find_subcommand(args: Sequence[str]) -> Tuple[int, List[int]]:
    """Index of the subcommand in ``args``, or ``len(args)`` if there is none.

    Also returns the positions of the ``--global`` options ahead of it.
    """
    scope_flags: List[int] = []
    skip_next = False
    for index, arg in enumerate(args):
        if skip_next:
            skip_next = False
            continue
        if arg == GLOBAL_SCOPE_FLAG:
            scope_flags.append(index)
        elif arg in _GLOBAL_OPTIONS_WITH_VALUE:
            skip_next = True
        elif arg in _INFORMATIONAL_OPTIONS or not arg.startswith("-"):
            return index, scope_flags
    return len(args), scope_flags


def parse_invocation(args: Iterable[str]) -> Invocation:
    """Split argv into global options, subcommand and subcommand arguments.

    A ``--global`` ahead of the subcommand is removed and recorded in
    ``use_global_scope``. After the subcommand it belongs to the subcommand
    and is left alone.
    """
    args = list(args)
    index, scope_flags = _find_subcommand(args)
    global_args = tuple(arg for position, arg in enumerate(args[:index]) if position not in scope_flags)
    use_global_scope = bool(scope_flags)

    if index == len(args):
        return Invocation(global_args, "", (), use_global_scope)
    return Invocation(global_args, args[index], tuple(args[index + 1:]), use_global_scope)


def _trigger(command_args: Sequence[str]) -> Trigger:
    if not command_args:
        return Trigger(TriggerAction.SHOW)
    if len(command_args) == 1 and command_args[0] in _TRIGGER_FLAGS:
        return Trigger(_TRIGGER_FLAGS[command_args[0]])
    return Trigger(TriggerAction.ACTIVATE, tuple(command_args))


def classify(invocation: Invocation, args: Sequence[str], triggers: Iterable[str],
             is_signoff_cmd: Callable[[str], bool]) -> Command:
    """Decide what to do with a parsed invocation.

    Args:
        invocation: The result of ``parse_invocation(args)``.
        args: The arguments git-together was called with.
        triggers: Subcommands that manage the active authors.
        is_signoff_cmd: Predicate for subcommands that get author injection.

    Returns:
        What to do with the invocation. A passthrough carries the original
        arguments, ``--global`` included.
    """
    subcommand = invocation.subcommand

    if subcommand in triggers:
        return _trigger(invocation.command_args)

    if subcommand and is_signoff_cmd(subcommand):
        solo = subcommand == MERGE_COMMAND or AMEND_FLAG in invocation.command_args
        return SignoffCommand(invocation.global_args, subcommand, invocation.command_args, solo)

    return Passthrough(tuple(args))
