"""Adds ``Co-authored-by`` trailers to the message of a ``git commit``.

git can be given a commit message in several ways, and the trailers have to
reach the final message whichever one the caller picked:

* ``-m``/``--message``: another ``-m`` is appended; git joins the
  paragraphs with a blank line.
* ``-F``/``--file <path>``: the file is copied to a scratch file with the
  trailers appended and the flag is pointed at the copy.
* ``-F -``: standard input is read and handled like a file.
* ``-C``/``-c`` (reuse a commit's message): left alone.
* no message flag: the trailers are written to a scratch file that is
  passed as ``--template``, so the editor opens with them in place.
"""

import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple, Union

from git_together.author import Author
from git_together.errors import MessageError
from git_together.utils import logger

__all__ = [
    "Message",
    "File",
    "Stdin",
    "Reuse",
    "ReuseEdit",
    "Editor",
    "MessageMethod",
    "detect_method",
    "co_author_trailers",
    "insert_options",
    "MessageAugmenter",
]

STDIN_PATH = "-"


@dataclass(frozen=True)
class Message:
    """``-m``/``--message``."""


@dataclass(frozen=True)
class File:
    """``-F``/``--file`` with a path.

    ``args[value_index]`` is ``prefix + path``; ``prefix`` is empty when the
    path is a separate argument.
    """

    value_index: int
    prefix: str
    path: str


@dataclass(frozen=True)
class Stdin:
    """``-F -``, laid out like File."""

    value_index: int
    prefix: str


@dataclass(frozen=True)
class Reuse:
    """``-C``/``--reuse-message``."""


@dataclass(frozen=True)
class ReuseEdit:
    """``-c``/``--reedit-message``."""


@dataclass(frozen=True)
class Editor:
    """No message flag, git starts the editor."""


MessageMethod = Union[Message, File, Stdin, Reuse, ReuseEdit, Editor]

_MESSAGE_OPTIONS = {"--message": "m", "--file": "F", "--reuse-message": "C", "--reedit-message": "c"}

# Other `git commit` options whose value may be the following argument
_LONG_OPTIONS_WITH_VALUE = frozenset(
    ["--author", "--date", "--cleanup", "--fixup", "--squash", "--trailer",
     "--template", "--pathspec-from-file", "--untracked-files"]
)
_SHORT_OPTIONS_WITH_VALUE = frozenset("mFCct")
# Short options whose optional value can only be attached
_SHORT_OPTIONS_ATTACHED_VALUE = frozenset("Su")


def _method(option: str, value: str, value_index: int, prefix: str) -> Optional[MessageMethod]:
    if option == "m":
        return Message()
    if option == "F":
        if value == STDIN_PATH:
            return Stdin(value_index, prefix)
        return File(value_index, prefix, value)
    if option == "C":
        return Reuse()
    if option == "c":
        return ReuseEdit()
    return None


def detect_method(args: Sequence[str]) -> MessageMethod:
    """Work out how ``git commit args`` will get its message.

    The first message option wins, as it does for git. Values of other
    options are skipped and scanning stops at ``--``.
    """
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            break

        if arg.startswith("--"):
            name, has_value, value = arg.partition("=")
            if name in _MESSAGE_OPTIONS:
                if has_value:
                    method = _method(_MESSAGE_OPTIONS[name], value, index, name + "=")
                elif index + 1 < len(args):
                    method = _method(_MESSAGE_OPTIONS[name], args[index + 1], index + 1, "")
                else:
                    method = None
                if method is not None:
                    return method
            elif name in _LONG_OPTIONS_WITH_VALUE and not has_value:
                index += 1

        elif arg.startswith("-") and len(arg) > 1:
            for position in range(1, len(arg)):
                option = arg[position]
                if option in _SHORT_OPTIONS_ATTACHED_VALUE:
                    break
                if option not in _SHORT_OPTIONS_WITH_VALUE:
                    continue

                attached = arg[position + 1:]
                if attached:
                    method = _method(option, attached, index, arg[:position + 1])
                elif index + 1 < len(args):
                    index += 1
                    method = _method(option, args[index], index, "")
                else:
                    method = None
                if method is not None:
                    return method
                break

        index += 1

    return Editor()


def insert_options(args: Sequence[str], options: Sequence[str]) -> List[str]:
    """Add ``options`` to the end of the options in ``args``, before any ``--``."""
    args = list(args)
    end = args.index("--") if "--" in args else len(args)
    return args[:end] + list(options) + args[end:]


def co_author_trailers(co_authors: Iterable[Author]) -> List[str]:
    return [author.trailer for author in co_authors]


def _with_trailers(message: str, trailers: Sequence[str]) -> str:
    return "\n".join(message.splitlines() + [""] + list(trailers)) + "\n"


class MessageAugmenter:
    """Rewrites commit arguments so the message carries co-author trailers.

    Owns at most one scratch file, which is deleted by ``close()``; use it
    as a context manager around running git.
    """

    def __init__(self, stdin: Optional[TextIO] = None, base_dir: Optional[Path] = None) -> None:
        """Initialize the augmenter.

        Args:
            stdin: Where ``-F -`` messages are read from, defaults to sys.stdin.
            base_dir: Directory relative ``-F`` paths are resolved against.
        """
        self.stdin = stdin
        self.base_dir = base_dir
        self.scratch: Optional[Path] = None

    def __enter__(self) -> "MessageAugmenter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self.scratch is None:
            return
        try:
            self.scratch.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("could not remove %s: %s", self.scratch, e)
        self.scratch = None

    def augment(self, args: Sequence[str], co_authors: Sequence[Author]) -> Tuple[MessageMethod, List[str]]:
        """Return ``args`` rewritten to add a trailer for each co-author.

        Raises:
            MessageError: If the message cannot be read or the scratch file written.
        """
        args = list(args)
        method = detect_method(args)
        trailers = co_author_trailers(co_authors)
        if not trailers:
            return method, args

        logger.debug("adding %d co-author trailer(s) via %s", len(trailers), type(method).__name__)

        if isinstance(method, Message):
            return method, insert_options(args, ["-m", "\n".join(trailers)])

        if isinstance(method, File):
            message = self._read_file(method.path)
            args[method.value_index] = method.prefix + self._write_scratch(_with_trailers(message, trailers))
            return method, args

        if isinstance(method, Stdin):
            message = self._read_stdin()
            args[method.value_index] = method.prefix + self._write_scratch(_with_trailers(message, trailers))
            return method, args

        if isinstance(method, Editor):
            template = self._write_scratch("\n\n" + "\n".join(trailers) + "\n")
            return method, insert_options(args, ["--template", template])

        return method, args

    def _read_file(self, path: str) -> str:
        source = Path(path).expanduser()
        if not source.is_absolute() and self.base_dir is not None:
            source = self.base_dir / source
        try:
            return source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MessageError(f"could not read commit message from '{path}'") from e

    def _read_stdin(self) -> str:
        try:
            return (self.stdin or sys.stdin).read()
        except (OSError, ValueError) as e:
            raise MessageError("could not read commit message from standard input") from e

    def _write_scratch(self, content: str) -> str:
        self.close()
        try:
            fd, path = tempfile.mkstemp(prefix="git-together-", suffix=".txt")
            self.scratch = Path(path)
            with os.fdopen(fd, "w", encoding="utf-8") as scratch:
                scratch.write(content)
        except OSError as e:
            raise MessageError("could not write commit message scratch file") from e
        return path
