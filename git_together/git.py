"""Git backed configuration store and repository helpers."""

import re
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from git_together.errors import CommandError, ConfigError, ConfigKeyNotFound
from git_together.utils import SubprocessHandler, logger

__all__ = ["ConfigScope", "GitConfig", "Repo"]

# `git config` exit codes
_KEY_NOT_FOUND = 1
_NOTHING_TO_UNSET = 5


class ConfigScope(Enum):
    """Which configuration files a GitConfig reads and writes.

    LOCAL reads the merged system, global and repository configuration and
    writes to the repository. GLOBAL reads and writes the user's global
    file. REPOSITORY reads and writes only the repository's own file.
    """

    LOCAL = ()
    GLOBAL = ("--global",)
    REPOSITORY = ("--local",)


class GitConfig:
    """Config store that reads and writes through ``git config``."""

    def __init__(self, scope: ConfigScope = ConfigScope.LOCAL, git_program: str = "git",
                 handler: Optional[SubprocessHandler] = None, cwd: Optional[Path] = None) -> None:
        self.scope = scope
        self.git_program = git_program
        self.handler = handler or SubprocessHandler()
        self.cwd = cwd

    @classmethod
    def open(cls, scope: ConfigScope, repo: Optional["Repo"], git_program: str = "git",
             handler: Optional[SubprocessHandler] = None) -> "GitConfig":
        """Open the store for ``scope``, using the global scope outside a repository."""
        if scope is not ConfigScope.GLOBAL and repo is None:
            logger.debug("not inside a git repository, using global config")
            scope = ConfigScope.GLOBAL
        return cls(scope, git_program, handler, repo.workdir if repo else None)

    def _run(self, *args: str) -> Tuple[str, str, int]:
        command = [self.git_program]
        if self.cwd is not None:
            command += ["-C", str(self.cwd)]
        command += ["config", *self.scope.value, *args]
        try:
            return self.handler.run_command(command)
        except CommandError as e:
            raise ConfigError(f"error running git config {' '.join(args)}") from e

    @staticmethod
    def _fail(message: str, stderr: str) -> ConfigError:
        detail = stderr.strip()
        return ConfigError(f"{message}: {detail}" if detail else message)

    def get(self, key: str) -> str:
        stdout, stderr, code = self._run("--get", key)
        if code == _KEY_NOT_FOUND:
            raise ConfigKeyNotFound(key)
        if code != 0:
            raise self._fail(f"error getting git config for '{key}'", stderr)
        return stdout.rstrip("\n")

    def get_multi(self, key: str) -> List[str]:
        """Every value of a multi-valued key, in file order."""
        stdout, stderr, code = self._run("--null", "--get-all", key)
        if code == _KEY_NOT_FOUND:
            return []
        if code != 0:
            raise self._fail(f"error getting git config for '{key}'", stderr)
        return [value for value in stdout.split("\0") if value]

    def get_all(self, prefix: str) -> Dict[str, str]:
        stdout, stderr, code = self._run("--null", "--get-regexp", f"^{re.escape(prefix)}")
        if code == _KEY_NOT_FOUND:
            return {}
        if code != 0:
            raise self._fail("error getting git config entries", stderr)

        entries = {}
        for entry in stdout.split("\0"):
            if not entry:
                continue
            key, _, value = entry.partition("\n")
            entries[key] = value
        return entries

    def set(self, key: str, value: str) -> None:
        _, stderr, code = self._run("--replace-all", key, value)
        if code != 0:
            raise self._fail(f"error setting git config '{key}': '{value}'", stderr)

    def add(self, key: str, value: str) -> None:
        _, stderr, code = self._run("--add", key, value)
        if code != 0:
            raise self._fail(f"error adding git config '{key}': '{value}'", stderr)

    def clear(self, key: str) -> None:
        _, stderr, code = self._run("--unset-all", key)
        if code == _NOTHING_TO_UNSET:
            raise ConfigKeyNotFound(key)
        if code != 0:
            raise self._fail(f"error removing git config '{key}'", stderr)


class Repo:
    """The git work tree enclosing the current directory."""

    def __init__(self, workdir: Path, git_program: str = "git",
                 handler: Optional[SubprocessHandler] = None) -> None:
        self.workdir = workdir
        self.git_program = git_program
        self.handler = handler or SubprocessHandler()

    @classmethod
    def discover(cls, cwd: Optional[Path] = None, git_program: str = "git",
                 handler: Optional[SubprocessHandler] = None) -> Optional["Repo"]:
        """Find the work tree containing ``cwd``, or None outside of one."""
        handler = handler or SubprocessHandler()
        command = [git_program]
        if cwd is not None:
            command += ["-C", str(cwd)]
        command += ["rev-parse", "--show-toplevel"]

        stdout, _, code = handler.run_command(command)
        if code != 0 or not stdout.strip():
            return None
        return cls(Path(stdout.strip()), git_program, handler)

    def local_config(self) -> GitConfig:
        return GitConfig(ConfigScope.REPOSITORY, self.git_program, self.handler, self.workdir)

    def auto_include(self, filename: str) -> bool:
        """Include ``filename`` from the work tree root in the repository config.

        Does nothing when the file does not exist or is already included.

        Returns:
            bool: True if the include was added.
        """
        if not (self.workdir / filename).exists():
            return False

        # include.path is resolved relative to .git/config
        include_path = f"../{filename}"
        config = self.local_config()
        if include_path in config.get_multi("include.path"):
            return False

        config.add("include.path", include_path)
        logger.debug("added %s to include.path", include_path)
        return True
