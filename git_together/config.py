"""Configuration module for git-together.

This module defines the key/value store interface every piece of
git-together state goes through, two implementations of it (a namespacing
decorator and an in-memory store), and the Settings class that holds the
fixed runtime settings of the wrapper.
"""

import os
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from git_together.errors import ConfigError, ConfigKeyNotFound

__all__ = [
    "Config",
    "NamespacedConfig",
    "MemoryConfig",
    "Settings",
    "default_settings",
    "parse_bool",
]


class Config(Protocol):
    """Flat dotted-key string store.

    ``get`` raises ConfigKeyNotFound for unknown keys. ``get_all`` returns
    every entry whose key starts with ``prefix``. ``add`` appends another
    value to a multi-valued key where ``set`` replaces it.
    """

    def get(self, key: str) -> str: ...

    def get_all(self, prefix: str) -> Dict[str, str]: ...

    def set(self, key: str, value: str) -> None: ...

    def add(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class NamespacedConfig:
    """Prefixes every key with ``<namespace>.`` before delegating."""

    def __init__(self, namespace: str, inner: Config) -> None:
        self.namespace = namespace
        self.inner = inner

    def _key(self, key: str) -> str:
        return f"{self.namespace}.{key}"

    def get(self, key: str) -> str:
        return self.inner.get(self._key(key))

    def get_all(self, prefix: str) -> Dict[str, str]:
        strip = len(self.namespace) + 1
        return {key[strip:]: value for key, value in self.inner.get_all(self._key(prefix)).items()}

    def set(self, key: str, value: str) -> None:
        self.inner.set(self._key(key), value)

    def add(self, key: str, value: str) -> None:
        self.inner.add(self._key(key), value)

    def clear(self, key: str) -> None:
        self.inner.clear(self._key(key))


class MemoryConfig:
    """Dictionary backed store, used for dry runs and in tests."""

    def __init__(self, data: Optional[Mapping[str, str]] = None) -> None:
        self.data: Dict[str, List[str]] = {key: [value] for key, value in (data or {}).items()}

    def get(self, key: str) -> str:
        values = self.data.get(key)
        if not values:
            raise ConfigKeyNotFound(key)
        return values[-1]

    def get_all(self, prefix: str) -> Dict[str, str]:
        return {key: values[-1] for key, values in self.data.items() if key.startswith(prefix) and values}

    def set(self, key: str, value: str) -> None:
        self.data[key] = [value]

    def add(self, key: str, value: str) -> None:
        self.data.setdefault(key, []).append(value)

    def clear(self, key: str) -> None:
        if key not in self.data:
            raise ConfigKeyNotFound(key)
        del self.data[key]


_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0", ""}


def parse_bool(key: str, value: str) -> bool:
    """Interpret a git style boolean value.

    Raises:
        ConfigError: If the value is not a recognised boolean spelling.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"invalid boolean value for '{key}': '{value}'")


class Settings:
    """Runtime settings for git-together.

    These are the values that are not stored in git config: what the wrapped
    program is called, which subcommands are handled and which environment
    variables are consulted.

    Attributes:
        namespace: Config section all git-together keys live under.
        triggers: Subcommands that manage the active authors.
        signoff_commands: Subcommands that get author/committer injection.
        message_commands: Signoff subcommands that accept commit message flags.
        git_program: The program being wrapped.
        no_signoff_env: Environment variable that suppresses signoff and trailers.
        debug_env: Environment variable that turns on debug logging.
    """

    def __init__(
        self,
        namespace: str = "git-together",
        triggers: Iterable[str] = ("with", "together"),
        signoff_commands: Iterable[str] = ("commit", "merge", "revert"),
        message_commands: Iterable[str] = ("commit",),
        git_program: Optional[str] = None,
        no_signoff_env: str = "GIT_TOGETHER_NO_SIGNOFF",
        debug_env: str = "GIT_TOGETHER_DEBUG",
    ):
        """Initialize the settings with the given values.

        Args:
            namespace: Config section all git-together keys live under.
            triggers: Subcommands that manage the active authors.
            signoff_commands: Subcommands that get author/committer injection.
            message_commands: Signoff subcommands that accept commit message flags.
            git_program: The program being wrapped, ``$GIT_TOGETHER_GIT`` or ``git``.
            no_signoff_env: Environment variable that suppresses signoff and trailers.
            debug_env: Environment variable that turns on debug logging.

        Raises:
            ValueError: If any of the values is invalid.
        """
        self.namespace: str = namespace
        self.triggers: Tuple[str, ...] = tuple(triggers)
        self.signoff_commands: Tuple[str, ...] = tuple(signoff_commands)
        self.message_commands: Tuple[str, ...] = tuple(message_commands)
        self.git_program: str = git_program or os.environ.get("GIT_TOGETHER_GIT", "git")
        self.no_signoff_env: str = no_signoff_env
        self.debug_env: str = debug_env

        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    def validate(self) -> List[str]:
        """Return a list of validation errors, empty when the settings are valid."""
        errors = []
        if not isinstance(self.namespace, str) or not self.namespace or "." in self.namespace:
            errors.append("namespace must be a non-empty string without dots")
        if not self.triggers or not all(isinstance(t, str) and t for t in self.triggers):
            errors.append("triggers must be a non-empty list of subcommand names")
        if not all(isinstance(c, str) and c for c in self.signoff_commands):
            errors.append("signoff_commands must contain only subcommand names")
        if set(self.triggers) & set(self.signoff_commands):
            errors.append("triggers and signoff_commands must not overlap")
        if not set(self.message_commands) <= set(self.signoff_commands):
            errors.append("message_commands must be a subset of signoff_commands")
        if not self.git_program:
            errors.append("git_program must be a non-empty string")
        return errors

    def is_debug(self) -> bool:
        return bool(os.environ.get(self.debug_env))


# Default settings instance
default_settings = Settings()
