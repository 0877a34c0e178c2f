"""Exception types raised by git-together.

Every error raised on purpose derives from GitTogetherError so the CLI can
report it and exit with a non-zero status instead of printing a traceback.
"""

__all__ = [
    "GitTogetherError",
    "AuthorParseError",
    "MissingName",
    "MissingEmailSeed",
    "MissingDomain",
    "AuthorNotFound",
    "InvalidAuthor",
    "NoActiveAuthors",
    "ConfigError",
    "ConfigKeyNotFound",
    "MessageError",
    "CommandError",
]


class GitTogetherError(Exception):
    """Base class for all git-together errors."""


class AuthorParseError(GitTogetherError):
    """A raw author string could not be parsed."""


class MissingName(AuthorParseError):
    def __init__(self) -> None:
        super().__init__("author name is missing")


class MissingEmailSeed(AuthorParseError):
    def __init__(self) -> None:
        super().__init__("author email is missing")


class MissingDomain(AuthorParseError):
    def __init__(self, seed: str) -> None:
        super().__init__(f"no domain configured to complete email '{seed}'")
        self.seed = seed


class AuthorNotFound(GitTogetherError):
    def __init__(self, initials: str) -> None:
        super().__init__(f"author not found for '{initials}'")
        self.initials = initials


class InvalidAuthor(GitTogetherError):
    def __init__(self, initials: str, raw: str) -> None:
        super().__init__(f"invalid author for '{initials}': '{raw}'")
        self.initials = initials
        self.raw = raw


class NoActiveAuthors(GitTogetherError):
    def __init__(self) -> None:
        super().__init__("no active authors, run 'git with <initials>...' first")


class ConfigError(GitTogetherError):
    """The configuration store failed to read or write a value."""


class ConfigKeyNotFound(ConfigError):
    def __init__(self, key: str) -> None:
        super().__init__(f"config key not found: '{key}'")
        self.key = key


class MessageError(GitTogetherError):
    """The commit message could not be augmented with co-author trailers."""


class CommandError(GitTogetherError):
    """The wrapped program could not be run to completion."""
