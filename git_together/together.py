"""Active author state for git-together.

The active authors are kept as initials joined with ``+`` under
``git-together.active``. Each set of initials maps to an entry under
``git-together.authors``, and every read resolves them again, so edits to the
authors take effect on the next command.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from git_together.author import Author, AuthorParser
from git_together.config import Config, NamespacedConfig, Settings, default_settings, parse_bool
from git_together.errors import (
    AuthorNotFound,
    AuthorParseError,
    ConfigError,
    ConfigKeyNotFound,
    InvalidAuthor,
    NoActiveAuthors,
)
from git_together.git import ConfigScope, GitConfig, Repo
from git_together.utils import SubprocessHandler, logger

__all__ = ["GitTogether", "Signoff"]

_IDENTITY_FIELDS = ("name", "email")


@dataclass(frozen=True)
class Signoff:
    """Who a commit is attributed to.

    Attributes:
        authors: Every active author, in order.
        add_signoff_flag: Whether ``--signoff`` should be passed to git.
    """

    authors: Tuple[Author, ...]
    add_signoff_flag: bool

    @property
    def author(self) -> Author:
        return self.authors[0]

    @property
    def committer(self) -> Author:
        return self.authors[-1]

    @property
    def co_authors(self) -> Tuple[Author, ...]:
        return self.authors[1:]

    @property
    def env(self) -> Dict[str, str]:
        return {
            "GIT_AUTHOR_NAME": self.author.name,
            "GIT_AUTHOR_EMAIL": self.author.email,
            "GIT_COMMITTER_NAME": self.committer.name,
            "GIT_COMMITTER_EMAIL": self.committer.email,
        }


class GitTogether:
    """Reads and changes the active authors in a config store.

    Args:
        store: The un-namespaced config store; ``user.name`` and
            ``user.email`` are written to it directly.
        settings: Runtime settings, the namespace in particular.
        author_parser: Parser for author entries. Built from the
            configured ``domain`` when omitted.
        identity_store: Where the identity saved on activation is read
            from. It must only see the values ``store`` writes, so that an
            identity inherited from another config file is not copied
            over on ``clear_active``. Defaults to ``store``.
    """

    def __init__(self, store: Config, settings: Settings = default_settings,
                 author_parser: Optional[AuthorParser] = None,
                 identity_store: Optional[Config] = None) -> None:
        self.store = store
        self.identity_store = identity_store or store
        self.settings = settings
        self.config = NamespacedConfig(settings.namespace, store)
        self.author_parser = author_parser or AuthorParser(self._get_optional("domain"))

    @classmethod
    def open(cls, scope: ConfigScope = ConfigScope.LOCAL, settings: Settings = default_settings,
             cwd: Optional[Path] = None, handler: Optional[SubprocessHandler] = None) -> "GitTogether":
        """Open git-together state from git config.

        Inside a repository that has a ``.git-together`` file in its root,
        the file is added to the repository's include path first so that
        authors shared through it are visible.
        """
        handler = handler or SubprocessHandler()
        repo = Repo.discover(cwd, settings.git_program, handler)
        if repo is not None:
            try:
                repo.auto_include(f".{settings.namespace}")
            except ConfigError as e:
                logger.warning("could not include .%s: %s", settings.namespace, e)

        store = GitConfig.open(scope, repo, settings.git_program, handler)
        identity_store = store
        if repo is not None and store.scope is ConfigScope.LOCAL:
            identity_store = repo.local_config()
        return cls(store, settings, identity_store=identity_store)

    def _get_optional(self, key: str) -> Optional[str]:
        try:
            return self.config.get(key)
        except ConfigKeyNotFound:
            return None

    def get_active(self) -> List[str]:
        """Return the active initials, first author first.

        Raises:
            NoActiveAuthors: If no authors are active.
        """
        active = self._get_optional("active")
        initials = [i for i in (active or "").split("+") if i]
        if not initials:
            raise NoActiveAuthors()
        return initials

    def set_active(self, initials: Sequence[str]) -> List[Author]:
        """Make ``initials`` the active authors.

        All initials are resolved before anything is written, so an unknown
        or malformed author leaves the stored state untouched. The first
        author also becomes ``user.name``/``user.email``; the identity that
        was configured before the first activation is kept aside so
        ``clear_active`` can put it back.

        Returns:
            List[Author]: The resolved authors, in the order given.
        """
        initials = list(initials)
        if not initials:
            raise NoActiveAuthors()

        authors = self.get_authors(initials)
        first_activation = self._get_optional("active") is None

        self.config.set("active", "+".join(initials))
        if first_activation:
            self._save_original_user()
        self._set_user(authors[0])

        logger.debug("active authors: %s", "+".join(initials))
        return authors

    def clear_active(self) -> None:
        """Deactivate all authors and restore the original identity.

        A saved identity is written back. Without one, ``user.name`` and
        ``user.email`` are removed from the store, uncovering whatever other
        config files define. Both are best-effort; failures are logged only.
        """
        was_active = True
        try:
            self.config.clear("active")
        except ConfigKeyNotFound:
            logger.debug("no active authors to clear")
            was_active = False

        for field in _IDENTITY_FIELDS:
            key = f"user.{field}"
            saved = self._get_optional(key)
            if saved is None and not was_active:
                continue
            try:
                if saved is None:
                    self.store.clear(key)
                else:
                    self.store.set(key, saved)
                    self.config.clear(key)
            except ConfigError as e:
                logger.debug("could not restore %s: %s", key, e)

    def rotate_active(self) -> None:
        """Move the first active author to the end of the list.

        The authors are resolved again, picking up config changes made since
        they were activated. Does nothing when no authors are active.
        """
        try:
            active = self.get_active()
        except NoActiveAuthors:
            return
        self.set_active(active[1:] + active[:1])

    def all_authors(self) -> Dict[str, Author]:
        """Return every configured author keyed by initials.

        Raises:
            InvalidAuthor: If any configured author is malformed.
        """
        authors = {}
        for key, raw in self.config.get_all("authors.").items():
            initials = key.split(".")[-1]
            authors[initials] = self._parse_author(initials, raw)
        return authors

    def get_authors(self, initials: Sequence[str]) -> List[Author]:
        return [self.get_author(i) for i in initials]

    def get_author(self, initials: str) -> Author:
        try:
            raw = self.config.get(f"authors.{initials}")
        except ConfigKeyNotFound as e:
            raise AuthorNotFound(initials) from e
        return self._parse_author(initials, raw)

    def _parse_author(self, initials: str, raw: str) -> Author:
        try:
            return self.author_parser.parse(raw)
        except AuthorParseError as e:
            raise InvalidAuthor(initials, raw) from e

    def signoff(self, no_signoff: bool = False) -> Signoff:
        """Resolve the author and committer of the next commit.

        With one active author they are the same person. With more, the
        first is the author and the last the committer.

        Args:
            no_signoff: Never ask for ``--signoff``, even for a pair.

        Raises:
            NoActiveAuthors: If no authors are active.
        """
        authors = tuple(self.get_authors(self.get_active()))
        add_signoff_flag = not no_signoff and authors[0] != authors[-1]
        return Signoff(authors=authors, add_signoff_flag=add_signoff_flag)

    def aliases(self) -> List[str]:
        raw = self._get_optional("aliases") or ""
        return [alias.strip() for alias in raw.split(",") if alias.strip()]

    def is_signoff_cmd(self, cmd: str) -> bool:
        return cmd in self.settings.signoff_commands or cmd in self.aliases()

    def is_message_cmd(self, cmd: str) -> bool:
        """Whether ``cmd`` accepts commit message flags (``-m``, ``-F`` ...)."""
        return cmd in self.settings.message_commands or cmd in self.aliases()

    def is_co_authored(self) -> bool:
        raw = self._get_optional("co-authored")
        if raw is None:
            return False
        return parse_bool(f"{self.settings.namespace}.co-authored", raw)

    def _save_original_user(self) -> None:
        for field in _IDENTITY_FIELDS:
            key = f"user.{field}"
            if self._get_optional(key) is not None:
                continue
            try:
                original = self.identity_store.get(key)
            except ConfigKeyNotFound:
                continue
            self.config.set(key, original)

    def _set_user(self, author: Author) -> None:
        self.store.set("user.name", author.name)
        self.store.set("user.email", author.email)
