"""Author identities and the parser for raw ``authors.<initials>`` values."""

from dataclasses import dataclass
from typing import Optional

from git_together.errors import MissingDomain, MissingEmailSeed, MissingName

__all__ = ["Author", "AuthorParser"]


@dataclass(frozen=True)
class Author:
    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    @property
    def trailer(self) -> str:
        """The ``Co-authored-by`` trailer line crediting this author."""
        return f"Co-authored-by: {self}"


class AuthorParser:
    """Parses ``"Display Name; local-part-or-email"`` strings into authors.

    A bare local part is completed with the configured domain, so with
    ``domain="rocinante.com"`` the value ``"James Holden; jholden"`` becomes
    ``James Holden <jholden@rocinante.com>``. Values that already carry an
    ``@`` are used as they are.
    """

    def __init__(self, domain: Optional[str] = None) -> None:
        self.domain: Optional[str] = domain

    def parse(self, raw: str) -> Author:
        """Parse a raw author string.

        Args:
            raw: The value stored under ``authors.<initials>``.

        Returns:
            Author: The parsed author.

        Raises:
            MissingName: If there is no name before the ``;``.
            MissingEmailSeed: If there is nothing after the ``;``.
            MissingDomain: If the email needs a domain and none is configured.
        """
        parts = raw.split(";")

        name = parts[0].strip()
        if not name:
            raise MissingName()

        seed = parts[1].strip() if len(parts) > 1 else ""
        if not seed:
            raise MissingEmailSeed()

        if "@" in seed:
            return Author(name=name, email=seed)

        if not self.domain:
            raise MissingDomain(seed)
        return Author(name=name, email=f"{seed}@{self.domain}")
