"""
git-together: pair and mob programming attribution for git

Key Features:
    - Keep a list of active authors with ``git with <initials>...``
    - Commit as the first active author, with the last one as committer
    - Add ``--signoff`` or ``Co-authored-by`` trailers for the rest
    - Rotate the active authors after every successful commit
    - Pass every other git command through untouched

Usage:
    Alias git to git-together and configure some authors:
    $ git config --global git-together.domain rocinante.com
    $ git config --global git-together.authors.jh "James Holden; jholden"
    $ git config --global git-together.authors.nn "Naomi Nagata; nnagata"

    Then work as a pair:
    $ git with jh nn
    $ git commit -m "fix the drive"

Commands:
    - git with: show the active authors
    - git with <initials>...: set the active authors
    - git with --list: show all configured authors
    - git with --clear: clear the active authors
    - git with --version: show the git-together version
"""

__version__ = "0.1.0"
__author__ = "git-together"

from .author import Author, AuthorParser
from .together import GitTogether, Signoff

__all__ = ["Author", "AuthorParser", "GitTogether", "Signoff", "__version__", "__author__"]
