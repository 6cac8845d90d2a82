"""Parsers for ``git for-each-ref`` listings."""

from __future__ import annotations

from typing import List, Optional

from gitpane.git.errors import ParseError
from gitpane.git.models import BranchRef


def _lines(listing: str) -> List[str]:
    # Subjects may contain \f or \x1c, which str.splitlines treats as breaks.
    return listing.split("\n")


def match_ref(listing: str, object_hash: str) -> Optional[str]:
    """Find the first ``<hash> <name>`` line whose hash starts with *object_hash*."""
    for line_no, line in enumerate(_lines(listing), start=1):
        if not line.startswith(object_hash):
            continue
        _, sep, name = line.partition(" ")
        if not sep or not name:
            raise ParseError("malformed ref listing line", line=line, line_no=line_no)
        return name
    return None


def parse_branch_refs(listing: str) -> List[BranchRef]:
    """Parse ``<name> <upstream> <subject>`` lines; upstream may be empty."""
    refs: List[BranchRef] = []
    for line_no, line in enumerate(_lines(listing), start=1):
        if not line:
            continue
        columns = line.split(" ", 2)
        if len(columns) != 3 or not columns[0]:
            raise ParseError("malformed branch listing line", line=line, line_no=line_no)
        name, upstream, subject = columns
        refs.append(BranchRef(name=name, upstream=upstream or None, subject=subject))
    return refs
