"""
Whitelist matcher — which tools may run unattended.

An identifier is trusted if it equals a whitelist entry or contains
one as a substring, so versioned or suffixed names still match
(``linux-exploit-suggester-2.sh`` matches ``linux-exploit-suggester``).
The substring rule is permissive: a short token such as ``so`` matches
anything containing ``so``. Set ``strict`` to require exact equality.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class WhitelistSet:
    """Immutable set of trusted identifier tokens."""

    entries: frozenset[str]
    strict: bool = False

    @classmethod
    def of(cls, entries: Iterable[str], strict: bool = False) -> WhitelistSet:
        return cls(entries=frozenset(entries), strict=strict)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and is_whitelisted(identifier, self)

    def __len__(self) -> int:
        return len(self.entries)


def is_whitelisted(identifier: str, whitelist: WhitelistSet) -> bool:
    """Return True if ``identifier`` is trusted by ``whitelist``.

    Case-sensitive, no globbing. Never raises.
    """
    if identifier in whitelist.entries:
        return True
    if whitelist.strict:
        return False
    return any(token in identifier for token in whitelist.entries)


def matching_entry(identifier: str, whitelist: WhitelistSet) -> str | None:
    """The whitelist token that admits ``identifier``, if any.

    Used for reporting; exact matches win over substring matches.
    """
    if identifier in whitelist.entries:
        return identifier
    if whitelist.strict:
        return None
    for token in sorted(whitelist.entries):
        if token in identifier:
            return token
    return None
