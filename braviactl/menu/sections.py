"""Section classification for action ids.

An id such as ``C21`` splits into a letter prefix (``C``) and a number (21).
Rules match on the prefix and, optionally, an inclusive numeric range, so one
letter family can be spread over several sections. Rule order is display order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

OTHER_SECTION = "Other"

_ID_RE = re.compile(r"^\s*([A-Za-z]+)(\d*)\s*$")


@dataclass(frozen=True)
class SectionRule:
    title: str
    prefix: str
    low: int | None = None
    high: int | None = None

    def matches(self, prefix: str, number: int | None) -> bool:
        if prefix != self.prefix.casefold():
            return False
        if self.low is None and self.high is None:
            return True
        if number is None:
            return False
        if self.low is not None and number < self.low:
            return False
        if self.high is not None and number > self.high:
            return False
        return True


def split_action_id(action_id: str) -> tuple[str, int | None] | None:
    """Return ``(casefolded prefix, number)`` or ``None`` for unparseable ids."""
    match = _ID_RE.match(action_id)
    if match is None:
        return None
    prefix, digits = match.groups()
    return prefix.casefold(), int(digits) if digits else None


class SectionTable:
    """Ordered prefix/range table with a trailing catch-all ``Other`` section."""

    def __init__(self, rules: tuple[SectionRule, ...] | list[SectionRule]) -> None:
        self.rules = tuple(rules)
        titles: list[str] = []
        for rule in self.rules:
            if rule.title not in titles:
                titles.append(rule.title)
        if OTHER_SECTION not in titles:
            titles.append(OTHER_SECTION)
        self.order: tuple[str, ...] = tuple(titles)

    def classify(self, action_id: str) -> str:
        parts = split_action_id(action_id)
        if parts is None:
            return OTHER_SECTION
        prefix, number = parts
        for rule in self.rules:
            if rule.matches(prefix, number):
                return rule.title
        return OTHER_SECTION


DEFAULT_SECTIONS = SectionTable(
    (
        SectionRule("Connection", "A"),
        SectionRule("Power", "B"),
        SectionRule("Navigation", "C", 1, 19),
        SectionRule("Playback", "C", 20, 39),
        SectionRule("Volume", "D"),
        SectionRule("Inputs", "E"),
        SectionRule("Apps", "F"),
        SectionRule("Tools", "G"),
    )
)
