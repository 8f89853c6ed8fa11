"""
Text normalization for morgengrau pages.

Page text goes through two stages, in this order:

1. decode  - transliterate to ASCII with unidecode
2. repair  - undo the artifacts the site's encoding leaves behind
             (stripped umlauts, mangled "Rhythm'n'Blues", relative links)

Repair patterns match the output of decode, so decode must run first.
"""

import re
from dataclasses import dataclass

from unidecode import unidecode

from morgengrau.pipeline.config import CGI_BASE_URL


@dataclass(frozen=True)
class RepairTable:
    """Ordered literal (pattern, replacement) substitutions."""

    version: str
    substitutions: tuple[tuple[str, str], ...]

    def apply(self, s: str) -> str:
        for pattern, replacement in self.substitutions:
            s = s.replace(pattern, replacement)
        return s


REPAIR_TABLE = RepairTable(
    version="2023.1",
    substitutions=(
        ("m&B", "m'n'B"),
        ('"', ""),
        ("kc", "küc"),
        ("ebud", "ebäud"),
        ("wlb", "wölb"),
        ("Mrz", "März"),
        ("show_event.pl?sts=det&", f"{CGI_BASE_URL}show_event.pl?sts=det&"),
    ),
)

# A word keeps apostrophe-joined parts together: "rock'n'roll" is one word
_WORD_RE = re.compile(r"\w+(?:'\w+)*")


def decode(s: str) -> str:
    return unidecode(s)


def repair(s: str, table: RepairTable = REPAIR_TABLE) -> str:
    return table.apply(s)


def normalize(s: str) -> str:
    """Decode, then repair."""
    return repair(decode(s))


def trim(s: str) -> str:
    """Repair, then strip surrounding whitespace."""
    return repair(s).strip()


def titlecase(s: str) -> str:
    """Upper-case the first letter of each word, lower-case the rest.

    Unlike str.title(), letters after an apostrophe stay lower-case.
    """
    return _WORD_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), s)


def title(s: str) -> str:
    """Decode, repair, strip and title-case an event title."""
    return titlecase(normalize(s).strip())


def remove_whitespace(s: str) -> str:
    """Drop every whitespace character, including internal spacing."""
    return "".join(ch for ch in s if not ch.isspace())
