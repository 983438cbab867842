"""Regex extraction of import specifiers from ECMAScript and stylesheet sources.

Matching is purely textual. Specifiers built at runtime are missed and
import-like text inside strings or comments may produce false hits; both
are accepted limitations of this parser.
"""

from __future__ import annotations

import re
from typing import List

STATIC_IMPORT = re.compile(
    r"""(?:import\s+(?:[\w*\s{},]*\s+from\s+)?|export\s+[\w*\s{},]*\s+from\s+|require\s*\(\s*)['"]([^'"]+)['"]"""
)
DYNAMIC_IMPORT = re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)""")
STYLESHEET_IMPORT = re.compile(r"""@import\s+(?:url\(\s*)?['"]([^'"]+)['"]""")

_PATTERNS = (STATIC_IMPORT, DYNAMIC_IMPORT, STYLESHEET_IMPORT)


def extract_import_targets(text: str) -> List[str]:
    """Return raw import specifiers: static, then dynamic, then stylesheet.

    Duplicates are dropped while keeping first-seen order.
    """
    targets: List[str] = []
    seen: set[str] = set()
    for pattern in _PATTERNS:
        for match in pattern.finditer(text):
            specifier = match.group(1).strip()
            if specifier and specifier not in seen:
                seen.add(specifier)
                targets.append(specifier)
    return targets


__all__ = ["extract_import_targets"]
