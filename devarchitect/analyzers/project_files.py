"""Readers for the README summary and ``.env*`` variable declarations."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from ..logging import get_logger
from ..models import EnvVariable

README_NAMES = ("README.md", "readme.md", "Readme.md")
README_DESCRIPTION_LIMIT = 300

# Earlier files win when a key is declared more than once.
ENV_FILES = (
    ".env",
    ".env.local",
    ".env.development",
    ".env.development.local",
    ".env.production",
    ".env.production.local",
    ".env.test",
    ".env.example",
    ".env.sample",
    ".env.template",
)
MASKED_VALUE = "***masked***"

_ENV_LINE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_SECRET_KEY = re.compile(r"secret|password|key|token|api", re.IGNORECASE)

logger = get_logger("project_files")


def read_readme_description(root: Path) -> Optional[str]:
    """Return the first paragraph block after the README's first heading.

    Lines are joined with single spaces until the next heading or until the
    text grows past the description limit. Returns ``None`` without a README.
    """
    for name in README_NAMES:
        path = root / name
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable README %s: %s", path, exc)
            continue
        return _summarize(text)
    return None


def _summarize(text: str) -> str:
    parts: List[str] = []
    length = 0
    found_title = False
    for line in text.splitlines():
        if line.startswith("#"):
            if found_title:
                break
            found_title = True
            continue
        stripped = line.strip()
        if found_title and stripped:
            parts.append(stripped)
            length += len(stripped) + 1
            if length > README_DESCRIPTION_LIMIT:
                break
    return " ".join(parts)


def load_env_variables(root: Path) -> List[EnvVariable]:
    """Collect ``KEY=value`` declarations across the known env files.

    The comment line right above a declaration becomes its description.
    Non-empty values of keys that look like credentials are masked.
    """
    variables: List[EnvVariable] = []
    seen: set[str] = set()
    for env_file in ENV_FILES:
        path = root / env_file
        if not path.is_file():
            continue
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable env file %s: %s", path, exc)
            continue

        last_comment = ""
        for line in lines:
            stripped = line.strip()
            if stripped.startswith("#"):
                last_comment = stripped[1:].strip()
                continue
            match = _ENV_LINE.match(stripped)
            if not match or match.group(1) in seen:
                continue
            key, value = match.group(1), match.group(2)
            seen.add(key)
            if value and _SECRET_KEY.search(key):
                value = MASKED_VALUE
            variables.append(
                EnvVariable(key=key, value=value, source=env_file, description=last_comment or None)
            )
            last_comment = ""
    return variables


__all__ = [
    "ENV_FILES",
    "MASKED_VALUE",
    "load_env_variables",
    "read_readme_description",
]
