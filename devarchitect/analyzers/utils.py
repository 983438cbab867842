"""Shared helpers for reading the package manifest."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..models import PackageInfo


def load_package_json(root: Path) -> Dict[str, object]:
    """Return the parsed package.json contents or an empty dict."""
    package_json = root / "package.json"
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_package_info(root: Path) -> Optional[PackageInfo]:
    """Return the manifest fields used for stack detection, or None without a manifest."""
    data = load_package_json(root)
    if not data:
        return None

    return PackageInfo(
        name=_as_text(data.get("name")),
        description=_as_text(data.get("description")),
        version=_as_optional_text(data.get("version")),
        license=_as_optional_text(data.get("license")),
        author=_extract_author(data.get("author")),
        keywords=tuple(item for item in _as_list(data.get("keywords")) if isinstance(item, str)),
        scripts=_extract_scripts(data.get("scripts")),
        dependencies=_dependency_names(data.get("dependencies")),
        dev_dependencies=_dependency_names(data.get("devDependencies")),
    )


def _dependency_names(value: object) -> Tuple[str, ...]:
    if isinstance(value, dict):
        return tuple(key for key in value if isinstance(key, str))
    return ()


def _extract_scripts(value: object) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {key: cmd for key, cmd in value.items() if isinstance(key, str) and isinstance(cmd, str)}


def _extract_author(value: object) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ""


def _as_optional_text(value: object) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _as_list(value: object) -> list:
    return value if isinstance(value, list) else []


__all__ = ["load_package_info", "load_package_json"]
