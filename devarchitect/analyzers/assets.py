"""Media asset inventory built from the workspace listing."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Tuple

from ..models import AssetCategory, DetectedAsset

MAX_ASSETS = 5000

# Default category per extension, before path hints are applied.
ASSET_EXTENSIONS: Dict[str, AssetCategory] = {
    ".png": "Sprite",
    ".jpg": "Sprite",
    ".jpeg": "Sprite",
    ".gif": "Sprite",
    ".webp": "Sprite",
    ".svg": "Icon",
    ".ico": "Icon",
    ".mp3": "Audio_SFX",
    ".wav": "Audio_SFX",
    ".ogg": "Audio_SFX",
    ".flac": "Audio_Music",
    ".m4a": "Audio_Music",
    ".ttf": "Font",
    ".otf": "Font",
    ".woff": "Font",
    ".woff2": "Font",
    ".mp4": "Video",
    ".webm": "Video",
    ".gltf": "Model3D",
    ".glb": "Model3D",
    ".obj": "Model3D",
    ".fbx": "Model3D",
}

# Path hints override the extension default; the first matching row wins.
# A hint matches any path word that starts with it ("sounds" matches "sound").
PATH_HINTS: Tuple[Tuple[Tuple[str, ...], AssetCategory], ...] = (
    (("background", "bg"), "Background"),
    (("music", "soundtrack", "ost"), "Audio_Music"),
    (("sfx", "sound", "effect"), "Audio_SFX"),
    (("ui", "button", "interface", "menu"), "UI_Element"),
    (("sprite", "character", "enemy", "player"), "Sprite"),
    (("icon",), "Icon"),
    (("texture",), "Texture"),
    (("font",), "Font"),
)

_WORD = re.compile(r"[a-z0-9]+")


def categorize_asset(rel_path: str, default: AssetCategory) -> AssetCategory:
    words = _WORD.findall(rel_path.lower())
    for hints, category in PATH_HINTS:
        if any(word.startswith(hint) for word in words for hint in hints):
            return category
    return default


def collect_assets(files: Iterable[str], *, limit: int = MAX_ASSETS) -> List[DetectedAsset]:
    """Return media files sorted by category, then by file name."""
    assets: List[DetectedAsset] = []
    for rel_path in files:
        if len(assets) >= limit:
            break
        posix = PurePosixPath(rel_path)
        extension = posix.suffix.lower()
        default = ASSET_EXTENSIONS.get(extension)
        if default is None:
            continue
        assets.append(
            DetectedAsset(
                name=posix.name,
                category=categorize_asset(rel_path, default),
                path=rel_path,
                extension=extension,
            )
        )
    assets.sort(key=lambda asset: (asset.category, asset.name))
    return assets


__all__ = ["ASSET_EXTENSIONS", "MAX_ASSETS", "categorize_asset", "collect_assets"]
