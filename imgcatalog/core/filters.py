"""Extension-based selection of candidate image files."""

from pathlib import Path
from typing import Iterable

DEFAULT_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp"})


def normalize_extension(ext: str) -> str:
    """Return an extension lowercased and without its leading dot."""
    return ext.strip().lstrip(".").lower()


class ExtensionFilter:
    """Accepts paths whose final extension is in an allow-list."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_EXTENSIONS):
        self.extensions = frozenset(normalize_extension(e) for e in extensions)

    def accepts(self, path: str | Path) -> bool:
        """Check if a file is a candidate image based on its extension."""
        suffix = Path(path).suffix
        if not suffix:
            return False
        return normalize_extension(suffix) in self.extensions

    def __repr__(self) -> str:
        return f"ExtensionFilter({sorted(self.extensions)!r})"
