"""
Reference Image Cache

On-disk cache of downloaded reference images, keyed by normalized celebrity
name. Purely a performance optimization: a missing or empty cache directory
only means the images are fetched again.
"""

import os
import re
from pathlib import Path
from typing import Optional, Union

from ..core.logger import get_logger

logger = get_logger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Wikimedia Special:FilePath may drop the extension, so everything is stored as .jpg
CACHE_EXTENSION = ".jpg"


def safe_name(name: str) -> str:
    """Lowercase a name and collapse each run of non-alphanumerics into '-'."""
    return _NON_ALNUM.sub("-", name.lower())


class ReferenceImageCache:
    """Directory of cached reference images."""

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)

    def path_for(self, name: str) -> Path:
        return self.cache_dir / f"{safe_name(name)}{CACHE_EXTENSION}"

    def get(self, name: str) -> Optional[bytes]:
        """Return cached bytes for a name, or None when not cached."""
        path = self.path_for(name)
        if not path.is_file():
            return None
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning(f"Unreadable cache entry {path}: {e}")
            return None
        return data or None

    def put(self, name: str, data: bytes) -> Path:
        """Write bytes for a name (temp file, then rename)."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        tmp_path = path.with_suffix(path.suffix + ".part")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
        return path

    def __contains__(self, name: str) -> bool:
        return self.path_for(name).is_file()


__all__ = [
    "safe_name",
    "ReferenceImageCache",
    "CACHE_EXTENSION",
]
