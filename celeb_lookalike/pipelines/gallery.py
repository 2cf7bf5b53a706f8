"""
Reference Gallery Pipeline

Builds the in-memory celebrity gallery once at startup: each configured
reference image is loaded (from the on-disk cache, otherwise downloaded),
embedded, and kept as an immutable (name, display_url, embedding) record.

References that cannot be fetched, decoded or embedded are skipped with a
warning. A gallery with no entries at all is fatal.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

import numpy as np
import requests

from ..core.config import settings
from ..core.exceptions import GalleryEmptyError, ReferenceFetchError
from ..core.logger import get_logger
from ..ml.inference import EmbeddingProvider, freeze_vector
from ..utils import image_loader
from ..utils.reference_cache import ReferenceImageCache

logger = get_logger(__name__)

Fetcher = Callable[[str], bytes]


@dataclass(frozen=True)
class Reference:
    """A configured celebrity and where to get their photo."""
    name: str
    source_url: str


@dataclass(frozen=True)
class GalleryEntry:
    """One embedded reference. The embedding array is read-only."""
    name: str
    display_url: str
    embedding: np.ndarray


@dataclass(frozen=True)
class Gallery:
    """
    Immutable set of gallery entries plus the references it was built from.

    ``references`` is kept so that fallback picks can still be made when no
    entry could be embedded.
    """
    entries: Tuple[GalleryEntry, ...] = ()
    references: Tuple[Reference, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[GalleryEntry]:
        return iter(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    @classmethod
    def from_vectors(
        cls,
        items: Iterable[Tuple[str, Sequence[float], str]],
        references: Iterable[Reference] = (),
    ) -> "Gallery":
        """
        Build a gallery directly from (name, vector, display_url) tuples.

        Names are unique; a repeated name keeps the first vector.
        """
        entries: List[GalleryEntry] = []
        seen = set()
        for name, vector, url in items:
            if name in seen:
                logger.warning(f"Duplicate gallery name skipped: {name}")
                continue
            seen.add(name)
            entries.append(GalleryEntry(name=name, display_url=url, embedding=freeze_vector(vector)))
        return cls(entries=tuple(entries), references=tuple(references))


# =============================================================================
# REFERENCE CONFIGURATION
# =============================================================================

def wikimedia_url(file_name: str, width: Optional[int] = None) -> str:
    """Stable Wikimedia Commons URL that survives hash-path changes."""
    width = width or settings.gallery.image_width
    return f"https://commons.wikimedia.org/wiki/Special:FilePath/{quote(file_name)}?width={width}"


DEFAULT_REFERENCE_FILES = (
    ("Tom Cruise", "Tom_Cruise_by_Gage_Skidmore_2.jpg"),
    ("Angelina Jolie", "Angelina_Jolie_2_June_2014 (cropped).jpg"),
    ("Scarlett Johansson", "Scarlett_Johansson_in_Kuwait_01b-tweaked.jpg"),
    ("Keanu Reeves", "Keanu_Reeves_2019.jpg"),
    ("Dwayne Johnson", "Dwayne_Johnson_2014.jpg"),
    ("Emma Watson", "Emma_Watson_2013.jpg"),
    ("Chris Hemsworth", "Chris_Hemsworth_by_Gage_Skidmore_2.jpg"),
    ("Zendaya", "Zendaya_2018.png"),
    ("Robert Downey Jr.", "Robert_Downey_Jr_2014_Comic_Con (cropped).jpg"),
    ("Gal Gadot", "Gal_Gadot_by_Gage_Skidmore_2.jpg"),
)


def default_references() -> Tuple[Reference, ...]:
    return tuple(Reference(name, wikimedia_url(fname)) for name, fname in DEFAULT_REFERENCE_FILES)


def load_references(path: Optional[Union[str, Path]] = None) -> Tuple[Reference, ...]:
    """
    Load the configured reference list.

    The JSON file holds a list of objects with ``name`` and ``url`` (or
    ``sourceUrl``). Without a path the built-in list is used.
    """
    path = path or settings.gallery.references_file
    if not path:
        return default_references()

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"References file {path} must contain a JSON list")

    references = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Reference #{i} in {path} must be an object")
        name = item.get("name")
        url = item.get("url") or item.get("sourceUrl")
        if not name or not url:
            raise ValueError(f"Reference #{i} in {path} needs 'name' and 'url'")
        references.append(Reference(str(name), str(url)))
    return tuple(references)


# =============================================================================
# BUILDING
# =============================================================================

def _default_fetcher(timeout: float) -> Fetcher:
    return lambda url: image_loader.fetch_bytes(url, timeout=timeout)


def fetch_reference_image(
    reference: Reference,
    cache: Optional[ReferenceImageCache],
    fetcher: Fetcher,
) -> bytes:
    """
    Return the image bytes for a reference, cache first.

    Raises:
        ReferenceFetchError: when the download fails
    """
    if cache is not None:
        cached = cache.get(reference.name)
        if cached is not None:
            return cached

    try:
        data = fetcher(reference.source_url)
    except requests.RequestException as e:
        raise ReferenceFetchError(reference.name, reference.source_url, details=str(e))

    if not data:
        raise ReferenceFetchError(reference.name, reference.source_url, details="empty response")

    if cache is not None:
        try:
            cache.put(reference.name, data)
        except OSError as e:
            logger.warning(f"Could not cache reference image for {reference.name}: {e}")
    return data


def build_gallery(
    references: Iterable[Reference],
    provider: EmbeddingProvider,
    cache: Optional[ReferenceImageCache] = None,
    fetcher: Optional[Fetcher] = None,
) -> Gallery:
    """
    Embed every reference and assemble the gallery.

    Args:
        references: Configured (name, source_url) list
        provider: Embedding provider
        cache: Optional on-disk reference image cache
        fetcher: url -> bytes (default: HTTP download via requests)

    Returns:
        Gallery with one entry per reference that yielded a descriptor

    Raises:
        GalleryEmptyError: if no reference produced a descriptor
    """
    references = tuple(references)
    fetcher = fetcher or _default_fetcher(settings.gallery.fetch_timeout)

    entries: List[GalleryEntry] = []
    seen = set()

    for ref in references:
        if ref.name in seen:
            logger.warning(f"Duplicate reference name skipped: {ref.name}")
            continue
        seen.add(ref.name)

        try:
            data = fetch_reference_image(ref, cache, fetcher)
            image = image_loader.load_from_bytes(data)
            vector = provider.embed(image)
        except Exception as e:
            # Any per-reference failure (network, decode, model) only drops that entry
            logger.warning(f"Failed ref: {ref.name} ({e})")
            continue

        if vector is None:
            logger.warning(f"No face found in ref: {ref.name}")
            continue

        entries.append(GalleryEntry(
            name=ref.name,
            display_url=ref.source_url,
            embedding=freeze_vector(vector),
        ))
        logger.debug(f"Gallery entry ready: {ref.name}")

    if not entries:
        raise GalleryEmptyError(details={"configured": len(references)})

    logger.info(f"Gallery ready: {len(entries)}/{len(references)} references")
    return Gallery(entries=tuple(entries), references=references)


def build_default_gallery(provider: EmbeddingProvider) -> Gallery:
    """Build the gallery from configured references and cache directory."""
    cache_dir = settings.gallery.cache_dir
    cache = ReferenceImageCache(cache_dir) if cache_dir else None
    return build_gallery(load_references(), provider, cache=cache)


__all__ = [
    "Reference",
    "GalleryEntry",
    "Gallery",
    "wikimedia_url",
    "default_references",
    "load_references",
    "fetch_reference_image",
    "build_gallery",
    "build_default_gallery",
]
