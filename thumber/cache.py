import os
import json
import hashlib
import logging
import tempfile
from dataclasses import dataclass

from .errors import (
    DirectoryNotWritableError,
    NoOperationAppliedError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

# extension -> Pillow encoder
PILLOW_FORMATS = {
    "jpg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "tiff": "TIFF",
    "bmp": "BMP",
    "webp": "WEBP",
}

# extensions whose encoder takes a quality setting
QUALITY_FORMATS = frozenset({"jpg", "webp"})

# read once; os.umask can only be queried by setting it
UMASK = os.umask(0)
os.umask(UMASK)


def normalize_format(fmt, aliases=None):
    """Returns the file extension for ``fmt``, resolving aliases like ``jpeg``."""
    ext = str(fmt or "").strip().lstrip(".").lower()
    ext = (aliases or {}).get(ext, ext)
    if ext not in PILLOW_FORMATS:
        raise UnsupportedFormatError(f"Image format `{fmt}` is not supported")
    return ext


def pillow_format(ext):
    return PILLOW_FORMATS[ext]


def stable_json(obj):
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_cache_key(source_ref, operations, extension, quality):
    payload = {
        "source": source_ref,
        "operations": [[name, args] for name, args in operations],
        "extension": extension,
        "quality": quality if extension in QUALITY_FORMATS else None,
    }
    return hashlib.md5(stable_json(payload).encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ThumbnailArtifact:
    cache_key: str
    path: str
    extension: str
    existed: bool


def _check_writable(directory):
    if not os.path.isdir(directory) or not os.access(directory, os.W_OK):
        raise DirectoryNotWritableError(f"The directory `{directory}` is not writeable")


def atomic_write(path, data):
    """Writes ``data`` to ``path`` through a temp file in the same directory.

    Readers either see no file or the complete one. The temp file never
    outlives a failed write.
    """
    directory = os.path.dirname(path)
    fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, 0o666 & ~UMASK)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class ThumbnailResolver:
    """Maps a thumbnail request to a file in the target directory.

    The file name is the cache key, so identical requests share one file. A
    missing file is produced by calling ``render(pillow_format, quality)``,
    which must return the encoded bytes.
    """

    def __init__(self, config):
        self.config = config

    def resolve(self, source_ref, operations, params, render):
        if not operations:
            raise NoOperationAppliedError("No valid method called before the `save` method")

        quality = params.get("quality", self.config.default_quality)
        target = params.get("target")

        if target:
            path = target if os.path.isabs(target) else os.path.join(self.config.target, target)
            path = os.path.abspath(path)
            extension = normalize_format(os.path.splitext(path)[1], self.config.format_aliases)
            cache_key = os.path.splitext(os.path.basename(path))[0]
        else:
            extension = normalize_format(
                params.get("format") or self.config.default_format, self.config.format_aliases
            )
            cache_key = compute_cache_key(source_ref, operations, extension, quality)
            path = os.path.join(self.config.target, f"{cache_key}.{extension}")

        _check_writable(os.path.dirname(path))

        if os.path.exists(path):
            logger.debug("Thumbnail cache hit: %s", path)
            return ThumbnailArtifact(cache_key, path, extension, existed=True)

        data = render(pillow_format(extension), quality)
        atomic_write(path, data)
        logger.info("Created thumbnail: %s", path)

        return ThumbnailArtifact(cache_key, path, extension, existed=False)
