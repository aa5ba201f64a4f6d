import io
import os
import logging

import requests
from PIL import Image, UnidentifiedImageError

from . import operations
from .cache import PILLOW_FORMATS, QUALITY_FORMATS, ThumbnailResolver
from .errors import ArgumentError, InvalidSourceImageError

logger = logging.getLogger(__name__)


def is_url(path):
    return path.lower().startswith(("http://", "https://"))


class ThumbCreator:
    """Creates a thumbnail from a source image.

    ``path`` can be relative to the configured source directory, a full path
    or a remote url. Operation methods are chainable and ``save()`` writes the
    result (or reuses an existing thumbnail) and returns its path::

        ThumbCreator("400x400.png", config).resize(200).save({"format": "png"})
    """

    def __init__(self, path, config):
        if not path:
            raise ArgumentError("Thumbnail path is missing")
        self.config = config
        self.callbacks = []
        self.artifact = None

        if is_url(path):
            self.path = path
        else:
            self.path = os.path.abspath(os.path.join(config.source_dir, path))
            if not os.path.isfile(self.path):
                raise InvalidSourceImageError(f"Unable to read image from file `{path}`")

    def _dimensions(self, width, height, allow_negative=False):
        if width is None and height is None:
            raise ArgumentError("You have to set at least the width or the height")
        for value in (width, height):
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ArgumentError(f"Invalid dimension `{value!r}`")
            if value < 1 and not allow_negative:
                raise ArgumentError(f"Invalid dimension `{value!r}`")
        return width, height

    def _add(self, name, **args):
        self.callbacks.append((name, args))
        return self

    def crop(self, width=None, height=None, x=None, y=None):
        width, height = self._dimensions(width, height)
        for value in (x, y):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                raise ArgumentError(f"Invalid crop position `{value!r}`")
        return self._add("crop", width=width, height=height, x=x, y=y)

    def fit(self, width=None, height=None, position="center", upsize=True):
        width, height = self._dimensions(width, height)
        operations.position_offsets(position)
        return self._add("fit", width=width, height=height, position=position, upsize=bool(upsize))

    def resize(self, width=None, height=None, aspect_ratio=True, upsize=True):
        width, height = self._dimensions(width, height)
        return self._add(
            "resize", width=width, height=height, aspect_ratio=bool(aspect_ratio), upsize=bool(upsize)
        )

    def resize_canvas(self, width=None, height=None, anchor="center", relative=False, bgcolor="#ffffff"):
        width, height = self._dimensions(width, height, allow_negative=relative)
        operations.position_offsets(anchor)
        return self._add(
            "resize_canvas",
            width=width,
            height=height,
            anchor=anchor,
            relative=bool(relative),
            bgcolor=bgcolor,
        )

    def _read_source(self):
        if not is_url(self.path):
            return self.path
        try:
            response = requests.get(self.path, timeout=self.config.remote_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Cannot fetch remote image %s: %s", self.path, e)
            raise InvalidSourceImageError(f"Unable to read image from `{self.path}`") from e
        return io.BytesIO(response.content)

    def _render(self, fmt, quality):
        try:
            with Image.open(self._read_source()) as img:
                img.load()
                for name, args in self.callbacks:
                    img = getattr(operations, name)(img, **args)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            logger.error("Cannot identify image file %s: %s", self.path, e)
            raise InvalidSourceImageError(f"Unable to read image from file `{self.path}`") from e

        if fmt in ("JPEG", "BMP"):
            img = img.convert("RGB")
        elif img.mode not in ("RGB", "RGBA", "L", "LA", "P"):
            img = img.convert("RGBA")

        quality_formats = {PILLOW_FORMATS[ext] for ext in QUALITY_FORMATS}
        options = {"quality": quality} if fmt in quality_formats else {}
        buffer = io.BytesIO()
        img.save(buffer, format=fmt, **options)
        return buffer.getvalue()

    def save(self, params=None):
        """Saves the thumbnail and returns its path.

        Recognized params are ``format``, ``quality`` and ``target``. The
        thumbnail is only generated when it does not exist yet.
        """
        params = dict(params or {})
        params.setdefault("format", self.config.default_format)
        params.setdefault("quality", self.config.default_quality)

        quality = params["quality"]
        if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 100:
            raise ArgumentError(f"Quality must be an integer between 1 and 100, got `{quality!r}`")

        resolver = ThumbnailResolver(self.config)
        self.artifact = resolver.resolve(self.path, self.callbacks, params, self._render)
        return self.artifact.path
