import os
from dataclasses import dataclass, field
from functools import partial

from flask import url_for
from markupsafe import Markup, escape

from .creator import ThumbCreator
from .errors import ArgumentError, UnsupportedOperationError

# public name -> (ThumbCreator method, extra params forwarded to it)
OPERATIONS = {
    "crop": ("crop", ("x", "y")),
    "fit": ("fit", ("position", "upsize")),
    "resize": ("resize", ("aspect_ratio", "upsize")),
    "resizeCanvas": ("resize_canvas", ("anchor", "relative", "bgcolor")),
}
NAME_ALIASES = {"resize_canvas": "resizeCanvas"}
SAVE_PARAMS = ("format", "quality", "target")


def split_name(name):
    """Splits a method name like ``cropUrl`` into ``("crop", True)``."""
    url_only = False
    for suffix in ("Url", "_url"):
        if name.endswith(suffix):
            name, url_only = name[: -len(suffix)], True
            break
    operation = NAME_ALIASES.get(name, name)
    if operation not in OPERATIONS:
        raise UnsupportedOperationError(f"Method `ThumbCreator.{name}()` does not exist")
    return operation, url_only


@dataclass(frozen=True)
class ThumbnailRequest:
    operation: str
    url_only: bool
    source_ref: str
    params: dict = field(default_factory=dict)
    options: dict = field(default_factory=dict)

    @classmethod
    def parse(cls, name, path=None, params=None, options=None, default_format="jpg"):
        if not path:
            raise ArgumentError("Thumbnail path is missing")
        operation, url_only = split_name(name)

        params = dict(params or {})
        allowed = ("width", "height") + SAVE_PARAMS + OPERATIONS[operation][1]
        unexpected = sorted(set(params) - set(allowed))
        if unexpected:
            raise ArgumentError(f"Unexpected params for `{name}`: {', '.join(unexpected)}")
        params.setdefault("format", default_format)
        params.setdefault("width", None)
        params.setdefault("height", None)

        options = dict(options or {})
        options.setdefault("fullBase", True)

        return cls(operation, url_only, path, params, options)

    @property
    def extras(self):
        return {k: self.params[k] for k in OPERATIONS[self.operation][1] if k in self.params}

    @property
    def save_params(self):
        return {k: self.params[k] for k in SAVE_PARAMS if k in self.params}

    @property
    def full_base(self):
        return bool(self.options["fullBase"])

    @property
    def attributes(self):
        return {k: v for k, v in self.options.items() if k != "fullBase"}


def _is_within(path, directory):
    return os.path.commonpath([path, directory]) == directory


def flask_url_builder(config):
    """Returns a url builder for thumbnails served by the app."""

    def build(path, full_base):
        path = os.path.abspath(path)
        for endpoint, directory in (("thumber.thumbnail", config.target), ("static", config.static_dir)):
            if directory and _is_within(path, directory):
                filename = os.path.relpath(path, directory).replace(os.sep, "/")
                return url_for(endpoint, filename=filename, _external=full_base)
        raise ArgumentError(f"Thumbnail `{path}` is not inside a public directory")

    return build


def render_image(url, attributes):
    """Renders an ``img`` element. ``True`` values become bare attributes."""
    attributes = {"alt": "", **attributes}
    html = f'<img src="{escape(url)}"'
    for key, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            html += f" {escape(key)}"
        else:
            html += f' {escape(key)}="{escape(value)}"'
    return Markup(html + "/>")


class ThumbHelper:
    """Template helper exposing the thumbnail operations.

    Each operation takes the source path, a dict of params (``width``,
    ``height``, ``format``, ``quality``, ``target`` and the operation extras)
    and a dict of options (``fullBase`` plus html attributes)::

        {{ thumb.resize("400x400.png", {"width": 200}, {"class": "thumb"}) }}
        {{ thumb.fitUrl("400x400.png", {"width": 100}) }}

    ``…Url`` variants return the url, the others an ``img`` element.
    """

    def __init__(self, config, url_builder=None, renderer=None):
        self.config = config
        self.url_builder = url_builder or flask_url_builder(config)
        self.renderer = renderer or render_image

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        split_name(name)
        return partial(self.invoke, name)

    def invoke(self, name, path=None, params=None, options=None):
        request = ThumbnailRequest.parse(name, path, params, options, self.config.default_format)
        url = self.run(request)
        if request.url_only:
            return url
        return self.renderer(url, request.attributes)

    def run(self, request):
        """Creates (or reuses) the thumbnail and returns its url."""
        method = OPERATIONS[request.operation][0]
        creator = ThumbCreator(request.source_ref, self.config)
        getattr(creator, method)(request.params["width"], request.params["height"], **request.extras)
        creator.save(request.save_params)
        return self.url_builder(creator.artifact.path, request.full_base)
