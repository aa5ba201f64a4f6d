import os
from dataclasses import dataclass, field
from typing import Optional

FORMAT_ALIASES = {"jpeg": "jpg", "tif": "tiff"}


@dataclass(frozen=True)
class ThumberConfig:
    target: str
    source_dir: str
    static_dir: Optional[str] = None
    default_format: str = "jpg"
    default_quality: int = 90
    format_aliases: dict = field(default_factory=lambda: dict(FORMAT_ALIASES))
    remote_timeout: float = 15
    url_prefix: str = "/thumbs"

    @classmethod
    def from_app(cls, app):
        """Build the configuration from ``app.config``, filling defaults in place."""
        static_dir = app.static_folder
        app.config.setdefault("THUMBER_TARGET", os.path.join(static_dir, "thumbs"))
        app.config.setdefault("THUMBER_SOURCE_DIR", os.path.join(static_dir, "img"))
        app.config.setdefault("THUMBER_DEFAULT_FORMAT", "jpg")
        app.config.setdefault("THUMBER_DEFAULT_QUALITY", 90)
        app.config.setdefault("THUMBER_FORMAT_ALIASES", dict(FORMAT_ALIASES))
        app.config.setdefault("THUMBER_REMOTE_TIMEOUT", 15)
        app.config.setdefault("THUMBER_URL_PREFIX", "/thumbs")

        return cls(
            target=os.path.abspath(app.config["THUMBER_TARGET"]),
            source_dir=os.path.abspath(app.config["THUMBER_SOURCE_DIR"]),
            static_dir=os.path.abspath(static_dir) if static_dir else None,
            default_format=app.config["THUMBER_DEFAULT_FORMAT"],
            default_quality=app.config["THUMBER_DEFAULT_QUALITY"],
            format_aliases=dict(app.config["THUMBER_FORMAT_ALIASES"]),
            remote_timeout=app.config["THUMBER_REMOTE_TIMEOUT"],
            url_prefix=app.config["THUMBER_URL_PREFIX"],
        )
