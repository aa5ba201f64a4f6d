from .cache import ThumbnailArtifact, ThumbnailResolver, compute_cache_key, normalize_format
from .config import ThumberConfig
from .creator import ThumbCreator
from .errors import (
    ArgumentError,
    DirectoryNotWritableError,
    InvalidSourceImageError,
    NoOperationAppliedError,
    ThumberError,
    UnsupportedFormatError,
    UnsupportedOperationError,
)
from .extension import Thumber
from .helper import ThumbHelper, ThumbnailRequest
from .manager import ThumbManager

__version__ = "1.0.0"
