class ThumberError(Exception):
    """Base class for every error raised by thumber."""


class ArgumentError(ThumberError, ValueError):
    pass


class UnsupportedOperationError(ThumberError, AttributeError):
    pass


class UnsupportedFormatError(ThumberError, ValueError):
    pass


class InvalidSourceImageError(ThumberError):
    pass


class DirectoryNotWritableError(ThumberError, OSError):
    pass


class NoOperationAppliedError(ThumberError, RuntimeError):
    pass
