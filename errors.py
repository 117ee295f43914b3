class SitemapError(Exception):
    """Base class for everything the generator raises on purpose."""


class ValidationError(SitemapError, ValueError):
    """An entry, extension payload or setting breaks a protocol rule."""


class CapacityError(SitemapError):
    """A per-file or lifetime limit has been reached."""


class SitemapRuntimeError(SitemapError, RuntimeError):
    """I/O failure or an operation called out of sequence."""
