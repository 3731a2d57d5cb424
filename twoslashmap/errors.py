"""Exceptions raised by twoslashmap."""


class SourceMapError(ValueError):
    """A raw source map could not be decoded."""


class FixtureError(ValueError):
    """A recorded replay fixture is missing data or has the wrong shape."""
