"""Errors raised by the source extractors.

Parsers raise these; the file-level ``load_*`` functions catch them, log, and
return an empty result so one broken file never aborts its siblings.
"""


class SceneExtractionError(Exception):
    """Base error of the extraction pipeline."""


class NotFoundError(SceneExtractionError):
    """Source file or directory is absent."""


class MalformedEntryError(SceneExtractionError):
    """A macro was found but one of its fields cannot be used."""


class AmbiguousResolutionError(SceneExtractionError):
    """A preset or transform lookup did not resolve."""
