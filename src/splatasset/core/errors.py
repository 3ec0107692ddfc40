"""Error kinds that abort a transcode run before anything is published."""

from __future__ import annotations


class TranscodeError(Exception):
    """Base class for fatal read/validation errors of one transcode run."""


class SourceNotFound(TranscodeError, FileNotFoundError):
    """The source PLY file does not exist."""


class SourceTooLarge(TranscodeError):
    """The source file is 2 GiB or larger."""


class HeaderParseError(TranscodeError):
    """The PLY header is malformed or declares an unsupported property type."""


class RecordSizeMismatch(TranscodeError):
    """Declared record stride or total byte count does not match the record layout."""


class EmptyPointCloud(Exception):
    """Source holds zero records.

    Not a TranscodeError: the pipeline runner treats it as a no-op and returns None.
    """
