"""
wavenib.errors

The two failure kinds shared by the decoder and the slicer.

FormatError means the input (or the slicing configuration) is wrong and
retrying with the same input cannot help. ResourceError means reading or
allocating failed; the underlying exception is kept as ``__cause__``.
"""

from __future__ import annotations


class FormatError(ValueError):
    """Raised when a container violates the supported audio profile or layout."""


class ResourceError(OSError):
    """Raised on a short read, an I/O failure or an allocation failure."""


class SliceSpecError(FormatError):
    """Raised when a SliceSpec cannot be applied to a given sample stream."""


__all__ = ["FormatError", "ResourceError", "SliceSpecError"]
