"""Exception taxonomy for the package authoring engine.

Four fatal families plus one non-fatal warning:

- StateError: the call is invalid for the current package/slide state.
- ValidationError: an option value is malformed (arity, keyword, type).
- NotFoundError: a referenced slide, file, part or XML node is absent.
- PackageIOError: the filesystem or the ZIP container failed.
- IntegrityWarning: a recoverable mismatch found while opening a package.
"""


class PptxExportError(Exception):
    """Base class for every error raised by pptx_export."""


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class StateError(PptxExportError):
    """Operation is not valid for the current package state."""


class NoActiveSlide(StateError):
    """A shape or note was added while no slide is loaded in the buffer."""


class NoDestination(StateError):
    """``save()`` was called without a path and none was ever established."""


class PackageClosed(StateError):
    """The package was already closed and its staging area released."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationError(PptxExportError, ValueError):
    """An option value is malformed or out of its domain."""


class InvalidStyleValue(ValidationError):
    """Unrecognized style keyword or a color vector of the wrong arity."""


class ConflictingContentType(ValidationError):
    """An extension or part is already registered with another MIME type."""


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class NotFoundError(PptxExportError, LookupError):
    """A referenced entity does not exist."""


class SlideNotFound(NotFoundError):
    """No slide exists at the requested ordinal."""


class NodeNotFound(NotFoundError):
    """No XML element matches the requested tag."""


class UnresolvedPart(NotFoundError):
    """A part has neither a Default nor an Override content type."""


class PackageNotFound(NotFoundError, FileNotFoundError):
    """The container file to open does not exist."""


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

class PackageIOError(PptxExportError, OSError):
    """Extraction, staging or archival failed."""


class WriteFailure(PackageIOError):
    """The container could not be written to its destination."""


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------

class IntegrityWarning(UserWarning):
    """Non-fatal inconsistency detected in an opened package."""
