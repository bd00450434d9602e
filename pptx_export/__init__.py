"""pptx-export: authoring engine for Office Open XML presentation packages.

Usage::

    from pptx_export import PresentationPackage

    with PresentationPackage.new("out.pptx", dimensions=(12, 6)) as pkg:
        pkg.add_slide()
        pkg.add_picture("figure.png", scale="maxfixed")
        pkg.add_textbox("Caption", geometry=[0.5, 5, 11, 0.8], font_size=18)
        pkg.save()
"""

from .errors import (
    ConflictingContentType,
    IntegrityWarning,
    InvalidStyleValue,
    NoActiveSlide,
    NoDestination,
    NodeNotFound,
    NotFoundError,
    PackageClosed,
    PackageIOError,
    PackageNotFound,
    PptxExportError,
    SlideNotFound,
    StateError,
    UnresolvedPart,
    ValidationError,
    WriteFailure,
)
from .generator import DeckBuilder, PresentationPackage, build_deck, create_or_open
from .qa import PackageValidator, QAResult, validate_package
from .schema import (
    Border,
    DeckSpec,
    Geometry,
    PackageInfo,
    Picture,
    PresentationMetadata,
    ScalePolicy,
    ShapeKind,
    SlideSpec,
    Textbox,
    TextStyle,
    load_deck,
    save_deck,
)

__version__ = "0.1.0"

__all__ = [
    # Package assembly
    "PresentationPackage",
    "create_or_open",
    "DeckBuilder",
    "build_deck",
    # Models
    "Border",
    "DeckSpec",
    "Geometry",
    "PackageInfo",
    "Picture",
    "PresentationMetadata",
    "ScalePolicy",
    "ShapeKind",
    "SlideSpec",
    "Textbox",
    "TextStyle",
    "load_deck",
    "save_deck",
    # QA
    "PackageValidator",
    "QAResult",
    "validate_package",
    # Errors
    "ConflictingContentType",
    "IntegrityWarning",
    "InvalidStyleValue",
    "NoActiveSlide",
    "NoDestination",
    "NodeNotFound",
    "NotFoundError",
    "PackageClosed",
    "PackageIOError",
    "PackageNotFound",
    "PptxExportError",
    "SlideNotFound",
    "StateError",
    "UnresolvedPart",
    "ValidationError",
    "WriteFailure",
]
