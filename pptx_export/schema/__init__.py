"""Deck schema package - typed models for shapes, slides and decks.

- models.py: Core dataclasses (Geometry, TextStyle, Picture, Textbox, DeckSpec, etc.)
- loader.py: YAML serialization/deserialization of DeckSpec
"""

from .loader import load_deck, save_deck
from .models import (
    Border,
    DeckSpec,
    Geometry,
    PackageInfo,
    Picture,
    PresentationMetadata,
    ScalePolicy,
    Shape,
    ShapeKind,
    SlideSpec,
    Textbox,
    TextStyle,
    shape_from_dict,
)

__all__ = [
    # Models
    "Border",
    "DeckSpec",
    "Geometry",
    "PackageInfo",
    "Picture",
    "PresentationMetadata",
    "ScalePolicy",
    "Shape",
    "ShapeKind",
    "SlideSpec",
    "Textbox",
    "TextStyle",
    "shape_from_dict",
    # Loader
    "load_deck",
    "save_deck",
]
