"""Presentation generation: slide buffer, shape emitters, package assembler."""

from .deck_builder import DeckBuilder, build_deck
from .presentation import PresentationPackage, create_or_open
from .slide_buffer import SlideBuffer, SlideRecord

__all__ = [
    "DeckBuilder",
    "PresentationPackage",
    "SlideBuffer",
    "SlideRecord",
    "build_deck",
    "create_or_open",
]
