"""Deck builder. Renders a declarative DeckSpec through PresentationPackage.

Usage::

    from pptx_export.generator.deck_builder import DeckBuilder
    from pptx_export.schema import load_deck

    deck = load_deck("decks/review.yaml")
    DeckBuilder(deck).build("review.pptx")
"""

import logging
from pathlib import Path

from pptx_export.generator.presentation import PresentationPackage, create_or_open
from pptx_export.schema.models import DeckSpec, SlideSpec

logger = logging.getLogger(__name__)


class DeckBuilder:
    """Builds a presentation file from a DeckSpec.

    Parameters
    ----------
    deck : DeckSpec
        Slides, shapes and notes plus the package options (dimensions,
        metadata, master background).
    """

    def __init__(self, deck: DeckSpec) -> None:
        self.deck = deck

    def build(self, path: str | Path, *, append: bool = False) -> Path:
        """Write the deck to ``path`` and return the written file.

        With ``append`` an existing file at ``path`` is opened and the
        deck's slides are added after its own; the deck's dimensions and
        master background are then ignored.
        """
        if append:
            package = create_or_open(
                path,
                dimensions=self.deck.dimensions,
                background_color=self.deck.background_color,
                metadata=self.deck.metadata,
            )
        else:
            package = PresentationPackage.new(
                path,
                dimensions=self.deck.dimensions,
                background_color=self.deck.background_color,
                metadata=self.deck.metadata,
            )
        with package:
            self.render(package)
            return package.save()

    def render(self, package: PresentationPackage) -> list[int]:
        """Add every slide of the deck to ``package``; returns their ordinals."""
        return [self._build_slide(package, slide) for slide in self.deck.slides]

    # ------------------------------------------------------------------
    # Slide builders
    # ------------------------------------------------------------------

    def _build_slide(self, package: PresentationPackage, slide: SlideSpec) -> int:
        ordinal = package.add_slide(background_color=slide.background_color,
                                    position=slide.position)
        for shape in slide.shapes:
            package.add_shape(shape)
        if slide.note is not None:
            package.add_note(slide.note)
        logger.debug("Rendered slide %d (%d shapes)", ordinal, len(slide.shapes))
        return ordinal


def build_deck(deck: DeckSpec, path: str | Path) -> Path:
    """Convenience wrapper: build ``deck`` into a new file at ``path``."""
    return DeckBuilder(deck).build(path)
