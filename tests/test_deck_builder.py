"""Tests for the deck builder (DeckSpec -> .pptx)."""

import pytest
from pptx import Presentation
from pptx.util import Inches

from pptx_export.errors import InvalidStyleValue
from pptx_export.generator.deck_builder import DeckBuilder, build_deck
from pptx_export.generator.presentation import PresentationPackage
from pptx_export.qa.validator import validate_package
from pptx_export.schema.models import (
    DeckSpec,
    Geometry,
    Picture,
    PresentationMetadata,
    ScalePolicy,
    SlideSpec,
    Textbox,
    TextStyle,
)


@pytest.fixture
def deck(png_bytes):
    return DeckSpec(
        dimensions=(12, 6),
        metadata=PresentationMetadata(author="Builder", title="Deck"),
        slides=[
            SlideSpec(
                shapes=[
                    Textbox(text="Heading\nSubheading", geometry=Geometry(0.5, 0.25, 11, 1),
                            style=TextStyle(font_size=28, font_weight="bold")),
                    Picture(image=png_bytes, scale=ScalePolicy.MAX_FIXED),
                ],
                note="Say hello.",
            ),
            SlideSpec(shapes=[Textbox(text="Second")], background_color="#DDDDDD"),
        ],
    )


class TestDeckBuilder:

    def test_build(self, deck, tmp_path):
        path = DeckBuilder(deck).build(tmp_path / "deck.pptx")
        prs = Presentation(str(path))
        assert (prs.slide_width, prs.slide_height) == (Inches(12), Inches(6))
        assert len(prs.slides) == 2
        first = prs.slides[0]
        assert first.shapes[0].text_frame.text == "Heading\nSubheading"
        assert first.shapes[1].width == Inches(12)
        assert first.notes_slide.notes_text_frame.text == "Say hello."
        assert prs.core_properties.title == "Deck"
        assert prs.core_properties.author == "Builder"

    def test_output_passes_qa(self, deck, tmp_path):
        path = build_deck(deck, tmp_path / "deck.pptx")
        assert validate_package(path, expected_slides=2).passed

    def test_render_returns_ordinals(self, deck):
        with PresentationPackage.new(dimensions=deck.dimensions) as package:
            assert DeckBuilder(deck).render(package) == [1, 2]
            assert package.slide_count == 2

    def test_position_inserts(self, deck, tmp_path):
        deck.slides.append(SlideSpec(shapes=[Textbox(text="Cover")], position=1))
        prs = Presentation(str(DeckBuilder(deck).build(tmp_path / "deck.pptx")))
        assert prs.slides[0].shapes[0].text_frame.text == "Cover"
        assert len(prs.slides) == 3

    def test_append(self, deck, tmp_path):
        path = DeckBuilder(deck).build(tmp_path / "deck.pptx")
        extra = DeckSpec(dimensions=(4, 3), slides=[SlideSpec(shapes=[Textbox(text="More")])])
        DeckBuilder(extra).build(path, append=True)
        prs = Presentation(str(path))
        assert len(prs.slides) == 3
        assert prs.slide_width == Inches(12)
        assert prs.slides[2].shapes[0].text_frame.text == "More"

    def test_append_creates_missing_file(self, deck, tmp_path):
        path = DeckBuilder(deck).build(tmp_path / "new.pptx", append=True)
        assert len(Presentation(str(path)).slides) == 2

    def test_invalid_shape_aborts_build(self, tmp_path):
        bad = DeckSpec(slides=[SlideSpec(shapes=[Textbox(text="x", fill_color="nope")])])
        with pytest.raises(InvalidStyleValue):
            build_deck(bad, tmp_path / "bad.pptx")
        assert not (tmp_path / "bad.pptx").exists()
