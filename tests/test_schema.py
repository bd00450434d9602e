"""Tests for the deck schema models and the YAML loader."""

from pathlib import Path

import pytest
import yaml

from pptx_export.errors import PackageNotFound, ValidationError
from pptx_export.schema import (
    Border,
    DeckSpec,
    Geometry,
    Picture,
    PresentationMetadata,
    ScalePolicy,
    ShapeKind,
    SlideSpec,
    Textbox,
    TextStyle,
    load_deck,
    save_deck,
    shape_from_dict,
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestScalePolicy:

    @pytest.mark.parametrize("value,expected", [
        ("noscale", ScalePolicy.NONE),
        ("MaxFixed", ScalePolicy.MAX_FIXED),
        ("max", ScalePolicy.MAX),
        (ScalePolicy.MAX, ScalePolicy.MAX),
    ])
    def test_parse(self, value, expected):
        assert ScalePolicy.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValidationError, match="Scale"):
            ScalePolicy.parse("stretch")


class TestGeometry:

    def test_from_sequence(self):
        g = Geometry.from_sequence([1, 2, 3.5, 4], rotation=15)
        assert (g.left, g.top, g.width, g.height, g.rotation) == (1.0, 2.0, 3.5, 4.0, 15)

    @pytest.mark.parametrize("values", [[1, 2, 3], "1234", [1, 2, "x", 4], None])
    def test_from_sequence_rejects(self, values):
        with pytest.raises(ValidationError):
            Geometry.from_sequence(values)

    def test_dict_forms(self):
        assert Geometry.from_dict([0, 0, 1, 1]) == Geometry(0, 0, 1, 1)
        assert Geometry.from_dict({"left": 1, "top": 2, "width": 3, "height": 4,
                                   "rotation": 90}) == Geometry(1, 2, 3, 4, 90)

    def test_dict_missing_key(self):
        with pytest.raises(ValidationError, match="height"):
            Geometry.from_dict({"left": 1, "top": 2, "width": 3})

    def test_to_dict_omits_zero_rotation(self):
        assert Geometry(1, 2, 3, 4).to_dict() == {"left": 1, "top": 2, "width": 3, "height": 4}

    def test_with_rotation(self):
        assert Geometry(0, 0, 1, 1).with_rotation(30) == Geometry(0, 0, 1, 1, 30)
        assert Geometry(0, 0, 1, 1, 15).with_rotation(0) == Geometry(0, 0, 1, 1, 15)
        assert Geometry(0, 0, 1, 1, 15).with_rotation(15) == Geometry(0, 0, 1, 1, 15)

    def test_with_rotation_conflict(self):
        with pytest.raises(ValidationError, match="twice"):
            Geometry(0, 0, 1, 1, 15).with_rotation(30)


class TestTextStyle:

    def test_from_dict(self):
        style = TextStyle.from_dict({"font_size": 14, "color": [0, 0, 1]})
        assert style.font_size == 14
        assert style.color == [0, 0, 1]
        assert style.font_weight is None

    def test_unknown_option(self):
        with pytest.raises(ValidationError, match="font_family"):
            TextStyle.from_dict({"font_family": "Arial"})

    def test_to_dict_skips_unset(self):
        assert TextStyle(font_weight="bold", color=(1, 0, 0)).to_dict() == {
            "font_weight": "bold", "color": [1, 0, 0],
        }


class TestShapes:

    def test_kinds(self):
        assert Picture.kind is ShapeKind.PICTURE
        assert Textbox.kind is ShapeKind.TEXTBOX

    def test_textbox_from_dict(self):
        shape = shape_from_dict({
            "type": "textbox",
            "text": "Hello",
            "position": [1, 1, 4, 1],
            "border": {"width": 2},
            "fill_color": "w",
            "style": {"font_size": 24},
        })
        assert isinstance(shape, Textbox)
        assert shape.geometry == Geometry(1, 1, 4, 1)
        assert shape.border == Border(width=2)
        assert shape.fill_color == "w"
        assert shape.style.font_size == 24

    def test_picture_from_dict(self):
        shape = shape_from_dict({"type": "Picture", "image": "chart.png", "scale": "max"})
        assert isinstance(shape, Picture)
        assert shape.image == "chart.png"
        assert shape.scale is ScalePolicy.MAX
        assert shape.geometry is None

    def test_picture_requires_image(self):
        with pytest.raises(ValidationError):
            shape_from_dict({"type": "picture"})

    def test_unknown_type(self):
        with pytest.raises(ValidationError, match="table"):
            shape_from_dict({"type": "table"})

    def test_inline_bytes_cannot_be_serialized(self):
        with pytest.raises(ValidationError):
            Picture(image=b"\x89PNG").to_dict()

    def test_textbox_to_dict(self):
        d = Textbox(text="a\nb", geometry=Geometry(0, 0, 1, 1),
                    style=TextStyle(font_size=12)).to_dict()
        assert d == {
            "type": "textbox",
            "position": {"left": 0, "top": 0, "width": 1, "height": 1},
            "text": "a\nb",
            "style": {"font_size": 12},
        }

    def test_shape_level_rotation(self):
        shape = shape_from_dict({"type": "textbox", "text": "t", "rotation": 30})
        assert shape.rotation == 30
        assert shape.placement() is None
        assert shape.to_dict() == {"type": "textbox", "rotation": 30, "text": "t"}

    def test_rotation_folded_into_position(self):
        shape = shape_from_dict({"type": "picture", "image": "a.png",
                                 "position": [1, 1, 2, 2], "rotation": 45})
        assert shape.placement() == Geometry(1, 1, 2, 2, 45)

    def test_bad_rotation(self):
        with pytest.raises(ValidationError, match="Rotation"):
            shape_from_dict({"type": "textbox", "rotation": "steep"})

    def test_textbox_paragraph_list(self):
        shape = shape_from_dict({"type": "textbox", "text": ["one", "two"]})
        assert shape.text == ["one", "two"]
        assert shape_from_dict({"type": "textbox", "text": 7}).text == "7"


class TestMetadata:

    def test_defaults(self):
        meta = PresentationMetadata()
        assert (meta.author, meta.title, meta.subject, meta.description) == (
            "pptx-export", "Blank", "", "")

    def test_comments_alias(self):
        assert PresentationMetadata.from_dict({"comments": "c"}).description == "c"
        assert PresentationMetadata.from_dict(
            {"comments": "c", "description": "d"}).description == "d"


class TestDeckSpec:

    def test_defaults(self):
        deck = DeckSpec.from_dict({})
        assert deck.slides == []
        assert deck.dimensions == (10.0, 7.5)
        assert deck.background_color is None

    def test_bad_dimensions(self):
        with pytest.raises(ValidationError, match="Dimensions"):
            DeckSpec.from_dict({"dimensions": [10]})

    def test_slide_from_dict(self):
        slide = SlideSpec.from_dict({"note": "n", "background_color": "k", "position": 1})
        assert slide.shapes == []
        assert (slide.note, slide.background_color, slide.position) == ("n", "k", 1)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_deck():
    return DeckSpec(
        dimensions=(13.333, 7.5),
        metadata=PresentationMetadata(author="Ops", title="Weekly"),
        background_color=[1, 1, 1],
        slides=[
            SlideSpec(
                shapes=[
                    Textbox(text="Weekly numbers", geometry=Geometry(0.5, 0.5, 12, 1),
                            style=TextStyle(font_size=32, font_weight="bold")),
                    Picture(image="figures/trend.png", scale=ScalePolicy.MAX_FIXED),
                ],
                note="Open with the trend.",
            ),
            SlideSpec(background_color="#F2F2F2"),
        ],
    )


class TestLoader:

    def test_save_writes_yaml(self, sample_deck, tmp_path):
        path = tmp_path / "decks" / "weekly.yaml"
        save_deck(sample_deck, path)
        data = yaml.safe_load(path.read_text())
        assert list(data) == ["dimensions", "metadata", "background_color", "slides"]
        assert data["slides"][0]["shapes"][1] == {
            "type": "picture", "image": "figures/trend.png", "scale": "maxfixed",
        }

    def test_load_resolves_relative_images(self, sample_deck, tmp_path):
        path = tmp_path / "weekly.yaml"
        save_deck(sample_deck, path)
        deck = load_deck(path)
        assert deck.dimensions == (13.333, 7.5)
        assert deck.metadata.title == "Weekly"
        assert len(deck.slides) == 2
        title, picture = deck.slides[0].shapes
        assert title.style.font_weight == "bold"
        assert picture.image == tmp_path / "figures" / "trend.png"
        assert deck.slides[0].note == "Open with the trend."
        assert deck.slides[1].background_color == "#F2F2F2"

    def test_absolute_image_kept(self, tmp_path):
        image = Path(tmp_path / "abs.png").resolve()
        path = tmp_path / "deck.yaml"
        path.write_text(yaml.safe_dump({"slides": [
            {"shapes": [{"type": "picture", "image": str(image)}]},
        ]}))
        assert load_deck(path).slides[0].shapes[0].image == image

    def test_missing_file(self, tmp_path):
        with pytest.raises(PackageNotFound):
            load_deck(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("slides: [unclosed\n")
        with pytest.raises(ValidationError, match="not valid YAML"):
            load_deck(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ValidationError, match="mapping"):
            load_deck(path)
