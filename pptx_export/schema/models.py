"""Typed models shared by the assembler, the deck builder and the loader.

Shapes are a tagged variant: every concrete shape class carries a
``ShapeKind`` and the shared geometry/border/fill fields, and the assembler
dispatches on the kind. Positions are in inches, line widths in points,
rotations in degrees (counter-clockwise positive). Colors are kept as given
(RGB triple in [0, 1], one-letter code or ``#RRGGBB``) and validated when a
shape is inserted.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from pptx_export.errors import ValidationError

ColorValue = str | Sequence[float]

DEFAULT_DIMENSIONS = (10.0, 7.5)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ShapeKind(Enum):
    """Which shape variant a model describes."""
    PICTURE = "picture"
    TEXTBOX = "textbox"


class ScalePolicy(Enum):
    """How a picture without an explicit position is sized on the slide."""
    NONE = "noscale"          # native size, centered
    MAX_FIXED = "maxfixed"    # largest size keeping aspect ratio, centered
    MAX = "max"               # stretched to the whole slide

    @classmethod
    def parse(cls, value: "ScalePolicy | str") -> "ScalePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(f"Bad property value found in Scale: {value!r}") from None


# ---------------------------------------------------------------------------
# Geometry and styling primitives
# ---------------------------------------------------------------------------

def _numbers(values: Any, count: int, label: str) -> list[float]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence) or len(values) != count:
        raise ValidationError(f"Bad property value found in {label}: expected {count} numbers")
    try:
        return [float(v) for v in values]
    except (TypeError, ValueError):
        raise ValidationError(f"Bad property value found in {label}: {values!r}") from None


@dataclass
class Geometry:
    """Shape rectangle in inches plus rotation in degrees."""
    left: float
    top: float
    width: float
    height: float
    rotation: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float], rotation: float = 0.0) -> "Geometry":
        """Build from an ``[x, y, width, height]`` vector."""
        left, top, width, height = _numbers(values, 4, "Position")
        return cls(left, top, width, height, rotation)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"left": self.left, "top": self.top,
                             "width": self.width, "height": self.height}
        if self.rotation:
            d["rotation"] = self.rotation
        return d

    @classmethod
    def from_dict(cls, d: dict | Sequence[float]) -> "Geometry":
        if not isinstance(d, dict):
            return cls.from_sequence(d)
        try:
            return cls(left=float(d["left"]), top=float(d["top"]),
                       width=float(d["width"]), height=float(d["height"]),
                       rotation=float(d.get("rotation", 0.0)))
        except KeyError as exc:
            raise ValidationError(f"Position is missing {exc.args[0]!r}") from None
        except (TypeError, ValueError):
            raise ValidationError(f"Bad property value found in Position: {d!r}") from None

    def with_rotation(self, rotation: float) -> "Geometry":
        """This rectangle turned by ``rotation`` degrees.

        A zero ``rotation`` keeps the current one; a different non-zero
        rotation already set on the rectangle is a conflict.
        """
        if not rotation or rotation == self.rotation:
            return self
        if self.rotation:
            raise ValidationError(f"Rotation given twice: {self.rotation!r} in Position "
                                  f"and {rotation!r}")
        return replace(self, rotation=rotation)


@dataclass
class Border:
    """Edge line. Drawn when either the width or the color is given."""
    width: float | None = None      # points, defaults to 1 when only color is set
    color: ColorValue | None = None  # defaults to black when only width is set

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.width is not None:
            d["width"] = self.width
        if self.color is not None:
            d["color"] = _color_to_plain(self.color)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Border":
        return cls(width=d.get("width"), color=d.get("color"))


@dataclass
class TextStyle:
    """Run and paragraph formatting shared by every paragraph of a box."""
    font_size: float | None = None
    font_weight: str | None = None            # normal | light | bold | demi
    font_angle: str | None = None             # normal | italic | oblique
    color: ColorValue | None = None
    horizontal_alignment: str | None = None   # left | center | right
    vertical_alignment: str | None = None     # top | middle | bottom

    _FIELDS: ClassVar[tuple[str, ...]] = (
        "font_size", "font_weight", "font_angle", "color",
        "horizontal_alignment", "vertical_alignment",
    )

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        for name in self._FIELDS:
            value = getattr(self, name)
            if value is not None:
                d[name] = _color_to_plain(value) if name == "color" else value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "TextStyle":
        unknown = set(d) - set(cls._FIELDS)
        if unknown:
            raise ValidationError(f"Unknown text style option(s): {', '.join(sorted(unknown))}")
        return cls(**d)


def _color_to_plain(color: ColorValue) -> Any:
    return color if isinstance(color, str) else list(color)


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

@dataclass
class Shape:
    """Fields common to every shape variant."""
    geometry: Geometry | None = None
    border: Border | None = None
    fill_color: ColorValue | None = None
    rotation: float = 0.0   # degrees, folded into geometry or applied to the default placement

    kind: ClassVar[ShapeKind]

    def _common_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.kind.value}
        if self.geometry is not None:
            d["position"] = self.geometry.to_dict()
        if self.border is not None:
            d["border"] = self.border.to_dict()
        if self.fill_color is not None:
            d["fill_color"] = _color_to_plain(self.fill_color)
        if self.rotation:
            d["rotation"] = self.rotation
        return d

    def placement(self) -> Geometry | None:
        """Explicit rectangle with the shape-level rotation folded in."""
        if self.geometry is None:
            return None
        return self.geometry.with_rotation(self.rotation)

    @staticmethod
    def _common_kwargs(d: dict) -> dict:
        return {
            "geometry": Geometry.from_dict(d["position"]) if d.get("position") is not None else None,
            "border": Border.from_dict(d["border"]) if d.get("border") is not None else None,
            "fill_color": d.get("fill_color"),
            "rotation": _numbers([d.get("rotation") or 0.0], 1, "Rotation")[0],
        }


@dataclass
class Picture(Shape):
    """An image placed from raw bytes or a file path."""
    image: bytes | str | Path = b""
    filename: str | None = None
    scale: ScalePolicy = ScalePolicy.NONE

    kind: ClassVar[ShapeKind] = ShapeKind.PICTURE

    def to_dict(self) -> dict:
        if isinstance(self.image, bytes):
            raise ValidationError("Inline image bytes cannot be written to a deck file")
        d = self._common_dict()
        d["image"] = str(self.image)
        if self.scale is not ScalePolicy.NONE:
            d["scale"] = self.scale.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Picture":
        if not d.get("image"):
            raise ValidationError("Picture requires an 'image' path")
        return cls(image=d["image"], filename=d.get("filename"),
                   scale=ScalePolicy.parse(d.get("scale", ScalePolicy.NONE)),
                   **cls._common_kwargs(d))


@dataclass
class Textbox(Shape):
    """A text box; ``text`` is split into paragraphs on line breaks.

    ``text`` may also be a list of strings, one or more paragraphs each.
    """
    text: str | list[str] = ""
    style: TextStyle = field(default_factory=TextStyle)

    kind: ClassVar[ShapeKind] = ShapeKind.TEXTBOX

    def to_dict(self) -> dict:
        d = self._common_dict()
        d["text"] = self.text
        style = self.style.to_dict()
        if style:
            d["style"] = style
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Textbox":
        text = d.get("text", "")
        return cls(text=text if isinstance(text, list) else str(text),
                   style=TextStyle.from_dict(d.get("style") or {}),
                   **cls._common_kwargs(d))


_SHAPE_TYPES: dict[str, type[Shape]] = {
    ShapeKind.PICTURE.value: Picture,
    ShapeKind.TEXTBOX.value: Textbox,
}


def shape_from_dict(d: dict) -> Shape:
    """Build the shape variant named by ``d['type']``."""
    shape_type = _SHAPE_TYPES.get(str(d.get("type", "")).lower())
    if shape_type is None:
        raise ValidationError(f"Unknown shape type: {d.get('type')!r}")
    return shape_type.from_dict(d)


# ---------------------------------------------------------------------------
# Package-level models
# ---------------------------------------------------------------------------

@dataclass
class PresentationMetadata:
    """Document properties written to ``docProps/core.xml``."""
    author: str = "pptx-export"
    title: str = "Blank"
    subject: str = ""
    description: str = ""

    def to_dict(self) -> dict:
        return {"author": self.author, "title": self.title,
                "subject": self.subject, "description": self.description}

    @classmethod
    def from_dict(cls, d: dict) -> "PresentationMetadata":
        return cls(
            author=d.get("author", "pptx-export"),
            title=d.get("title", "Blank"),
            subject=d.get("subject", ""),
            description=d.get("description", d.get("comments", "")),
        )


@dataclass(frozen=True)
class PackageInfo:
    """Result of ``PresentationPackage.query()``."""
    path: Path | None
    dimensions: tuple[float, float]   # inches
    slide_count: int


@dataclass
class SlideSpec:
    """One slide of a declarative deck."""
    shapes: list[Shape] = field(default_factory=list)
    note: str | None = None
    background_color: ColorValue | None = None
    position: int | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"shapes": [shape.to_dict() for shape in self.shapes]}
        if self.note is not None:
            d["note"] = self.note
        if self.background_color is not None:
            d["background_color"] = _color_to_plain(self.background_color)
        if self.position is not None:
            d["position"] = self.position
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SlideSpec":
        return cls(
            shapes=[shape_from_dict(s) for s in d.get("shapes") or []],
            note=d.get("note"),
            background_color=d.get("background_color"),
            position=d.get("position"),
        )


@dataclass
class DeckSpec:
    """A whole presentation described as data (see ``schema.loader``)."""
    slides: list[SlideSpec] = field(default_factory=list)
    dimensions: tuple[float, float] = DEFAULT_DIMENSIONS
    metadata: PresentationMetadata = field(default_factory=PresentationMetadata)
    background_color: ColorValue | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "dimensions": list(self.dimensions),
            "metadata": self.metadata.to_dict(),
        }
        if self.background_color is not None:
            d["background_color"] = _color_to_plain(self.background_color)
        d["slides"] = [slide.to_dict() for slide in self.slides]
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "DeckSpec":
        width, height = _numbers(d.get("dimensions", DEFAULT_DIMENSIONS), 2, "Dimensions")
        return cls(
            slides=[SlideSpec.from_dict(s) for s in d.get("slides") or []],
            dimensions=(width, height),
            metadata=PresentationMetadata.from_dict(d.get("metadata") or {}),
            background_color=d.get("background_color"),
        )
