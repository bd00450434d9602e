"""Shape emitters - XML fragments for pictures, text boxes and notes.

Every emitter takes already-resolved values (EMU integers, hex colors,
OOXML keywords) and appends a structurally complete fragment to a tree.
Resolution helpers at the top of the module turn user-facing values into
those resolved forms and raise InvalidStyleValue on anything malformed,
so callers can resolve everything before touching the slide.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real

from pptx.dml.color import RGBColor

from pptx_export.errors import InvalidStyleValue, ValidationError
from pptx_export.package.xmltree import (
    Element,
    append_text,
    create_child,
    find_all,
    find_first,
    qn,
    remove_node,
)
from pptx_export.schema.models import Border, ColorValue, ScalePolicy, TextStyle
from pptx_export.units import font_size_to_pptx, points_to_emu

# ---------------------------------------------------------------------------
# Style vocabulary
# ---------------------------------------------------------------------------

_COLOR_CODES = {
    "b": RGBColor(0x00, 0x00, 0xFF),
    "g": RGBColor(0x00, 0xFF, 0x00),
    "r": RGBColor(0xFF, 0x00, 0x00),
    "c": RGBColor(0x00, 0xFF, 0xFF),
    "m": RGBColor(0xFF, 0x00, 0xFF),
    "y": RGBColor(0xFF, 0xFF, 0x00),
    "k": RGBColor(0x00, 0x00, 0x00),
    "w": RGBColor(0xFF, 0xFF, 0xFF),
}

_WEIGHTS = {"normal": False, "light": False, "bold": True, "demi": True}
_ANGLES = {"normal": False, "italic": True, "oblique": True}
_HORIZONTAL = {"left": "l", "center": "ctr", "right": "r"}
_VERTICAL = {"top": "t", "middle": "ctr", "bottom": "b"}

# Characters lxml refuses in text nodes.
_XML_INVALID = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

DEFAULT_LINE_WIDTH = 1.0   # points
DEFAULT_LINE_COLOR = "000000"


@dataclass(frozen=True)
class ResolvedTextStyle:
    size: int | None = None        # hundredths of a point
    bold: bool | None = None
    italic: bool | None = None
    color: str | None = None       # RRGGBB
    align: str | None = None       # l | ctr | r
    anchor: str | None = None      # t | ctr | b


@dataclass(frozen=True)
class ResolvedLine:
    width: int                     # EMU
    color: str


def parse_color(value: ColorValue, option: str = "Color") -> str:
    """Resolve an RGB triple in [0, 1], a one-letter code or ``#RRGGBB``."""
    if isinstance(value, str):
        text = value.strip()
        if text.lower() in _COLOR_CODES:
            return str(_COLOR_CODES[text.lower()])
        if text.startswith("#") and len(text) == 7:
            try:
                return str(RGBColor.from_string(text[1:].upper()))
            except ValueError:
                pass
        raise InvalidStyleValue(f"Bad property value found in {option}: {value!r}")

    if not isinstance(value, Sequence) or len(value) != 3:
        raise InvalidStyleValue(f"Bad property value found in {option}: expected 3 components")
    if not all(isinstance(v, Real) and not isinstance(v, bool) and 0 <= v <= 1 for v in value):
        raise InvalidStyleValue(f"Bad property value found in {option}: components must be in [0, 1]")
    red, green, blue = (int(round(v * 255)) for v in value)
    return str(RGBColor(red, green, blue))


def _keyword(value: str | None, table: dict, option: str):
    if value is None:
        return None
    try:
        return table[str(value).lower()]
    except KeyError:
        raise InvalidStyleValue(f"Bad property value found in {option}: {value!r}") from None


def resolve_text_style(style: TextStyle | None) -> ResolvedTextStyle:
    """Validate every option of ``style`` and convert it to OOXML values."""
    if style is None:
        return ResolvedTextStyle()
    size = None
    if style.font_size is not None:
        if not isinstance(style.font_size, Real) or isinstance(style.font_size, bool) \
                or style.font_size <= 0:
            raise InvalidStyleValue(f"Bad property value found in FontSize: {style.font_size!r}")
        size = font_size_to_pptx(style.font_size)
    return ResolvedTextStyle(
        size=size,
        bold=_keyword(style.font_weight, _WEIGHTS, "FontWeight"),
        italic=_keyword(style.font_angle, _ANGLES, "FontAngle"),
        color=parse_color(style.color) if style.color is not None else None,
        align=_keyword(style.horizontal_alignment, _HORIZONTAL, "HorizontalAlignment"),
        anchor=_keyword(style.vertical_alignment, _VERTICAL, "VerticalAlignment"),
    )


def resolve_border(border: Border | None) -> ResolvedLine | None:
    """Line drawn around a shape, or None when neither width nor color is set."""
    if border is None or (border.width is None and border.color is None):
        return None
    width = DEFAULT_LINE_WIDTH if border.width is None else border.width
    if not isinstance(width, Real) or isinstance(width, bool) or width < 0:
        raise InvalidStyleValue(f"Bad property value found in LineWidth: {border.width!r}")
    color = DEFAULT_LINE_COLOR if border.color is None else parse_color(border.color, "EdgeColor")
    return ResolvedLine(points_to_emu(width), color)


def split_paragraphs(text: str | Sequence[str]) -> list[str]:
    """One entry per line of ``text``; surrounding blanks of each line are dropped.

    ``text`` is a string or a sequence of strings, each holding one or more
    lines. A vertical tab (PowerPoint's soft line break) also ends a line.
    Raises ValidationError for other input types and for characters that
    cannot appear in XML, so callers can check text before touching a slide.
    """
    if isinstance(text, str):
        items = [text]
    elif isinstance(text, Sequence) and all(isinstance(item, str) for item in text):
        items = list(text)
    else:
        raise ValidationError(f"Text must be a string or a list of strings, "
                              f"not {type(text).__name__}")
    lines: list[str] = []
    for item in items:
        item = item.replace("\r\n", "\n").replace("\r", "\n").replace("\x0b", "\n")
        bad = _XML_INVALID.search(item)
        if bad is not None:
            raise ValidationError(f"Text contains a character XML cannot hold: {bad.group()!r}")
        lines.extend(item.split("\n"))
    return [line.strip() for line in lines] or [""]


# ---------------------------------------------------------------------------
# Picture placement
# ---------------------------------------------------------------------------

def place_picture(native: tuple[int, int], slide: tuple[int, int],
                  policy: ScalePolicy) -> tuple[int, int, int, int]:
    """Rectangle ``(x, y, cx, cy)`` in EMU for an image of ``native`` size.

    NONE keeps the native size and centers it; MAX_FIXED scales uniformly to
    the largest size that fits the slide, centered; MAX fills the slide.
    """
    native_cx, native_cy = native
    slide_cx, slide_cy = slide
    if policy is ScalePolicy.MAX or native_cx <= 0 or native_cy <= 0:
        return 0, 0, slide_cx, slide_cy
    if policy is ScalePolicy.MAX_FIXED:
        scale = min(slide_cx / native_cx, slide_cy / native_cy)
        cx, cy = int(round(native_cx * scale)), int(round(native_cy * scale))
    else:
        cx, cy = native_cx, native_cy
    return int(round((slide_cx - cx) / 2)), int(round((slide_cy - cy) / 2)), cx, cy


# ---------------------------------------------------------------------------
# Shape properties
# ---------------------------------------------------------------------------

def _add_solid_fill(parent: Element, color: str) -> Element:
    fill = create_child(parent, "a:solidFill")
    create_child(fill, "a:srgbClr", {"val": color})
    return fill


def _add_shape_properties(parent: Element, rect: tuple[int, int, int, int], rotation: int,
                          *, fill: str | None, line: ResolvedLine | None,
                          no_fill: bool) -> Element:
    x, y, cx, cy = rect
    sp_pr = create_child(parent, "p:spPr")
    xfrm = create_child(sp_pr, "a:xfrm", {"rot": rotation} if rotation else None)
    create_child(xfrm, "a:off", {"x": x, "y": y})
    create_child(xfrm, "a:ext", {"cx": cx, "cy": cy})
    geom = create_child(sp_pr, "a:prstGeom", {"prst": "rect"})
    create_child(geom, "a:avLst")
    if fill is not None:
        _add_solid_fill(sp_pr, fill)
    elif no_fill:
        create_child(sp_pr, "a:noFill")
    if line is not None:
        ln = create_child(sp_pr, "a:ln", {"w": line.width})
        _add_solid_fill(ln, line.color)
    return sp_pr


def add_picture_node(sp_tree: Element, object_id: int, r_id: str, media_name: str,
                     rect: tuple[int, int, int, int], *, rotation: int = 0,
                     fill: str | None = None, line: ResolvedLine | None = None) -> Element:
    """Append a ``p:pic`` bound to the image relationship ``r_id``."""
    pic = create_child(sp_tree, "p:pic")
    nv_pic_pr = create_child(pic, "p:nvPicPr")
    create_child(nv_pic_pr, "p:cNvPr",
                 {"id": object_id, "name": f"Picture {object_id}", "descr": media_name})
    c_nv_pic_pr = create_child(nv_pic_pr, "p:cNvPicPr")
    create_child(c_nv_pic_pr, "a:picLocks", {"noChangeAspect": True})
    create_child(nv_pic_pr, "p:nvPr")

    blip_fill = create_child(pic, "p:blipFill")
    create_child(blip_fill, "a:blip", {"r:embed": r_id})
    stretch = create_child(blip_fill, "a:stretch")
    create_child(stretch, "a:fillRect")

    _add_shape_properties(pic, rect, rotation, fill=fill, line=line, no_fill=False)
    return pic


def add_textbox_node(sp_tree: Element, object_id: int, rect: tuple[int, int, int, int],
                     text: str | Sequence[str], style: ResolvedTextStyle, *, rotation: int = 0,
                     fill: str | None = None, line: ResolvedLine | None = None) -> Element:
    """Append a ``p:sp`` text box with one paragraph per line of ``text``."""
    sp = create_child(sp_tree, "p:sp")
    nv_sp_pr = create_child(sp, "p:nvSpPr")
    create_child(nv_sp_pr, "p:cNvPr", {"id": object_id, "name": f"TextBox {object_id}"})
    create_child(nv_sp_pr, "p:cNvSpPr", {"txBox": True})
    create_child(nv_sp_pr, "p:nvPr")
    _add_shape_properties(sp, rect, rotation, fill=fill, line=line, no_fill=True)
    add_text_body(sp, text, style)
    return sp


# ---------------------------------------------------------------------------
# Text bodies
# ---------------------------------------------------------------------------

def add_text_body(shape: Element, text: str | Sequence[str], style: ResolvedTextStyle,
                  *, autofit: bool = True) -> Element:
    """Append a ``p:txBody`` to ``shape``; alignment is shared by every paragraph."""
    body = create_child(shape, "p:txBody")
    body_pr = create_child(body, "a:bodyPr", {"wrap": "square", "rtlCol": False})
    if style.anchor is not None:
        body_pr.set("anchor", style.anchor)
    if autofit:
        create_child(body_pr, "a:normAutofit")
    create_child(body, "a:lstStyle")

    for paragraph in split_paragraphs(text):
        p = create_child(body, "a:p")
        if style.align is not None:
            create_child(p, "a:pPr", {"algn": style.align})
        if paragraph:
            run = create_child(p, "a:r")
            _add_run_properties(run, "a:rPr", style)
            append_text(create_child(run, "a:t"), paragraph)
        _add_run_properties(p, "a:endParaRPr", style)
    return body


def _add_run_properties(parent: Element, tag: str, style: ResolvedTextStyle) -> Element:
    attrs: list[tuple[str, object]] = [("lang", "en-US"), ("dirty", False)]
    if style.bold is not None:
        attrs.append(("b", style.bold))
    if style.italic is not None:
        attrs.append(("i", style.italic))
    if style.size is not None:
        attrs.append(("sz", style.size))
    r_pr = create_child(parent, tag, attrs)
    if style.color is not None:
        _add_solid_fill(r_pr, style.color)
    return r_pr


def replace_notes_text(notes: Element, text: str | Sequence[str],
                       style: ResolvedTextStyle) -> Element:
    """Set the body placeholder text of a notes slide, dropping any previous text."""
    placeholder = _notes_body_shape(notes)
    for old in find_all(placeholder, "p:txBody"):
        remove_node(placeholder, old)
    return add_text_body(placeholder, text, style, autofit=False)


def notes_text(notes: Element) -> str:
    """Plain text of a notes slide body, paragraphs joined with newlines."""
    body = find_first(_notes_body_shape(notes), "p:txBody")
    return "\n".join("".join(t.text or "" for t in find_all(p, "a:t"))
                     for p in find_all(body, "a:p"))


def _notes_body_shape(notes: Element) -> Element:
    for ph in find_all(notes, "p:ph"):
        if ph.get("type") == "body":
            return ph.getparent().getparent().getparent()
    return find_first(notes, "p:sp")


# ---------------------------------------------------------------------------
# Backgrounds
# ---------------------------------------------------------------------------

def set_background(c_sld: Element, color: str) -> Element:
    """Give a ``p:cSld`` a solid background, replacing any existing one."""
    for old in c_sld.findall(qn("p:bg")):
        c_sld.remove(old)
    bg = create_child(c_sld, "p:bg", index=0)
    bg_pr = create_child(bg, "p:bgPr")
    _add_solid_fill(bg_pr, color)
    create_child(bg_pr, "a:effectLst")
    return bg
