"""Conversions between physical units and the format's native integers.

EMUs (English Metric Units) are 1/360,000 of a centimetre. The per-inch and
per-point factors come from ``pptx.util``; its ``Inches``/``Pt`` truncate,
so conversions here round to the nearest EMU instead. Rotation is stored
in 60,000ths of a degree, clockwise-positive, so counter-clockwise input
angles are negated. Font sizes are stored in hundredths of a point.
"""

from pptx.util import Emu, Inches, Pt

EMU_PER_INCH = int(Inches(1))
EMU_PER_PT = int(Pt(1))
ROTATION_PER_DEGREE = 60000
FONT_SIZE_SCALE = 100
DEFAULT_DPI = 72


def inches_to_emu(value: float) -> int:
    return int(round(value * EMU_PER_INCH))


def points_to_emu(value: float) -> int:
    return int(round(value * EMU_PER_PT))


def degrees_to_rotation(value: float) -> int:
    """Counter-clockwise degrees to the stored clockwise rotation units."""
    return int(round(-value * ROTATION_PER_DEGREE))


def font_size_to_pptx(value: float) -> int:
    """Font size in points to the ``sz`` attribute value."""
    return int(round(value * FONT_SIZE_SCALE))


def pixels_to_emu(pixels: float, dpi: float = DEFAULT_DPI) -> int:
    """Pixel length at ``dpi`` to EMUs."""
    return int(round(pixels * EMU_PER_INCH / (dpi or DEFAULT_DPI)))


def emu_to_inches(emu: int | None) -> float | None:
    if emu is None:
        return None
    return Emu(emu).inches
