"""Package Assembler - create, edit and save one presentation package.

A ``PresentationPackage`` owns a private staging area (``PartStore``), the
package-wide relationship id sequence, the slide list and the Slide Buffer.
Every public operation keeps the cross-references consistent: the slide
list in ``presentation.xml``, its relationship table, each slide's own
table and the content-type registry.

Usage::

    from pptx_export import PresentationPackage

    with PresentationPackage.new("report.pptx", dimensions=(12, 6)) as pkg:
        pkg.add_slide(background_color="#F2F2F2")
        pkg.add_textbox("Quarterly review\\nDraft", geometry=[1, 1, 10, 2],
                        font_size=32, horizontal_alignment="center")
        pkg.add_picture("chart.png", scale="maxfixed")
        pkg.add_note("Talk about the trend first.")
        pkg.save()
"""

import logging
import posixpath
import warnings
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any

from lxml import etree
from pptx.parts.image import Image

from pptx_export.errors import (
    IntegrityWarning,
    NoDestination,
    NotFoundError,
    PackageClosed,
    PackageIOError,
    SlideNotFound,
    StateError,
    ValidationError,
)
from pptx_export.generator.shapes import (
    ResolvedLine,
    add_picture_node,
    add_textbox_node,
    parse_color,
    place_picture,
    replace_notes_text,
    resolve_border,
    resolve_text_style,
    set_background,
    split_paragraphs,
)
from pptx_export.generator.slide_buffer import SlideBuffer, SlideRecord
from pptx_export.package.archive import PackageWriter, extract_package
from pptx_export.package.content_types import (
    CONTENT_TYPES_PART,
    CT_NOTES_SLIDE,
    CT_SLIDE,
    ContentTypeRegistry,
)
from pptx_export.package.parts import PartStore
from pptx_export.package.relationships import (
    RT_IMAGE,
    RT_NOTES_MASTER,
    RT_NOTES_SLIDE,
    RT_SLIDE,
    RT_SLIDE_LAYOUT,
    RelationshipIdAllocator,
    RelationshipTable,
    rels_part_name,
    resolve_target,
)
from pptx_export.package.templates import (
    EDITABLE_PARTS,
    NOTES_SLIDE_XML,
    SLIDE_LAYOUT_TARGET,
    SLIDE_XML,
    STATIC_PARTS,
)
from pptx_export.package.xmltree import (
    create_child,
    find_all,
    find_first,
    get_text,
    has_node,
    parse_xml,
    qn,
    serialize_xml,
    set_text,
)
from pptx_export.schema.models import (
    DEFAULT_DIMENSIONS,
    Border,
    ColorValue,
    Geometry,
    PackageInfo,
    Picture,
    PresentationMetadata,
    ScalePolicy,
    Shape,
    ShapeKind,
    Textbox,
    TextStyle,
)
from pptx_export.units import degrees_to_rotation, emu_to_inches, inches_to_emu, pixels_to_emu

logger = logging.getLogger(__name__)

PRESENTATION_PART = "ppt/presentation.xml"
PRESENTATION_RELS_PART = rels_part_name(PRESENTATION_PART)
APP_PART = "docProps/app.xml"
CORE_PART = "docProps/core.xml"
SLIDE_MASTER_PART = "ppt/slideMasters/slideMaster1.xml"

# Slide ids 0-255 are reserved by the format.
SLIDE_ID_BASELINE = 255

# Formats without a pixel size; they are laid out as if slide-sized.
VECTOR_CONTENT_TYPES = {
    "emf": "image/x-emf",
    "wmf": "image/x-wmf",
    "eps": "image/x-eps",
    "svg": "image/svg+xml",
}

_PINNED_ON_OPEN = (
    CONTENT_TYPES_PART,
    APP_PART,
    CORE_PART,
    PRESENTATION_PART,
    PRESENTATION_RELS_PART,
)

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

Rect = tuple[int, int, int, int]


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _with_extension(path: str | Path) -> Path:
    path = Path(path)
    return path if path.suffix.lower() == ".pptx" else path.with_name(path.name + ".pptx")


def _dimensions_emu(dimensions: Sequence[float]) -> tuple[int, int]:
    try:
        width, height = (float(v) for v in dimensions)
    except (TypeError, ValueError):
        raise ValidationError(f"Bad property value found in Dimensions: {dimensions!r}") from None
    if width <= 0 or height <= 0:
        raise ValidationError(f"Bad property value found in Dimensions: {dimensions!r}")
    return inches_to_emu(width), inches_to_emu(height)


def _merge_metadata(base: PresentationMetadata | None, **fields: str | None) -> PresentationMetadata:
    if fields.get("description") is None:
        fields["description"] = fields.get("comments")
    fields.pop("comments", None)
    updates = {name: str(value) for name, value in fields.items() if value is not None}
    return replace(base or PresentationMetadata(), **updates)


def _coerce_geometry(geometry: Geometry | Sequence[float] | None) -> Geometry | None:
    if geometry is None or isinstance(geometry, Geometry):
        return geometry
    return Geometry.from_sequence(geometry)


# ---------------------------------------------------------------------------
# Package
# ---------------------------------------------------------------------------

class PresentationPackage:
    """One presentation package being authored.

    Use ``PresentationPackage.new()`` to start a blank package or
    ``PresentationPackage.open()`` to edit an existing file. The package
    must be closed (``close()``, ``save_and_close()`` or a ``with`` block)
    to release its staging directory.
    """

    def __init__(self, store: PartStore, path: Path | None,
                 metadata: PresentationMetadata) -> None:
        self._store = store
        self.path = path
        self.metadata = metadata
        self._closed = False
        self._revision = 0
        self._allocator = RelationshipIdAllocator()
        self._content_types = ContentTypeRegistry(store.pinned(CONTENT_TYPES_PART))
        self._presentation = store.pinned(PRESENTATION_PART)
        self._pres_rels = RelationshipTable(store.pinned(PRESENTATION_RELS_PART), self._allocator)
        self._app = store.pinned(APP_PART)
        self._core = store.pinned(CORE_PART)
        self._slides: list[SlideRecord] = []
        self._last_slide_id = SLIDE_ID_BASELINE
        self._buffer = SlideBuffer(store, self._allocator)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, path: str | Path | None = None, *,
            dimensions: Sequence[float] = DEFAULT_DIMENSIONS,
            author: str | None = None, title: str | None = None,
            subject: str | None = None, description: str | None = None,
            comments: str | None = None,
            background_color: ColorValue | None = None,
            metadata: PresentationMetadata | None = None) -> "PresentationPackage":
        """Start a blank package.

        Parameters
        ----------
        path : str | Path | None
            Default destination for ``save()``; ``.pptx`` is appended when
            missing.
        dimensions : (width, height)
            Slide size in inches.
        background_color : color, optional
            Solid background of the slide master.
        """
        size = _dimensions_emu(dimensions)
        background = (parse_color(background_color, "BackgroundColor")
                      if background_color is not None else None)
        info = _merge_metadata(metadata, author=author, title=title, subject=subject,
                               description=description, comments=comments)

        store = PartStore()
        try:
            for name, xml in STATIC_PARTS.items():
                store.write_bytes(name, xml.encode("utf-8"))
            for name, xml in EDITABLE_PARTS.items():
                store.pin(name, parse_xml(xml.encode("utf-8")))
            package = cls(store, _with_extension(path) if path is not None else None, info)
            package._init_blank(size, background)
        except Exception:
            store.release()
            raise
        logger.info("Created blank presentation (%.2f x %.2f in)", *package.dimensions)
        return package

    @classmethod
    def open(cls, path: str | Path, *,
             author: str | None = None, title: str | None = None,
             subject: str | None = None, description: str | None = None,
             comments: str | None = None) -> "PresentationPackage":
        """Open an existing ``.pptx`` for editing.

        The last slide becomes the active slide. Metadata arguments override
        the values stored in the file. Emits ``IntegrityWarning`` when the
        declared slide count disagrees with the linked slide parts.
        """
        source = Path(path)
        if not source.is_file():
            source = _with_extension(source)

        store = PartStore()
        try:
            extract_package(source, store)
            for name in _PINNED_ON_OPEN:
                if not store.exists(name):
                    raise NotFoundError(f"{source.name} has no {name} part")
                try:
                    store.pin(name, parse_xml(store.read_bytes(name)))
                except etree.XMLSyntaxError as exc:
                    raise PackageIOError(f"{source.name}: malformed part {name}: {exc}") from exc
            package = cls(store, source.resolve(), PresentationMetadata())
            package._load_existing(source.name)
        except Exception:
            store.release()
            raise

        package.metadata = _merge_metadata(package.metadata, author=author, title=title,
                                           subject=subject, description=description,
                                           comments=comments)
        logger.info("Opened %s (%d slides)", source, package.slide_count)
        return package

    def _init_blank(self, size: tuple[int, int], background: str | None) -> None:
        for tag in ("p:sldSz", "p:notesSz"):
            node = find_first(self._presentation, tag)
            node.set("cx", str(size[0]))
            node.set("cy", str(size[1]))
        if background is not None:
            master = self._store.pinned(SLIDE_MASTER_PART)
            set_background(find_first(master, "p:cSld"), background)
        now = _timestamp()
        set_text(self._core, "dcterms:created", now)
        set_text(self._core, "dcterms:modified", now)
        self._allocator.observe(self._pres_rels.max_numeric_id())

    def _load_existing(self, source_name: str) -> None:
        for name in self._store.iter_part_names():
            if name.endswith(".rels"):
                table = RelationshipTable(self._store.load(name), self._allocator)
                self._allocator.observe(table.max_numeric_id())

        for node in find_all(self._presentation, "p:sldId"):
            r_id = node.get(qn("r:id"), "")
            part_name = resolve_target(PRESENTATION_PART, self._pres_rels.find(r_id).target)
            if not self._store.exists(part_name):
                raise NotFoundError(f"{source_name}: slide part {part_name} ({r_id}) is missing")
            self._slides.append(SlideRecord(int(node.get("id")), r_id, part_name))
        self._last_slide_id = max((r.slide_id for r in self._slides), default=SLIDE_ID_BASELINE)

        self.metadata = PresentationMetadata(
            author=get_text(self._core, "dc:creator"),
            title=get_text(self._core, "dc:title"),
            subject=get_text(self._core, "dc:subject"),
            description=get_text(self._core, "dc:description"),
        )
        revision = get_text(self._core, "cp:revision", "0").strip()
        self._revision = int(revision) if revision.isdigit() else 0

        declared = get_text(self._app, "ep:Slides").strip()
        if declared.isdigit() and int(declared) != len(self._slides):
            message = (f"{source_name} declares {declared} slides but links "
                       f"{len(self._slides)}; using {len(self._slides)}")
            logger.warning(message)
            warnings.warn(message, IntegrityWarning, stacklevel=3)

        if self._slides:
            self._buffer.load(self._slides[-1], len(self._slides))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def slide_count(self) -> int:
        return len(self._slides)

    @property
    def current_slide(self) -> int | None:
        """Ordinal of the active slide, or None before the first slide."""
        return self._buffer.ordinal

    @property
    def dimensions(self) -> tuple[float, float]:
        """Slide size in inches."""
        node = find_first(self._presentation, "p:sldSz")
        return emu_to_inches(int(node.get("cx"))), emu_to_inches(int(node.get("cy")))

    @property
    def slide_ids(self) -> list[int]:
        return [record.slide_id for record in self._slides]

    @property
    def revision(self) -> int:
        return self._revision

    def query(self) -> PackageInfo:
        self._check_open()
        return PackageInfo(path=self.path, dimensions=self.dimensions,
                           slide_count=self.slide_count)

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def add_slide(self, background_color: ColorValue | None = None,
                  position: int | None = None) -> int:
        """Append a blank slide (or insert it at ``position``) and make it active.

        Returns the new slide's ordinal.
        """
        self._check_open()
        background = (parse_color(background_color, "BackgroundColor")
                      if background_color is not None else None)
        count = len(self._slides)
        if position is not None and (not isinstance(position, int) or isinstance(position, bool)
                                     or not 1 <= position <= count):
            raise ValidationError(
                f"Bad property value found in Position: {position!r} (slides 1..{count})"
            )

        self._buffer.flush()

        file_number = max((r.file_number for r in self._slides), default=0) + 1
        while self._store.exists(f"ppt/slides/slide{file_number}.xml"):
            file_number += 1
        part_name = f"ppt/slides/slide{file_number}.xml"

        slide_id = self._last_slide_id + 1
        r_id = self._pres_rels.add(RT_SLIDE, f"slides/slide{file_number}.xml")
        self._last_slide_id = slide_id
        ordinal = position or count + 1
        create_child(self._slide_id_list(), "p:sldId", {"id": slide_id, "r:id": r_id},
                     index=ordinal - 1)
        self._content_types.register_override(part_name, CT_SLIDE)

        record = SlideRecord(slide_id, r_id, part_name)
        self._slides.insert(ordinal - 1, record)

        tree = parse_xml(SLIDE_XML.encode("utf-8"))
        if background is not None:
            set_background(find_first(tree, "p:cSld"), background)
        rels = RelationshipTable.new(self._allocator)
        rels.add(RT_SLIDE_LAYOUT, SLIDE_LAYOUT_TARGET)
        self._buffer.activate(record, ordinal, tree, rels)

        logger.debug("Added slide %d (id %d, %s)", ordinal, slide_id, r_id)
        return ordinal

    def switch_slide(self, ordinal: int) -> int:
        """Flush the active slide and load slide ``ordinal`` into the buffer."""
        self._check_open()
        if isinstance(ordinal, bool) or not isinstance(ordinal, int) \
                or not 1 <= ordinal <= len(self._slides):
            raise SlideNotFound(f"Slide {ordinal!r} does not exist; "
                                f"the presentation has {len(self._slides)} slides")
        self._buffer.flush()
        self._buffer.load(self._slides[ordinal - 1], ordinal)
        return ordinal

    def _slide_id_list(self):
        if has_node(self._presentation, "p:sldIdLst"):
            return find_first(self._presentation, "p:sldIdLst")
        sld_sz = find_first(self._presentation, "p:sldSz")
        return create_child(self._presentation, "p:sldIdLst",
                            index=self._presentation.index(sld_sz))

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def add_shape(self, shape: Shape) -> int:
        """Insert ``shape`` on the active slide and return its object id."""
        self._check_open()
        self._buffer.require_active()
        inserters = {
            ShapeKind.PICTURE: self._insert_picture,
            ShapeKind.TEXTBOX: self._insert_textbox,
        }
        inserter = inserters.get(getattr(shape, "kind", None))
        if inserter is None:
            raise ValidationError(f"Unsupported shape: {shape!r}")
        return inserter(shape)

    def add_picture(self, image: bytes | str | Path, *,
                    geometry: Geometry | Sequence[float] | None = None,
                    rotation: float = 0.0,
                    scale: ScalePolicy | str = ScalePolicy.NONE,
                    border: Border | None = None,
                    fill_color: ColorValue | None = None,
                    filename: str | None = None) -> int:
        """Place an image on the active slide.

        ``geometry`` (``Geometry`` or ``[x, y, width, height]`` in inches)
        wins over ``scale``. Without a filename, raw bytes are identified
        from their content.
        """
        picture = Picture(
            geometry=_coerce_geometry(geometry), rotation=rotation, border=border,
            fill_color=fill_color, image=image, filename=filename,
            scale=ScalePolicy.parse(scale),
        )
        return self.add_shape(picture)

    def add_textbox(self, text: str | Sequence[str], *,
                    geometry: Geometry | Sequence[float] | None = None,
                    rotation: float = 0.0,
                    style: TextStyle | None = None,
                    border: Border | None = None,
                    fill_color: ColorValue | None = None,
                    **style_options: Any) -> int:
        """Add a text box; without geometry it covers the whole slide.

        ``text`` is a string or a list of strings; every line becomes a
        paragraph. ``rotation`` (degrees) turns the default full-slide box
        too, and is folded into a ``Geometry`` that has no rotation of its own.

        Style may be given as a ``TextStyle`` or as keyword options
        (``font_size``, ``font_weight``, ``font_angle``, ``color``,
        ``horizontal_alignment``, ``vertical_alignment``).
        """
        if style is None:
            style = TextStyle.from_dict(style_options)
        elif style_options:
            raise ValidationError("Pass either a TextStyle or style keyword options, not both")
        textbox = Textbox(
            geometry=_coerce_geometry(geometry), rotation=rotation, border=border,
            fill_color=fill_color, text=text, style=style,
        )
        return self.add_shape(textbox)

    def _insert_picture(self, shape: Picture) -> int:
        blob, filename = self._read_image(shape.image, shape.filename)
        ext, content_type, native = self._probe_image(blob, filename)
        line = resolve_border(shape.border)
        fill = parse_color(shape.fill_color, "FillColor") if shape.fill_color is not None else None
        geometry = shape.placement()
        if geometry is not None:
            rect, rotation = self._shape_rect(geometry)
        else:
            rect = place_picture(native, self._slide_size(), shape.scale)
            rotation = self._rotation(shape.rotation)

        buffer = self._buffer
        self._content_types.register_default(ext, content_type)
        object_id = buffer.next_object_id()
        media_name = self._media_part_name(buffer.record, object_id, ext)
        self._store.write_bytes(media_name, blob)
        media_file = PurePosixPath(media_name).name
        r_id = buffer.rels.add(RT_IMAGE, f"../media/{media_file}")
        add_picture_node(buffer.sp_tree, object_id, r_id, media_file, rect,
                         rotation=rotation, fill=fill, line=line)
        logger.debug("Picture %d on slide %d -> %s", object_id, buffer.ordinal, media_name)
        return object_id

    def _insert_textbox(self, shape: Textbox) -> int:
        paragraphs = split_paragraphs(shape.text)
        style = resolve_text_style(shape.style)
        line: ResolvedLine | None = resolve_border(shape.border)
        fill = parse_color(shape.fill_color, "BackgroundColor") if shape.fill_color is not None else None
        geometry = shape.placement()
        if geometry is not None:
            rect, rotation = self._shape_rect(geometry)
        else:
            rect, rotation = (0, 0, *self._slide_size()), self._rotation(shape.rotation)

        buffer = self._buffer
        object_id = buffer.next_object_id()
        add_textbox_node(buffer.sp_tree, object_id, rect, paragraphs, style,
                         rotation=rotation, fill=fill, line=line)
        logger.debug("Textbox %d on slide %d", object_id, buffer.ordinal)
        return object_id

    def _slide_size(self) -> tuple[int, int]:
        node = find_first(self._presentation, "p:sldSz")
        return int(node.get("cx")), int(node.get("cy"))

    @staticmethod
    def _shape_rect(geometry: Geometry) -> tuple[Rect, int]:
        try:
            rect = (inches_to_emu(geometry.left), inches_to_emu(geometry.top),
                    inches_to_emu(geometry.width), inches_to_emu(geometry.height))
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Bad property value found in Position: {exc}") from exc
        if rect[2] < 0 or rect[3] < 0:
            raise ValidationError("Bad property value found in Position: negative size")
        return rect, PresentationPackage._rotation(geometry.rotation)

    @staticmethod
    def _rotation(degrees: float) -> int:
        try:
            return degrees_to_rotation(degrees or 0.0)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Bad property value found in Rotation: {degrees!r}") from exc

    @staticmethod
    def _read_image(image: bytes | str | Path, filename: str | None) -> tuple[bytes, str | None]:
        if isinstance(image, (bytes, bytearray)):
            return bytes(image), filename
        path = Path(image)
        if not path.is_file():
            raise NotFoundError(f"Image file not found: {path}")
        try:
            return path.read_bytes(), filename or path.name
        except OSError as exc:
            raise PackageIOError(f"Cannot read image {path}: {exc}") from exc

    def _probe_image(self, blob: bytes, filename: str | None) -> tuple[str, str, tuple[int, int]]:
        """Extension, MIME type and native size (EMU) of an image payload."""
        if not blob:
            raise ValidationError("Image data is empty")
        ext = PurePosixPath(filename).suffix.lstrip(".").lower() if filename else ""
        if ext in VECTOR_CONTENT_TYPES:
            return ext, VECTOR_CONTENT_TYPES[ext], self._slide_size()
        try:
            image = Image.from_blob(blob, filename)
            ext, content_type = image.ext, image.content_type
            (px_width, px_height), (dpi_x, dpi_y) = image.size, image.dpi
        except (ValueError, OSError, KeyError) as exc:
            raise ValidationError(f"Unsupported or unreadable image {filename or ''}: {exc}") from exc
        if ext in VECTOR_CONTENT_TYPES:
            return ext, content_type, self._slide_size()
        return ext, content_type, (pixels_to_emu(px_width, dpi_x), pixels_to_emu(px_height, dpi_y))

    def _media_part_name(self, record: SlideRecord, object_id: int, ext: str) -> str:
        stem = f"ppt/media/image-{record.file_number}-{object_id}"
        name, suffix = f"{stem}.{ext}", 1
        while self._store.exists(name):
            suffix += 1
            name = f"{stem}-{suffix}.{ext}"
        return name

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def add_note(self, text: str | Sequence[str], *, font_weight: str | None = None,
                 font_angle: str | None = None, style: TextStyle | None = None) -> str:
        """Set the speaker notes of the active slide, replacing earlier notes.

        Returns the notes part name.
        """
        self._check_open()
        self._buffer.require_active()
        paragraphs = split_paragraphs(text)
        resolved = resolve_text_style(style or TextStyle(font_weight=font_weight,
                                                         font_angle=font_angle))
        buffer = self._buffer
        existing = buffer.rels.by_type(RT_NOTES_SLIDE)
        if existing:
            part_name = resolve_target(buffer.record.part_name, existing[0].target)
            notes = self._store.load(part_name)
            replace_notes_text(notes, paragraphs, resolved)
            self._store.store(part_name, notes)
            logger.debug("Replaced notes of slide %d", buffer.ordinal)
            return part_name

        master_target = self._notes_master_target()
        file_number = buffer.record.file_number
        while self._store.exists(f"ppt/notesSlides/notesSlide{file_number}.xml"):
            file_number += 1
        part_name = f"ppt/notesSlides/notesSlide{file_number}.xml"

        notes = parse_xml(NOTES_SLIDE_XML.encode("utf-8"))
        replace_notes_text(notes, paragraphs, resolved)
        notes_rels = RelationshipTable.new(self._allocator)
        notes_rels.add(RT_NOTES_MASTER, master_target)
        notes_rels.add(RT_SLIDE, f"../slides/{buffer.record.file_name}")

        self._content_types.register_override(part_name, CT_NOTES_SLIDE)
        self._store.store(part_name, notes)
        self._store.write_bytes(rels_part_name(part_name), serialize_xml(notes_rels.root))
        buffer.rels.add(RT_NOTES_SLIDE, f"../notesSlides/notesSlide{file_number}.xml")
        logger.debug("Added notes to slide %d (%s)", buffer.ordinal, part_name)
        return part_name

    def _notes_master_target(self) -> str:
        """Target of the notes master, relative to the notesSlides folder."""
        masters = self._pres_rels.by_type(RT_NOTES_MASTER)
        if not masters or masters[0].is_external:
            raise NotFoundError("The presentation has no notes master; speaker notes "
                                "cannot be added")
        master = resolve_target(PRESENTATION_PART, masters[0].target)
        if not self._store.exists(master):
            raise NotFoundError(f"Notes master part {master} is missing")
        return posixpath.relpath(master, "ppt/notesSlides")

    # ------------------------------------------------------------------
    # Save / close
    # ------------------------------------------------------------------

    def save(self, path: str | Path | None = None) -> Path:
        """Write the package to ``path`` (or the default destination).

        A ``path`` given here becomes the new default destination. Returns
        the written file's path.
        """
        self._check_open()
        if not self._slides:
            raise StateError("Cannot save a presentation without slides; add a slide first")
        if path is not None:
            destination = _with_extension(path)
        elif self.path is not None:
            destination = self.path
        else:
            raise NoDestination("No file name given and none was set when the package was created")

        self._buffer.flush()
        for name in self._store.iter_part_names():
            self._content_types.resolve(name)
        self._revision += 1
        self._update_properties()

        written = PackageWriter(self._store).write(destination)
        self.path = written
        logger.info("Saved %s (%d slides, revision %d)", written, len(self._slides), self._revision)
        return written

    def _update_properties(self) -> None:
        now = _timestamp()
        values = {
            "dc:title": self.metadata.title,
            "dc:creator": self.metadata.author,
            "dc:subject": self.metadata.subject,
            "dc:description": self.metadata.description,
            "cp:lastModifiedBy": self.metadata.author,
            "cp:revision": self._revision,
            "dcterms:modified": now,
        }
        if not get_text(self._core, "dcterms:created"):
            values["dcterms:created"] = now
        for tag, value in values.items():
            self._set_property(self._core, tag, value)
        self._set_property(self._app, "ep:Slides", len(self._slides))

    @staticmethod
    def _set_property(root, tag: str, value: Any) -> None:
        if has_node(root, tag):
            set_text(root, tag, value)
            return
        node = create_child(root, tag)
        if tag.startswith("dcterms:"):
            node.set(qn("xsi:type"), "dcterms:W3CDTF")
        set_text(root, node, value)

    def save_and_close(self, path: str | Path | None = None) -> Path:
        written = self.save(path)
        self.close()
        return written

    def close(self) -> None:
        """Release the staging directory. Unsaved edits are discarded."""
        if self._closed:
            logger.warning("Presentation %s is already closed", self.path or "<unsaved>")
            return
        self._closed = True
        self._buffer.clear()
        self._store.release()
        logger.debug("Closed presentation %s", self.path or "<unsaved>")

    def _check_open(self) -> None:
        if self._closed:
            raise PackageClosed("The presentation has been closed")

    def __enter__(self) -> "PresentationPackage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{len(self._slides)} slides"
        return f"<PresentationPackage {self.path or '<unsaved>'} ({state})>"


def create_or_open(path: str | Path | None = None, **options: Any) -> PresentationPackage:
    """Open ``path`` when it exists, otherwise start a new package bound to it.

    Creation-only options (``dimensions``, ``background_color``) are ignored
    when an existing file is opened.
    """
    if path is not None:
        candidate = Path(path)
        if candidate.is_file() or _with_extension(candidate).is_file():
            ignored = {"dimensions", "background_color", "metadata"} & set(options)
            if ignored:
                logger.warning("Ignoring %s for existing file %s", ", ".join(sorted(ignored)), path)
            kept = {k: v for k, v in options.items() if k not in ignored}
            return PresentationPackage.open(path, **kept)
    return PresentationPackage.new(path, **options)
