"""Relationship tables (``*.rels`` parts) and the package-wide id sequence.

Every table records the ids handed to it by one ``RelationshipIdAllocator``
shared across the package. The allocator only ever moves forward, so ids
are unique within each table and never repeat anywhere in the package.
"""

import logging
import posixpath
import re
from dataclasses import dataclass

from lxml import etree

from pptx_export.errors import NotFoundError
from pptx_export.package.xmltree import NAMESPACES, Element, create_child, find_all

logger = logging.getLogger(__name__)

RID_PREFIX = "rId"
_RID_PATTERN = re.compile(rf"^{RID_PREFIX}(\d+)$")

_OFFICE_RELS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
RT_SLIDE = f"{_OFFICE_RELS}/slide"
RT_SLIDE_LAYOUT = f"{_OFFICE_RELS}/slideLayout"
RT_SLIDE_MASTER = f"{_OFFICE_RELS}/slideMaster"
RT_NOTES_SLIDE = f"{_OFFICE_RELS}/notesSlide"
RT_NOTES_MASTER = f"{_OFFICE_RELS}/notesMaster"
RT_IMAGE = f"{_OFFICE_RELS}/image"
RT_THEME = f"{_OFFICE_RELS}/theme"
RT_OFFICE_DOCUMENT = f"{_OFFICE_RELS}/officeDocument"


@dataclass(frozen=True)
class Relationship:
    """One ``(id, type, target)`` row of a relationship table."""

    r_id: str
    rel_type: str
    target: str
    is_external: bool = False


def parse_rid(r_id: str) -> int | None:
    """Numeric part of an ``rIdN`` id, or None for other id styles."""
    match = _RID_PATTERN.match(r_id or "")
    return int(match.group(1)) if match else None


def format_rid(number: int) -> str:
    return f"{RID_PREFIX}{number}"


def rels_part_name(source_part: str) -> str:
    """``ppt/slides/slide1.xml`` -> ``ppt/slides/_rels/slide1.xml.rels``."""
    folder, name = posixpath.split(source_part.lstrip("/"))
    return posixpath.join(folder, "_rels", f"{name}.rels")


def source_part_name(rels_part: str) -> str:
    """Inverse of ``rels_part_name``; the package itself is ``""``."""
    folder, name = posixpath.split(rels_part.lstrip("/"))
    parent = posixpath.dirname(folder)
    base = name[: -len(".rels")]
    return posixpath.join(parent, base) if parent else base


def resolve_target(source_part: str, target: str) -> str:
    """Target of a relationship as a canonical part name."""
    if target.startswith("/"):
        return target.lstrip("/")
    base_dir = posixpath.dirname(source_part.lstrip("/"))
    return posixpath.normpath(posixpath.join(base_dir, target))


class RelationshipIdAllocator:
    """Package-global, monotonically increasing ``rIdN`` sequence."""

    def __init__(self, last: int = 0) -> None:
        self._last = last

    @property
    def last(self) -> int:
        return self._last

    def observe(self, value: int | str | None) -> None:
        """Advance past an id already present in the package."""
        number = parse_rid(value) if isinstance(value, str) else value
        if number is not None and number > self._last:
            self._last = number

    def allocate(self) -> str:
        self._last += 1
        r_id = format_rid(self._last)
        logger.debug("Allocated relationship id %s", r_id)
        return r_id


class RelationshipTable:
    """A relationship part of one source part."""

    def __init__(self, root: Element, allocator: RelationshipIdAllocator) -> None:
        self.root = root
        self.allocator = allocator

    @classmethod
    def new(cls, allocator: RelationshipIdAllocator) -> "RelationshipTable":
        root = etree.Element(f"{{{NAMESPACES['pr']}}}Relationships", nsmap={None: NAMESPACES["pr"]})
        return cls(root, allocator)

    def add(self, rel_type: str, target: str, *, external: bool = False) -> str:
        """Append a relationship under the next package-wide id."""
        taken = self.ids()
        r_id = self.allocator.allocate()
        while r_id in taken:
            r_id = self.allocator.allocate()
        self.add_fixed(r_id, rel_type, target, external=external)
        return r_id

    def add_fixed(self, r_id: str, rel_type: str, target: str, *, external: bool = False) -> None:
        """Append a relationship under a caller-chosen id."""
        attrs = {"Id": r_id, "Type": rel_type, "Target": target}
        if external:
            attrs["TargetMode"] = "External"
        create_child(self.root, "pr:Relationship", attrs)

    def relationships(self) -> list[Relationship]:
        return [
            Relationship(
                r_id=node.get("Id", ""),
                rel_type=node.get("Type", ""),
                target=node.get("Target", ""),
                is_external=node.get("TargetMode") == "External",
            )
            for node in find_all(self.root, "pr:Relationship")
        ]

    def ids(self) -> set[str]:
        return {rel.r_id for rel in self.relationships()}

    def find(self, r_id: str) -> Relationship:
        for rel in self.relationships():
            if rel.r_id == r_id:
                return rel
        raise NotFoundError(f"Relationship {r_id} not found")

    def by_type(self, rel_type: str) -> list[Relationship]:
        return [rel for rel in self.relationships() if rel.rel_type == rel_type]

    def max_numeric_id(self) -> int:
        return max((parse_rid(rel.r_id) or 0 for rel in self.relationships()), default=0)
