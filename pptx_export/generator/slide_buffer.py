"""Slide Buffer - the single editable slide of a package.

The buffer is either *empty* or *active*. While active it holds one slide's
parsed tree and relationship table; every shape or note insertion edits
those two objects only. ``flush`` serializes them back to the Part Store,
and it runs whenever the package moves to another slide or saves.
"""

import logging
import posixpath
import re
from dataclasses import dataclass

from pptx_export.errors import NoActiveSlide
from pptx_export.package.parts import PartStore
from pptx_export.package.relationships import (
    RelationshipIdAllocator,
    RelationshipTable,
    rels_part_name,
)
from pptx_export.package.xmltree import Element, find_all, find_first

logger = logging.getLogger(__name__)

_FILE_NUMBER = re.compile(r"(\d+)\.xml$")


@dataclass
class SlideRecord:
    """Link between a slide ordinal's list entry and its part."""
    slide_id: int
    r_id: str
    part_name: str    # e.g. "ppt/slides/slide3.xml"

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.part_name)

    @property
    def file_number(self) -> int:
        match = _FILE_NUMBER.search(self.part_name)
        return int(match.group(1)) if match else 0

    @property
    def rels_part_name(self) -> str:
        return rels_part_name(self.part_name)


class SlideBuffer:
    """Holds at most one slide tree and its relationship table."""

    def __init__(self, store: PartStore, allocator: RelationshipIdAllocator) -> None:
        self._store = store
        self._allocator = allocator
        self.record: SlideRecord | None = None
        self.ordinal: int | None = None
        self.tree: Element | None = None
        self.rels: RelationshipTable | None = None
        self._last_object_id = 0

    @property
    def active(self) -> bool:
        return self.record is not None

    def require_active(self) -> None:
        if not self.active:
            raise NoActiveSlide("No slides have been added yet; add a slide first")

    @property
    def sp_tree(self) -> Element:
        self.require_active()
        return find_first(self.tree, "p:spTree")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def activate(self, record: SlideRecord, ordinal: int, tree: Element,
                 rels: RelationshipTable) -> None:
        """Make a freshly built slide the buffer content (no flush)."""
        self.record = record
        self.ordinal = ordinal
        self.tree = tree
        self.rels = rels
        self._last_object_id = self._max_object_id(tree)
        logger.debug("Slide %d (%s) is active", ordinal, record.file_name)

    def load(self, record: SlideRecord, ordinal: int) -> None:
        """Read a stored slide and its relationships into the buffer."""
        tree = self._store.load(record.part_name)
        rels_root = self._store.load(record.rels_part_name)
        self.activate(record, ordinal, tree, RelationshipTable(rels_root, self._allocator))

    def flush(self) -> None:
        """Serialize the active slide and its relationships to the Part Store."""
        if not self.active:
            return
        self._store.store(self.record.part_name, self.tree)
        self._store.store(self.record.rels_part_name, self.rels.root)
        logger.debug("Flushed slide %d (%s)", self.ordinal, self.record.file_name)

    def clear(self) -> None:
        self.record = self.ordinal = self.tree = self.rels = None
        self._last_object_id = 0

    # ------------------------------------------------------------------
    # Object ids
    # ------------------------------------------------------------------

    def next_object_id(self) -> int:
        """Allocate the next shape id of the active slide."""
        self.require_active()
        self._last_object_id += 1
        return self._last_object_id

    @staticmethod
    def _max_object_id(tree: Element) -> int:
        ids = [int(node.get("id")) for node in find_all(tree, "p:cNvPr")
               if (node.get("id") or "").isdigit()]
        return max(ids, default=1)
