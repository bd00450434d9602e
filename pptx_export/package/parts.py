"""Part Store - owns every part of one package in a private staging area.

Parts are addressed by canonical names relative to the container root
(``ppt/slides/slide1.xml``). A handful of frequently edited parts are
*pinned*: kept parsed in memory and written to staging only on ``commit``.
Everything else lives on disk in the staging directory and is parsed on
demand, which keeps the working set to the pinned parts plus one slide.
"""

import logging
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from lxml import etree

from pptx_export.errors import NotFoundError, PackageClosed, PackageIOError, ValidationError
from pptx_export.package.xmltree import Element, parse_xml, serialize_xml

logger = logging.getLogger(__name__)


def normalize_part_name(name: str) -> str:
    """Canonical part name: no leading slash, forward slashes, no ``..``."""
    posix = PurePosixPath(name.replace("\\", "/").lstrip("/"))
    if not posix.parts or ".." in posix.parts:
        raise ValidationError(f"Invalid part name: {name!r}")
    return posix.as_posix()


class PartStore:
    """Staging directory plus pinned in-memory part trees."""

    def __init__(self) -> None:
        try:
            self._root = Path(tempfile.mkdtemp(prefix="pptx_export_"))
        except OSError as exc:
            raise PackageIOError(f"Cannot create staging directory: {exc}") from exc
        self._pinned: dict[str, Element] = {}
        self._released = False
        logger.debug("Staging directory %s", self._root)

    @property
    def root(self) -> Path:
        self._check_open()
        return self._root

    @property
    def released(self) -> bool:
        return self._released

    def path_for(self, name: str) -> Path:
        return self.root.joinpath(*PurePosixPath(normalize_part_name(name)).parts)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def exists(self, name: str) -> bool:
        name = normalize_part_name(name)
        return name in self._pinned or self.path_for(name).is_file()

    def iter_part_names(self) -> Iterator[str]:
        """Every part name currently staged or pinned, sorted."""
        names = set(self._pinned)
        for path in self.root.rglob("*"):
            if path.is_file():
                names.add(path.relative_to(self._root).as_posix())
        yield from sorted(names)

    # ------------------------------------------------------------------
    # XML parts
    # ------------------------------------------------------------------

    def load(self, name: str) -> Element:
        """Return the parsed tree of ``name`` (the pinned tree if pinned).

        Raises PackageIOError when the part is not well-formed XML.
        """
        name = normalize_part_name(name)
        if name in self._pinned:
            return self._pinned[name]
        try:
            return parse_xml(self.read_bytes(name))
        except etree.XMLSyntaxError as exc:
            raise PackageIOError(f"Malformed part {name}: {exc}") from exc

    def store(self, name: str, root: Element) -> None:
        """Serialize ``root`` to its canonical path in the staging area."""
        name = normalize_part_name(name)
        if name in self._pinned:
            self._pinned[name] = root
        self.write_bytes(name, serialize_xml(root))

    def pin(self, name: str, root: Element) -> Element:
        self._pinned[normalize_part_name(name)] = root
        return root

    def pinned(self, name: str) -> Element:
        name = normalize_part_name(name)
        if name not in self._pinned:
            raise NotFoundError(f"Part is not pinned: {name}")
        return self._pinned[name]

    def commit(self) -> None:
        """Write every pinned tree to the staging directory."""
        for name, root in self._pinned.items():
            self.write_bytes(name, serialize_xml(root))

    # ------------------------------------------------------------------
    # Binary parts
    # ------------------------------------------------------------------

    def read_bytes(self, name: str) -> bytes:
        path = self.path_for(name)
        if not path.is_file():
            raise NotFoundError(f"Part not found in package: {normalize_part_name(name)}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise PackageIOError(f"Cannot read part {name}: {exc}") from exc

    def write_bytes(self, name: str, data: bytes) -> None:
        path = self.path_for(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise PackageIOError(f"Cannot stage part {name}: {exc}") from exc
        logger.debug("Staged %s (%d bytes)", name, len(data))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def release(self) -> None:
        """Remove the staging directory recursively."""
        if self._released:
            return
        self._pinned.clear()
        self._released = True
        try:
            shutil.rmtree(self._root)
        except OSError as exc:
            raise PackageIOError(f"Cannot remove staging directory {self._root}: {exc}") from exc
        logger.debug("Released staging directory %s", self._root)

    def _check_open(self) -> None:
        if self._released:
            raise PackageClosed("Package staging area has been released")
