"""QA validator: structural checks of a written presentation container.

Verifies the package-level contracts a consumer relies on: every part has
a content type, relationship targets exist, the slide list resolves to
slide parts with unique ids above the reserved range, the declared slide
count matches, and python-pptx can read the file back.

Usage::

    from pptx_export.qa.validator import PackageValidator

    result = PackageValidator().validate("deck.pptx")
    assert result.passed, result.report()
"""

import io
import logging
import zipfile
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from lxml import etree
from pptx import Presentation

from pptx_export.errors import UnresolvedPart
from pptx_export.package.content_types import CONTENT_TYPES_PART, ContentTypeRegistry
from pptx_export.package.relationships import (
    RT_OFFICE_DOCUMENT,
    RT_SLIDE,
    RelationshipIdAllocator,
    RelationshipTable,
    rels_part_name,
    resolve_target,
    source_part_name,
)
from pptx_export.package.xmltree import Element, find_all, get_text, parse_xml, qn

logger = logging.getLogger(__name__)

SLIDE_ID_BASELINE = 255


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Issue:
    """A single QA issue found during validation."""
    severity: str       # "error" or "warning"
    part: str           # "" for package-level issues
    category: str       # e.g. "content_type", "relationship", "slide_list"
    message: str

    def __str__(self) -> str:
        loc = self.part or "package"
        return f"[{self.severity.upper()}] {loc}: {self.message}"


@dataclass
class QAResult:
    """Aggregated result of QA validation."""
    issues: list[Issue] = field(default_factory=list)
    slide_count: int = 0

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def add(self, severity: str, part: str, category: str, message: str) -> None:
        self.issues.append(Issue(severity, part, category, message))

    def summary(self) -> str:
        """One-line summary string."""
        status = "PASS" if self.passed else "FAIL"
        return (
            f"QA {status}: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)"
        )

    def report(self) -> str:
        """Multi-line report of all issues."""
        lines = [self.summary()]
        for issue in self.issues:
            lines.append(f"  {issue}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# PackageValidator
# ---------------------------------------------------------------------------

class PackageValidator:
    """Validates a written ``.pptx`` container.

    Parameters
    ----------
    expected_slides : int, optional
        When given, a different number of linked slides is an error.
    """

    def __init__(self, expected_slides: int | None = None) -> None:
        self.expected_slides = expected_slides

    def validate(self, source: str | Path | bytes) -> QAResult:
        """Run all checks on a file path or raw container bytes."""
        result = QAResult()
        data = source if isinstance(source, bytes) else Path(source).read_bytes()
        parts = self._read_parts(data, result)
        if parts is None:
            return result

        registry = self._check_content_types(parts, result)
        self._check_relationships(parts, result)
        self._check_slide_list(parts, result)
        if registry is not None:
            self._check_python_pptx(data, result)
        logger.debug("Validated package: %s", result.summary())
        return result

    # ------------------------------------------------------------------
    # Container
    # ------------------------------------------------------------------

    def _read_parts(self, data: bytes, result: QAResult) -> dict[str, bytes] | None:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                return {
                    info.filename.lstrip("/"): archive.read(info)
                    for info in archive.infolist() if not info.is_dir()
                }
        except zipfile.BadZipFile as exc:
            result.add("error", "", "container", f"Not a ZIP container: {exc}")
            return None

    @staticmethod
    def _parse(parts: dict[str, bytes], name: str, result: QAResult) -> Element | None:
        try:
            return parse_xml(parts[name])
        except etree.XMLSyntaxError as exc:
            result.add("error", name, "xml", f"Malformed XML: {exc}")
            return None

    # ------------------------------------------------------------------
    # Content types
    # ------------------------------------------------------------------

    def _check_content_types(self, parts: dict[str, bytes],
                             result: QAResult) -> ContentTypeRegistry | None:
        """Every part resolves to a MIME type; overrides name real parts."""
        if CONTENT_TYPES_PART not in parts:
            result.add("error", CONTENT_TYPES_PART, "content_type", "Content-type registry is missing")
            return None
        root = self._parse(parts, CONTENT_TYPES_PART, result)
        if root is None:
            return None
        registry = ContentTypeRegistry(root)

        for name in sorted(parts):
            if name == CONTENT_TYPES_PART:
                continue
            try:
                registry.resolve(name)
            except UnresolvedPart as exc:
                result.add("error", name, "content_type", str(exc))

        for uri in registry.overrides():
            if uri.lstrip("/") not in parts:
                result.add("warning", uri.lstrip("/"), "content_type",
                           "Override names a part that is not in the package")
        return registry

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def _check_relationships(self, parts: dict[str, bytes], result: QAResult) -> None:
        """Internal targets exist and ids are unique within each table."""
        allocator = RelationshipIdAllocator()
        for name in sorted(parts):
            if not name.endswith(".rels"):
                continue
            root = self._parse(parts, name, result)
            if root is None:
                continue
            table = RelationshipTable(root, allocator)
            rels = table.relationships()
            duplicates = [r_id for r_id, n in Counter(rel.r_id for rel in rels).items() if n > 1]
            for r_id in duplicates:
                result.add("error", name, "relationship", f"Duplicate relationship id {r_id}")

            source = source_part_name(name)
            for rel in rels:
                if rel.is_external:
                    continue
                target = resolve_target(source, rel.target)
                if target not in parts:
                    result.add("error", name, "relationship",
                               f"{rel.r_id} targets missing part {target}")

    # ------------------------------------------------------------------
    # Slide list
    # ------------------------------------------------------------------

    def _check_slide_list(self, parts: dict[str, bytes], result: QAResult) -> None:
        presentation_part = self._presentation_part(parts, result)
        if presentation_part is None or presentation_part not in parts:
            result.add("error", presentation_part or "", "slide_list", "Presentation part is missing")
            return
        presentation = self._parse(parts, presentation_part, result)
        pres_rels_name = rels_part_name(presentation_part)
        if presentation is None or pres_rels_name not in parts:
            result.add("error", pres_rels_name, "slide_list",
                       "Presentation relationships are missing or unreadable")
            return
        pres_rels = self._parse(parts, pres_rels_name, result)
        if pres_rels is None:
            return
        rels_by_id = Counter(node.get("Id") for node in find_all(pres_rels, "pr:Relationship"))
        rel_nodes = {node.get("Id"): node for node in find_all(pres_rels, "pr:Relationship")}

        seen_ids: set[int] = set()
        entries = find_all(presentation, "p:sldId")
        for entry in entries:
            slide_id = int(entry.get("id", "0"))
            r_id = entry.get(qn("r:id"), "")
            if slide_id <= SLIDE_ID_BASELINE:
                result.add("error", presentation_part, "slide_list",
                           f"Slide id {slide_id} is in the reserved range")
            if slide_id in seen_ids:
                result.add("error", presentation_part, "slide_list", f"Duplicate slide id {slide_id}")
            seen_ids.add(slide_id)
            if rels_by_id.get(r_id, 0) != 1:
                result.add("error", presentation_part, "slide_list",
                           f"Slide {slide_id} references {r_id!r}, which resolves "
                           f"to {rels_by_id.get(r_id, 0)} relationships")
            elif rel_nodes[r_id].get("Type") != RT_SLIDE:
                result.add("error", presentation_part, "slide_list",
                           f"Slide {slide_id} references {r_id}, which is not a slide relationship")

        result.slide_count = len(entries)
        if self.expected_slides is not None and len(entries) != self.expected_slides:
            result.add("error", presentation_part, "slide_count",
                       f"Expected {self.expected_slides} slides, found {len(entries)}")

        if "docProps/app.xml" in parts:
            app = self._parse(parts, "docProps/app.xml", result)
            declared = get_text(app, "ep:Slides").strip() if app is not None else ""
            if declared.isdigit() and int(declared) != len(entries):
                result.add("warning", "docProps/app.xml", "metadata",
                           f"Declares {declared} slides but {len(entries)} are linked")

    def _presentation_part(self, parts: dict[str, bytes], result: QAResult) -> str | None:
        if "_rels/.rels" not in parts:
            result.add("error", "_rels/.rels", "relationship", "Package relationships are missing")
            return None
        root = self._parse(parts, "_rels/.rels", result)
        if root is None:
            return None
        for node in find_all(root, "pr:Relationship"):
            if node.get("Type") == RT_OFFICE_DOCUMENT:
                return resolve_target("", node.get("Target", ""))
        return None

    # ------------------------------------------------------------------
    # Read-back
    # ------------------------------------------------------------------

    def _check_python_pptx(self, data: bytes, result: QAResult) -> None:
        try:
            slide_count = len(Presentation(io.BytesIO(data)).slides)
        except Exception as exc:  # python-pptx raises a wide range of errors on bad input
            result.add("error", "", "python_pptx", f"python-pptx cannot open the file: {exc}")
            return
        if slide_count != result.slide_count:
            result.add("error", "", "python_pptx",
                       f"python-pptx sees {slide_count} slides, slide list has {result.slide_count}")


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def validate_package(source: str | Path | bytes,
                     expected_slides: int | None = None) -> QAResult:
    """One-shot convenience: validate a written presentation container."""
    return PackageValidator(expected_slides).validate(source)
