"""Content-Type Registry backed by the ``[Content_Types].xml`` part."""

import logging

from pptx_export.errors import ConflictingContentType, UnresolvedPart
from pptx_export.package.parts import normalize_part_name
from pptx_export.package.xmltree import Element, create_child, find_all

logger = logging.getLogger(__name__)

CONTENT_TYPES_PART = "[Content_Types].xml"

CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_NOTES_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.notesSlide+xml"
CT_RELATIONSHIPS = "application/vnd.openxmlformats-package.relationships+xml"
CT_XML = "application/xml"


def _part_uri(name: str) -> str:
    return "/" + normalize_part_name(name)


class ContentTypeRegistry:
    """Default (extension) and Override (part) MIME mappings of a package."""

    def __init__(self, root: Element) -> None:
        self.root = root

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_default(self, extension: str, mime_type: str) -> bool:
        """Declare ``extension``; returns False if it was already declared.

        Raises ConflictingContentType when the extension is registered
        with a different MIME type.
        """
        extension = extension.lstrip(".").lower()
        existing = self.defaults().get(extension)
        if existing is not None:
            if existing != mime_type:
                raise ConflictingContentType(
                    f"Extension '{extension}' already registered as {existing}, not {mime_type}"
                )
            return False
        index = len(find_all(self.root, "ct:Default"))
        create_child(self.root, "ct:Default",
                     {"Extension": extension, "ContentType": mime_type}, index=index)
        logger.debug("Registered default %s -> %s", extension, mime_type)
        return True

    def register_override(self, part_name: str, mime_type: str) -> bool:
        uri = _part_uri(part_name)
        existing = self.overrides().get(uri)
        if existing is not None:
            if existing != mime_type:
                raise ConflictingContentType(
                    f"Part '{uri}' already registered as {existing}, not {mime_type}"
                )
            return False
        create_child(self.root, "ct:Override", {"PartName": uri, "ContentType": mime_type})
        logger.debug("Registered override %s -> %s", uri, mime_type)
        return True

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def defaults(self) -> dict[str, str]:
        return {
            node.get("Extension", "").lower(): node.get("ContentType", "")
            for node in find_all(self.root, "ct:Default")
        }

    def overrides(self) -> dict[str, str]:
        return {
            node.get("PartName", ""): node.get("ContentType", "")
            for node in find_all(self.root, "ct:Override")
        }

    def has_override(self, part_name: str) -> bool:
        return _part_uri(part_name) in self.overrides()

    def resolve(self, part_name: str) -> str:
        """MIME type of ``part_name``: its Override, else its extension's Default."""
        uri = _part_uri(part_name)
        override = self.overrides().get(uri)
        if override is not None:
            return override
        segment = uri.rsplit("/", 1)[-1]
        extension = segment.rsplit(".", 1)[1].lower() if "." in segment else ""
        default = self.defaults().get(extension)
        if default is None:
            raise UnresolvedPart(f"No content type declared for {uri}")
        return default

    @property
    def image_extensions(self) -> set[str]:
        return {ext for ext, mime in self.defaults().items() if mime.startswith("image/")}
