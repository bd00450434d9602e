"""Tests for the Content-Type Registry."""

import pytest

from pptx_export.errors import ConflictingContentType, UnresolvedPart, ValidationError
from pptx_export.package.content_types import CT_SLIDE, ContentTypeRegistry
from pptx_export.package.templates import CONTENT_TYPES_XML
from pptx_export.package.xmltree import find_all, parse_xml


@pytest.fixture
def registry():
    return ContentTypeRegistry(parse_xml(CONTENT_TYPES_XML.encode("utf-8")))


class TestDefaults:

    def test_blank_package_defaults(self, registry):
        assert registry.defaults() == {
            "png": "image/png",
            "rels": "application/vnd.openxmlformats-package.relationships+xml",
            "xml": "application/xml",
        }

    def test_register_new_extension(self, registry):
        assert registry.register_default("jpg", "image/jpeg") is True
        assert registry.defaults()["jpg"] == "image/jpeg"
        assert registry.image_extensions == {"png", "jpg"}

    def test_register_is_idempotent(self, registry):
        assert registry.register_default("png", "image/png") is False
        assert len(find_all(registry.root, "ct:Default")) == 3

    def test_extension_normalized(self, registry):
        registry.register_default(".GIF", "image/gif")
        assert "gif" in registry.defaults()

    def test_conflicting_default_raises(self, registry):
        with pytest.raises(ConflictingContentType):
            registry.register_default("png", "image/x-png")

    def test_conflict_is_validation_error(self):
        assert issubclass(ConflictingContentType, ValidationError)

    def test_defaults_precede_overrides(self, registry):
        registry.register_default("gif", "image/gif")
        tags = [child.tag.rsplit("}", 1)[1] for child in registry.root]
        last_default = max(i for i, tag in enumerate(tags) if tag == "Default")
        first_override = tags.index("Override")
        assert last_default < first_override


class TestOverrides:

    def test_register_override(self, registry):
        assert registry.register_override("ppt/slides/slide1.xml", CT_SLIDE) is True
        assert registry.has_override("/ppt/slides/slide1.xml")
        assert registry.overrides()["/ppt/slides/slide1.xml"] == CT_SLIDE

    def test_override_idempotent(self, registry):
        registry.register_override("ppt/slides/slide1.xml", CT_SLIDE)
        assert registry.register_override("/ppt/slides/slide1.xml", CT_SLIDE) is False

    def test_conflicting_override_raises(self, registry):
        registry.register_override("ppt/slides/slide1.xml", CT_SLIDE)
        with pytest.raises(ConflictingContentType):
            registry.register_override("ppt/slides/slide1.xml", "application/xml")


class TestResolve:

    def test_override_wins(self, registry):
        assert registry.resolve("ppt/presentation.xml").endswith("presentation.main+xml")

    def test_default_by_extension(self, registry):
        assert registry.resolve("ppt/media/image-1-2.PNG") == "image/png"
        assert registry.resolve("ppt/slides/_rels/slide1.xml.rels").endswith("relationships+xml")

    def test_unresolved_raises(self, registry):
        with pytest.raises(UnresolvedPart):
            registry.resolve("ppt/media/image-1-2.jpg")

    def test_package_relationships_part(self, registry):
        rels = "application/vnd.openxmlformats-package.relationships+xml"
        assert registry.resolve("_rels/.rels") == rels
        assert registry.resolve("/_rels/.rels") == rels

    def test_extensionless_part_unresolved(self, registry):
        with pytest.raises(UnresolvedPart):
            registry.resolve("ppt/media/README")
