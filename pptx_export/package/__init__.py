"""Open Packaging Convention layer: parts, relationships, content types.

Modules:
    xmltree: namespace map and the generic tree API
    parts: PartStore (staging directory + pinned parts)
    content_types: ContentTypeRegistry
    relationships: RelationshipTable and the package-wide id allocator
    templates: fixed XML of a blank package
    archive: PackageWriter and container extraction
"""

from .archive import PackageWriter, extract_package
from .content_types import ContentTypeRegistry
from .parts import PartStore
from .relationships import Relationship, RelationshipIdAllocator, RelationshipTable

__all__ = [
    "ContentTypeRegistry",
    "PackageWriter",
    "PartStore",
    "Relationship",
    "RelationshipIdAllocator",
    "RelationshipTable",
    "extract_package",
]
