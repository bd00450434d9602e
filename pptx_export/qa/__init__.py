"""QA validation package for pptx-export.

Checks written containers for content-type coverage, relationship targets,
slide-list consistency and python-pptx readability.
"""

from .validator import (
    Issue,
    PackageValidator,
    QAResult,
    validate_package,
)

__all__ = [
    "Issue",
    "PackageValidator",
    "QAResult",
    "validate_package",
]
