"""Archival Writer and container extraction.

Writing never touches the destination until a complete archive exists:
parts are committed to the staging directory, zipped into a temporary
file beside the destination, and moved into place with ``os.replace``.
"""

import logging
import os
import tempfile
import zipfile
from pathlib import Path

from pptx_export.errors import PackageIOError, PackageNotFound, ValidationError, WriteFailure
from pptx_export.package.content_types import CONTENT_TYPES_PART
from pptx_export.package.parts import PartStore

logger = logging.getLogger(__name__)


class PackageWriter:
    """Serializes a PartStore into a ZIP container at a destination path."""

    def __init__(self, store: PartStore) -> None:
        self.store = store

    def write(self, destination: str | Path) -> Path:
        """Write the package and return the resolved destination path.

        Raises WriteFailure (chained to the underlying error) when staging,
        packing or the final rename fails. A file already present at
        ``destination`` is left intact in that case.
        """
        destination = Path(destination).resolve()
        tmp_path: Path | None = None
        try:
            self.store.commit()
            names = self._ordered_part_names()
            fd, tmp_name = tempfile.mkstemp(prefix=".~", suffix=".pptx", dir=destination.parent)
            os.close(fd)
            tmp_path = Path(tmp_name)
            with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for name in names:
                    archive.write(self.store.path_for(name), arcname=name)
            os.replace(tmp_path, destination)
        except (OSError, zipfile.LargeZipFile) as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise WriteFailure(f"PPTX file cannot be written to {destination}: {exc}") from exc

        logger.info("Wrote %d parts to %s", len(names), destination)
        return destination

    def _ordered_part_names(self) -> list[str]:
        # The content-type registry goes first in the archive.
        names = [name for name in self.store.iter_part_names() if name != CONTENT_TYPES_PART]
        return [CONTENT_TYPES_PART] + names


def extract_package(source: str | Path, store: PartStore) -> list[str]:
    """Unpack the container at ``source`` into ``store``; returns part names."""
    source = Path(source)
    if not source.is_file():
        raise PackageNotFound(f"PPTX to open not found: {source}")

    extracted: list[str] = []
    try:
        with zipfile.ZipFile(source) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                store.write_bytes(info.filename, archive.read(info))
                extracted.append(info.filename)
    except PackageIOError:
        raise
    except zipfile.BadZipFile as exc:
        raise PackageIOError(f"Not a valid PPTX container: {source}: {exc}") from exc
    except ValidationError as exc:
        raise PackageIOError(f"Unsafe member in {source}: {exc}") from exc
    except OSError as exc:
        raise PackageIOError(f"Cannot extract {source}: {exc}") from exc

    logger.debug("Extracted %d parts from %s", len(extracted), source.name)
    return extracted
