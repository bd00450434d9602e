"""CLI entry point for pptx-export.

Builds presentations from YAML deck files, validates written containers and
shows what a package holds.

Usage::

    # Build a deck into a new file
    python -m pptx_export.cli build \\
        --deck decks/review.yaml \\
        --output output/review.pptx

    # Append the deck's slides to an existing file
    python -m pptx_export.cli build \\
        --deck decks/appendix.yaml \\
        --output output/review.pptx --append

    # Check an existing PPTX
    python -m pptx_export.cli validate --pptx output/review.pptx

    # Show dimensions, slide count and metadata
    python -m pptx_export.cli inspect --pptx output/review.pptx -v
"""

import argparse
import logging
import os
import sys
import tempfile
import warnings
from pathlib import Path

from pptx_export.errors import IntegrityWarning, PptxExportError
from pptx_export.generator.deck_builder import DeckBuilder
from pptx_export.generator.presentation import PresentationPackage
from pptx_export.qa.validator import PackageValidator
from pptx_export.schema.loader import load_deck


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_build(args):
    """Build a PPTX presentation from a deck file."""
    try:
        deck = load_deck(args.deck)
    except PptxExportError as exc:
        _error(str(exc))
    _info(f"Deck: {args.deck} ({len(deck.slides)} slides)")

    output = Path(args.output)
    if output.suffix.lower() != ".pptx":
        output = output.with_name(output.name + ".pptx")
    output.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=".~build-", suffix=".pptx", dir=output.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        _info("Building PPTX...")
        try:
            package = _open_target(output, deck, args.append)
            with package:
                DeckBuilder(deck).render(package)
                package.save(tmp_path)
                slide_count = package.slide_count
        except PptxExportError as exc:
            _error(f"Build failed: {exc}")

        # QA validation
        if not args.skip_qa:
            _info("Running QA validation...")
            qa_result = PackageValidator(expected_slides=slide_count).validate(tmp_path)

            if qa_result.passed:
                _info(qa_result.summary())
            else:
                _warn(qa_result.summary())
                if args.verbose:
                    print(qa_result.report(), file=sys.stderr)

                if not args.force:
                    _error("QA validation failed. Use --force to write anyway, "
                           "or --skip-qa to skip validation.")
        else:
            _info("QA validation skipped (--skip-qa)")

        os.replace(tmp_path, output)
    finally:
        tmp_path.unlink(missing_ok=True)

    _info(f"Written: {output} ({output.stat().st_size:,} bytes, {slide_count} slides)")


def _open_target(output: Path, deck, append: bool) -> PresentationPackage:
    if append and output.exists():
        _info(f"Appending to {output}")
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", IntegrityWarning)
            package = PresentationPackage.open(output)
        for w in caught:
            _warn(str(w.message))
        return package
    return PresentationPackage.new(
        dimensions=deck.dimensions,
        background_color=deck.background_color,
        metadata=deck.metadata,
    )


def cmd_validate(args):
    """Validate an existing PPTX container."""
    pptx_path = Path(args.pptx)
    if not pptx_path.exists():
        _error(f"PPTX file not found: {pptx_path}")

    _info(f"Validating {pptx_path}")
    qa_result = PackageValidator(expected_slides=args.slides).validate(pptx_path)

    print(qa_result.report())
    sys.exit(0 if qa_result.passed else 1)


def cmd_inspect(args):
    """Show package information."""
    pptx_path = Path(args.pptx)
    if not pptx_path.exists():
        _error(f"PPTX file not found: {pptx_path}")

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", IntegrityWarning)
        try:
            package = PresentationPackage.open(pptx_path)
        except PptxExportError as exc:
            _error(f"Cannot open {pptx_path}: {exc}")
    for w in caught:
        _warn(str(w.message))

    with package:
        info = package.query()
        width, height = info.dimensions
        print(f"File:        {info.path}")
        print(f"Dimensions:  {width:g}\" x {height:g}\"")
        print(f"Slides:      {info.slide_count}")
        print(f"Title:       {package.metadata.title}")
        print(f"Author:      {package.metadata.author}")
        print(f"Revision:    {package.revision}")

        if args.verbose:
            print()
            for ordinal, slide_id in enumerate(package.slide_ids, start=1):
                print(f"  [{ordinal:2d}] slide id {slide_id}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pptx-export",
        description="Author PowerPoint packages from YAML deck files.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log package operations to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- build ----
    build = subparsers.add_parser(
        "build",
        help="Build a PPTX presentation from a YAML deck file.",
    )
    build.add_argument(
        "--deck",
        required=True,
        help="Path to the YAML deck file.",
    )
    build.add_argument(
        "-o", "--output",
        required=True,
        help="Output PPTX file path.",
    )
    build.add_argument(
        "--append",
        action="store_true",
        default=False,
        help="Add the deck's slides to an existing output file.",
    )
    build.add_argument(
        "--skip-qa",
        action="store_true",
        default=False,
        help="Skip QA validation after building.",
    )
    build.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Write output even if QA validation fails.",
    )
    build.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show detailed output (full QA report on failure).",
    )
    build.set_defaults(func=cmd_build)

    # ---- validate ----
    val = subparsers.add_parser(
        "validate",
        help="Validate the structure of an existing PPTX.",
    )
    val.add_argument(
        "--pptx",
        required=True,
        help="Path to the PPTX file to validate.",
    )
    val.add_argument(
        "--slides",
        type=int,
        default=None,
        help="Expected number of slides.",
    )
    val.set_defaults(func=cmd_validate)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show dimensions, slide count and metadata of a PPTX.",
    )
    insp.add_argument(
        "--pptx",
        required=True,
        help="Path to the PPTX file to inspect.",
    )
    insp.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="List every slide with its id.",
    )
    insp.set_defaults(func=cmd_inspect)

    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="  %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    args.func(args)


if __name__ == "__main__":
    main()
