"""Tests for the CLI entry point (pptx_export.cli).

Covers argument parsing, the build pipeline (deck loading, QA gate and
atomic output), the validate and inspect commands, and error handling.
"""

import argparse
import re
import zipfile
from unittest.mock import MagicMock, patch

import pytest
from pptx import Presentation

from pptx_export.cli import build_parser, cmd_build, cmd_inspect, cmd_validate, main
from pptx_export.generator.presentation import PresentationPackage
from pptx_export.schema.loader import save_deck
from pptx_export.schema.models import (
    DeckSpec,
    Geometry,
    Picture,
    PresentationMetadata,
    ScalePolicy,
    SlideSpec,
    Textbox,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def parser():
    return build_parser()


@pytest.fixture
def deck_file(tmp_path, png_bytes):
    """A two-slide YAML deck referencing an image next to it."""
    (tmp_path / "figure.png").write_bytes(png_bytes)
    deck = DeckSpec(
        dimensions=(12, 6),
        metadata=PresentationMetadata(title="CLI Deck"),
        slides=[
            SlideSpec(shapes=[Textbox(text="Hello", geometry=Geometry(1, 1, 6, 1))],
                      note="notes"),
            SlideSpec(shapes=[Picture(image="figure.png", scale=ScalePolicy.MAX_FIXED)]),
        ],
    )
    path = tmp_path / "deck.yaml"
    save_deck(deck, path)
    return path


@pytest.fixture
def built_pptx(tmp_path):
    path = tmp_path / "existing.pptx"
    with PresentationPackage.new(path, dimensions=(10, 5), title="Existing") as package:
        package.add_slide()
        package.add_slide()
        package.add_slide()
        package.save()
    return path


@pytest.fixture
def qa_fail():
    """A failing QAResult mock."""
    qa = MagicMock()
    qa.passed = False
    qa.summary.return_value = "QA FAIL: 1 error(s), 0 warning(s)"
    qa.report.return_value = (
        "QA FAIL: 1 error(s), 0 warning(s)\n"
        "  [ERROR] ppt/presentation.xml: broken"
    )
    return qa


def _build_args(deck, output, **overrides):
    values = dict(deck=str(deck), output=str(output), append=False,
                  skip_qa=False, force=False, verbose=False)
    values.update(overrides)
    return argparse.Namespace(**values)


# ===================================================================
# Parser tests
# ===================================================================

class TestParser:

    def test_build_minimal(self, parser):
        args = parser.parse_args(["build", "--deck", "d.yaml", "-o", "out.pptx"])
        assert args.command == "build"
        assert args.func is cmd_build
        assert (args.append, args.skip_qa, args.force, args.verbose) == (False, False, False, False)

    def test_build_flags(self, parser):
        args = parser.parse_args(["build", "--deck", "d.yaml", "--output", "o.pptx",
                                  "--append", "--skip-qa", "--force", "-v"])
        assert (args.append, args.skip_qa, args.force, args.verbose) == (True, True, True, True)

    def test_validate_command(self, parser):
        args = parser.parse_args(["validate", "--pptx", "x.pptx", "--slides", "4"])
        assert args.func is cmd_validate
        assert args.slides == 4

    def test_inspect_command(self, parser):
        args = parser.parse_args(["--debug", "inspect", "--pptx", "x.pptx", "-v"])
        assert args.func is cmd_inspect
        assert args.debug and args.verbose

    def test_no_command_fails(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args([])

    def test_build_requires_output(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["build", "--deck", "d.yaml"])

    def test_validate_requires_pptx(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["validate"])


# ===================================================================
# Build command tests
# ===================================================================

class TestCmdBuild:
    """Tests for cmd_build()."""

    def test_full_pipeline(self, deck_file, tmp_path, capsys):
        output = tmp_path / "out" / "deck.pptx"
        cmd_build(_build_args(deck_file, output))

        prs = Presentation(str(output))
        assert len(prs.slides) == 2
        assert prs.core_properties.title == "CLI Deck"
        err = capsys.readouterr().err
        assert "QA PASS" in err
        assert "2 slides" in err

    def test_adds_extension(self, deck_file, tmp_path):
        cmd_build(_build_args(deck_file, tmp_path / "deck", skip_qa=True))
        assert (tmp_path / "deck.pptx").exists()

    def test_skip_qa(self, deck_file, tmp_path):
        with patch("pptx_export.cli.PackageValidator") as MockValidator:
            cmd_build(_build_args(deck_file, tmp_path / "deck.pptx", skip_qa=True))
        MockValidator.assert_not_called()
        assert (tmp_path / "deck.pptx").exists()

    def test_qa_fail_exits(self, deck_file, tmp_path, qa_fail):
        output = tmp_path / "deck.pptx"
        with patch("pptx_export.cli.PackageValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            with pytest.raises(SystemExit):
                cmd_build(_build_args(deck_file, output))
        MockValidator.assert_called_once_with(expected_slides=2)
        assert not output.exists()
        assert list(tmp_path.glob(".~*")) == []

    def test_qa_fail_keeps_previous_output(self, deck_file, built_pptx, qa_fail):
        original = built_pptx.read_bytes()
        with patch("pptx_export.cli.PackageValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            with pytest.raises(SystemExit):
                cmd_build(_build_args(deck_file, built_pptx))
        assert built_pptx.read_bytes() == original

    def test_qa_fail_force_writes(self, deck_file, tmp_path, qa_fail, capsys):
        output = tmp_path / "deck.pptx"
        with patch("pptx_export.cli.PackageValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            cmd_build(_build_args(deck_file, output, force=True, verbose=True))
        assert output.exists()
        err = capsys.readouterr().err
        assert "QA FAIL" in err
        assert "[ERROR] ppt/presentation.xml: broken" in err

    def test_append(self, deck_file, built_pptx):
        cmd_build(_build_args(deck_file, built_pptx, append=True))
        prs = Presentation(str(built_pptx))
        assert len(prs.slides) == 5
        assert prs.slide_height == 5 * 914400

    def test_missing_deck_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            cmd_build(_build_args(tmp_path / "missing.yaml", tmp_path / "o.pptx"))
        assert "Deck file not found" in capsys.readouterr().err

    def test_invalid_deck_content_exits(self, tmp_path, capsys):
        deck = tmp_path / "bad.yaml"
        deck.write_text("slides:\n  - shapes:\n      - type: textbox\n        text: x\n"
                        "        fill_color: nope\n")
        output = tmp_path / "bad.pptx"
        with pytest.raises(SystemExit):
            cmd_build(_build_args(deck, output))
        assert "Build failed" in capsys.readouterr().err
        assert not output.exists()


# ===================================================================
# Validate command tests
# ===================================================================

class TestCmdValidate:
    """Tests for cmd_validate()."""

    def test_validate_pass(self, built_pptx, capsys):
        args = argparse.Namespace(pptx=str(built_pptx), slides=3)
        with pytest.raises(SystemExit) as exc_info:
            cmd_validate(args)
        assert exc_info.value.code == 0
        assert "PASS" in capsys.readouterr().out

    def test_validate_fail_exit_code(self, built_pptx, capsys):
        args = argparse.Namespace(pptx=str(built_pptx), slides=4)
        with pytest.raises(SystemExit) as exc_info:
            cmd_validate(args)
        assert exc_info.value.code == 1
        assert "Expected 4 slides, found 3" in capsys.readouterr().out

    def test_validate_missing_pptx_exits(self):
        args = argparse.Namespace(pptx="/nonexistent/file.pptx", slides=None)
        with pytest.raises(SystemExit) as exc_info:
            cmd_validate(args)
        assert exc_info.value.code == 1


# ===================================================================
# Inspect command tests
# ===================================================================

class TestCmdInspect:
    """Tests for cmd_inspect()."""

    def test_inspect_basic(self, built_pptx, capsys):
        cmd_inspect(argparse.Namespace(pptx=str(built_pptx), verbose=False))
        out = capsys.readouterr().out
        assert "Slides:      3" in out
        assert "Dimensions:  10\" x 5\"" in out
        assert "Title:       Existing" in out
        assert "slide id" not in out

    def test_inspect_verbose(self, built_pptx, capsys):
        cmd_inspect(argparse.Namespace(pptx=str(built_pptx), verbose=True))
        out = capsys.readouterr().out
        assert "[ 1] slide id 256" in out
        assert "[ 3] slide id 258" in out

    def test_inspect_reports_integrity_warning(self, built_pptx, capsys):
        with zipfile.ZipFile(built_pptx) as archive:
            contents = {i.filename: archive.read(i) for i in archive.infolist()}
        app = contents["docProps/app.xml"].decode("utf-8")
        contents["docProps/app.xml"] = re.sub(r"<Slides>\d+</Slides>", "<Slides>9</Slides>",
                                              app).encode("utf-8")
        with zipfile.ZipFile(built_pptx, "w") as archive:
            for name, data in contents.items():
                archive.writestr(name, data)

        cmd_inspect(argparse.Namespace(pptx=str(built_pptx), verbose=False))
        captured = capsys.readouterr()
        assert "Slides:      3" in captured.out
        assert "WARNING:" in captured.err
        assert "declares 9 slides" in captured.err

    def test_inspect_missing_file(self, tmp_path):
        with pytest.raises(SystemExit):
            cmd_inspect(argparse.Namespace(pptx=str(tmp_path / "none.pptx"), verbose=False))


# ===================================================================
# Main
# ===================================================================

class TestMain:

    def test_main_dispatches(self, built_pptx, capsys):
        main(["inspect", "--pptx", str(built_pptx)])
        assert "Slides:      3" in capsys.readouterr().out

    def test_main_validate_exit_code(self, built_pptx):
        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--pptx", str(built_pptx)])
        assert exc_info.value.code == 0
