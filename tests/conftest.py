"""
pytest configuration and fixtures for aspectsort tests.
"""

import io
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from PIL import Image

from aspectsort.constants import ORIENTATION_TAG
from aspectsort.errors import DecodeError
from aspectsort.metadata import ImageMetadata


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


@pytest.fixture
def source_dir(tmp_path):
    source = tmp_path / "source"
    source.mkdir()
    return source


@pytest.fixture
def dest_dir(tmp_path):
    return tmp_path / "dest"


@pytest.fixture
def make_image(source_dir):
    """Factory that writes a real image file under the source directory."""

    def create_image(name: str, width: int, height: int,
                     orientation: Optional[int] = None, fmt: Optional[str] = None,
                     exif_tags: Optional[Dict[int, object]] = None) -> Path:
        """Create an image of the given size, optionally carrying EXIF data.

        Args:
            name: path relative to the source directory
            width, height: pixel dimensions
            orientation: EXIF orientation code, or None to omit the tag
            fmt: Pillow format name (default: from extension)
            exif_tags: extra EXIF tags; with no tags and no orientation the
                file has no EXIF profile at all
        """
        file_path = source_dir / name
        file_path.parent.mkdir(parents=True, exist_ok=True)

        img = Image.new("RGB", (width, height), color=(40, 80, 120))
        tags = dict(exif_tags or {})
        if orientation is not None:
            tags[ORIENTATION_TAG] = orientation
        save_kwargs = {}
        if tags:
            exif = Image.Exif()
            for tag, value in tags.items():
                exif[tag] = value
            save_kwargs["exif"] = exif
        img.save(file_path, format=fmt, **save_kwargs)
        return file_path

    return create_image


@pytest.fixture
def fake_probe():
    """Probe stand-in that serves metadata from a table keyed by file name.

    Table values are (width, height, orientation) or (width, height,
    orientation, has_exif); with three values a file has EXIF exactly when
    it has an orientation. Files whose name is missing from the table raise
    DecodeError, so tests can drive the pipeline over placeholder files
    without real image data.
    """

    def build(table: Dict[str, tuple], calls: Optional[List[Path]] = None):
        def probe(path: Path) -> ImageMetadata:
            if calls is not None:
                calls.append(path)
            if path.name not in table:
                raise DecodeError(path, "cannot identify image file")
            entry = table[path.name]
            width, height, orientation = entry[:3]
            has_exif = entry[3] if len(entry) > 3 else orientation is not None
            return ImageMetadata(path=path, width=width, height=height,
                                 orientation=orientation, format="JPEG",
                                 has_exif=has_exif)
        return probe

    return build


@pytest.fixture
def placeholder_files(source_dir):
    """Write placeholder files with distinct contents under the source directory."""

    def create_files(names: List[str]) -> List[Path]:
        paths = []
        for name in names:
            file_path = source_dir / name
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(f"placeholder {name}".encode())
            paths.append(file_path)
        return paths

    return create_files


@pytest.fixture
def copied_files():
    """List every copied image under a destination root, relative to it."""

    def list_files(dest: Path) -> List[Path]:
        if not dest.exists():
            return []
        return sorted(p.relative_to(dest) for p in dest.rglob("*") if p.is_file())

    return list_files


@pytest.fixture
def test_config_path(tmp_path):
    """Test-specific config path with clean state guarantee."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir / "config.yml"


@pytest.fixture
def cli_runner():
    """Create a CLI runner that captures output and uses test config."""

    def run_cli(*args, config_path=None, answer="n"):
        """Run aspectsort CLI with given arguments.

        Args:
            *args: Command line arguments (source, dest, --flags, etc)
            config_path: Optional config path for test isolation
            answer: Reply to the saved-config confirmation prompt

        Returns:
            CliResult with exit_code, output, and error
        """
        from aspectsort.cli import main
        from aspectsort.constants import get_console

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        old_argv = sys.argv
        stdout = io.StringIO()
        stderr = io.StringIO()

        console = get_console()
        console.input = lambda prompt="": answer

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            sys.argv = ['aspectsort'] + [str(a) for a in args]

            exit_code = main(config_path=config_path)

            return CliResult(exit_code=exit_code, output=stdout.getvalue(),
                             error=stderr.getvalue())
        except SystemExit as e:
            return CliResult(exit_code=e.code if e.code is not None else 0,
                             output=stdout.getvalue(), error=stderr.getvalue())
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            sys.argv = old_argv
            del console.input

    return run_cli
