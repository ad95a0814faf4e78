"""
Pytest configuration for local imports and shared image fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def make_png_bytes(width: int, height: int, color: tuple[int, int, int]) -> bytes:
	"""
	Encode a solid color PNG.

	Args:
		width: Pixel width.
		height: Pixel height.
		color: RGB fill.

	Returns:
		PNG bytes.
	"""
	image = PIL.Image.new("RGB", (width, height), color)
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	return buffer.getvalue()


@pytest.fixture
def logo_png() -> bytes:
	return make_png_bytes(350, 100, (120, 20, 40))


@pytest.fixture
def band_png() -> bytes:
	return make_png_bytes(400, 100, (20, 120, 40))
