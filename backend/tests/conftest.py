"""
Pytest configuration and fixtures for backend tests
"""
import io
import zipfile

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from creative_validator.main import app
from creative_validator.models import FileAsset


VALID_BANNER_HTML = """<!DOCTYPE html>
<html>
<head>
  <link href="https://fonts.googleapis.com/css?family=Roboto" rel="stylesheet">
  <script>var clickTag = "__CLICKTHRU__";</script>
</head>
<body>
  <a href="javascript:void(0)" onclick="window.location=clickTag" target="_top">
    <img src="images/background.png">
  </a>
</body>
</html>
"""


def build_zip(members):
    """Build an in-memory ZIP from a {path: text or bytes} mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for path, data in members.items():
            archive.writestr(path, data)
    return buffer.getvalue()


def build_image(width, height, mode="RGB", image_format="PNG"):
    """Render a solid image with Pillow and return its encoded bytes."""
    img = Image.new(mode, (width, height), color=0)
    buffer = io.BytesIO()
    img.save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def client():
    """Create a test client for the FastAPI application"""
    return TestClient(app)


@pytest.fixture
def make_asset():
    """Factory for analyzed assets with sensible defaults"""
    def _make(name="banner_300x250.png", dimensions="300x250", size_kb=100,
              file_format="png", **overrides):
        return FileAsset(
            name=name,
            dimensions=dimensions,
            size_kb=size_kb,
            file_format=file_format,
            **overrides
        )
    return _make


@pytest.fixture
def valid_banner_zip():
    """A packaged HTML5 banner that passes every structural rule"""
    return build_zip({
        "index.html": VALID_BANNER_HTML,
        "images/background.png": b"\x89PNG\r\n",
        "style.css": "body { margin: 0; }",
    })


@pytest.fixture
def sample_png():
    """A 300x250 RGB PNG"""
    return build_image(300, 250)


@pytest.fixture
def sample_cmyk_jpeg():
    """A 300x250 CMYK JPEG"""
    return build_image(300, 250, mode="CMYK", image_format="JPEG")


@pytest.fixture
def zip_builder():
    """Expose build_zip to tests that assemble their own archives"""
    return build_zip


@pytest.fixture
def image_builder():
    """Expose build_image to tests that need specific sizes or modes"""
    return build_image


@pytest.fixture
def banner_html():
    """Root markup of a compliant banner"""
    return VALID_BANNER_HTML
