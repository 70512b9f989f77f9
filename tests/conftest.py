"""
Shared pytest fixtures and configuration for all tests
"""
import io
import sys
import base64
from pathlib import Path
from types import SimpleNamespace

import pytest
from PIL import Image

# Add project root to Python path for imports
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))


def make_image_bytes(fmt="PNG", color=(255, 0, 0), size=(8, 8)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


class FakeUpload(io.BytesIO):
    """Stand-in for Streamlit's UploadedFile"""

    def __init__(self, data, mime_type, name="upload.png"):
        super().__init__(data)
        self.type = mime_type
        self.name = name


class FakeModels:
    """Records calls the way genai.Client().models would receive them"""

    def __init__(self, images=None, parts=None, error=None):
        self.images = images if images is not None else []
        self.parts = parts if parts is not None else []
        self.error = error
        self.calls = []

    def generate_images(self, **kwargs):
        self.calls.append(("generate_images", kwargs))
        if self.error:
            raise self.error
        return SimpleNamespace(
            generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=b)) for b in self.images]
        )

    def generate_content(self, **kwargs):
        self.calls.append(("generate_content", kwargs))
        if self.error:
            raise self.error
        return SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=self.parts))]
        )


class FakeService:
    """Service double for controller tests; mirrors ImageServiceClient's surface"""

    def __init__(self, result=None, error=None, on_call=None):
        self.result = result
        self.error = error
        self.on_call = on_call
        self.calls = []

    def _respond(self, name, args):
        self.calls.append((name, args))
        if self.on_call:
            self.on_call(name, args)
        if self.error:
            raise self.error
        return self.result

    def generate_image(self, prompt, aspect_ratio):
        return self._respond("generate_image", (prompt, aspect_ratio))

    def edit_image(self, instruction, image_base64, mime_type):
        return self._respond("edit_image", (instruction, image_base64, mime_type))


def inline_part(data, mime_type="image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def text_part(text):
    return SimpleNamespace(text=text, inline_data=None)


@pytest.fixture
def png_bytes():
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes("JPEG", color=(0, 0, 255))


@pytest.fixture
def png_b64(png_bytes):
    return base64.b64encode(png_bytes).decode("utf-8")


@pytest.fixture
def jpeg_b64(jpeg_bytes):
    return base64.b64encode(jpeg_bytes).decode("utf-8")


@pytest.fixture
def project_root():
    return project_dir


SVG_BYTES = b'<svg xmlns="http://www.w3.org/2000/svg" width="8" height="8"><rect width="8" height="8" fill="red"/></svg>'

# ISO-BMFF header of a HEIC photo
HEIC_BYTES = b"\x00\x00\x00\x18ftypheic\x00\x00\x00\x00mif1heic"


class BrokenUpload:
    """Upload whose read fails, as a dropped connection would"""

    def __init__(self, mime_type="image/png", name="broken.png"):
        self.type = mime_type
        self.name = name

    def getvalue(self):
        raise OSError("read failed")


class UntouchableUpload:
    """Upload that records any attempt to read it"""

    def __init__(self, mime_type="image/png", name="upload.png"):
        self.type = mime_type
        self.name = name
        self.reads = 0

    def getvalue(self):
        self.reads += 1
        return b"data"
