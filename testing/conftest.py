"""Shared fixtures for aichar tests."""

from io import BytesIO

import pytest
from PIL import Image

from aichar.config import CONFIG_ENV_VAR, use_settings
from aichar.services.character_cards import CharacterRecord


def make_png(mode: str = "RGB", size=(8, 6)) -> bytes:
    """Small PNG with a non-uniform pixel pattern."""
    image = Image.new(mode, size)
    width, height = size
    if mode == "P":
        image.putpalette([i % 256 for i in range(768)])
    for x in range(width):
        for y in range(height):
            if mode == "RGB":
                image.putpixel((x, y), (x * 30 % 256, y * 40 % 256, (x + y) * 10 % 256))
            elif mode == "RGBA":
                image.putpixel((x, y), (x * 30 % 256, y * 40 % 256, 200, (x * y * 7) % 256))
            else:
                image.putpixel((x, y), (x * 7 + y * 13) % 256)
    output = BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Every test starts from default settings, ignoring the environment."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    use_settings(None)
    yield
    use_settings(None)


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def png_file(tmp_path, png_bytes):
    path = tmp_path / "portrait.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def character():
    return CharacterRecord(
        name="Nova",
        summary="A starship navigator from the outer colonies.",
        personality="Curious, dry humor, fiercely loyal.",
        scenario="The ship drifts near an uncharted nebula.",
        greeting_message="Course plotted. Where to next, captain?",
        example_messages="{{user}}: Status?\n{{char}}: All green, and bored.",
    )
