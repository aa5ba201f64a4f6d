import io
from pathlib import Path

import pytest
from flask import Flask
from PIL import Image

from thumber import Thumber, ThumberConfig


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "img"
    path.mkdir()
    Image.new("RGB", (400, 400), (200, 30, 30)).save(path / "400x400.png")
    Image.new("RGB", (400, 400), (30, 200, 30)).save(path / "400x400.jpg")
    Image.new("RGBA", (400, 200), (0, 0, 255, 128)).save(path / "400x200.png")
    (path / "invalid.png").write_text("this is not an image")
    return path


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    path = tmp_path / "thumbs"
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture
def config(tmp_path: Path, source_dir: Path, target_dir: Path) -> ThumberConfig:
    return ThumberConfig(
        target=str(target_dir),
        source_dir=str(source_dir),
        static_dir=str(tmp_path / "static"),
    )


@pytest.fixture
def app(tmp_path: Path, source_dir: Path, target_dir: Path) -> Flask:
    app = Flask(__name__, static_folder=str(tmp_path / "static"))
    app.config.update(
        TESTING=True,
        SERVER_NAME="localhost",
        THUMBER_TARGET=str(target_dir),
        THUMBER_SOURCE_DIR=str(source_dir),
    )
    Thumber(app)
    return app


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (64, 32), (10, 20, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
