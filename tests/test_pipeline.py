from __future__ import annotations

import logging
from pathlib import Path

import pytest
from PIL import Image

from photo_pipeline import pipeline as pipeline_module
from photo_pipeline.config import PipelineConfig
from photo_pipeline.errors import ProbeError
from photo_pipeline.orientation import Orientation
from photo_pipeline.pipeline import Failure, ImagePipeline, ProcessingResult, probe, process_image


def test_probe_reads_header(tmp_path: Path, make_image) -> None:
    src = make_image(tmp_path / "a.png", (320, 240), fmt="PNG")
    meta = probe(src)
    assert (meta.width, meta.height) == (320, 240)
    assert meta.format == "PNG"
    assert meta.byte_size == src.stat().st_size


def test_probe_rejects_non_image(tmp_path: Path) -> None:
    bad = tmp_path / "bad.jpg"
    bad.write_bytes(b"definitely not a jpeg")
    with pytest.raises(ProbeError) as exc:
        probe(bad)
    assert exc.value.filename == "bad.jpg"


def test_landscape_scenario(tmp_path: Path, make_image) -> None:
    src = make_image(tmp_path / "originals" / "nature" / "lake.jpg", (4000, 3000))
    dst = tmp_path / "publish" / "lake.jpg"

    result = process_image(src, dst, PipelineConfig(), category="nature")

    assert isinstance(result, ProcessingResult)
    assert result.resized_size == (2500, 1875)
    assert result.original_size == (4000, 3000)
    assert result.orientation is Orientation.HORIZONTAL
    assert result.aspect_ratio == "4:3"
    assert result.category == "nature"
    with Image.open(dst) as im:
        assert im.size == (2500, 1875)
        assert im.format == "JPEG"


def test_square_scenario_is_not_upscaled(tmp_path: Path, make_image) -> None:
    src = make_image(tmp_path / "sq.jpg", (1200, 1200))
    dst = tmp_path / "out" / "sq.jpg"

    result = process_image(src, dst, PipelineConfig())

    assert result.resized_size == (1200, 1200)
    assert result.orientation is Orientation.SQUARE
    assert result.aspect_ratio == "1:1"


def test_portrait_scenario(tmp_path: Path, make_image) -> None:
    src = make_image(tmp_path / "tall.jpg", (3000, 3600))
    dst = tmp_path / "out" / "tall.jpg"

    result = process_image(src, dst, PipelineConfig(watermark=False))

    assert result.resized_size == (2083, 2500)
    assert result.orientation is Orientation.VERTICAL
    with Image.open(dst) as im:
        assert im.size == (2083, 2500)


def test_png_with_alpha_is_published_as_jpeg(tmp_path: Path, make_image, small_config) -> None:
    src = make_image(tmp_path / "logo.png", (400, 100), fmt="PNG")
    dst = tmp_path / "out" / "logo.jpg"

    result = ImagePipeline(small_config).process(src, dst)

    assert result.ok
    assert result.filename == "logo.jpg"
    with Image.open(dst) as im:
        assert im.format == "JPEG"
        assert im.mode == "RGB"
        assert im.size == (200, 50)


def test_watermark_changes_output(tmp_path: Path, make_image, small_config) -> None:
    src = make_image(tmp_path / "plain.jpg", (200, 150), color=(0, 0, 0))
    marked = tmp_path / "marked.jpg"
    plain = tmp_path / "plain_out.jpg"

    process_image(src, marked, small_config)
    process_image(src, plain, small_config.replace(watermark=False))

    assert marked.read_bytes() != plain.read_bytes()


def test_corrupt_file_becomes_failure(tmp_path: Path, small_config, caplog) -> None:
    src = tmp_path / "broken.jpg"
    src.write_bytes(b"\x00" * 64)
    dst = tmp_path / "out" / "broken.jpg"

    with caplog.at_level(logging.ERROR, logger="photo_pipeline.pipeline"):
        result = process_image(src, dst, small_config, category="cars")

    assert isinstance(result, Failure)
    assert result.filename == "broken.jpg"
    assert result.stage == "probe"
    assert result.category == "cars"
    assert result.cause
    assert not dst.exists()
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "broken.jpg" in errors[0].getMessage()


def test_interrupted_publish_keeps_previous_destination(tmp_path: Path, make_image, small_config, monkeypatch) -> None:
    src = make_image(tmp_path / "photo.jpg", (300, 200))
    dst = tmp_path / "out" / "photo.jpg"
    dst.parent.mkdir()
    dst.write_bytes(b"previous published version")

    def interrupted(src_path, dst_path):
        assert Path(src_path).exists()
        raise OSError("simulated crash before rename")

    monkeypatch.setattr(pipeline_module.os, "replace", interrupted)
    result = process_image(src, dst, small_config)

    assert isinstance(result, Failure)
    assert result.stage == "publish"
    assert dst.read_bytes() == b"previous published version"
    assert not (tmp_path / "out" / "photo.jpg.tmp").exists()


def test_successful_publish_leaves_no_temp_file(tmp_path: Path, make_image, small_config) -> None:
    src = make_image(tmp_path / "photo.jpg", (300, 200))
    dst = tmp_path / "out" / "photo.jpg"

    process_image(src, dst, small_config)

    assert sorted(p.name for p in dst.parent.iterdir()) == ["photo.jpg"]


def test_backup_is_created_once(tmp_path: Path, make_image, small_config) -> None:
    src = make_image(tmp_path / "photo.jpg", (300, 200))
    original = src.read_bytes()
    config = small_config.replace(backup=True, max_dimension=None)

    first = process_image(src, src, config)
    second = process_image(src, src, config)

    assert first.ok and second.ok
    backup = tmp_path / "photo.jpg.backup"
    assert backup.read_bytes() == original
    assert src.read_bytes() != original


def test_rerun_is_deterministic(tmp_path: Path, make_image, small_config) -> None:
    src = make_image(tmp_path / "photo.jpg", (300, 200))
    dst = tmp_path / "out" / "photo.jpg"

    process_image(src, dst, small_config)
    first = dst.read_bytes()
    process_image(src, dst, small_config)

    assert dst.read_bytes() == first


def test_published_jpeg_carries_no_source_exif(tmp_path: Path, make_image) -> None:
    src = tmp_path / "phone.jpg"
    exif = Image.Exif()
    exif[0x0112] = 6
    exif[0x8825] = {1: "N", 2: (47.0, 22.0, 1.0)}
    Image.new("RGB", (4000, 3000), (30, 60, 90)).save(src, exif=exif.tobytes())
    with Image.open(src) as im:
        assert im.getexif().get(0x0112) == 6
    dst = tmp_path / "out" / "phone.jpg"

    result = process_image(src, dst, PipelineConfig())

    assert result.ok
    with Image.open(dst) as im:
        out_exif = im.getexif()
        assert "exif" not in im.info
    assert out_exif.get(0x0112) in (None, 1)
    assert 0x8825 not in out_exif
