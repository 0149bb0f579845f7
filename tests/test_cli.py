"""Tests for the command-line interface."""

import json

import numpy as np
import pytest

from bmp_dither.cli import main
from bmp_dither.config import ConfigError, DitherSettings
from bmp_dither.core.bitmap import read_bitmap, write_bitmap
from bmp_dither.core.pixels import PixelBuffer
from bmp_dither.core.quantize import DistanceMode


@pytest.fixture
def sample_bmp(tmp_path):
    ys, xs = np.mgrid[0:8, 0:12]
    arr = np.stack([xs * 20, ys * 30, np.full_like(xs, 128)], axis=2)
    path = tmp_path / "photo.bmp"
    write_bitmap(path, PixelBuffer.from_array(arr))
    return path


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("BMP_DITHER_PALETTE", "BMP_DITHER_DISTANCE", "BMP_DITHER_SERPENTINE", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        s = DitherSettings.from_env()
        assert s.palette == "black,white"
        assert s.distance == DistanceMode.EUCLIDEAN
        assert s.serpentine is False
        assert s.log_level == "WARNING"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BMP_DITHER_PALETTE", "red,blue")
        monkeypatch.setenv("BMP_DITHER_DISTANCE", "Manhattan")
        monkeypatch.setenv("BMP_DITHER_SERPENTINE", "yes")
        s = DitherSettings.from_env()
        assert s.palette == "red,blue"
        assert s.distance == DistanceMode.MANHATTAN
        assert s.serpentine is True

    @pytest.mark.parametrize(
        "name, value", [("BMP_DITHER_DISTANCE", "chebyshev"), ("LOG_LEVEL", "LOUD")]
    )
    def test_bad_env_value(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError, match=name):
            DitherSettings.from_env()


class TestConvert:
    def test_default_output_path(self, sample_bmp, capsys):
        main(["convert", str(sample_bmp)])
        output = sample_bmp.parent / "photo_dithered.bmp"
        assert output.exists()
        _, buf = read_bitmap(output)
        assert buf.colors() <= {(0, 0, 0), (255, 255, 255)}
        assert "Wrote" in capsys.readouterr().err

    def test_json_output(self, sample_bmp, tmp_path, capsys):
        output = tmp_path / "out.bmp"
        main([
            "convert", str(sample_bmp), "-o", str(output),
            "--palette", "black,white,#ff0000", "--distance", "manhattan",
            "--serpentine", "--json",
        ])
        doc = json.loads(capsys.readouterr().out)
        assert doc["status"] == "success"
        assert doc["output"] == str(output.resolve())
        assert doc["settings"]["palette"] == [[0, 0, 0], [255, 255, 255], [255, 0, 0]]
        assert doc["settings"]["distance"] == "manhattan"
        assert doc["settings"]["serpentine"] is True
        assert doc["metadata"]["width"] == 12
        assert doc["metadata"]["height"] == 8

    def test_bits_palette(self, sample_bmp, tmp_path):
        output = tmp_path / "out.bmp"
        main(["convert", str(sample_bmp), "-o", str(output), "--bits", "1"])
        _, buf = read_bitmap(output)
        assert all(c in (0, 255) for color in buf.colors() for c in color)

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["convert", str(tmp_path / "missing.bmp"), "--json"])
        assert exc.value.code == 1
        err = json.loads(capsys.readouterr().err)
        assert err["code"] == "FILE_NOT_FOUND"

    def test_invalid_palette(self, sample_bmp, tmp_path, capsys):
        output = tmp_path / "out.bmp"
        with pytest.raises(SystemExit):
            main(["convert", str(sample_bmp), "-o", str(output), "--palette", "chartreuse", "--json"])
        assert json.loads(capsys.readouterr().err)["code"] == "INVALID_PALETTE"
        assert not output.exists()

    def test_invalid_bitmap(self, tmp_path, capsys):
        src = tmp_path / "fake.bmp"
        src.write_bytes(b"GIF89a" + bytes(100))
        with pytest.raises(SystemExit):
            main(["convert", str(src), "--json"])
        assert json.loads(capsys.readouterr().err)["code"] == "INVALID_INPUT"

    def test_unsupported_bitmap(self, sample_bmp, tmp_path, capsys):
        data = bytearray(sample_bmp.read_bytes())
        data[28] = 32
        src = tmp_path / "deep.bmp"
        src.write_bytes(bytes(data))
        with pytest.raises(SystemExit):
            main(["convert", str(src)])
        assert "Unsupported bit depth" in capsys.readouterr().err


class TestInfo:
    def test_plain(self, sample_bmp, capsys):
        main(["info", str(sample_bmp)])
        out = capsys.readouterr().out
        assert "width: 12" in out
        assert "compression: RGB" in out

    def test_json(self, sample_bmp, capsys):
        main(["info", str(sample_bmp), "--json"])
        doc = json.loads(capsys.readouterr().out)
        assert doc["header"]["width"] == 12
        assert doc["header"]["height"] == 8
        assert doc["header"]["bits_per_pixel"] == 24


class TestBadEnvironment:
    def test_json_error(self, sample_bmp, monkeypatch, capsys):
        monkeypatch.setenv("BMP_DITHER_DISTANCE", "chebyshev")
        with pytest.raises(SystemExit) as exc:
            main(["info", str(sample_bmp), "--json"])
        assert exc.value.code == 1
        err = json.loads(capsys.readouterr().err)
        assert err["status"] == "error"
        assert err["code"] == "INVALID_INPUT"
        assert "BMP_DITHER_DISTANCE" in err["error"]

    def test_plain_error(self, sample_bmp, monkeypatch, capsys):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(SystemExit) as exc:
            main(["convert", str(sample_bmp)])
        assert exc.value.code == 1
        assert "LOG_LEVEL" in capsys.readouterr().err
        assert not (sample_bmp.parent / "photo_dithered.bmp").exists()
