import io
import json
import zipfile

from PIL import Image

import app


def _write_png(path, color, size=(3, 2)):
    Image.new("RGBA", size, color).save(path)
    return path


def _colors(data: bytes):
    with Image.open(io.BytesIO(data)) as image:
        data = image.convert("RGBA").tobytes()
    return {tuple(data[i : i + 4]) for i in range(0, len(data), 4)}


def test_single_image_exported_under_original_name(qapp, tmp_path):
    source = _write_png(tmp_path / "red.png", (255, 0, 0, 255))
    out = tmp_path / "out"

    code = app.main(
        [str(source), "-r", "#FF0000:#00FF00:10", "--config", str(tmp_path / "c.json"), "-o", str(out)]
    )

    assert code == 0
    assert _colors((out / "red.png").read_bytes()) == {(0, 255, 0, 255)}
    # Source file is untouched
    assert _colors(source.read_bytes()) == {(255, 0, 0, 255)}


def test_several_images_exported_as_zip(qapp, tmp_path):
    first = _write_png(tmp_path / "one.png", (255, 255, 255, 255))
    second = _write_png(tmp_path / "two.png", (0, 0, 255, 255))
    out = tmp_path / "out"

    code = app.main(
        [
            str(first),
            str(second),
            "-r",
            "#FFFFFF:transparent",
            "--config",
            str(tmp_path / "c.json"),
            "-o",
            str(out),
            "--archive-name",
            "result.zip",
        ]
    )

    assert code == 0
    with zipfile.ZipFile(out / "result.zip") as zf:
        assert zf.namelist() == ["one.png", "two.png"]
        assert _colors(zf.read("one.png")) == {(0, 0, 0, 0)}
        assert _colors(zf.read("two.png")) == {(0, 0, 255, 255)}


def test_rules_from_config_and_save(qapp, tmp_path):
    config_path = tmp_path / "c.json"
    source = _write_png(tmp_path / "white.png", (255, 255, 255, 200))
    out = tmp_path / "out"

    # No --rule: the default white-to-black rule applies, alpha kept
    assert app.main([str(source), "--config", str(config_path), "-o", str(out)]) == 0
    assert _colors((out / "white.png").read_bytes()) == {(0, 0, 0, 200)}

    app.main(
        [str(source), "-r", "#FFFFFF:#FF0000:5", "--save-rules", "--config", str(config_path), "-o", str(out)]
    )
    saved = json.loads(config_path.read_text())
    assert saved["rules"] == [{"sourceColor": "#FFFFFF", "targetColor": "#FF0000", "tolerance": 5}]


def test_unreadable_image_is_skipped(qapp, tmp_path, capsys):
    good = _write_png(tmp_path / "good.png", (1, 2, 3, 255))
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    out = tmp_path / "out"

    code = app.main([str(bad), str(good), "--config", str(tmp_path / "c.json"), "-o", str(out)])

    assert code == 0
    assert (out / "good.png").exists()
    assert "✗ bad.png" in capsys.readouterr().out


def test_nothing_to_export(qapp, tmp_path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"garbage")

    code = app.main([str(bad), "--config", str(tmp_path / "c.json"), "-o", str(tmp_path)])

    assert code == 1
    assert "Nothing to export" in capsys.readouterr().out


def test_status_line_uses_singular_for_one(qapp, tmp_path, capsys):
    source = _write_png(tmp_path / "one.png", (1, 2, 3, 255))

    app.main([str(source), "-r", "#FF0000:#00FF00", "--config", str(tmp_path / "c.json"), "-o", str(tmp_path / "out")])

    assert "Processing 1 image with 1 rule..." in capsys.readouterr().out
