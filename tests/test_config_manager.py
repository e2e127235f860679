import json

from config_manager import ConfigManager
from models import DEFAULT_ARCHIVE_NAME, TRANSPARENT, AppConfig, ReplacementRule


def test_missing_file_gives_defaults(tmp_path):
    config = ConfigManager(tmp_path / "missing.json").load()

    assert config.rules == [ReplacementRule("#FFFFFF", "#000000", 15)]
    assert config.archive_name == DEFAULT_ARCHIVE_NAME


def test_save_and_load(tmp_path):
    manager = ConfigManager(tmp_path / "config.json")
    config = AppConfig(
        rules=[
            ReplacementRule("#FF0000", TRANSPARENT, 25),
            ReplacementRule(TRANSPARENT, "#00FF00", 0),
        ],
        output_dir="exports",
        archive_name="batch.zip",
    )

    ok, error = manager.save(config)

    assert ok and error is None
    assert manager.load() == config
    saved = json.loads((tmp_path / "config.json").read_text())
    assert saved["rules"][0] == {
        "sourceColor": "#FF0000",
        "targetColor": TRANSPARENT,
        "tolerance": 25,
    }


def test_partial_file_falls_back_per_field(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"archive_name": "x.zip"}))

    config = ConfigManager(path).load()

    assert config.archive_name == "x.zip"
    assert config.rules == AppConfig().rules


def test_corrupt_file_gives_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    assert ConfigManager(path).load() == AppConfig()
    assert "Could not load config file" in caplog.text


def test_save_failure_is_reported(tmp_path):
    ok, error = ConfigManager(tmp_path / "no" / "such" / "dir.json").save(AppConfig())
    assert not ok
    assert error
