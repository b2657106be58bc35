import json

import pytest

from freedeck_config.core.config_manager import ConfigManager, EditorSettings
from freedeck_config.core.errors import TruncatedInputError
from freedeck_config.core.image_processor import BACK_IMAGE
from freedeck_config.core.rows import ActionRecord


def test_new_profile_defaults():
    profile = ConfigManager().new_profile()
    assert (profile.width, profile.height) == (3, 2)
    assert profile.page_count == 1
    assert profile.get_row(0, 0) == ActionRecord.noop()
    assert profile.images[0] == BACK_IMAGE


def test_new_profile_pages_link_back_to_first():
    profile = ConfigManager().new_profile(4, 2, pages=3)
    assert profile.page_count == 3
    assert profile.get_row(1, 0) == ActionRecord.goto_page(0)
    assert profile.get_row(2, 0) == ActionRecord.goto_page(0)


def test_save_and_load_profile(tmp_path):
    manager = ConfigManager()
    profile = manager.new_profile(pages=2)
    path = tmp_path / "config.bin"

    manager.save_profile(profile, str(path))
    loaded = manager.load_profile(str(path))

    assert loaded.pages == profile.pages
    assert path.read_bytes()[:4] == bytes([3, 2, 13, 0])


def test_load_missing_profile(tmp_path):
    with pytest.raises(OSError):
        ConfigManager().load_profile(str(tmp_path / "missing.bin"))


def test_load_truncated_profile(tmp_path):
    path = tmp_path / "bad.bin"
    path.write_bytes(bytes([3, 2, 7, 0]))
    with pytest.raises(TruncatedInputError):
        ConfigManager().load_profile(str(path))


def test_custom_icon_size(tmp_path):
    manager = ConfigManager(EditorSettings(icon_width=16, icon_height=16))
    profile = manager.new_profile()
    path = tmp_path / "small.bin"
    manager.save_profile(profile, str(path))
    assert len(path.read_bytes()) == 4 + 6 * 8 + 6 * 32
    assert manager.load_profile(str(path)).images[1] == bytes(32)


def test_settings_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    manager = ConfigManager(EditorSettings(default_width=5, last_directory="/tmp"))
    manager.save_settings(str(path))

    other = ConfigManager()
    settings = other.load_settings(str(path))
    assert settings.default_width == 5
    assert settings.last_directory == "/tmp"
    assert settings.threshold == 128


def test_missing_settings_use_defaults(tmp_path):
    settings = ConfigManager().load_settings(str(tmp_path / "none.json"))
    assert settings == EditorSettings()


def test_newer_settings_version_rejected(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"version": 99}), encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigManager().load_settings(str(path))


def test_loaded_profile_keeps_icon_size(tmp_path):
    manager = ConfigManager(EditorSettings(icon_width=16, icon_height=16))
    path = tmp_path / "small.bin"
    manager.save_profile(manager.new_profile(), str(path))

    loaded = manager.load_profile(str(path))
    loaded.add_page(0)
    assert len(loaded.images[6]) == 16 * 16
    manager.save_profile(loaded, str(path))

    again = manager.load_profile(str(path))
    assert again.page_count == 2
    assert again.images[7] == bytes(32)


def test_explicit_zero_width_rejected():
    with pytest.raises(ValueError):
        ConfigManager().new_profile(width=0)
