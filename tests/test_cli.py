from PIL import Image

from freedeck_config.cli import main
from freedeck_config.core.config_manager import ConfigManager
from freedeck_config.core.rows import ActionRecord


def test_new_and_info(tmp_path, capsys):
    path = str(tmp_path / "config.bin")
    assert main(["new", path, "--pages", "2"]) == 0
    assert main(["info", path]) == 0
    out = capsys.readouterr().out
    assert "Grid: 3x2" in out
    assert "Pages: 2" in out
    assert "Page 0" in out


def test_page_editing(tmp_path):
    path = str(tmp_path / "config.bin")
    main(["new", path, "--pages", "3"])
    assert main(["set-action", path, "1", "3", "--goto", "2"]) == 0
    assert main(["delete-page", path, "0"]) == 0
    assert main(["add-page", path, "--back", "1"]) == 0

    profile = ConfigManager().load_profile(path)
    assert profile.page_count == 3
    assert profile.get_row(0, 3) == ActionRecord.goto_page(1)
    assert profile.get_row(2, 0) == ActionRecord.goto_page(1)


def test_set_icon(tmp_path):
    path = str(tmp_path / "config.bin")
    image = tmp_path / "icon.png"
    Image.new("L", (32, 32), 255).save(image)
    main(["new", path])
    assert main(["set-icon", path, "0", "1", str(image)]) == 0
    profile = ConfigManager().load_profile(path)
    assert profile.images[1] == bytes([0xFF] * 128)


def test_errors_return_one(tmp_path, capsys):
    path = str(tmp_path / "config.bin")
    main(["new", path])
    assert main(["delete-page", path, "5"]) == 1
    assert main(["info", str(tmp_path / "missing.bin")]) == 1
    assert "Error:" in capsys.readouterr().err
