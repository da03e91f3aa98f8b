import pytest

from ferium.config import Config, FeriumError, Modpack, ModpackIdentifier
from ferium.modpack import check_output_directory, configure, delete, format_info, switch


@pytest.fixture(autouse=True)
def no_colour(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


def feed(monkeypatch, *answers):
    remaining = iter(answers)
    asked = []

    def fake_input(prompt=""):
        asked.append(prompt)
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)
    return asked


def make_config(tmp_path, active=0):
    return Config(
        active_modpack=active,
        modpacks=[
            Modpack("CF Pack", ModpackIdentifier(ModpackIdentifier.CURSEFORGE, 452013), tmp_path, False),
            Modpack("MR Fabulously Optimised", ModpackIdentifier(ModpackIdentifier.MODRINTH, "1KVo5zza"), tmp_path, True),
            Modpack("Third", ModpackIdentifier(ModpackIdentifier.MODRINTH, "abcdefgh"), tmp_path, False),
        ],
    )


def test_check_relative_rejected():
    with pytest.raises(FeriumError, match="not absolute"):
        check_output_directory("relative/dir")


def test_check_empty_directory_asks_nothing(monkeypatch, tmp_path):
    asked = feed(monkeypatch)
    (tmp_path / "mods").mkdir()
    (tmp_path / "mods" / ".DS_Store").write_text("")
    result = check_output_directory(tmp_path)
    assert result is None
    assert asked == []


def test_check_declined_backup(monkeypatch, tmp_path):
    asked = feed(monkeypatch, "n")
    (tmp_path / "mods").mkdir()
    (tmp_path / "mods" / "a.jar").write_text("jar")
    result = check_output_directory(tmp_path)
    assert result is None
    assert len(asked) == 1
    assert sorted(p.name for p in tmp_path.iterdir()) == ["mods"]


def test_check_makes_backup(monkeypatch, tmp_path):
    out = tmp_path / "out"
    (out / "resourcepacks").mkdir(parents=True)
    (out / "resourcepacks" / "pack.zip").write_text("zip")
    backup = tmp_path / "backup"
    feed(monkeypatch, "y", str(backup))
    result = check_output_directory(out)
    assert result is None
    assert (backup / "resourcepacks" / "pack.zip").read_text() == "zip"


def test_check_backup_without_folder(monkeypatch, tmp_path):
    feed(monkeypatch, "y")
    (tmp_path / "mods").mkdir()
    (tmp_path / "mods" / "a.jar").write_text("jar")
    with pytest.raises(FeriumError):
        check_output_directory(tmp_path)


def test_configure_with_arguments(tmp_path):
    modpack = make_config(tmp_path / "x").modpacks[0]
    configure(modpack, tmp_path, True)
    assert modpack.output_dir == tmp_path
    assert modpack.install_overrides is True


def test_configure_relative_dir_rejected(tmp_path):
    modpack = make_config(tmp_path).modpacks[0]
    with pytest.raises(FeriumError):
        configure(modpack, "relative", True)
    assert modpack.output_dir == tmp_path


def test_configure_interactive(monkeypatch, tmp_path):
    modpack = make_config(tmp_path).modpacks[1]
    feed(monkeypatch, "", "n")
    configure(modpack)
    assert modpack.output_dir == tmp_path
    assert modpack.install_overrides is False


def test_configure_cancel_keeps_settings(monkeypatch, tmp_path):
    modpack = make_config(tmp_path).modpacks[1]
    feed(monkeypatch)
    configure(modpack)
    assert modpack.output_dir == tmp_path
    assert modpack.install_overrides is True


def test_delete_before_active(tmp_path):
    config = make_config(tmp_path, active=2)
    delete(config, "cf pack")
    assert [m.name for m in config.modpacks] == ["MR Fabulously Optimised", "Third"]
    assert config.active_modpack == 1


def test_delete_active_switches_by_name(tmp_path):
    config = make_config(tmp_path, active=0)
    delete(config, "CF Pack", "third")
    assert config.modpacks[config.active_modpack].name == "Third"


def test_delete_active_with_one_left(tmp_path):
    config = make_config(tmp_path, active=1)
    del config.modpacks[2]
    delete(config, "MR Fabulously Optimised")
    assert config.active_modpack == 0
    assert len(config.modpacks) == 1


def test_delete_unknown(tmp_path):
    config = make_config(tmp_path)
    with pytest.raises(FeriumError):
        delete(config, "missing")
    assert len(config.modpacks) == 3


def test_delete_interactive_cancel(monkeypatch, tmp_path):
    config = make_config(tmp_path)
    feed(monkeypatch)
    delete(config)
    assert len(config.modpacks) == 3


def test_switch_single_modpack(tmp_path):
    config = make_config(tmp_path, active=5)
    del config.modpacks[1:]
    with pytest.raises(FeriumError):
        switch(config, "CF Pack")
    assert config.active_modpack == 0


def test_switch_by_name(tmp_path):
    config = make_config(tmp_path)
    switch(config, "mr fabulously optimised")
    assert config.active_modpack == 1


def test_switch_unknown(tmp_path):
    config = make_config(tmp_path)
    with pytest.raises(FeriumError):
        switch(config, "missing")
    assert config.active_modpack == 0


def test_switch_interactive(monkeypatch, tmp_path):
    config = make_config(tmp_path)
    feed(monkeypatch, "3")
    switch(config)
    assert config.active_modpack == 2


def test_format_info(tmp_path):
    config = make_config(tmp_path)
    active = format_info(config.modpacks[1], True)
    inactive = format_info(config.modpacks[0], False)
    assert active.splitlines()[0] == "MR Fabulously Optimised *"
    assert "1KVo5zza" in active
    assert str(tmp_path) in active
    assert inactive.splitlines()[0] == "CF Pack"
    assert "452013" in inactive
    assert "Install Overrides: true" in active