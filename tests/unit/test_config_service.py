from entrytitles import config as config_module
from entrytitles.services.config_service import apply_config_updates, get_config_snapshot


def _prepare_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.json")


def test_apply_config_updates_reports_changes(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)

    result = apply_config_updates(use_caching=False, state_dir="/data/state")

    assert result.changed is True
    assert result.use_caching_set is True
    assert result.state_dir_set is True
    assert result.titles_cachefile_set is False
    snapshot = get_config_snapshot()
    assert snapshot.use_caching is False
    assert snapshot.state_dir == "/data/state"


def test_apply_config_updates_clears_cachefile(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)
    apply_config_updates(titles_cachefile="/tmp/titles.dat")
    assert get_config_snapshot().titles_cachefile == "/tmp/titles.dat"

    result = apply_config_updates(clear_titles_cachefile=True)

    assert result.titles_cachefile_cleared is True
    assert get_config_snapshot().titles_cachefile is None


def test_apply_config_updates_without_arguments(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)

    result = apply_config_updates()

    assert result.changed is False
    assert not (tmp_path / "config" / "config.json").exists()
