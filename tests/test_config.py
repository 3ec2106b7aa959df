"""Tests for application paths and ConfigManager."""

import json

from podterm.core.config import AppPaths, ConfigManager


class TestAppPaths:
    def test_explicit_root(self, tmp_path) -> None:
        paths = AppPaths.create(tmp_path / "home")
        assert paths.root.is_dir()
        assert paths.cache_dir.is_dir()
        assert paths.subscriptions_path == tmp_path / "home" / "subscriptions.json"
        assert paths.state_path == tmp_path / "home" / "state.json"

    def test_env_override(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("PODTERM_HOME", str(tmp_path / "env-home"))
        assert AppPaths.create().root == tmp_path / "env-home"

    def test_xdg_fallback(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("PODTERM_HOME", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        assert AppPaths.create().root == tmp_path / "xdg" / "podterm"


class TestConfigManager:
    def test_defaults_written_on_first_run(self, paths) -> None:
        config = ConfigManager(paths)
        assert paths.config_path.exists()
        assert paths.keybindings_path.exists()
        assert config.get("ui.page_size") == 15
        assert config.get("playback.seek_seconds") == 15

    def test_get_missing_key_returns_default(self, config) -> None:
        assert config.get("ui.nope", "fallback") == "fallback"
        assert config.get("ui.page_size.deeper") is None

    def test_set_persists(self, paths, config) -> None:
        config.set("ui.theme", "amber")
        config.set("new.section.value", 3)

        reloaded = ConfigManager(paths)
        assert reloaded.get("ui.theme") == "amber"
        assert reloaded.get("new.section.value") == 3

    def test_partial_file_is_merged_with_defaults(self, paths) -> None:
        paths.config_path.write_text(json.dumps({"ui": {"page_size": 5}}), encoding="utf-8")
        config = ConfigManager(paths)
        assert config.get("ui.page_size") == 5
        assert config.get("ui.menu_page_size") == 10
        assert config.get("download.timeout_seconds") == 1800

    def test_unreadable_file_falls_back_to_defaults(self, paths) -> None:
        paths.config_path.write_text("[broken", encoding="utf-8")
        paths.keybindings_path.write_text('"not an object"', encoding="utf-8")
        config = ConfigManager(paths)
        assert config.get("ui.page_size") == 15
        assert config.get_action_for_key("p") == "play_pause"

    def test_keybinding_lookup(self, config) -> None:
        assert config.get_action_for_key(" ") == "play_pause"
        assert config.get_action_for_key("S") == "stop"
        assert config.get_action_for_key("right") == "seek_forward"
        assert config.get_action_for_key("q") is None
        assert config.get_keys_for_action("seek_backward") == ["left"]
        assert config.get_keys_for_action("missing") == []

    def test_custom_keybindings(self, paths) -> None:
        paths.keybindings_path.write_text(json.dumps({"stop": "x"}), encoding="utf-8")
        config = ConfigManager(paths)
        assert config.get_action_for_key("x") == "stop"
        assert config.get_action_for_key("s") is None
        assert config.get_action_for_key("p") == "play_pause"
