"""Unit tests for ConfigManager."""

import pytest

from precision_lens.core.config_manager import ConfigManager, get_config_manager


CONFIG_TEXT = """\
# Precision Lens
click_policy = double
double_click_window_ms = 300   # trailing comment
bridge_url = "http://127.0.0.1:9000/analyze"
storage_key = 'last_capture'

not a setting
console_output = yes
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.txt"
    path.write_text(CONFIG_TEXT, encoding="utf-8")
    return path


class TestParsing:
    """Line parsing and file reading."""

    @pytest.mark.asyncio
    async def test_read_config(self, config_file):
        config = await ConfigManager().read_config_async(config_file)
        assert config == {
            "click_policy": "double",
            "double_click_window_ms": "300",
            "bridge_url": "http://127.0.0.1:9000/analyze",
            "storage_key": "last_capture",
            "console_output": "yes",
        }

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        assert await ConfigManager().read_config_async(tmp_path / "nope.txt") == {}

    def test_singleton(self):
        assert get_config_manager() is get_config_manager()


class TestTypedAccessors:
    """get_str / get_bool / get_int / get_float."""

    def test_typed_values(self):
        manager = ConfigManager()
        config = {"a": "12", "b": "0.5", "c": "on", "d": "text"}
        assert manager.get_int(config, "a") == 12
        assert manager.get_float(config, "b") == 0.5
        assert manager.get_bool(config, "c") is True
        assert manager.get_str(config, "d") == "text"

    def test_defaults_for_missing_and_malformed(self):
        manager = ConfigManager()
        config = {"a": "twelve", "b": "half"}
        assert manager.get_int(config, "a", default=3) == 3
        assert manager.get_float(config, "b", default=1.5) == 1.5
        assert manager.get_bool(config, "missing", default=True) is True
        assert manager.get_str(config, "missing", default="x") == "x"
