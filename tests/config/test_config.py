"""Tests for the YAML configuration layer (fiscal_config)."""

from pathlib import Path

import pytest
import yaml

from fiscal_config import CONFIG_PATH_ENV, LedgerConfig, get_active_config
from fiscal_config.bridges import init_engine_from_config
from fiscal_config.loader import compute_checksum, load_config, parse_config
from fiscal_kernel.db.engine import get_engine, reset_engine


def _write(tmp_path: Path, data: dict, name: str = "ledger.yaml") -> Path:
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultSet:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)

        config = get_active_config()

        assert isinstance(config, LedgerConfig)
        assert config.config_id == "default"
        assert config.money.decimal_places == 2
        assert config.retained_earnings.code_prefix == "33"
        assert config.inventory.carry_forward_statuses == ("available",)
        assert config.descriptions.closing_entry == "Closing entry for fiscal year {fiscal_year_name}"
        assert config.database.url == "sqlite://"
        assert config.source_path.endswith("default.yaml")
        assert len(config.checksum) == 64

    def test_config_is_frozen(self):
        config = get_active_config()

        with pytest.raises(AttributeError):
            config.money.decimal_places = 4


class TestResolution:

    def test_explicit_path(self, tmp_path):
        path = _write(tmp_path, {"config_id": "explicit", "money": {"decimal_places": 3}})

        config = get_active_config(path)

        assert config.config_id == "explicit"
        assert config.money.decimal_places == 3
        assert config.retained_earnings.code_prefix == "33"

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = _write(tmp_path, {"config_id": "from-env"})
        monkeypatch.setenv(CONFIG_PATH_ENV, str(path))

        assert get_active_config().config_id == "from-env"

    def test_explicit_path_beats_environment(self, tmp_path, monkeypatch):
        env_path = _write(tmp_path, {"config_id": "from-env"}, "env.yaml")
        arg_path = _write(tmp_path, {"config_id": "from-arg"}, "arg.yaml")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(env_path))

        assert get_active_config(arg_path).config_id == "from-arg"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestParsing:

    def test_prefix_can_be_disabled(self):
        config = parse_config({"retained_earnings": {"code_prefix": None}})

        assert config.retained_earnings.code_prefix is None

    def test_single_status_string(self):
        config = parse_config({"inventory": {"carry_forward_statuses": "reserved"}})

        assert config.inventory.carry_forward_statuses == ("reserved",)

    def test_negative_precision_rejected(self):
        with pytest.raises(ValueError):
            parse_config({"money": {"decimal_places": -1}})

    def test_empty_statuses_rejected(self):
        with pytest.raises(ValueError):
            parse_config({"inventory": {"carry_forward_statuses": []}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError):
            parse_config({"money": [2]})

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError):
            load_config(path)

    def test_partial_descriptions(self):
        config = parse_config({"descriptions": {"net_profit": "Profit"}})

        assert config.descriptions.net_profit == "Profit"
        assert config.descriptions.net_loss == "Net loss for the year"


class TestChecksum:

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_content_change_detected(self):
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


def test_config_trace_logged(captured_logs):
    config = get_active_config()

    traces = [r for r in captured_logs() if r["message"] == "FISCAL_CONFIG_TRACE"]
    assert traces
    assert traces[-1]["checksum"] == config.checksum
    assert traces[-1]["config_id"] == "default"


class TestEngineFromConfig:

    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        reset_engine()

    def test_engine_follows_database_section(self, tmp_path):
        db_path = tmp_path / "ledger.db"
        config = parse_config({"database": {"url": f"sqlite:///{db_path}", "echo": True}})

        engine = init_engine_from_config(config)

        assert engine is get_engine()
        assert engine.dialect.name == "sqlite"
        assert engine.url.database == str(db_path)
        assert engine.echo is True

    def test_explicit_url_overrides_section(self, tmp_path):
        config = parse_config({"database": {"url": f"sqlite:///{tmp_path / 'unused.db'}"}})

        engine = init_engine_from_config(config, database_url="sqlite://")

        assert engine.url.database in (None, "")
        assert engine.echo is False

    def test_pool_size_passed_through(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "fiscal_config.bridges.init_engine_from_url",
            lambda url, **kwargs: calls.append((url, kwargs)),
        )
        config = parse_config(
            {"database": {"url": "postgresql://ledger@db/fiscal", "pool_size": 5}}
        )

        init_engine_from_config(config)

        assert calls == [("postgresql://ledger@db/fiscal", {"echo": False, "pool_size": 5})]
