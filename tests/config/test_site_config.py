"""
Tests for site configuration loading.

Covers:
- Packaged default site
- Resolution order: argument, environment variable, packaged default
- Parse failures wrapped in InvalidConfigError
- FUEL_CONFIG_TRACE emission
"""

from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from fuel_config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    get_active_config,
    resolve_config_path,
)
from fuel_config.loader import compute_checksum, load_site_config, parse_site_config
from fuel_kernel.domain.values import FuelType, MeterType
from fuel_kernel.exceptions import InvalidConfigError


def _site_dict() -> dict:
    return {
        "site_id": "north-01",
        "name": "North Depot",
        "prices": {"ADO": "1.90", "ULP": 2, "ZOOM": "2.25"},
        "tanks": [
            {"id": "t-ado", "fuel_type": "ADO", "capacity": 20000, "current_volume": 9000},
        ],
        "meters": [
            {"id": "m-ado-1", "type": "PUMP", "last_reading": 100},
        ],
    }


def _write(tmp_path: Path, data: dict, name: str = "site.yaml") -> Path:
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultSite:
    def test_loads(self):
        config = load_site_config(DEFAULT_CONFIG_PATH)

        assert config.site_id == "depot-01"
        assert config.prices[FuelType.ADO] == Decimal("1.85")
        assert config.prices[FuelType.ULP] == Decimal("1.92")
        assert config.prices[FuelType.ZOOM] == Decimal("2.10")
        assert config.variance_alert_threshold == Decimal("50")
        assert [t.id for t in config.tanks] == ["t55-ado", "t30-ulp", "t30-zoom"]
        assert config.meter("m-gantry-01").type == MeterType.GANTRY
        assert config.tank("t55-ado").current_volume == Decimal("42000")
        assert config.insight.endpoint is None

    def test_lookup_unknown(self):
        config = load_site_config(DEFAULT_CONFIG_PATH)
        assert config.tank("nope") is None
        assert config.meter("nope") is None

    def test_prices_read_only(self):
        config = load_site_config(DEFAULT_CONFIG_PATH)
        with pytest.raises(TypeError):
            config.prices[FuelType.ADO] = Decimal("0")


class TestParseSiteConfig:
    def test_defaults_applied(self):
        config = parse_site_config(_site_dict())

        assert config.currency == "USD"
        assert config.tanks[0].name == "t-ado"
        assert config.insight.max_records == 3
        assert config.checksum == compute_checksum(_site_dict())

    def test_insight_block(self):
        data = _site_dict()
        data["insight"] = {"endpoint": "https://insight.example/v1", "timeout_seconds": 5}
        config = parse_site_config(data)

        assert config.insight.endpoint == "https://insight.example/v1"
        assert config.insight.timeout_seconds == 5.0
        assert config.insight.model == "default"

    def test_missing_key(self):
        data = _site_dict()
        del data["tanks"]

        with pytest.raises(InvalidConfigError) as exc_info:
            parse_site_config(data, source="north.yaml")
        assert exc_info.value.source == "north.yaml"
        assert "tanks" in exc_info.value.reason

    def test_missing_price(self):
        data = _site_dict()
        del data["prices"]["ZOOM"]

        with pytest.raises(InvalidConfigError, match="ZOOM"):
            parse_site_config(data)

    def test_unknown_fuel_type(self):
        data = _site_dict()
        data["tanks"][0]["fuel_type"] = "KEROSENE"

        with pytest.raises(InvalidConfigError):
            parse_site_config(data)

    def test_volume_over_capacity(self):
        data = _site_dict()
        data["tanks"][0]["current_volume"] = 25000

        with pytest.raises(InvalidConfigError, match="outside"):
            parse_site_config(data)

    def test_duplicate_meter_ids(self):
        data = _site_dict()
        data["meters"].append({"id": "m-ado-1", "type": "DRUM"})

        with pytest.raises(InvalidConfigError, match="duplicate meter"):
            parse_site_config(data)

    def test_checksum_is_order_independent(self):
        a = _site_dict()
        b = dict(reversed(list(_site_dict().items())))
        assert compute_checksum(a) == compute_checksum(b)


class TestActiveConfig:
    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "other.yaml"))
        path = _write(tmp_path, _site_dict())

        assert resolve_config_path(path) == path
        assert get_active_config(path).site_id == "north-01"

    def test_env_var(self, tmp_path, monkeypatch):
        path = _write(tmp_path, _site_dict())
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert get_active_config().site_id == "north-01"

    def test_packaged_default(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        assert resolve_config_path() == DEFAULT_CONFIG_PATH
        assert get_active_config().site_id == "depot-01"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_trace_logged(self, tmp_path, captured_logs):
        path = _write(tmp_path, _site_dict())
        config = get_active_config(path)

        trace = next(r for r in captured_logs() if r["message"] == "FUEL_CONFIG_TRACE")
        assert trace["site_id"] == "north-01"
        assert trace["source"] == str(path)
        assert trace["checksum"] == config.checksum
        assert trace["tank_count"] == 1
