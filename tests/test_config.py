"""Tests de configuración: entorno, parsing y validación."""

import dataclasses
import os
from datetime import datetime, timezone

import pytest

from common.config import get_settings
from collector.aligner import AlignmentPolicy
from collector.config import (
    DEFAULT_METRICS,
    CollectorConfig,
    parse_duration,
    parse_list,
    parse_timestamp,
)
from collector.domain.state import CollectionMode
from collector.domain.time_range import validate_interval
from collector.errors import ConfigError
from collector.scheduler import initial_state

_ENV_VARS = (
    "COLLECTOR_PERIOD", "COLLECTOR_INTERVAL", "COLLECTOR_RESOURCES", "COLLECTOR_METRICS",
    "COLLECTOR_BACKFILL_DATE", "AWS_REGION", "COLLECTOR_NAMESPACE", "COLLECTOR_DIMENSION",
    "COLLECTOR_SINK", "REDIS_URL", "COLLECTOR_STREAM", "COLLECTOR_STREAM_MAXLEN",
    "COLLECTOR_WORKERS", "COLLECTOR_ALIGNMENT", "COLLECTOR_STATUS_PORT", "COLLECTOR_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # copia aislada: load_dotenv escribe directamente en os.environ
    monkeypatch.setattr(os, "environ", {k: v for k, v in os.environ.items() if k not in _ENV_VARS})
    monkeypatch.setenv("COLLECTOR_ENV_FILE", str(tmp_path / "missing.env"))
    return monkeypatch


class TestParseDuration:

    @pytest.mark.parametrize("text,seconds", [
        ("300s", 300.0),
        ("5m", 300.0),
        ("1h30m", 5400.0),
        ("1.5h", 5400.0),
        ("500ms", 0.5),
        ("45", 45.0),
    ])
    def test_valid(self, text, seconds):
        assert parse_duration(text) == seconds

    @pytest.mark.parametrize("text", ["", "abc", "5x", "-5s", "0s", "10s junk"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            parse_duration(text)


class TestParseTimestamp:

    def test_zulu(self):
        assert parse_timestamp("2024-01-01T00:00:00.000Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-01-01T06:00:00") == datetime(2024, 1, 1, 6, tzinfo=timezone.utc)

    def test_offset_converted(self):
        assert parse_timestamp("2024-01-01T02:00:00+02:00") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_invalid(self):
        with pytest.raises(ConfigError):
            parse_timestamp("yesterday")


class TestValidateInterval:

    @pytest.mark.parametrize("interval", [60, 120, 300, 3600])
    def test_valid(self, interval):
        assert validate_interval(interval) == interval

    @pytest.mark.parametrize("interval", [0, -60, 30, 90, 61, True, 60.0])
    def test_invalid(self, interval):
        with pytest.raises(ConfigError):
            validate_interval(interval)


class TestCollectorConfig:

    def test_defaults_from_env(self, clean_env):
        clean_env.setenv("AWS_REGION", "eu-west-1")

        cfg = CollectorConfig.from_settings(get_settings())

        assert cfg.region == "eu-west-1"
        assert cfg.period_seconds == 300.0
        assert cfg.interval == 60
        assert cfg.resources == ()
        assert cfg.metrics == DEFAULT_METRICS
        assert cfg.backfill_date is None
        assert cfg.backfill is False
        assert cfg.sink == "redis"
        assert cfg.alignment is AlignmentPolicy.TRUNCATE
        assert cfg.status_port == 0

    def test_full_env(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        clean_env.setenv("COLLECTOR_PERIOD", "1m")
        clean_env.setenv("COLLECTOR_INTERVAL", "300")
        clean_env.setenv("COLLECTOR_RESOURCES", "fn-a, fn-b,")
        clean_env.setenv("COLLECTOR_METRICS", "Invocations,Errors")
        clean_env.setenv("COLLECTOR_BACKFILL_DATE", "2024-01-01T00:00:00Z")
        clean_env.setenv("COLLECTOR_SINK", "memory")
        clean_env.setenv("COLLECTOR_WORKERS", "4")
        clean_env.setenv("COLLECTOR_ALIGNMENT", "STRICT")

        cfg = CollectorConfig.from_settings(get_settings())

        assert cfg.period_seconds == 60.0
        assert cfg.interval == 300
        assert cfg.resources == ("fn-a", "fn-b")
        assert cfg.metrics == ("Invocations", "Errors")
        assert cfg.backfill_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert cfg.sink == "memory"
        assert cfg.workers == 4
        assert cfg.alignment is AlignmentPolicy.STRICT

    def test_env_file_loaded(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("AWS_REGION=ap-south-1\nCOLLECTOR_INTERVAL=120\n")
        clean_env.setenv("COLLECTOR_ENV_FILE", str(env_file))

        cfg = CollectorConfig.from_settings(get_settings())

        assert cfg.region == "ap-south-1"
        assert cfg.interval == 120

    def test_real_env_wins_over_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("AWS_REGION=ap-south-1\n")
        clean_env.setenv("COLLECTOR_ENV_FILE", str(env_file))
        clean_env.setenv("AWS_REGION", "us-west-2")

        assert CollectorConfig.from_settings(get_settings()).region == "us-west-2"

    def test_missing_region(self, clean_env):
        with pytest.raises(ConfigError, match="region"):
            CollectorConfig.from_settings(get_settings())

    def test_interval_not_multiple_of_60(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        clean_env.setenv("COLLECTOR_INTERVAL", "90")
        with pytest.raises(ConfigError, match="multiple of 60"):
            CollectorConfig.from_settings(get_settings())

    @pytest.mark.parametrize("name,value", [
        ("COLLECTOR_INTERVAL", "sixty"),
        ("COLLECTOR_PERIOD", "soon"),
        ("COLLECTOR_SINK", "kafka"),
        ("COLLECTOR_WORKERS", "0"),
        ("COLLECTOR_ALIGNMENT", "loose"),
        ("COLLECTOR_STATUS_PORT", "70000"),
        ("COLLECTOR_METRICS", "Errors,Errors"),
        ("COLLECTOR_BACKFILL_DATE", "not-a-date"),
        ("COLLECTOR_LOG_LEVEL", "FOO"),
    ])
    def test_invalid_values(self, clean_env, name, value):
        clean_env.setenv("AWS_REGION", "us-east-1")
        clean_env.setenv(name, value)
        with pytest.raises(ConfigError):
            CollectorConfig.from_settings(get_settings())

    def test_overrides_take_precedence_and_are_validated(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        settings = get_settings()

        cfg = CollectorConfig.from_settings(settings, interval=120, region=None, workers=2)
        assert cfg.interval == 120
        assert cfg.region == "us-east-1"
        assert cfg.workers == 2

        with pytest.raises(ConfigError):
            CollectorConfig.from_settings(settings, interval=45)

    def test_invalid_env_period_ignored_when_overridden(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        clean_env.setenv("COLLECTOR_PERIOD", "soon")

        cfg = CollectorConfig.from_settings(get_settings(), period_seconds=120.0)

        assert cfg.period_seconds == 120.0

    @pytest.mark.parametrize("value", ["0001-01-01T00:00:00Z", "0001-01-01T00:00:00"])
    def test_zero_backfill_date_means_periodic(self, clean_env, value):
        clean_env.setenv("AWS_REGION", "us-east-1")
        clean_env.setenv("COLLECTOR_BACKFILL_DATE", value)

        cfg = CollectorConfig.from_settings(get_settings())

        assert cfg.backfill_date is None
        assert cfg.backfill is False
        state = initial_state(("fn-a",), cfg.metrics, cfg.interval, backfill_start=cfg.backfill_date)
        assert state.mode is CollectionMode.PERIODIC

    def test_zero_backfill_date_override(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        zero = datetime(1, 1, 1, tzinfo=timezone.utc)

        assert CollectorConfig.from_settings(get_settings(), backfill_date=zero).backfill_date is None

    def test_log_level_normalized(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        clean_env.setenv("COLLECTOR_LOG_LEVEL", " debug ")

        assert CollectorConfig.from_settings(get_settings()).log_level == "DEBUG"

    def test_frozen(self, clean_env):
        clean_env.setenv("AWS_REGION", "us-east-1")
        cfg = CollectorConfig.from_settings(get_settings())
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.interval = 120


def test_parse_list():
    assert parse_list(" a ,b,, c ") == ("a", "b", "c")
    assert parse_list("") == ()
