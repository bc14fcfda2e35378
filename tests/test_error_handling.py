"""Test error handling functionality.

Verifies that custom exceptions carry the expected status codes and details,
that configuration is validated, and that the HTTP layer turns errors into
the uniform error body.
"""
import math

import pytest
from fastapi.testclient import TestClient

from core import config
from core.exceptions import (
    ConfigurationError,
    InputRangeError,
    InsufficientDataError,
    MissingPrerequisiteError,
    NotFoundError,
    ValidationError,
    WeatherLookupError,
)
from main import app
from services.weather_provider import OpenMeteoWeatherProvider


def test_exception_classes_have_proper_attributes():
    """Test that custom exception classes have expected attributes."""
    exc = NotFoundError("Snapshot", 123)
    assert exc.status_code == 404
    assert "Snapshot" in exc.message
    assert "123" in exc.message

    exc = ValidationError("Invalid input", field="age")
    assert exc.status_code == 400
    assert exc.message == "Invalid input"
    assert exc.details == {"field": "age"}

    exc = InsufficientDataError("No profiles", minimum_required=1)
    assert exc.status_code == 400
    assert exc.details == {"minimum_required": 1}


def test_input_range_error_details():
    """Test the details carried by InputRangeError."""
    exc = InputRangeError("age", 140, 13, 120)
    assert isinstance(exc, ValidationError)
    assert exc.status_code == 422
    assert exc.details == {"field": "age", "value": 140, "minimum": 13, "maximum": 120}
    assert "between 13 and 120" in exc.message

    nan = InputRangeError("weight_kg", math.nan)
    assert nan.details["value"] == "nan"


def test_missing_prerequisite_error_details():
    """Test the details carried by MissingPrerequisiteError."""
    exc = MissingPrerequisiteError("Katch-McArdle", ["body_fat_percent"])
    assert exc.status_code == 400
    assert exc.details == {"formula": "Katch-McArdle", "missing": ["body_fat_percent"]}
    assert exc.message == "Katch-McArdle requires body_fat_percent"


def test_weather_lookup_error_details():
    """Test the details carried by WeatherLookupError."""
    exc = WeatherLookupError("timed out", provider="open-meteo")
    assert exc.status_code == 503
    assert exc.details == {"provider": "open-meteo"}


@pytest.mark.parametrize("timeout", [0, -1, 3.5, 30])
def test_weather_timeout_must_be_bounded(timeout):
    """Test that an unbounded weather timeout raises ConfigurationError."""
    with pytest.raises(ConfigurationError) as exc_info:
        config.weather_timeout(timeout)
    assert exc_info.value.details == {"config_key": "WEATHER_TIMEOUT_SECONDS"}


def test_weather_timeout_accepts_bounded_values():
    """Test that bounded weather timeouts are accepted."""
    assert config.weather_timeout(3.0) == 3.0
    assert config.weather_timeout(0.5) == 0.5
    assert 0 < config.settings.WEATHER_TIMEOUT_SECONDS <= config.MAX_WEATHER_TIMEOUT_SECONDS


def test_provider_rejects_unbounded_timeout():
    """Test that the weather provider refuses an unbounded timeout."""
    with pytest.raises(ConfigurationError):
        OpenMeteoWeatherProvider(timeout=10)


def test_settings_read_typed_values_from_environment(monkeypatch):
    """Test that settings coerce environment strings to their declared types."""
    monkeypatch.setenv("REGION_CACHE_SIZE", "12")
    monkeypatch.setenv("WEATHER_LOOKUP_ENABLED", "no")
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "1.5")
    monkeypatch.delenv("READ_DATABASE_URL", raising=False)
    loaded = config.load_settings()
    assert loaded.REGION_CACHE_SIZE == 12
    assert loaded.WEATHER_LOOKUP_ENABLED is False
    assert loaded.WEATHER_TIMEOUT_SECONDS == 1.5
    assert loaded.read_database_url == loaded.WRITE_DATABASE_URL


@pytest.mark.parametrize(
    "key, value",
    [
        ("WEATHER_TIMEOUT_SECONDS", "abc"),
        ("WEATHER_TIMEOUT_SECONDS", "5"),
        ("WEATHER_TIMEOUT_SECONDS", "0"),
        ("REGION_CACHE_SIZE", "many"),
        ("REGION_CACHE_SIZE", "-1"),
    ],
)
def test_invalid_settings_raise_configuration_error(monkeypatch, key, value):
    """Test that a bad environment value is reported with its setting name."""
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigurationError) as exc_info:
        config.load_settings()
    assert exc_info.value.details == {"config_key": key}


def test_api_out_of_range_returns_422_with_field():
    """Test that an out-of-range profile returns 422 naming the field."""
    client = TestClient(app)
    res = client.post(
        "/api/health/calculate",
        json={"sex": "male", "age": 8, "weight_kg": 30, "height_cm": 130},
        headers={"X-Request-ID": "req-42"},
    )
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["details"]["field"] == "age"
    assert error["details"]["minimum"] == 13
    assert error["request_id"] == "req-42"


def test_api_missing_prerequisite_returns_400():
    """Test that a missing prerequisite returns 400."""
    client = TestClient(app)
    res = client.post(
        "/api/health/calculate",
        json={
            "sex": "female", "age": 30, "weight_kg": 60, "height_cm": 165,
            "overrides": {"bmr_formula": "katch_mcardle"},
        },
    )
    assert res.status_code == 400
    assert res.json()["error"]["details"]["formula"] == "Katch-McArdle"


def test_api_schema_error_returns_validation_body():
    """Test that a schema error returns the validation body."""
    client = TestClient(app)
    res = client.post(
        "/api/health/calculate",
        json={"sex": "robot", "age": 30, "weight_kg": 60, "height_cm": 165},
    )
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["message"] == "Validation error"
    assert any("sex" in e["field"] for e in error["details"]["validation_errors"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
