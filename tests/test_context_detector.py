"""Tests for climate and population context detection.

Weather lookups are replaced with small fake providers so no test touches
the network.
"""
import pytest
import requests

from core.exceptions import WeatherLookupError
from schemas.profile_schema import ClimateType, Confidence, ContextSource, PopulationType, Profile
from services.context_detector import ContextDetector, classify_weather, climate_for_region, population_for_country
from services.weather_provider import OpenMeteoWeatherProvider, WeatherObservation, split_timeout


class FakeWeather:
    """Returns a fixed observation and records every call."""

    def __init__(self, temperature_c=30.0, humidity_pct=80.0, altitude_m=10.0):
        self.observation = WeatherObservation(
            temperature_c=temperature_c, humidity_pct=humidity_pct, altitude_m=altitude_m
        )
        self.calls = []

    def current(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        return self.observation


class FailingWeather:
    def __init__(self):
        self.calls = 0

    def current(self, latitude, longitude):
        self.calls += 1
        raise WeatherLookupError("Weather lookup timed out after 3.0s", provider="fake")


def _profile(**fields):
    base = {"sex": "female", "age": 30, "weight_kg": 60, "height_cm": 165}
    base.update(fields)
    return Profile(**base)


def test_gps_weather_gives_high_confidence_climate():
    """Test that a GPS weather lookup gives high-confidence climate."""
    weather = FakeWeather(temperature_c=31, humidity_pct=85)
    detector = ContextDetector(weather_provider=weather, lookup_enabled=True)
    result = detector.detect(_profile(latitude=9.93, longitude=76.26, country_code="IN"))

    assert weather.calls == [(9.93, 76.26)]
    assert result.climate_type == ClimateType.TROPICAL
    assert result.climate_confidence == Confidence.HIGH
    assert result.source == ContextSource.GPS
    assert result.population_type == PopulationType.SOUTH_ASIAN
    assert result.population_confidence == Confidence.MEDIUM
    # overall confidence is the lower of the two
    assert result.confidence == Confidence.MEDIUM
    assert result.degraded is False
    assert result.altitude_m == 10


def test_failed_weather_lookup_falls_back_to_profile_region():
    """Test that a failed lookup falls back to the profile region."""
    weather = FailingWeather()
    detector = ContextDetector(weather_provider=weather, lookup_enabled=True)
    result = detector.detect(_profile(latitude=9.93, longitude=76.26, country_code="IN", state_code="KL"))

    assert weather.calls == 1
    assert result.degraded is True
    assert result.climate_type == ClimateType.TROPICAL
    assert result.source == ContextSource.PROFILE
    assert result.climate_confidence == Confidence.MEDIUM
    assert any("unavailable" in note for note in result.notes)


def test_failed_weather_lookup_without_region_uses_default():
    """Test that a failed lookup without a region uses the default context."""
    detector = ContextDetector(weather_provider=FailingWeather(), lookup_enabled=True)
    result = detector.detect(_profile(latitude=51.5, longitude=-0.12))

    assert result.degraded is True
    assert result.climate_type == ClimateType.TEMPERATE
    assert result.source == ContextSource.DEFAULT
    assert result.confidence == Confidence.LOW


def test_disabled_lookup_never_calls_provider():
    """Test that a disabled lookup never reaches the weather provider."""
    weather = FakeWeather()
    detector = ContextDetector(weather_provider=weather, lookup_enabled=False)
    result = detector.detect(_profile(latitude=25.2, longitude=55.3, country_code="AE"))

    assert weather.calls == []
    assert result.climate_type == ClimateType.ARID
    assert result.degraded is False


def test_state_table_beats_country_table():
    """Test that a state entry wins over its country entry."""
    detector = ContextDetector(weather_provider=FakeWeather(), lookup_enabled=False)
    assert detector.detect(_profile(country_code="IN", state_code="HP")).climate_type == ClimateType.COLD
    assert detector.detect(_profile(country_code="US", state_code="fl")).climate_type == ClimateType.TROPICAL


def test_diverse_country_resolves_to_mixed_with_low_confidence():
    """Test that a diverse country resolves to a mixed population."""
    detector = ContextDetector(weather_provider=FakeWeather(), lookup_enabled=False)
    result = detector.detect(_profile(country_code="US", state_code="CA"))

    assert result.population_type == PopulationType.MIXED
    assert result.population_confidence == Confidence.LOW
    assert result.climate_confidence == Confidence.MEDIUM
    assert result.confidence == Confidence.LOW


def test_ip_country_is_low_confidence():
    """Test that an IP-derived country gives low confidence."""
    detector = ContextDetector(weather_provider=FakeWeather(), lookup_enabled=False)
    result = detector.detect(_profile(ip_country_code="th"))

    assert result.climate_type == ClimateType.TROPICAL
    assert result.source == ContextSource.IP
    assert result.population_type == PopulationType.SOUTHEAST_ASIAN
    assert result.population_source == ContextSource.IP
    assert result.confidence == Confidence.LOW


def test_no_location_uses_universal_default():
    """Test the default context when no location is known."""
    detector = ContextDetector(weather_provider=FakeWeather(), lookup_enabled=True)
    result = detector.detect(_profile())

    assert result.climate_type == ClimateType.TEMPERATE
    assert result.population_type == PopulationType.CAUCASIAN
    assert result.source == ContextSource.DEFAULT
    assert result.confidence == Confidence.LOW
    assert any("general region" in note for note in result.notes)


def test_overrides_short_circuit_detection():
    """Test that overrides skip detection."""
    weather = FakeWeather()
    detector = ContextDetector(weather_provider=weather, lookup_enabled=True)
    profile = _profile(
        latitude=9.93, longitude=76.26,
        overrides={"climate_type": "cold", "population_type": "east_asian"},
    )
    result = detector.detect(profile)

    assert weather.calls == []
    assert result.climate_type == ClimateType.COLD
    assert result.population_type == PopulationType.EAST_ASIAN
    assert result.confidence == Confidence.HIGH
    assert result.source == ContextSource.PROFILE


@pytest.mark.parametrize(
    "temperature,humidity,altitude,expected",
    [
        (31, 85, 10, ClimateType.TROPICAL),
        (5, 60, 100, ClimateType.COLD),
        (35, 15, 300, ClimateType.ARID),
        (20, 50, 100, ClimateType.TEMPERATE),
        (33, 90, 2500, ClimateType.HIGHLAND),
    ],
)
def test_classify_weather(temperature, humidity, altitude, expected):
    """Test climate classification from temperature, humidity and altitude."""
    observation = WeatherObservation(temperature_c=temperature, humidity_pct=humidity, altitude_m=altitude)
    assert classify_weather(observation) == expected


def test_region_tables():
    """Test lookups in the bundled region tables."""
    assert climate_for_region("NO") == ClimateType.COLD
    assert climate_for_region("GB") is None
    assert population_for_country("JP") == PopulationType.EAST_ASIAN
    assert population_for_country("ZA") == PopulationType.MIXED
    assert population_for_country("XX") is None


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def test_open_meteo_provider_parses_current_conditions():
    """Test parsing of an Open-Meteo current-conditions response."""
    payload = {"elevation": 2400.0, "current": {"temperature_2m": 12.5, "relative_humidity_2m": 40}}
    session = FakeSession(response=FakeResponse(payload))
    provider = OpenMeteoWeatherProvider(base_url="http://weather.test/v1/forecast", timeout=2.0, session=session)

    observation = provider.current(27.7, 85.3)
    assert observation.temperature_c == 12.5
    assert observation.humidity_pct == 40
    assert observation.altitude_m == 2400
    assert session.requests[0]["timeout"] == (0.8, 1.2)
    assert session.requests[0]["params"]["latitude"] == 27.7


@pytest.mark.parametrize("total", [0.5, 1.0, 2.0, 3.0])
def test_connect_and_read_timeouts_stay_within_total(total):
    """Test that the connect and read phases together never exceed the configured timeout."""
    connect, read = split_timeout(total)
    assert connect > 0 and read > 0
    assert connect + read <= total + 1e-9


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.Timeout("read timed out")),
        FakeSession(error=requests.ConnectionError("no route")),
        FakeSession(response=FakeResponse({}, status_code=503)),
        FakeSession(response=FakeResponse({"elevation": 10})),
    ],
)
def test_open_meteo_provider_failures_raise_weather_lookup_error(session):
    """Test that provider failures raise WeatherLookupError."""
    provider = OpenMeteoWeatherProvider(base_url="http://weather.test/v1/forecast", timeout=1.0, session=session)
    with pytest.raises(WeatherLookupError) as exc_info:
        provider.current(0.0, 0.0)
    assert exc_info.value.details == {"provider": "open-meteo"}
