"""Climate and population context detection.

Climate and population are resolved independently, each walking its own
fallback chain from the most to the least certain source:

    climate:    override -> GPS weather -> profile country/state -> IP country -> default
    population: override -> profile country -> IP country -> default

A failed weather lookup never raises; it marks the context as degraded and
the chain continues with the region tables.
"""

from functools import lru_cache
from typing import List, Optional, Tuple

from core import config
from core.exceptions import WeatherLookupError
from core.logger import get_logger
from data.regions import (
    ARID_COUNTRIES,
    COLD_COUNTRIES,
    HIGH_DIVERSITY_COUNTRIES,
    POPULATION_COUNTRIES,
    STATE_CLIMATES,
    TROPICAL_COUNTRIES,
)
from schemas.profile_schema import ClimateType, Confidence, ContextSource, PopulationType, Profile
from schemas.result_schema import ContextResult
from services.weather_provider import OpenMeteoWeatherProvider, WeatherObservation

logger = get_logger("services.context_detector")

HIGHLAND_ALTITUDE_M = 2000
DEFAULT_CLIMATE = ClimateType.TEMPERATE
DEFAULT_POPULATION = PopulationType.CAUCASIAN


def classify_weather(observation: WeatherObservation) -> ClimateType:
    """Map raw weather readings to a climate zone.

    Altitude above 2000 m wins over every temperature rule.
    """
    temp = observation.temperature_c
    humidity = observation.humidity_pct
    if observation.altitude_m > HIGHLAND_ALTITUDE_M:
        return ClimateType.HIGHLAND
    if temp > 28 and humidity > 70:
        return ClimateType.TROPICAL
    if temp < 10:
        return ClimateType.COLD
    if temp > 30 and humidity < 30:
        return ClimateType.ARID
    return ClimateType.TEMPERATE


def _normalize(code: Optional[str]) -> Optional[str]:
    if code is None:
        return None
    code = code.strip().upper()
    return code or None


@lru_cache(maxsize=config.settings.REGION_CACHE_SIZE)
def climate_for_region(country: str, state: Optional[str] = None) -> Optional[ClimateType]:
    """Look up a climate zone from the region tables, or None if unknown."""
    states = STATE_CLIMATES.get(country)
    if states is not None and state is not None and state in states:
        return ClimateType(states[state])
    if country in TROPICAL_COUNTRIES:
        return ClimateType.TROPICAL
    if country in COLD_COUNTRIES:
        return ClimateType.COLD
    if country in ARID_COUNTRIES:
        return ClimateType.ARID
    return None


@lru_cache(maxsize=config.settings.REGION_CACHE_SIZE)
def population_for_country(country: str) -> Optional[PopulationType]:
    """Look up a population group from the country table, or None if unknown.

    Highly diverse countries resolve to `mixed`.
    """
    if country in HIGH_DIVERSITY_COUNTRIES:
        return PopulationType.MIXED
    for population, countries in POPULATION_COUNTRIES.items():
        if country in countries:
            return PopulationType(population)
    return None


class ContextDetector:
    """Detects the climate and population context of a profile.

    Args:
        weather_provider: Object with a `current(latitude, longitude)` method
            returning a `WeatherObservation`. Defaults to Open-Meteo.
        lookup_enabled: Whether GPS weather lookups run at all.
    """

    def __init__(self, weather_provider=None, lookup_enabled: Optional[bool] = None):
        self.weather_provider = weather_provider or OpenMeteoWeatherProvider()
        self.lookup_enabled = config.settings.WEATHER_LOOKUP_ENABLED if lookup_enabled is None else lookup_enabled

    def detect(self, profile: Profile) -> ContextResult:
        """Resolve the context for a profile.

        Args:
            profile: Input profile.

        Returns:
            `ContextResult` whose confidence is the lower of the climate and
            population confidences.
        """
        notes: List[str] = []
        climate, climate_conf, climate_source, altitude, degraded = self._detect_climate(profile, notes)
        population, population_conf, population_source = self._detect_population(profile, notes)

        confidence = Confidence.lowest(climate_conf, population_conf)
        if confidence == Confidence.LOW:
            notes.append("Based on your general region; set your location or population for more accurate thresholds.")

        result = ContextResult(
            climate_type=climate,
            population_type=population,
            confidence=confidence,
            source=climate_source,
            climate_confidence=climate_conf,
            population_confidence=population_conf,
            population_source=population_source,
            altitude_m=altitude,
            degraded=degraded,
            notes=notes,
        )
        logger.debug(
            "Context: climate=%s (%s/%s) population=%s (%s/%s)",
            climate.value, climate_source.value, climate_conf.value,
            population.value, population_source.value, population_conf.value,
        )
        return result

    def _detect_climate(
        self, profile: Profile, notes: List[str]
    ) -> Tuple[ClimateType, Confidence, ContextSource, Optional[float], bool]:
        override = profile.overrides.climate_type
        if override is not None:
            notes.append(f"Climate set explicitly to {override.value}.")
            return override, Confidence.HIGH, ContextSource.PROFILE, None, False

        degraded = False
        if profile.has_location:
            if self.lookup_enabled:
                try:
                    observation = self.weather_provider.current(profile.latitude, profile.longitude)
                    climate = classify_weather(observation)
                    notes.append(
                        f"Climate {climate.value} from local weather "
                        f"({observation.temperature_c:.0f}C, {observation.humidity_pct:.0f}% humidity, "
                        f"{observation.altitude_m:.0f} m)."
                    )
                    return climate, Confidence.HIGH, ContextSource.GPS, observation.altitude_m, False
                except WeatherLookupError as exc:
                    degraded = True
                    logger.warning("Context detection degraded: %s", exc.message)
                    notes.append("Local weather unavailable; falling back to region data.")
            else:
                notes.append("Weather lookup disabled; using region data.")

        country = _normalize(profile.country_code)
        if country is not None:
            climate = climate_for_region(country, _normalize(profile.state_code))
            if climate is not None:
                notes.append(f"Climate {climate.value} from region {country}.")
                return climate, Confidence.MEDIUM, ContextSource.PROFILE, None, degraded

        ip_country = _normalize(profile.ip_country_code)
        if ip_country is not None:
            climate = climate_for_region(ip_country)
            if climate is not None:
                notes.append(f"Climate {climate.value} estimated from network location.")
                return climate, Confidence.LOW, ContextSource.IP, None, degraded

        return DEFAULT_CLIMATE, Confidence.LOW, ContextSource.DEFAULT, None, degraded

    def _detect_population(
        self, profile: Profile, notes: List[str]
    ) -> Tuple[PopulationType, Confidence, ContextSource]:
        override = profile.overrides.population_type
        if override is not None:
            return override, Confidence.HIGH, ContextSource.PROFILE

        country = _normalize(profile.country_code)
        if country is not None:
            population = population_for_country(country)
            if population == PopulationType.MIXED:
                notes.append(f"{country} is highly diverse; general BMI thresholds apply.")
                return population, Confidence.LOW, ContextSource.PROFILE
            if population is not None:
                return population, Confidence.MEDIUM, ContextSource.PROFILE

        ip_country = _normalize(profile.ip_country_code)
        if ip_country is not None:
            population = population_for_country(ip_country)
            if population is not None:
                return population, Confidence.LOW, ContextSource.IP

        return DEFAULT_POPULATION, Confidence.LOW, ContextSource.DEFAULT


__all__ = [
    "classify_weather",
    "climate_for_region",
    "population_for_country",
    "ContextDetector",
]
