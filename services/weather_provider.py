"""Current-weather lookup for GPS-based climate detection.

The Open-Meteo forecast API needs no key and returns the current
temperature, relative humidity and the grid-cell elevation. Every failure,
including a timeout, is raised as `WeatherLookupError`; the context detector
turns that into a lower-confidence context.

The configured timeout is split into a connect and a read phase whose sum
equals it. `requests` applies the read timeout to each socket read, not to
the whole body, but the forecast payload is a few hundred bytes and arrives
in a single read.
"""

from typing import Optional, Tuple

import requests
from pydantic import BaseModel, ConfigDict

from core import config
from core.exceptions import WeatherLookupError
from core.logger import get_logger

logger = get_logger("services.weather_provider")

CONNECT_SHARE = 0.4


def split_timeout(total: float) -> Tuple[float, float]:
    """(connect, read) timeouts that add up to `total` seconds."""
    connect = round(total * CONNECT_SHARE, 3)
    return connect, round(total - connect, 3)


class WeatherObservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature_c: float
    humidity_pct: float
    altitude_m: float = 0.0


class OpenMeteoWeatherProvider:
    """Weather provider backed by the Open-Meteo forecast endpoint."""

    name = "open-meteo"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or config.settings.WEATHER_API_URL
        self.timeout = config.weather_timeout(timeout if timeout is not None else config.settings.WEATHER_TIMEOUT_SECONDS)
        self.phase_timeouts = split_timeout(self.timeout)
        self.session = session or requests.Session()

    def current(self, latitude: float, longitude: float) -> WeatherObservation:
        """Fetch current conditions at a coordinate.

        Args:
            latitude: Decimal degrees.
            longitude: Decimal degrees.

        Returns:
            `WeatherObservation` with temperature, humidity and elevation.

        Raises:
            WeatherLookupError: On network errors, timeouts, non-2xx
                responses or payloads missing the expected fields.
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m,relative_humidity_2m",
        }
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.phase_timeouts)
            resp.raise_for_status()
            payload = resp.json()
            current = payload["current"]
            observation = WeatherObservation(
                temperature_c=float(current["temperature_2m"]),
                humidity_pct=float(current["relative_humidity_2m"]),
                altitude_m=float(payload.get("elevation") or 0.0),
            )
        except requests.Timeout as exc:
            logger.warning("Weather lookup timed out after %ss", self.timeout)
            raise WeatherLookupError(f"Weather lookup timed out after {self.timeout}s", provider=self.name) from exc
        except requests.RequestException as exc:
            logger.warning("Weather lookup failed: %s", exc)
            raise WeatherLookupError(f"Weather lookup failed: {exc}", provider=self.name) from exc
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Unexpected weather payload: %s", exc)
            raise WeatherLookupError("Weather response did not contain current conditions", provider=self.name) from exc

        logger.debug(
            "Weather at (%.2f, %.2f): %.1fC, %.0f%% humidity, %.0fm",
            latitude, longitude, observation.temperature_c, observation.humidity_pct, observation.altitude_m,
        )
        return observation


__all__ = ["WeatherObservation", "OpenMeteoWeatherProvider", "split_timeout"]
