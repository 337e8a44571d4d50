"""Normalized CWA forecast models."""

from dataclasses import dataclass, field


@dataclass
class ForecastInterval:
    start_time: str
    end_time: str
    weather: str = ""
    rain: str = ""  # e.g. "20%"
    min_temp: str = ""  # e.g. "18°C"
    max_temp: str = ""
    comfort: str = ""
    wind_speed: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "weather": self.weather,
            "rain": self.rain,
            "minTemp": self.min_temp,
            "maxTemp": self.max_temp,
            "comfort": self.comfort,
            "windSpeed": self.wind_speed,
        }


@dataclass
class NormalizedForecast:
    city: str
    update_time: str
    forecasts: list[ForecastInterval] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "updateTime": self.update_time,
            "forecasts": [f.to_dict() for f in self.forecasts],
        }
