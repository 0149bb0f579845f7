import logging
import os
from dataclasses import dataclass

from bmp_dither.core.quantize import DistanceMode


class ConfigError(ValueError):
    """An environment variable holds a value we can't use."""


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_distance(name: str, default: str) -> DistanceMode:
    value = os.getenv(name, default).strip().lower()
    try:
        return DistanceMode(value)
    except ValueError:
        choices = ", ".join(d.value for d in DistanceMode)
        raise ConfigError(f"{name}={value!r} is not a distance mode (use one of {choices})") from None


def _env_log_level(name: str, default: str) -> str:
    value = os.getenv(name, default).strip().upper()
    # getLevelName maps known names to their numeric level
    if not isinstance(logging.getLevelName(value), int):
        raise ConfigError(f"{name}={value!r} is not a logging level")
    return value


@dataclass(frozen=True)
class DitherSettings:
    palette: str
    distance: DistanceMode
    serpentine: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "DitherSettings":
        return cls(
            palette=os.getenv("BMP_DITHER_PALETTE", "black,white"),
            distance=_env_distance("BMP_DITHER_DISTANCE", "euclidean"),
            serpentine=_env_flag("BMP_DITHER_SERPENTINE"),
            log_level=_env_log_level("LOG_LEVEL", "WARNING"),
        )


def configure_logging(level: str | None = None) -> logging.Logger:
    logging.basicConfig(
        level=level or DitherSettings.from_env().log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return logging.getLogger("bmp_dither")
