#================================================================
# Settings
#================================================================
import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

MODES = ("automatic", "drag")
_FLOAT_FIELDS = ("light_radius", "blocker_radius", "orbit_radius", "angular_speed",
                 "initial_angle", "max_range")


class SettingsError(ValueError):
    """Raised for a settings file or value that cannot be used."""


@dataclass(frozen=True)
class Settings:
    # Window
    width:          int   = 800
    height:         int   = 600
    title:          str   = "2D Raycasting Sphere"
    fps:            int   = 60

    # Scene
    light_radius:   float = 15.0
    blocker_radius: float = 80.0
    blocker_center: Optional[tuple] = None   # None → window center
    orbit_radius:   float = 150.0
    angular_speed:  float = 0.01             # rad per frame
    initial_angle:  float = 0.0
    mode:           str   = "automatic"

    # Rays
    num_rays:       int   = 360
    max_range:      float = 1000.0

    # Colors (RGBA)
    background_color: tuple = (0, 0, 0, 255)
    light_color:      tuple = (255, 255, 0, 255)
    blocker_color:    tuple = (0, 100, 255, 255)
    ray_color:        tuple = (255, 255, 255, 255)
    hud_color:        tuple = (180, 220, 255, 255)
    show_hud:         bool  = False

    def resolved_blocker_center(self) -> tuple:
        if self.blocker_center is None:
            return (self.width / 2.0, self.height / 2.0)
        return self.blocker_center

    def validate(self) -> "Settings":
        for name in _FLOAT_FIELDS:
            if not math.isfinite(getattr(self, name)):
                raise SettingsError(f"{name} must be a finite number, got {getattr(self, name)}")
        if self.blocker_center is not None and not all(math.isfinite(v) for v in self.blocker_center):
            raise SettingsError(f"blocker_center must be finite, got {list(self.blocker_center)}")
        if self.width < 1 or self.height < 1:
            raise SettingsError(f"window size must be positive, got {self.width}x{self.height}")
        if self.fps < 1:
            raise SettingsError(f"fps must be at least 1, got {self.fps}")
        if not self.blocker_radius > 0:
            raise SettingsError(f"blocker_radius must be > 0, got {self.blocker_radius}")
        if self.light_radius < 0:
            raise SettingsError(f"light_radius must be >= 0, got {self.light_radius}")
        if self.orbit_radius < 0:
            raise SettingsError(f"orbit_radius must be >= 0, got {self.orbit_radius}")
        if not 0 < self.angular_speed < 2 * math.pi:
            raise SettingsError(f"angular_speed must be in (0, 2pi) rad per frame, got {self.angular_speed}")
        if self.num_rays < 1:
            raise SettingsError(f"num_rays must be at least 1, got {self.num_rays}")
        if not self.max_range > 0:
            raise SettingsError(f"max_range must be > 0, got {self.max_range}")
        if self.mode not in MODES:
            raise SettingsError(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.blocker_center is not None and len(self.blocker_center) != 2:
            raise SettingsError(f"blocker_center must be [x, y], got {list(self.blocker_center)}")
        for name in ("background_color", "light_color", "blocker_color", "ray_color", "hud_color"):
            _check_color(name, getattr(self, name))
        return self


def _check_color(name, value):
    if len(value) not in (3, 4) or not all(isinstance(v, int) and 0 <= v <= 255 for v in value):
        raise SettingsError(f"{name} must be 3 or 4 integers in 0..255, got {list(value)}")


_FIELD_NAMES = {f.name for f in fields(Settings)}
_SEQUENCE_FIELDS = {"blocker_center", "background_color", "light_color",
                    "blocker_color", "ray_color", "hud_color"}


def _coerce(name, value):
    if name in _SEQUENCE_FIELDS:
        if value is None and name == "blocker_center":
            return None
        if not isinstance(value, (list, tuple)):
            raise SettingsError(f"{name} must be a list, got {value!r}")
        if name == "blocker_center":
            try:
                return tuple(float(v) for v in value)
            except (TypeError, ValueError) as e:
                raise SettingsError(f"blocker_center must be numbers, got {value!r}") from e
        return tuple(value)
    default = getattr(Settings, name)
    # bool is checked before int since bool subclasses int
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise SettingsError(f"{name} must be true/false, got {value!r}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise SettingsError(f"{name} must be an integer, got {value!r}")
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SettingsError(f"{name} must be a number, got {value!r}")
        return float(value)
    if not isinstance(value, str):
        raise SettingsError(f"{name} must be a string, got {value!r}")
    return value


#=========================================================================================#
# dict ↔ Settings                                                                         #
#=========================================================================================#

def settings_from_dict(d: Optional[dict], base: Settings = Settings()) -> Settings:
    if d is None:
        return base.validate()
    if not isinstance(d, dict):
        raise SettingsError(f"settings must be a mapping, got {type(d).__name__}")
    unknown = set(d) - _FIELD_NAMES
    if unknown:
        raise SettingsError(f"unknown settings: {', '.join(sorted(unknown))}")
    values = {name: _coerce(name, value) for name, value in d.items()}
    return replace(base, **values).validate()


def settings_to_dict(settings: Settings) -> dict:
    d = asdict(settings)
    for name in _SEQUENCE_FIELDS:
        if d[name] is not None:
            d[name] = list(d[name])
    return d


#=========================================================================================#
# Read / write yaml file                                                                  #
#=========================================================================================#

def load_settings(path, base: Settings = Settings()) -> Settings:
    path = Path(path)
    try:
        with open(path, "r") as f:
            d = yaml.safe_load(f)
    except OSError as e:
        raise SettingsError(f"cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"invalid YAML in {path}: {e}") from e
    settings = settings_from_dict(d, base)
    logger.info("Loaded settings from %s", path)
    return settings


def write_settings(settings: Settings, path):
    with open(path, "w") as f:
        yaml.safe_dump(
            settings_to_dict(settings),
            f,
            sort_keys=False,
            default_flow_style=None
        )
    logger.info("Wrote settings to %s", path)
