"""Bodies, physical radii and event kinds understood by the almanac."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final

__all__ = [
    "AU_KM",
    "BODY_RADIUS_KM",
    "Body",
    "EARTH_RADIUS_KM",
    "EventType",
    "SUN_RISE_SET_ALTITUDE",
]


AU_KM: Final[float] = 149_597_870.691
EARTH_RADIUS_KM: Final[float] = 6378.0

# Sun altitude at rise/set: apparent radius plus horizontal refraction.
SUN_RISE_SET_ALTITUDE: Final[float] = -50.0 / 60.0


class Body(IntEnum):
    """Solar-system bodies, numbered like the Swiss Ephemeris planet ids."""

    SUN = 0
    MOON = 1
    MERCURY = 2
    VENUS = 3
    MARS = 4
    JUPITER = 5
    SATURN = 6
    URANUS = 7
    NEPTUNE = 8
    PLUTO = 9


BODY_RADIUS_KM: Final[dict[Body, float]] = {
    Body.SUN: 696_342.0,
    Body.MOON: 1737.0,
    Body.MERCURY: 2439.7,
    Body.VENUS: 6051.8,
    Body.MARS: 3396.2,
    Body.JUPITER: 69_911.0,
    Body.SATURN: 58_232.0,
    Body.URANUS: 25_362.0,
    Body.NEPTUNE: 24_622.0,
    Body.PLUTO: 1188.0,
}


class EventType(str, Enum):
    """Kinds of daily events tabulated by the almanac."""

    SUN_RISE_SUNSET = "SunRiseSunset"
    MOON_RISE_MOONSET = "MoonRiseMoonSet"
    MERCURY_RISE_SET = "MercuryRiseSet"
    VENUS_RISE_SET = "VenusRiseSet"
    MARS_RISE_SET = "MarsRiseSet"
    JUPITER_RISE_SET = "JupiterRiseSet"
    SATURN_RISE_SET = "SaturnRiseSet"
    URANUS_RISE_SET = "UranusRiseSet"
    NEPTUNE_RISE_SET = "NeptuneRiseSet"
    PLUTO_RISE_SET = "PlutoRiseSet"
    CIVIL_TWILIGHT = "CivilTwilight"
    NAUTICAL_TWILIGHT = "NauticalTwilight"
    AMATEUR_ASTRONOMICAL_TWILIGHT = "AmateurAstronomicalTwilight"
    ASTRONOMICAL_TWILIGHT = "AstronomicalTwilight"

    @classmethod
    def parse(cls, value: "EventType | str") -> "EventType":
        """Resolve a member from its value or (case-insensitive) member name."""

        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        lowered = text.lower()
        for member in cls:
            if lowered == member.value.lower():
                return member
        raise ValueError(f"Unknown event type: {value!r}")

    @property
    def body(self) -> Body:
        return _EVENT_BODIES.get(self, Body.SUN)

    @property
    def is_rise_set(self) -> bool:
        return self not in _TWILIGHT_DEPTHS

    @property
    def is_twilight(self) -> bool:
        return self in _TWILIGHT_DEPTHS

    @property
    def threshold_deg(self) -> float:
        """Altitude (degrees) at which the event is considered to occur."""

        if self in _TWILIGHT_DEPTHS:
            return _TWILIGHT_DEPTHS[self]
        if self is EventType.SUN_RISE_SUNSET:
            return SUN_RISE_SET_ALTITUDE
        return 0.0

    @property
    def label(self) -> str:
        return _EVENT_LABELS[self]


_EVENT_BODIES: Final[dict[EventType, Body]] = {
    EventType.SUN_RISE_SUNSET: Body.SUN,
    EventType.MOON_RISE_MOONSET: Body.MOON,
    EventType.MERCURY_RISE_SET: Body.MERCURY,
    EventType.VENUS_RISE_SET: Body.VENUS,
    EventType.MARS_RISE_SET: Body.MARS,
    EventType.JUPITER_RISE_SET: Body.JUPITER,
    EventType.SATURN_RISE_SET: Body.SATURN,
    EventType.URANUS_RISE_SET: Body.URANUS,
    EventType.NEPTUNE_RISE_SET: Body.NEPTUNE,
    EventType.PLUTO_RISE_SET: Body.PLUTO,
}

_TWILIGHT_DEPTHS: Final[dict[EventType, float]] = {
    EventType.CIVIL_TWILIGHT: -6.0,
    EventType.NAUTICAL_TWILIGHT: -12.0,
    EventType.AMATEUR_ASTRONOMICAL_TWILIGHT: -15.0,
    EventType.ASTRONOMICAL_TWILIGHT: -18.0,
}

_EVENT_LABELS: Final[dict[EventType, str]] = {
    EventType.SUN_RISE_SUNSET: "Sun rise and set",
    EventType.MOON_RISE_MOONSET: "Moon rise and set",
    EventType.MERCURY_RISE_SET: "Mercury rise and set",
    EventType.VENUS_RISE_SET: "Venus rise and set",
    EventType.MARS_RISE_SET: "Mars rise and set",
    EventType.JUPITER_RISE_SET: "Jupiter rise and set",
    EventType.SATURN_RISE_SET: "Saturn rise and set",
    EventType.URANUS_RISE_SET: "Uranus rise and set",
    EventType.NEPTUNE_RISE_SET: "Neptune rise and set",
    EventType.PLUTO_RISE_SET: "Pluto rise and set",
    EventType.CIVIL_TWILIGHT: "Civil twilight",
    EventType.NAUTICAL_TWILIGHT: "Nautical twilight",
    EventType.AMATEUR_ASTRONOMICAL_TWILIGHT: "Amateur astronomical twilight",
    EventType.ASTRONOMICAL_TWILIGHT: "Astronomical twilight",
}
