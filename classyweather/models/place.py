"""Geocoded place model."""

from dataclasses import dataclass

# Offset from an ASCII capital letter to its regional indicator symbol
_REGIONAL_INDICATOR_OFFSET = 0x1F1E6 - ord("A")


def country_flag(country_code: str) -> str:
    """Convert an ISO 3166 alpha-2 code to its flag emoji. Empty on bad input."""
    code = (country_code or "").strip().upper()
    if len(code) != 2 or not code.isascii() or not code.isalpha():
        return ""
    return "".join(chr(_REGIONAL_INDICATOR_OFFSET + ord(c)) for c in code)


@dataclass(frozen=True)
class Place:
    latitude: float
    longitude: float
    timezone: str  # IANA id, e.g. "Europe/Paris"
    name: str
    country_code: str = ""

    @property
    def display_name(self) -> str:
        flag = country_flag(self.country_code)
        return f"{self.name} {flag}" if flag else self.name
