"""Token extraction from free-text postal addresses."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_POSTAL_CODE_PATTERN = re.compile(r"(?<!\d)(\d{5})(?!\d)")
_COUNTRY_PATTERN = re.compile(r"^[^\W\d_]+(?:[\s'.-]+[^\W\d_]+)*\.?$")


@dataclass(frozen=True, slots=True)
class AddressTokens:
    """City, postal code and country pulled out of an address string."""

    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.postal_code and self.city and self.country)


def _segments(text: str) -> List[str]:
    return [segment.strip() for segment in text.split(",") if segment.strip()]


def extract_postal_code(address: str) -> Optional[str]:
    match = _POSTAL_CODE_PATTERN.search(address)
    return match.group(1) if match else None


def extract_city(address: str, postal_code: Optional[str] = None) -> Optional[str]:
    """Return the segment preceding the postal code, else the last segment."""

    if postal_code:
        match = _POSTAL_CODE_PATTERN.search(address)
        if match and match.group(1) == postal_code:
            before = _segments(address[: match.start()])
            return before[-1] if before else None
    segments = _segments(address)
    return segments[-1] if segments else None


def extract_country(address: str) -> Optional[str]:
    """Return the trailing alphabetic segment that follows a comma."""

    if "," not in address:
        return None
    tail = address.rsplit(",", 1)[1].strip()
    return tail if tail and _COUNTRY_PATTERN.match(tail) else None


def parse_address(address: Optional[str]) -> AddressTokens:
    if not address or not address.strip():
        return AddressTokens()
    postal_code = extract_postal_code(address)
    return AddressTokens(
        postal_code=postal_code,
        city=extract_city(address, postal_code),
        country=extract_country(address),
    )
