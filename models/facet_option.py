"""Facet option data model and helpers."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class NoDecoration:
    """Plain text option."""


@dataclass(frozen=True)
class Logo:
    """Option rendered with a logo image (brands)."""

    url: str


@dataclass(frozen=True)
class Swatch:
    """Option rendered with a colour swatch."""

    hex: str


@dataclass(frozen=True)
class Flag:
    """Option rendered with a country flag (nationalities)."""

    code: str


Decoration = Union[NoDecoration, Logo, Swatch, Flag]

COUNTRY_CODES: Dict[str, str] = {
    "united states": "US",
    "germany": "DE",
    "brazil": "BR",
    "italy": "IT",
    "france": "FR",
    "japan": "JP",
    "united kingdom": "GB",
    "china": "CN",
    "south korea": "KR",
    "spain": "ES",
    "portugal": "PT",
    "canada": "CA",
    "australia": "AU",
}


@dataclass(frozen=True)
class FacetOption:
    """One selectable value of a facet."""

    id: str
    label: str
    decoration: Decoration = NoDecoration()
    parent_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("FacetOption requires a non-empty id")


def _normalise_hex(raw: str) -> str:
    value = raw.strip()
    return value if value.startswith("#") else f"#{value}"


def option_from_payload(payload: Dict[str, Any]) -> FacetOption:
    """Factory to build a :class:`FacetOption` from a loose catalog entry.

    Catalog endpoints return ``{id, name, logo?, hex?, parentId?}`` shaped
    dicts; brand payloads may nest the logo under ``brandInfo``.
    """

    raw_id = payload.get("id")
    if raw_id in (None, ""):
        raise ValueError(f"Catalog entry without id: {payload!r}")

    label = payload.get("name") or payload.get("label") or str(raw_id)
    logo = payload.get("logo") or (payload.get("brandInfo") or {}).get("logo")
    hex_value = payload.get("hex") or payload.get("hexCode")
    if logo:
        decoration: Decoration = Logo(url=str(logo))
    elif hex_value:
        decoration = Swatch(hex=_normalise_hex(str(hex_value)))
    else:
        decoration = NoDecoration()

    parent_id = payload.get("parentId")
    return FacetOption(
        id=str(raw_id),
        label=str(label),
        decoration=decoration,
        parent_id=str(parent_id) if parent_id not in (None, "") else None,
    )


def nationality_option(name: str) -> FacetOption:
    """Nationalities are bare country names; known ones get a flag."""

    code = COUNTRY_CODES.get(name.strip().lower())
    return FacetOption(id=name, label=name, decoration=Flag(code=code) if code else NoDecoration())


def release_date_option(kind: str, value: int) -> FacetOption:
    """Year, month and day options use the number as id; months show their name."""

    label = calendar.month_name[value] if kind == "months" and 1 <= value <= 12 else str(value)
    return FacetOption(id=str(value), label=label)


__all__ = [
    "Decoration",
    "FacetOption",
    "Flag",
    "Logo",
    "NoDecoration",
    "Swatch",
    "nationality_option",
    "option_from_payload",
    "release_date_option",
]
