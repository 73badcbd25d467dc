"""Data models shared by the directory core and its jobs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class LocationRecord:
    """One (neighborhood, postal code) pair, the natural grain of the source data."""

    province: str
    district: str
    subarea: str | None
    neighborhood: str
    postal_code: str
    province_slug: str
    district_slug: str
    neighborhood_slug: str

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.province_slug, self.district_slug, self.neighborhood_slug, self.postal_code)

    @property
    def path(self) -> str:
        return f"{self.province_slug}/{self.district_slug}/{self.neighborhood_slug}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProvinceSummary:
    province: str
    province_slug: str
    record_count: int


@dataclass(frozen=True)
class DistrictSummary:
    district: str
    district_slug: str
    postal_code_count: int


@dataclass(frozen=True)
class NeighborhoodSummary:
    neighborhood: str
    neighborhood_slug: str


@dataclass(frozen=True)
class NeighborhoodDetail:
    province: str
    district: str
    neighborhood: str
    subarea: str | None
    postal_codes: list[str] = field(default_factory=list)
    province_slug: str = ""
    district_slug: str = ""
    neighborhood_slug: str = ""


@dataclass(frozen=True)
class DistrictNeighbor:
    district: str
    district_slug: str
    neighborhood_count: int


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    kind: str
    key: tuple[str, ...]


Lookup = Union[Found[T], NotFound]


def to_plain(value: Any) -> Any:
    """Turn dataclasses (and lists/lookups of them) into JSON-ready structures."""
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, Found):
        return {"found": True, "value": to_plain(value.value)}
    if isinstance(value, NotFound):
        return {"found": False, "kind": value.kind, "key": list(value.key)}
    if hasattr(value, "__dataclass_fields__"):
        return asdict(value)
    return value
