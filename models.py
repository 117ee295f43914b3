from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

from errors import ValidationError

LastModified = Union[datetime, date, str]


class Alternate(NamedTuple):
    hreflang: str
    href: str


class SinglePayload(NamedTuple):
    """One extension item, e.g. a single image under a URL."""
    fields: Mapping[str, Any]

    @property
    def items(self) -> Tuple[Mapping[str, Any], ...]:
        return (self.fields,)


class PayloadList(NamedTuple):
    """Several extension items under one URL."""
    items: Tuple[Mapping[str, Any], ...]


Payload = Union[SinglePayload, PayloadList]


def as_payload(value) -> Payload:
    """
    Tag a caller value as a single item or a list of items.
    Mappings are one item, lists/tuples are many.
    """
    if isinstance(value, (SinglePayload, PayloadList)):
        return value
    if isinstance(value, Mapping):
        return SinglePayload(value)
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, Mapping):
                raise ValidationError(
                    f"Extension list items must be mappings, got {type(item).__name__}"
                )
        return PayloadList(tuple(value))
    raise ValidationError(
        f"Extension payload must be a mapping or a list of mappings, got {type(value).__name__}"
    )


def as_alternates(values) -> Tuple[Alternate, ...]:
    # entries missing hreflang or href are dropped
    result = []
    for alt in values or ():
        if isinstance(alt, Alternate):
            result.append(alt)
        elif isinstance(alt, Mapping):
            if alt.get("hreflang") and alt.get("href"):
                result.append(Alternate(alt["hreflang"], alt["href"]))
        else:
            hreflang, href = alt
            result.append(Alternate(hreflang, href))
    return tuple(result)


@dataclass(frozen=True)
class UrlEntry:
    path:        str
    lastmod:     Optional[str] = None
    changefreq:  Optional[str] = None
    priority:    Optional[str] = None
    alternates:  Tuple[Alternate, ...] = ()
    extensions:  Dict[str, Payload] = field(default_factory=dict)


@dataclass
class GeneratedFiles:
    """What finalize() produced; the only durable record of a run."""
    sitemaps_location:       List[str]
    sitemaps_index_url:      str
    sitemaps_index_location: Optional[str] = None

    @property
    def has_index(self) -> bool:
        return self.sitemaps_index_location is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "sitemaps_location":  list(self.sitemaps_location),
            "sitemaps_index_url": self.sitemaps_index_url,
        }
        if self.has_index:
            data["sitemaps_index_location"] = self.sitemaps_index_location
        return data


def as_number(value) -> Optional[float]:
    """Numbers and numeric strings as float; anything else (bools included) as None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


# W3C datetime profile; %z also takes the "Z" shorthand
W3C_DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M%z",
)
W3C_DATE_HELP = (
    "Supported values are complete date (YYYY-MM-DD) or complete date plus hours, "
    "minutes and seconds, and timezone (YYYY-MM-DDThh:mm:ss+TZD)"
)


def parse_w3c_date(value) -> Optional[Union[datetime, date]]:
    """Parse a W3C date string into a date or an aware datetime, None if it isn't one."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        pass
    for fmt in W3C_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None
