"""
Checks run on every entry before the generator accepts it.
Nothing here touches the disk; a failed check raises ValidationError
and leaves the generator exactly as it was.
"""
from datetime import date, datetime
from typing import Dict, Mapping, Optional

from errors import ValidationError
from extensions import EXTENSIONS
from models import W3C_DATE_HELP, Payload, as_number, as_payload, parse_w3c_date

MAX_URL_LENGTH = 2048
MAX_URLS_PER_SITEMAP = 50000

CHANGEFREQ_VALUES = (
    "always", "hourly", "daily", "weekly", "monthly", "yearly", "never",
)

# Exact tenths only. 0.25 is rejected even though it lies in [0, 1].
PRIORITY_VALUES = (0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0)


def validate_path(path) -> str:
    if not isinstance(path, str):
        raise ValidationError(f"URL path must be a string, got {type(path).__name__}")
    if not 1 <= len(path) <= MAX_URL_LENGTH:
        raise ValidationError(
            f"URL length must be between 1 and {MAX_URL_LENGTH} characters, got {len(path)}"
        )
    return path


def is_valid_changefreq(value) -> bool:
    return value in CHANGEFREQ_VALUES


def validate_changefreq(value) -> None:
    if value is not None and not is_valid_changefreq(value):
        raise ValidationError(
            f"Invalid changefreq value {value!r}. "
            f"Allowed values are: {', '.join(CHANGEFREQ_VALUES)}"
        )


def is_valid_priority(value) -> bool:
    number = as_number(value)
    return number is not None and number in PRIORITY_VALUES


def validate_priority(value) -> Optional[float]:
    if value is None:
        return None
    if not is_valid_priority(value):
        raise ValidationError(
            f"Invalid priority value {value!r}. "
            "Allowed values are 0.0, 0.1, ..., 1.0 (one decimal place, between 0.0 and 1.0)"
        )
    return as_number(value)


def validate_extensions(loc: str, extensions: Optional[Mapping]) -> Dict[str, Payload]:
    """Tag every payload and hand it to its extension's own rules."""
    result = {}
    for name, value in (extensions or {}).items():
        ext = EXTENSIONS.get(name)
        if ext is None:
            raise ValidationError(
                f"Unknown extension {name!r}. Supported extensions are: {', '.join(EXTENSIONS)}"
            )
        payload = as_payload(value)
        ext.validate(loc, payload)
        result[name] = payload
    return result


def validate_lastmod(value) -> None:
    if value is None or isinstance(value, (datetime, date)):
        return
    if not isinstance(value, str):
        raise ValidationError(
            f"lastmod must be a datetime, a date or a W3C date string, got {type(value).__name__}"
        )
    if parse_w3c_date(value) is None:
        raise ValidationError(f"Invalid lastmod value {value!r}. {W3C_DATE_HELP}")


def validate_entry(loc, path, lastmod=None, changefreq=None, priority=None, extensions=None):
    """
    loc is the absolute URL the path will be published under;
    extension rules compare it with their own URLs.
    Returns (priority as float or None, tagged extensions).
    """
    validate_path(path)
    validate_lastmod(lastmod)
    validate_changefreq(changefreq)
    number = validate_priority(priority)
    return number, validate_extensions(loc, extensions)


def validate_sitemap_filename(filename) -> str:
    if not filename:
        raise ValidationError("Sitemap filename should be a non-empty string")
    if not filename.endswith(".xml"):
        raise ValidationError(f"Sitemap filename should end with .xml, got {filename!r}")
    return filename


def validate_filename(filename, what: str) -> str:
    if not filename:
        raise ValidationError(f"{what} filename should be a non-empty string")
    return filename


def validate_max_urls_per_sitemap(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Max URLs per sitemap must be an integer, got {value!r}")
    if not 1 <= value <= MAX_URLS_PER_SITEMAP:
        raise ValidationError(
            f"Max URLs per sitemap must be between 1 and {MAX_URLS_PER_SITEMAP}, got {value}"
        )
    return value
