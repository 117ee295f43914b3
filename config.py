import os
from dataclasses import dataclass, field
from typing import List, Optional

from validator import (
    validate_filename, validate_max_urls_per_sitemap, validate_sitemap_filename,
)

VERSION = "1.0.0"


def _env_bool(name, default=False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    base_url:               str
    save_directory:         str = "."
    sitemap_filename:       str = "sitemap.xml"
    index_filename:         str = "sitemap-index.xml"
    robots_filename:        str = "robots.txt"
    max_urls_per_sitemap:   int = 50000
    compression:            bool = False
    compress_index:         bool = False
    stylesheet:             Optional[str] = None
    include_generator_info: bool = True
    generator_version:      str = VERSION
    http_timeout:           float = 10
    enable_http:            bool = True
    search_engines:         Optional[List[str]] = field(default=None)

    def __post_init__(self):
        validate_sitemap_filename(self.sitemap_filename)
        validate_filename(self.index_filename, "Sitemap index")
        validate_filename(self.robots_filename, "Robots")
        validate_max_urls_per_sitemap(self.max_urls_per_sitemap)

    @classmethod
    def from_env(cls, **overrides):
        """Build a Config from SITEMAP_* environment variables."""
        engines = os.getenv("SITEMAP_SEARCH_ENGINES")
        values = dict(
            base_url               = os.getenv("SITEMAP_BASE_URL", os.getenv("BASE_URL", "")),
            save_directory         = os.getenv("SITEMAP_OUTPUT_DIR", "."),
            sitemap_filename       = os.getenv("SITEMAP_FILENAME", "sitemap.xml"),
            index_filename         = os.getenv("SITEMAP_INDEX_FILENAME", "sitemap-index.xml"),
            robots_filename        = os.getenv("SITEMAP_ROBOTS_FILENAME", "robots.txt"),
            max_urls_per_sitemap   = int(os.getenv("SITEMAP_MAX_URLS", 50000)),
            compression            = _env_bool("SITEMAP_COMPRESS"),
            compress_index         = _env_bool("SITEMAP_COMPRESS_INDEX"),
            stylesheet             = os.getenv("SITEMAP_STYLESHEET") or None,
            include_generator_info = _env_bool("SITEMAP_GENERATOR_INFO", True),
            http_timeout           = float(os.getenv("SITEMAP_HTTP_TIMEOUT", 10)),
            enable_http            = _env_bool("SITEMAP_ENABLE_HTTP", True),
            search_engines         = engines.split() if engines else None,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
