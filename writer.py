import os
from datetime import date, datetime
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from errors import SitemapRuntimeError
from extensions import EXTENSIONS
from models import UrlEntry, parse_w3c_date

TEMPLATES_PATH = os.path.join(os.path.dirname(__file__), "templates")

CLOSED = "closed"
DOCUMENT = "document"
URLSET = "urlset"
INDEX = "index"


def encode_url(url: str) -> str:
    """
    Percent-encode non-ASCII characters only, the way a browser address
    bar does. ASCII (including & < > and quotes) is left for the XML
    escaping done by the templates, so ASCII URLs pass through unchanged.
    """
    return "".join(c if ord(c) < 128 else quote(c, safe="") for c in url)


def join_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def format_datetime(value) -> str:
    """W3C datetime with a numeric offset, never the Z shorthand."""
    if isinstance(value, str):
        parsed = parse_w3c_date(value)
        if parsed is None:
            raise ValueError(f"Not a W3C date: {value!r}")
        value = parsed
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.astimezone()
        return value.replace(microsecond=0).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Unsupported date value: {value!r}")


def format_priority(value) -> str:
    # format() ignores LC_NUMERIC, so this is always "0.8", never "0,8"
    return format(float(value), ".1f")


def make_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_PATH),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["url"] = encode_url
    return env


class SitemapWriter:
    """
    Incremental sitemap serializer.

    Rendered XML collects in memory until drain() hands it over, so the
    caller decides when bytes go to disk. Document state:
    closed -> document -> urlset|index -> closed.
    """

    def __init__(self, base_url, generator_info=None, stylesheet=None, env=None):
        self.base_url       = base_url
        self.generator_info = generator_info
        self.stylesheet     = stylesheet
        self.env            = env or make_env()
        self.state          = CLOSED
        self.buffered_bytes = 0
        self._buffer        = []
        self._namespaces    = [(ext.prefix, ext.namespace) for ext in EXTENSIONS.values()]
        self._opening       = None
        self._closing       = None

    def render(self, template_name, **context) -> str:
        return self.env.get_template(template_name).render(**context)

    format_date = staticmethod(format_datetime)

    def _require(self, *states):
        if self.state not in states:
            raise SitemapRuntimeError(
                f"Writer is in state {self.state!r}, expected one of: {', '.join(states)}"
            )

    def write_raw(self, text: str) -> int:
        size = len(text.encode("utf-8"))
        self._buffer.append(text)
        self.buffered_bytes += size
        return size

    def drain(self) -> bytes:
        """Return and forget everything buffered since the last drain."""
        data = "".join(self._buffer).encode("utf-8")
        self._buffer = []
        self.buffered_bytes = 0
        return data

    def set_stylesheet(self, href):
        self.stylesheet = href
        self._opening = None

    def _header(self) -> str:
        return self.render(
            "header.xml.j2",
            stylesheet=self.stylesheet,
            generator_info=self.generator_info,
        )

    def _start(self, header):
        self._require(CLOSED)
        self.write_raw(header)
        self.state = DOCUMENT

    # urlset documents

    @property
    def urlset_opening(self) -> str:
        if self._opening is None:
            self._opening = self._header() + self.render(
                "urlset_open.xml.j2", namespaces=self._namespaces,
            )
        return self._opening

    def start_document(self):
        self._start(self.urlset_opening)
        self.state = URLSET

    def render_url(self, entry: UrlEntry) -> str:
        loc = join_url(self.base_url, entry.path)
        fragments = [
            Markup(EXTENSIONS[name].render(self, loc, payload))
            for name, payload in entry.extensions.items()
        ]
        return self.render(
            "url.xml.j2",
            loc=loc,
            lastmod=entry.lastmod,
            changefreq=entry.changefreq,
            priority=entry.priority,
            alternates=entry.alternates,
            extensions=fragments,
        )

    def write_url(self, entry: UrlEntry, rendered=None) -> int:
        self._require(URLSET)
        return self.write_raw(rendered if rendered is not None else self.render_url(entry))

    @property
    def urlset_closing(self) -> str:
        if self._closing is None:
            self._closing = self.render("urlset_close.xml.j2")
        return self._closing

    def end_document(self):
        self._require(URLSET)
        self.write_raw(self.urlset_closing)
        self.state = CLOSED

    # sitemap index documents

    def start_index_document(self):
        self._start(self._header() + self.render("index_open.xml.j2"))
        self.state = INDEX

    def write_index_entry(self, loc, lastmod=None):
        self._require(INDEX)
        self.write_raw(self.render(
            "index_entry.xml.j2",
            loc=loc,
            lastmod=format_datetime(lastmod or datetime.now().astimezone()),
        ))

    def end_index_document(self):
        self._require(INDEX)
        self.write_raw(self.render("index_close.xml.j2"))
        self.state = CLOSED
