import logging
from urllib.parse import quote, urlparse

from bs4 import BeautifulSoup

from errors import SitemapRuntimeError

logger = logging.getLogger("sitemap.notifier")

YAHOO_PING_URL = "http://search.yahooapis.com/SiteExplorerService/V1/ping?sitemap="
YAHOO_UPDATE_URL = (
    "http://search.yahooapis.com/SiteExplorerService/V1/updateNotification?appid={app_id}&url="
)

DEFAULT_SEARCH_ENGINES = [
    "http://www.google.com/ping?sitemap=",
    "http://submissions.ask.com/ping?sitemap=",
    "http://www.bing.com/ping?sitemap=",
    "http://www.webmaster.yandex.ru/ping?sitemap=",
]


def short_site(url) -> str:
    # http://www.google.com/ping -> google.com
    host = urlparse(url).hostname or ""
    return ".".join(host.split(".")[-2:])


def strip_markup(body) -> str:
    text = BeautifulSoup(body or "", "html.parser").get_text(" ")
    return " ".join(text.split())


def submit_sitemap(runtime, sitemap_url, search_engines=None, yahoo_app_id=None):
    """
    Ping every search engine with sitemap_url, one after another.
    Returns one result dict per engine: site, fullsite, http_code, message.
    """
    if not runtime.is_feature_available("http"):
        raise SitemapRuntimeError("Cannot submit sitemap: the http feature is not available")

    if search_engines is not None:
        engines = list(search_engines)
    elif yahoo_app_id:
        engines = [YAHOO_UPDATE_URL.format(app_id=quote(yahoo_app_id, safe=""))] + DEFAULT_SEARCH_ENGINES
    else:
        engines = [YAHOO_PING_URL] + DEFAULT_SEARCH_ENGINES

    results = []
    for engine in engines:
        submit_url = engine + quote(sitemap_url, safe=":/")
        status, body = runtime.http_get(submit_url)
        logger.info("Pinged %s -> %s", submit_url, status)
        results.append({
            "site":      short_site(engine),
            "fullsite":  submit_url,
            "http_code": status,
            "message":   strip_markup(body),
        })
    return results
