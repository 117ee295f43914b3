import requests

from errors import SitemapRuntimeError


class Runtime:
    """
    Network access behind one object so tests can swap it out.
    With enable_http=False there is no session and the "http" feature
    reports unavailable.
    """

    def __init__(self, timeout=10, session=None, enable_http=True):
        self.timeout = timeout
        if session is None and enable_http:
            session = requests.Session()
        self.session = session

    def is_feature_available(self, name) -> bool:
        if name == "http":
            return self.session is not None
        return False

    def http_get(self, url):
        """GET url and return (status_code, body text)."""
        if self.session is None:
            raise SitemapRuntimeError(f"HTTP is disabled, cannot request {url}")
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise SitemapRuntimeError(f"HTTP request to {url} failed: {e}") from e
        return r.status_code, r.text
