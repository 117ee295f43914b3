from unittest import mock

import pytest
import requests

from errors import SitemapRuntimeError
from runtime import Runtime


def test_http_feature_follows_session():
    assert Runtime().is_feature_available("http")
    assert Runtime(session=mock.Mock()).is_feature_available("http")
    assert not Runtime(enable_http=False).is_feature_available("http")
    assert not Runtime().is_feature_available("telepathy")


def test_http_get_when_disabled():
    runtime = Runtime(enable_http=False)
    with pytest.raises(SitemapRuntimeError, match="disabled"):
        runtime.http_get("http://example.com/ping")


def test_http_get_uses_timeout():
    session = mock.Mock()
    session.get.return_value = mock.Mock(status_code=200, text="ok")
    runtime = Runtime(timeout=3, session=session)
    assert runtime.http_get("http://example.com/ping") == (200, "ok")
    session.get.assert_called_once_with("http://example.com/ping", timeout=3)


def test_http_get_wraps_request_errors():
    session = mock.Mock()
    session.get.side_effect = requests.ConnectionError("refused")
    runtime = Runtime(session=session)
    with pytest.raises(SitemapRuntimeError, match="http://example.com/ping"):
        runtime.http_get("http://example.com/ping")
