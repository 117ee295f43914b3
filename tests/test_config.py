import pytest

from config import VERSION, Config
from errors import ValidationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "BASE_URL", "SITEMAP_BASE_URL", "SITEMAP_OUTPUT_DIR", "SITEMAP_FILENAME",
        "SITEMAP_INDEX_FILENAME", "SITEMAP_ROBOTS_FILENAME", "SITEMAP_MAX_URLS",
        "SITEMAP_COMPRESS", "SITEMAP_COMPRESS_INDEX", "SITEMAP_STYLESHEET",
        "SITEMAP_GENERATOR_INFO", "SITEMAP_HTTP_TIMEOUT", "SITEMAP_SEARCH_ENGINES",
        "SITEMAP_ENABLE_HTTP",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults():
    config = Config(base_url="https://example.com")
    assert config.sitemap_filename == "sitemap.xml"
    assert config.index_filename == "sitemap-index.xml"
    assert config.robots_filename == "robots.txt"
    assert config.max_urls_per_sitemap == 50000
    assert not config.compression
    assert not config.compress_index
    assert config.generator_version == VERSION


@pytest.mark.parametrize("settings", [
    {"sitemap_filename": "sitemap.txt"},
    {"sitemap_filename": ""},
    {"index_filename": ""},
    {"robots_filename": ""},
    {"max_urls_per_sitemap": 0},
    {"max_urls_per_sitemap": 50001},
])
def test_invalid_settings(settings):
    with pytest.raises(ValidationError):
        Config(base_url="https://example.com", **settings)


def test_from_env(clean_env):
    clean_env.setenv("SITEMAP_BASE_URL", "https://env.example.com")
    clean_env.setenv("SITEMAP_OUTPUT_DIR", "/tmp/out")
    clean_env.setenv("SITEMAP_MAX_URLS", "100")
    clean_env.setenv("SITEMAP_COMPRESS", "yes")
    clean_env.setenv("SITEMAP_GENERATOR_INFO", "0")
    clean_env.setenv("SITEMAP_SEARCH_ENGINES", "http://a/?s= http://b/?s=")
    clean_env.setenv("SITEMAP_ENABLE_HTTP", "false")
    config = Config.from_env()
    assert config.base_url == "https://env.example.com"
    assert config.save_directory == "/tmp/out"
    assert config.max_urls_per_sitemap == 100
    assert config.compression
    assert not config.compress_index
    assert not config.include_generator_info
    assert config.search_engines == ["http://a/?s=", "http://b/?s="]
    assert not config.enable_http


def test_from_env_falls_back_to_base_url(clean_env):
    clean_env.setenv("BASE_URL", "https://legacy.example.com")
    assert Config.from_env().base_url == "https://legacy.example.com"


def test_overrides_win_over_env(clean_env):
    clean_env.setenv("SITEMAP_BASE_URL", "https://env.example.com")
    clean_env.setenv("SITEMAP_MAX_URLS", "100")
    config = Config.from_env(base_url="https://cli.example.com", max_urls_per_sitemap=None)
    assert config.base_url == "https://cli.example.com"
    assert config.max_urls_per_sitemap == 100
