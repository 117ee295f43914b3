import io
import json
import logging

import pytest

import cli


@pytest.fixture(autouse=True)
def no_env(monkeypatch):
    monkeypatch.delenv("SITEMAP_BASE_URL", raising=False)
    monkeypatch.delenv("BASE_URL", raising=False)
    monkeypatch.setenv("SITEMAP_GENERATOR_INFO", "no")
    yield
    # main() attaches handlers bound to the captured streams
    logger = logging.getLogger("sitemap")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


def test_parse_line():
    assert cli.parse_line("/about\t2024-01-01\tmonthly\t0.5\n") == {
        "path": "/about", "lastmod": "2024-01-01", "changefreq": "monthly", "priority": "0.5",
    }
    assert cli.parse_line("/\t\tdaily\n") == {
        "path": "/", "lastmod": None, "changefreq": "daily", "priority": None,
    }


def test_read_entries_skips_blank_and_comment_lines():
    stream = io.StringIO("# pages\n/\n\n/contact\n")
    assert [e["path"] for e in cli.read_entries(stream)] == ["/", "/contact"]


def test_main_writes_sitemap_and_robots(tmp_path, capsys):
    paths = tmp_path / "paths.txt"
    paths.write_text("/\n/about\t2024-01-01\tmonthly\t0.5\n/team\n", encoding="utf-8")
    out = tmp_path / "public"

    code = cli.main([
        "--base", "https://example.com", "--out", str(out), "--input", str(paths),
        "--max-urls", "2", "--robots", "--log-level", "WARNING",
    ])

    assert code == 0
    manifest = json.loads(capsys.readouterr().out)
    assert manifest["sitemaps_index_url"] == "https://example.com/sitemap-index.xml"
    assert len(manifest["sitemaps_location"]) == 2
    assert (out / "sitemap1.xml").exists()
    assert (out / "robots.txt").read_text().endswith(
        "Sitemap: https://example.com/sitemap-index.xml\n"
    )


def test_main_reports_validation_errors(tmp_path, capsys):
    paths = tmp_path / "paths.txt"
    paths.write_text("/\t\tsometimes\n", encoding="utf-8")
    code = cli.main([
        "--base", "https://example.com", "--out", str(tmp_path), "--input", str(paths),
        "--log-level", "CRITICAL",
    ])
    assert code == 1
    assert capsys.readouterr().out == ""


def test_main_requires_base_url(tmp_path):
    paths = tmp_path / "paths.txt"
    paths.write_text("/\n", encoding="utf-8")
    assert cli.main(["--input", str(paths), "--out", str(tmp_path), "--log-level", "CRITICAL"]) == 1
