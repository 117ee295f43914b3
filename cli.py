"""
Command line entry point.

Reads one URL path per line (optionally followed by tab separated
lastmod, changefreq and priority columns) and writes the sitemap files:

    printf '/\n/about\t2024-01-01\tmonthly\t0.5\n' | \
        python cli.py --base https://example.com --out public --robots
"""
import argparse
import json
import sys

from config import Config
from errors import SitemapError
from generator import SitemapGenerator
from logging_setup import get_app_logger, setup_logging

logger = get_app_logger("sitemap.cli")


def parse_line(line):
    parts = [p.strip() or None for p in line.rstrip("\r\n").split("\t")]
    parts += [None] * (4 - len(parts))
    path, lastmod, changefreq, priority = parts[:4]
    return {"path": path, "lastmod": lastmod, "changefreq": changefreq, "priority": priority}


def read_entries(stream):
    for line in stream:
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        yield parse_line(line)


def build_parser():
    p = argparse.ArgumentParser(description="Generate sitemap.xml files from a list of URL paths")
    p.add_argument("--base", help="site URL, e.g. https://example.com (default: $SITEMAP_BASE_URL)")
    p.add_argument("--out", help="output directory (default: $SITEMAP_OUTPUT_DIR or .)")
    p.add_argument("--input", default="-", help="file with one path per line, - for stdin")
    p.add_argument("--filename", help="sitemap filename, must end with .xml")
    p.add_argument("--index-filename", help="sitemap index filename")
    p.add_argument("--max-urls", type=int, help="max URLs per sitemap file (1..50000)")
    p.add_argument("--compress", action="store_true", default=None, help="gzip the sitemap files")
    p.add_argument("--stylesheet", help="XSL stylesheet href")
    p.add_argument("--robots", action="store_true", help="add the sitemap to robots.txt")
    p.add_argument("--submit", action="store_true", help="ping search engines")
    p.add_argument("--yahoo-app-id", help="Yahoo application id for --submit")
    p.add_argument("--log-level", default="INFO")
    p.add_argument("--log-dir", help="also log to a rotating file in this directory")
    return p


def run(args, stream):
    config = Config.from_env(
        base_url=args.base,
        save_directory=args.out,
        sitemap_filename=args.filename,
        index_filename=args.index_filename,
        max_urls_per_sitemap=args.max_urls,
        compression=args.compress,
        stylesheet=args.stylesheet,
    )
    if not config.base_url:
        raise SitemapError("A base URL is required (--base or SITEMAP_BASE_URL)")

    generator = SitemapGenerator(config)
    generator.add_urls(read_entries(stream))
    generator.flush()
    generated = generator.finalize()
    logger.info("Wrote %d URLs", generator.get_urls_count())

    result = generated.to_dict()
    if args.robots:
        generator.update_robots()
    if args.submit:
        result["submissions"] = generator.submit_sitemap(args.yahoo_app_id)
    return result


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_dir)
    try:
        if args.input == "-":
            result = run(args, sys.stdin)
        else:
            with open(args.input, encoding="utf-8") as f:
                result = run(args, f)
    except SitemapError as e:
        logger.error("%s", e)
        return 1
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
