SAMPLE_ROBOTS_LINES = ["User-agent: *", "Allow: /"]


def patch_robots(existing, sitemap_url) -> str:
    """
    Point robots.txt at sitemap_url.

    existing is the current robots.txt text, or None when there is no
    file yet. Old "Sitemap:" lines are dropped; everything else is kept.
    """
    if existing is None:
        lines = list(SAMPLE_ROBOTS_LINES)
    else:
        lines = [line for line in existing.splitlines() if not line.startswith("Sitemap:")]
    lines.append(f"Sitemap: {sitemap_url}")
    return "\n".join(lines) + "\n"
