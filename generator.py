import logging
import os
from datetime import datetime

from errors import CapacityError, SitemapRuntimeError
from filesystem import FileSystem
from models import GeneratedFiles, UrlEntry, as_alternates
from notifier import submit_sitemap
from robots import patch_robots
from runtime import Runtime
from validator import (
    validate_entry, validate_filename, validate_max_urls_per_sitemap,
    validate_path, validate_sitemap_filename,
)
from writer import SitemapWriter, format_datetime, format_priority, join_url

logger = logging.getLogger("sitemap.generator")

# sitemaps.org limits
MAX_FILE_SIZE = 52428800
MAX_SITEMAPS_PER_INDEX = 50000

# buffered entries are written to disk at least this often
FLUSH_EVERY = 1000


def numbered_filename(filename, n):
    # sitemap.xml -> sitemap3.xml
    return f"{filename[:-len('.xml')]}{n}.xml"


class SitemapGenerator:
    """
    Streams URL entries into temporary sitemap files, splitting them by
    entry count and byte size, then finalize() moves them to their public
    names (optionally gzipped) and writes a sitemap index when there is
    more than one.

    Typical run:

        g = SitemapGenerator(Config(base_url="https://example.com", save_directory="out"))
        for path in paths:
            g.add_url(path, lastmod=..., changefreq="weekly", priority=0.5)
        g.flush()
        g.finalize()
        g.update_robots()
    """

    def __init__(self, config, fs=None, runtime=None, now=None):
        self.config        = config
        self.fs            = fs or FileSystem()
        self.runtime       = runtime or Runtime(
            timeout=config.http_timeout, enable_http=config.enable_http,
        )
        self.max_file_size = MAX_FILE_SIZE

        started = now or datetime.now().astimezone()
        self._chunk_name_format = "sm-{}-%d.xml" % int(started.timestamp())
        self._index_tmp_name    = "sm-index-%d.xml" % int(started.timestamp())

        generator_info = None
        if config.include_generator_info:
            generator_info = {
                "generator_class": type(self).__name__,
                "version":         config.generator_version,
                "generated_on":    format_datetime(started),
            }
        self._writer = SitemapWriter(
            config.base_url, generator_info=generator_info, stylesheet=config.stylesheet,
        )

        self._total_urls      = 0
        self._chunk_counter   = 0
        self._chunk_path      = None  # None while no chunk is open
        self._chunk_urls      = 0
        self._chunk_bytes     = 0     # bytes already on disk for the open chunk
        self._flushed_chunks  = []
        self._generated_files = None

    # settings

    def set_sitemap_filename(self, filename):
        self.config.sitemap_filename = validate_sitemap_filename(filename)
        return self

    def set_sitemap_index_filename(self, filename):
        self.config.index_filename = validate_filename(filename, "Sitemap index")
        return self

    def set_robots_filename(self, filename):
        self.config.robots_filename = validate_filename(filename, "Robots")
        return self

    def set_max_urls_per_sitemap(self, value):
        self.config.max_urls_per_sitemap = validate_max_urls_per_sitemap(value)
        return self

    def set_sitemap_stylesheet(self, href):
        self.config.stylesheet = href
        self._writer.set_stylesheet(href)
        return self

    def enable_compression(self):
        self.config.compression = True
        return self

    def disable_compression(self):
        self.config.compression = False
        return self

    def is_compression_enabled(self):
        return self.config.compression

    # adding entries

    @property
    def max_total_urls(self):
        return self.config.max_urls_per_sitemap * MAX_SITEMAPS_PER_INDEX

    @property
    def _chunk_room(self):
        # room left for <url> elements once the closing tag is accounted for
        return self.max_file_size - len(self._writer.urlset_closing.encode("utf-8"))

    def _chunk_size(self):
        return self._chunk_bytes + self._writer.buffered_bytes

    def add_url(self, path, lastmod=None, changefreq=None, priority=None,
                alternates=None, extensions=None):
        """
        Validate one entry and stream it into the current chunk.
        Raises ValidationError for bad input and CapacityError once the
        lifetime limit is reached; in both cases nothing is written.
        """
        validate_path(path)
        loc = join_url(self.config.base_url, path)
        number, payloads = validate_entry(loc, path, lastmod, changefreq, priority, extensions)

        if self._total_urls >= self.max_total_urls:
            raise CapacityError(
                f"Maximum number of URLs reached: {self.max_total_urls} "
                f"({self.config.max_urls_per_sitemap} per sitemap x "
                f"{MAX_SITEMAPS_PER_INDEX} sitemaps)"
            )

        entry = UrlEntry(
            path       = path,
            lastmod    = format_datetime(lastmod) if lastmod is not None else None,
            changefreq = changefreq,
            priority   = format_priority(number) if number is not None else None,
            alternates = as_alternates(alternates),
            extensions = payloads,
        )
        rendered = self._writer.render_url(entry)
        size = len(rendered.encode("utf-8"))
        if size > self._chunk_room - len(self._writer.urlset_opening.encode("utf-8")):
            raise CapacityError(
                f"URL element for {loc} is {size} bytes and cannot fit into "
                f"a sitemap of at most {self.max_file_size} bytes"
            )

        if self._chunk_path is None:
            self._open_chunk()
        elif self._chunk_size() + size > self._chunk_room:
            logger.info(
                "Chunk %s reached %d bytes after %d URLs, starting a new one",
                self._chunk_path, self._chunk_size(), self._chunk_urls,
            )
            self._close_chunk()
            self._open_chunk()

        self._writer.write_url(entry, rendered)
        self._chunk_urls += 1
        self._total_urls += 1

        if self._chunk_urls >= self.config.max_urls_per_sitemap:
            self._flush_writer()
            self._close_chunk()
        elif self._total_urls % FLUSH_EVERY == 0:
            self._flush_writer()
        return self

    def add_urls(self, urls):
        """Add several entries; each is a mapping of add_url() arguments or a tuple."""
        for url in urls:
            if isinstance(url, dict):
                self.add_url(**url)
            elif isinstance(url, str):
                self.add_url(url)
            else:
                self.add_url(*url)
        return self

    def get_urls_count(self):
        return self._total_urls

    # chunk lifecycle

    def _open_chunk(self):
        if self._chunk_counter >= MAX_SITEMAPS_PER_INDEX:
            raise CapacityError(
                f"Maximum number of sitemap files reached: {MAX_SITEMAPS_PER_INDEX}"
            )
        if self._chunk_counter == 0:
            self.fs.makedirs(self.config.save_directory)
        self._chunk_counter += 1
        self._chunk_path = os.path.join(
            self.config.save_directory, self._chunk_name_format.format(self._chunk_counter)
        )
        self._chunk_urls = 0
        self._chunk_bytes = 0
        self._writer.start_document()

    def _flush_writer(self):
        data = self._writer.drain()
        if not data:
            return
        # the first write of a chunk truncates any stale file of the same name
        self.fs.write(self._chunk_path, data, append=self._chunk_bytes > 0)
        self._chunk_bytes += len(data)
        logger.debug("Flushed %d bytes to %s", len(data), self._chunk_path)

    def _close_chunk(self):
        self._writer.end_document()
        self._flush_writer()
        self._flushed_chunks.append(self._chunk_path)
        logger.info(
            "Closed chunk %s: %d URLs, %d bytes",
            self._chunk_path, self._chunk_urls, self._chunk_bytes,
        )
        self._chunk_path = None
        self._chunk_urls = 0
        self._chunk_bytes = 0

    def flush(self):
        """Write out everything buffered and close the open chunk, if any."""
        if self._chunk_path is None:
            return self
        self._flush_writer()
        self._close_chunk()
        return self

    # finalizing

    def _public_url(self, filename):
        return join_url(self.config.base_url, filename)

    def _publish(self, src, filename, compress):
        target = os.path.join(self.config.save_directory, filename)
        if compress:
            self.fs.copy_gzip(src, target)
            self.fs.delete(src)
        else:
            self.fs.rename(src, target)
        return target

    def _write_index(self, urls):
        w = self._writer
        now = datetime.now().astimezone()
        w.start_index_document()
        for url in urls:
            w.write_index_entry(url, now)
        w.end_index_document()

        tmp = os.path.join(self.config.save_directory, self._index_tmp_name)
        self.fs.write(tmp, w.drain())
        filename = self.config.index_filename
        if self.config.compress_index:
            filename += ".gz"
        return self._publish(tmp, filename, self.config.compress_index), filename

    def finalize(self):
        """
        Move the closed chunks to their public names and write the index.

        Not transactional: if this fails halfway some chunks may already
        be renamed while others are still under their temporary names.
        """
        if self._chunk_path is not None:
            raise SitemapRuntimeError(
                "A sitemap chunk is still open; call flush() before finalize()"
            )
        if not self._flushed_chunks:
            raise SitemapRuntimeError(
                "To finalize a sitemap, first add URLs with add_url() and write them with flush()"
            )

        compress = self.config.compression
        suffix = ".gz" if compress else ""

        if len(self._flushed_chunks) == 1:
            filename = self.config.sitemap_filename + suffix
            location = self._publish(self._flushed_chunks[0], filename, compress)
            generated = GeneratedFiles(
                sitemaps_location  = [location],
                sitemaps_index_url = self._public_url(filename),
            )
        else:
            locations, urls = [], []
            for n, chunk in enumerate(self._flushed_chunks, start=1):
                filename = numbered_filename(self.config.sitemap_filename, n) + suffix
                locations.append(self._publish(chunk, filename, compress))
                urls.append(self._public_url(filename))
            index_location, index_filename = self._write_index(urls)
            generated = GeneratedFiles(
                sitemaps_location       = locations,
                sitemaps_index_url      = self._public_url(index_filename),
                sitemaps_index_location = index_location,
            )

        logger.info(
            "Finalized %d sitemap file(s), entry point %s",
            len(generated.sitemaps_location), generated.sitemaps_index_url,
        )
        self._flushed_chunks = []
        self._generated_files = generated
        return generated

    def get_generated_files(self):
        return self._generated_files

    # after finalize

    def _require_generated(self, action):
        if self._generated_files is None:
            raise SitemapRuntimeError(
                f"To {action}, first create the sitemap with flush() and finalize()"
            )
        return self._generated_files

    def update_robots(self):
        generated = self._require_generated("update robots.txt")
        path = os.path.join(self.config.save_directory, self.config.robots_filename)
        existing = None
        if self.fs.exists(path):
            existing = self.fs.read(path).decode("utf-8")
        content = patch_robots(existing, generated.sitemaps_index_url)
        self.fs.write(path, content.encode("utf-8"))
        logger.info("Updated %s with %s", path, generated.sitemaps_index_url)
        return self

    def submit_sitemap(self, yahoo_app_id=None):
        generated = self._require_generated("submit the sitemap")
        return submit_sitemap(
            self.runtime,
            generated.sitemaps_index_url,
            search_engines=self.config.search_engines,
            yahoo_app_id=yahoo_app_id,
        )
