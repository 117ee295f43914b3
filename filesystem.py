import gzip
import logging
import os
import shutil

from errors import SitemapRuntimeError

logger = logging.getLogger("sitemap.fs")


class FileSystem:
    """
    Thin wrapper over the local disk. The generator only touches files
    through this object, so tests can hand it a mock instead.
    Every OSError comes back as SitemapRuntimeError naming the path.
    """

    def exists(self, path) -> bool:
        return os.path.exists(path)

    def read(self, path) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise SitemapRuntimeError(f"Failed to read file {path}: {e}") from e

    def write(self, path, data: bytes, append=False):
        try:
            with open(path, "ab" if append else "wb") as f:
                f.write(data)
        except OSError as e:
            raise SitemapRuntimeError(f"Failed to write file {path}: {e}") from e

    def append(self, path, data: bytes):
        self.write(path, data, append=True)

    def rename(self, src, dst):
        try:
            os.replace(src, dst)
        except OSError as e:
            raise SitemapRuntimeError(f"Failed to rename {src} to {dst}: {e}") from e

    def copy_gzip(self, src, dst):
        """Stream src through a gzip filter into dst."""
        try:
            with open(src, "rb") as f_in, gzip.open(dst, "wb") as f_out:
                shutil.copyfileobj(f_in, f_out)
        except OSError as e:
            raise SitemapRuntimeError(f"Failed to compress {src} into {dst}: {e}") from e
        logger.debug("Compressed %s -> %s", src, dst)

    def delete(self, path):
        try:
            os.remove(path)
        except OSError as e:
            raise SitemapRuntimeError(f"Failed to delete file {path}: {e}") from e

    def makedirs(self, path):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise SitemapRuntimeError(f"Failed to create directory {path}: {e}") from e
