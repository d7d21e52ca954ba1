# path_prefixer.py
import re

_SEPARATORS = re.compile(r"/+")


def normalize_path(path: str) -> str:
    """
    Collapses repeated separators and trims leading/trailing ones.
    The root directory normalizes to an empty string.
    """
    return _SEPARATORS.sub("/", path or "").strip("/")


class PathPrefixer:
    """
    Converts between caller-facing (external) paths and Dropbox (internal) paths.

    Internal paths always start with exactly one "/" and never end with one.
    The root is "" without a prefix and "/<prefix>" with one, because the
    Dropbox API denotes its own root by an empty string rather than "/".
    """

    def __init__(self, prefix: str = ""):
        self.prefix = normalize_path(prefix)

    @property
    def root(self) -> str:
        return f"/{self.prefix}" if self.prefix else ""

    def prefix_path(self, path: str) -> str:
        path = normalize_path(path)
        if not path:
            return self.root
        return f"{self.root}/{path}"

    def strip_prefix(self, path: str) -> str:
        # Dropbox paths are case-insensitive; path_display may not match the configured case.
        path = normalize_path(path)
        if self.prefix:
            length = len(self.prefix)
            if path[:length].casefold() != self.prefix.casefold():
                return path
            if len(path) == length:
                return ""
            if path[length] == "/":
                path = path[length + 1 :]
        return path

    def strip_directory_prefix(self, path: str) -> str:
        return self.strip_prefix(path).rstrip("/")
