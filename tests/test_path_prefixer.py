# tests/test_path_prefixer.py
import pytest

from dbxfs.path_prefixer import PathPrefixer, normalize_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("", ""),
        ("/", ""),
        ("a", "a"),
        ("/a/b/", "a/b"),
        ("a//b///c", "a/b/c"),
    ],
)
def test_normalize_path(path, expected):
    assert normalize_path(path) == expected


def test_prefix_path_with_prefix():
    prefixer = PathPrefixer("prefix")

    assert prefixer.prefix_path("something") == "/prefix/something"
    assert prefixer.prefix_path("/nested//dir/") == "/prefix/nested/dir"


def test_prefix_path_without_prefix():
    prefixer = PathPrefixer()

    assert prefixer.prefix_path("something") == "/something"
    assert prefixer.prefix_path("//a/b") == "/a/b"


def test_root_is_never_double_slashed():
    """Dropbox denotes its root by an empty string, not by '/'."""
    assert PathPrefixer().prefix_path("") == ""
    assert PathPrefixer("/").prefix_path("/") == ""
    assert PathPrefixer("/prefix/").prefix_path("/") == "/prefix"


def test_strip_prefix_with_case_changing_characters():
    """Lower-casing "İ" yields two code points; the cut must follow the prefix itself."""
    prefixer = PathPrefixer("İstanbul")

    assert prefixer.strip_prefix("/İSTANBUL/photos/a.jpg") == "photos/a.jpg"
    assert prefixer.strip_prefix("/İstanbul") == ""


def test_strip_prefix():
    prefixer = PathPrefixer("prefix")

    assert prefixer.strip_prefix("/prefix/file") == "file"
    assert prefixer.strip_prefix("/prefix") == ""
    assert prefixer.strip_prefix("/prefix/a/b.txt") == "a/b.txt"


def test_strip_prefix_ignores_case():
    prefixer = PathPrefixer("Prefix")

    assert prefixer.strip_prefix("/prefix/File.txt") == "File.txt"


def test_strip_prefix_does_not_strip_partial_segments():
    prefixer = PathPrefixer("prefix")

    assert prefixer.strip_prefix("/prefixed/file") == "prefixed/file"


def test_strip_directory_prefix():
    prefixer = PathPrefixer("prefix")

    assert prefixer.strip_directory_prefix("/prefix/dir/") == "dir"
    assert prefixer.strip_directory_prefix("/prefix/") == ""


@pytest.mark.parametrize("prefix", ["", "prefix", "/deep/prefix/"])
@pytest.mark.parametrize("path", ["", "file", "/a/b/", "a//b", "dir/file.txt"])
def test_strip_prefix_reverses_prefix_path(prefix, path):
    prefixer = PathPrefixer(prefix)

    assert prefixer.strip_prefix(prefixer.prefix_path(path)) == normalize_path(path)
