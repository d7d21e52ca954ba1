# tests/test_mime.py
from dbxfs.mime import ExtensionMimeTypeDetector


def test_detects_from_extension():
    detector = ExtensionMimeTypeDetector()

    assert detector.detect_mime_type_from_path("dir/report.pdf") == "application/pdf"
    assert detector.detect_mime_type_from_path("notes.txt") == "text/plain"


def test_unknown_extension_falls_back_to_default():
    assert ExtensionMimeTypeDetector().detect_mime_type_from_path("file.unknownext") is None

    detector = ExtensionMimeTypeDetector(default="application/octet-stream")
    assert detector.detect_mime_type_from_path("no_extension") == "application/octet-stream"
