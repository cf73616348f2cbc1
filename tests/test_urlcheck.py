"""Tests for registered URL validation."""

import requests

from libraries.coordinates import LibraryCoordinate
from urlcheck import validate_urls

REPO = "https://repo.example.invalid/maven2"
GSON_URL = REPO + "/com/google/code/gson/gson/2.8.0/gson-2.8.0.jar"


def test_reports_passes_and_labelled_failures(http_stub):
    http_stub.add("https://a.invalid/ok.zip", status=200)
    http_stub.add("https://a.invalid/moved.zip", status=302)
    http_stub.add("https://a.invalid/down.zip", exc=requests.ConnectionError("dns"))
    http_stub.add(GSON_URL, status=200)
    libraries = {
        "gson": LibraryCoordinate.parse("com.google.code.gson:gson:2.8.0", name="gson"),
        "guava": LibraryCoordinate.parse("com.google.guava:guava:21.0", name="guava"),
    }

    report = validate_urls(
        [
            ("1.12.2-stable_39", "https://a.invalid/ok.zip"),
            ("1.12-stable_39", "https://a.invalid/moved.zip"),
            ("1.11-stable_32", "https://a.invalid/down.zip"),
            ("1.10.2-stable_29", "https://a.invalid/gone.zip"),
        ],
        libraries,
        repo_root=REPO,
    )

    assert report.passed == 3
    assert report.failed == [
        "mapping:1.11-stable_32",
        "mapping:1.10.2-stable_29",
        "library:guava",
    ]
    assert report.total == 6
    assert report.ok is False


def test_head_requests_follow_redirects(http_stub):
    http_stub.add("https://a.invalid/ok.zip", status=200)

    report = validate_urls([("k", "https://a.invalid/ok.zip")], {})

    assert report.ok
    call = http_stub.head_calls[0]
    assert call["allow_redirects"] is True
    assert call["timeout"] == (10, 10)
    assert http_stub.calls == []
