"""Shared fixtures: an in-process stand-in for requests.get/head."""

import io
import json
import zipfile

import pytest


class FakeResponse:
    """Minimal streamed response."""

    def __init__(self, status_code=200, body=b"", headers=None, stream_error=None):
        self.status_code = status_code
        self._body = body
        self.headers = headers or {}
        self._stream_error = stream_error
        self.closed = False

    @property
    def text(self):
        return self._body.decode("utf-8")

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self._body), chunk_size):
            yield self._body[i:i + chunk_size]
        if self._stream_error is not None:
            raise self._stream_error

    def close(self):
        self.closed = True


class HttpStub:
    """Routes URLs to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.head_calls = []

    def add(self, url, status=200, body=b"", exc=None, stream_error=None):
        self.routes[url] = (status, body, exc, stream_error)

    def add_json(self, url, payload, status=200):
        self.add(url, status=status, body=json.dumps(payload).encode("utf-8"))

    def get(self, url, timeout=None, headers=None, **kwargs):
        self.calls.append({"url": url, "timeout": timeout, "headers": headers, **kwargs})
        status, body, exc, stream_error = self.routes.get(url, (404, b"", None, None))
        if exc is not None:
            raise exc
        return FakeResponse(status, body, stream_error=stream_error)

    def head(self, url, timeout=None, headers=None, **kwargs):
        self.head_calls.append({"url": url, "timeout": timeout, "headers": headers, **kwargs})
        status, _, exc, _ = self.routes.get(url, (404, b"", None, None))
        if exc is not None:
            raise exc
        return FakeResponse(status)


@pytest.fixture
def http_stub(monkeypatch):
    """Replace network access in common.http_client with an HttpStub."""
    stub = HttpStub()
    monkeypatch.setattr("common.http_client.requests.get", stub.get)
    monkeypatch.setattr("common.http_client.requests.head", stub.head)
    return stub


def make_zip(files, compression=zipfile.ZIP_STORED):
    """Build zip bytes from a {name: text} mapping."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


def corrupt_member(archive, name, count=20):
    """Flip the first ``count`` payload bytes of one member, leaving the directory intact."""
    data = bytearray(archive)
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        info = zf.getinfo(name)
    offset = info.header_offset
    name_len = int.from_bytes(data[offset + 26:offset + 28], "little")
    extra_len = int.from_bytes(data[offset + 28:offset + 30], "little")
    start = offset + 30 + name_len + extra_len
    for i in range(start, start + min(count, info.compress_size)):
        data[i] ^= 0xFF
    return bytes(data)


@pytest.fixture
def mapping_zip():
    """A well-formed MCP archive with an extra entry that must be ignored."""
    return make_zip({
        "fields.csv": "searge,name,side,desc\nfield_1_a,foo,0,\n",
        "methods.csv": "searge,name,side,desc\nfunc_1_a,bar,0,\n",
        "params.csv": "param,name,side\np_1_1_,baz,0\n",
        "README.txt": "ignored",
    })


def write_mapping_dir(path, with_params=False):
    """Create a valid mapping directory at path."""
    path.mkdir(parents=True, exist_ok=True)
    (path / "fields.csv").write_text("searge,name\nfield_1_a,foo\n", encoding="utf-8")
    (path / "methods.csv").write_text("searge,name\nfunc_1_a,bar\n", encoding="utf-8")
    if with_params:
        (path / "params.csv").write_text("param,name\np_1_1_,baz\n", encoding="utf-8")
    return path


