from pathlib import Path

import pytest
import requests

from sarif_filter import loader
from sarif_filter.loader import LoadError, load_report, load_suppression_table, read_source


class _FakeResponse:
    def __init__(self, status_code: int, content: bytes = b""):
        self.status_code = status_code
        self.content = content


def _fake_get(responses: dict, calls: list):
    def fake_get(url, timeout=None):
        calls.append((url, timeout))
        result = responses[url]
        if isinstance(result, Exception):
            raise result
        return result

    return fake_get


def test_read_source_from_path(tmp_path: Path):
    p = tmp_path / "identities.yaml"
    p.write_text("identities: {}\n")
    assert read_source(str(p)) == b"identities: {}\n"


def test_read_source_missing_file(tmp_path: Path):
    with pytest.raises(LoadError, match="failed to read"):
        read_source(str(tmp_path / "missing.yaml"))


def test_read_source_from_url(monkeypatch):
    calls: list = []
    url = "https://example.com/identities.yaml"
    monkeypatch.setattr(loader.requests, "get", _fake_get({url: _FakeResponse(200, b"identities: {}")}, calls))
    assert read_source(url, timeout=5) == b"identities: {}"
    assert calls == [(url, 5)]


@pytest.mark.parametrize("status", [201, 204, 301, 404, 500])
def test_non_200_is_rejected(monkeypatch, status):
    url = "http://example.com/identities.yaml"
    monkeypatch.setattr(loader.requests, "get", _fake_get({url: _FakeResponse(status, b"identities: {}")}, []))
    with pytest.raises(LoadError, match=f"status code {status}"):
        read_source(url)


def test_network_error_is_wrapped(monkeypatch):
    calls: list = []
    url = "https://unreachable.invalid/identities.yaml"
    monkeypatch.setattr(loader.requests, "get", _fake_get({url: requests.ConnectionError("boom")}, calls))
    with pytest.raises(LoadError, match="failed to fetch"):
        read_source(url)
    assert len(calls) == 1


def test_load_report_from_path(tmp_path: Path):
    p = tmp_path / "report.sarif"
    p.write_text('{"version": "2.1.0", "runs": [{"results": [{"fingerprints": {"identity": "a"}}]}]}')
    report = load_report(str(p))
    assert report.version == "2.1.0"
    assert report.runs[0].results[0].identity == "a"


@pytest.mark.parametrize(
    "content, message",
    [
        ("{not json", "malformed JSON"),
        ("[1, 2]", "must be a JSON object"),
        ('{"runs": "nope"}', "invalid SARIF report"),
        ('{"runs": [{"results": [{"fingerprints": {"identity": ["x"]}}]}]}', "invalid SARIF report"),
    ],
)
def test_load_report_rejects_malformed(tmp_path: Path, content, message):
    p = tmp_path / "report.sarif"
    p.write_text(content)
    with pytest.raises(LoadError, match=message):
        load_report(str(p))


def test_load_suppression_table_from_url(monkeypatch):
    url = "https://example.com/identities.yaml"
    body = b"identities:\n  a:\n    enabled: true\n    expires-on: '2030-01-01'\n"
    monkeypatch.setattr(loader.requests, "get", _fake_get({url: _FakeResponse(200, body)}, []))
    table = load_suppression_table(url)
    assert table["a"].enabled is True
    assert table["a"].expires_on == "2030-01-01"


def test_load_suppression_table_rejects_bad_document(tmp_path: Path):
    p = tmp_path / "identities.yaml"
    p.write_text("- a\n- b\n")
    with pytest.raises(LoadError, match="invalid suppression table"):
        load_suppression_table(str(p))
