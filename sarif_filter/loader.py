from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError
import requests

from sarif_filter.models import SarifReport
from sarif_filter.suppression import SuppressionTable, SuppressionTableError, parse_suppression_document

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class LoadError(RuntimeError):
    pass


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    LOGGER.debug("Fetching %s", url)
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise LoadError(f"failed to fetch {url}: {exc}") from exc
    if resp.status_code != 200:
        raise LoadError(f"failed to fetch {url}: status code {resp.status_code}")
    return resp.content


def read_source(source: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    if is_url(source):
        return fetch_url(source, timeout)
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise LoadError(f"failed to read {source}: {exc.strerror or exc}") from exc


def load_report(source: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> SarifReport:
    data = read_source(source, timeout)
    try:
        raw = json.loads(data)
    except ValueError as exc:
        raise LoadError(f"malformed JSON in {source}: {exc}") from exc
    if not isinstance(raw, dict):
        raise LoadError(f"SARIF document in {source} must be a JSON object, got {type(raw).__name__}")
    try:
        return SarifReport.model_validate(raw)
    except ValidationError as exc:
        raise LoadError(f"invalid SARIF report in {source}: {exc}") from exc


def load_suppression_table(source: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> SuppressionTable:
    data = read_source(source, timeout)
    try:
        table = parse_suppression_document(data)
    except SuppressionTableError as exc:
        raise LoadError(f"invalid suppression table in {source}: {exc}") from exc
    LOGGER.debug("Loaded %d suppression entries from %s", len(table), source)
    return table
