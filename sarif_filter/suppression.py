from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import yaml

EXPIRY_KEYS = ("expires-on", "expiresOn", "expires_on")


class SuppressionTableError(ValueError):
    pass


@dataclass(frozen=True)
class SuppressionEntry:
    identity: str
    enabled: bool
    reason: str = ""
    expires_on: str | None = None


SuppressionTable = dict[str, SuppressionEntry]


def _expiry_text(value: Any) -> str | None:
    # YAML turns unquoted 2024-01-31 into a date object
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _parse_entry(identity: str, item: Any) -> SuppressionEntry:
    if item is None:
        item = {}
    if not isinstance(item, dict):
        raise SuppressionTableError(f"entry for identity {identity!r} must be a mapping, got {type(item).__name__}")

    enabled = item.get("enabled", False)
    if not isinstance(enabled, bool):
        raise SuppressionTableError(f"entry for identity {identity!r}: enabled must be true or false, got {enabled!r}")

    expires_on = None
    for key in EXPIRY_KEYS:
        if key in item:
            expires_on = _expiry_text(item[key])
            break

    reason = item.get("reason")
    return SuppressionEntry(
        identity=identity,
        enabled=enabled,
        reason="" if reason is None else str(reason),
        expires_on=expires_on,
    )


def parse_suppression_table(raw: Any) -> SuppressionTable:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SuppressionTableError(f"suppression document must be a mapping, got {type(raw).__name__}")

    identities = raw.get("identities")
    if identities is None:
        return {}
    if not isinstance(identities, dict):
        raise SuppressionTableError(f"'identities' must be a mapping, got {type(identities).__name__}")

    table: SuppressionTable = {}
    for key, item in identities.items():
        identity = str(key)
        table[identity] = _parse_entry(identity, item)
    return table


def parse_suppression_document(text: str | bytes) -> SuppressionTable:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SuppressionTableError(f"malformed YAML: {exc}") from exc
    return parse_suppression_table(raw)
