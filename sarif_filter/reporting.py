from __future__ import annotations

import json
from typing import Any

from sarif_filter.engine import FilterOutcome
from sarif_filter.models import SarifReport


def dump_report(report: SarifReport, indent: int = 2) -> str:
    return json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)


def suppression_summary(outcome: FilterOutcome) -> dict[str, Any]:
    entries = [
        {
            "identity": item.identity,
            "ruleId": item.rule_id,
            "reason": item.reason,
            "expiresOn": item.expires_on,
        }
        for item in outcome.suppressed
    ]
    return {
        "suppressed_count": len(entries),
        "entries": entries,
        "unused_identities": outcome.unused_identities,
    }
