from datetime import date
import json

from sarif_filter.engine import apply_suppressions
from sarif_filter.models import SarifReport
from sarif_filter.reporting import dump_report, suppression_summary
from sarif_filter.suppression import SuppressionEntry


def _report():
    return SarifReport.model_validate(
        {
            "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
            "version": "2.1.0",
            "runs": [
                {
                    "tool": {"driver": {"name": "scanner"}},
                    "results": [
                        {"ruleId": "R1", "message": {"text": "naïve"}, "fingerprints": {"identity": "a"}},
                        {"ruleId": "R2", "fingerprints": {"identity": "b"}},
                    ],
                }
            ],
        }
    )


def test_dump_report_is_indented_sarif():
    text = dump_report(_report())
    assert text.startswith('{\n  "$schema": ')
    assert '"ruleId": "R1"' in text
    assert "naïve" in text
    assert json.loads(text)["runs"][0]["results"][1]["ruleId"] == "R2"


def test_suppression_summary():
    table = {
        "a": SuppressionEntry(identity="a", enabled=True, reason="accepted risk", expires_on="2030-01-01"),
        "z": SuppressionEntry(identity="z", enabled=True),
    }
    outcome = apply_suppressions(_report(), table, date(2026, 1, 1))
    summary = suppression_summary(outcome)
    assert summary == {
        "suppressed_count": 1,
        "entries": [{"identity": "a", "ruleId": "R1", "reason": "accepted risk", "expiresOn": "2030-01-01"}],
        "unused_identities": ["z"],
    }
