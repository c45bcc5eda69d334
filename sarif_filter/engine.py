from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
import logging
import re

from sarif_filter.models import Result, SarifReport
from sarif_filter.suppression import SuppressionEntry, SuppressionTable

LOGGER = logging.getLogger(__name__)

INVALID_DATE_POLICIES = ("suppress", "revive")
DEFAULT_INVALID_DATE_POLICY = "suppress"

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass
class SuppressedResult:
    identity: str
    rule_id: str | None
    reason: str
    expires_on: str | None


@dataclass
class FilterOutcome:
    report: SarifReport
    suppressed: list[SuppressedResult]
    unused_identities: list[str]


def _as_day(now: date | datetime) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def _check_policy(invalid_date_policy: str) -> None:
    if invalid_date_policy not in INVALID_DATE_POLICIES:
        raise ValueError(f"Unknown invalid date policy: {invalid_date_policy}")


def parse_expiry(value: str) -> date:
    if not _ISO_DATE.fullmatch(value):
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)


def is_expired(entry: SuppressionEntry, today: date, invalid_date_policy: str = DEFAULT_INVALID_DATE_POLICY) -> bool:
    if not entry.expires_on:
        return False
    try:
        expires = parse_expiry(entry.expires_on)
    except ValueError as exc:
        LOGGER.warning("Invalid expiration date for identity %s: %s", entry.identity, exc)
        return invalid_date_policy == "revive"
    return today > expires


def should_keep(
    identity: str,
    table: SuppressionTable,
    today: date,
    invalid_date_policy: str = DEFAULT_INVALID_DATE_POLICY,
) -> bool:
    # a finding without an identity fingerprint never matches an entry
    if not identity:
        return True
    entry = table.get(identity)
    if entry is None:
        return True
    if not entry.enabled:
        return True
    return is_expired(entry, today, invalid_date_policy)


def filter_results(
    results: list[Result],
    table: SuppressionTable,
    today: date,
    invalid_date_policy: str = DEFAULT_INVALID_DATE_POLICY,
) -> tuple[list[Result], list[SuppressedResult]]:
    kept: list[Result] = []
    suppressed: list[SuppressedResult] = []

    for result in results:
        identity = result.identity
        if should_keep(identity, table, today, invalid_date_policy):
            kept.append(result)
            continue
        entry = table[identity]
        suppressed.append(
            SuppressedResult(
                identity=identity,
                rule_id=result.rule_id,
                reason=entry.reason,
                expires_on=entry.expires_on,
            )
        )

    return kept, suppressed


def apply_suppressions(
    report: SarifReport,
    table: SuppressionTable,
    now: date | datetime,
    invalid_date_policy: str = DEFAULT_INVALID_DATE_POLICY,
) -> FilterOutcome:
    """Drop the findings of ``report`` that an active suppression covers.

    ``now`` is reduced to a calendar date once and used for every finding. The
    input report and table are left untouched; the returned report is a new
    value whose runs keep their order and tool metadata, and whose results are
    an order-preserving subsequence of the input results.
    """
    _check_policy(invalid_date_policy)
    today = _as_day(now)

    runs = []
    suppressed: list[SuppressedResult] = []
    seen: set[str] = set()

    for run in report.runs:
        if run.results is None:
            runs.append(run.model_copy())
            continue
        seen.update(result.identity for result in run.results if result.identity)
        kept, dropped = filter_results(run.results, table, today, invalid_date_policy)
        suppressed.extend(dropped)
        runs.append(run.model_copy(update={"results": kept}))

    unused = sorted(identity for identity in table if identity not in seen)
    update = {"runs": runs} if "runs" in report.model_fields_set else {}
    return FilterOutcome(
        report=report.model_copy(update=update),
        suppressed=suppressed,
        unused_identities=unused,
    )


def filter_report(
    report: SarifReport,
    table: SuppressionTable,
    now: date | datetime,
    invalid_date_policy: str = DEFAULT_INVALID_DATE_POLICY,
) -> SarifReport:
    return apply_suppressions(report, table, now, invalid_date_policy).report
