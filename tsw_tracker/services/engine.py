"""
Memoized insights engine.

This module ties the analyses together and caches their output. Reports are
keyed on a content fingerprint of the check-in log, the selected window and
the reference day, so an unchanged log is never analyzed twice while any
edit to it produces a fresh report.

Typical usage:
    engine = InsightsEngine()
    report = engine.analyze(rows, window="month")
    if report.triggers.status == ReportStatus.NO_DATA:
        show_logging_prompt()
"""
import hashlib
import json
import os
from collections import OrderedDict
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from tsw_tracker.models.checkin import CheckIn
from tsw_tracker.models.report import InsightsReport
from tsw_tracker.models.window import TimeWindow
from tsw_tracker.services.baseline import baseline_confidence
from tsw_tracker.services.constants import MIN_UNIQUE_DAYS, RECENT_PERIOD_DAYS
from tsw_tracker.services.delayed_reaction import analyze_food_reactions, analyze_product_reactions
from tsw_tracker.services.improvements import analyze_improvement_correlations
from tsw_tracker.services.ingestion import normalize_check_ins
from tsw_tracker.services.patterns import analyze_trigger_patterns
from tsw_tracker.services.treatments import analyze_treatments
from tsw_tracker.services.windows import filter_by_window, resolve_window
from tsw_tracker.utils.logging import logger

DEFAULT_CACHE_SIZE = 32

Record = Union[CheckIn, Mapping[str, Any]]

class InsightsEngine:
    """Analyzes check-in logs and memoizes the resulting reports."""

    def __init__(
        self,
        max_entries: Optional[int] = None,
        min_unique_days: int = MIN_UNIQUE_DAYS,
        recent_days: int = RECENT_PERIOD_DAYS
    ):
        """
        Initialize the engine.

        Args:
            max_entries: Number of reports kept in the cache. Defaults to the
                INSIGHTS_CACHE_SIZE environment variable, or 32.
            min_unique_days: Evidence threshold for active trigger patterns
            recent_days: Length of the recent period for trends and resolved triggers
        """
        if max_entries is None:
            max_entries = int(os.environ.get('INSIGHTS_CACHE_SIZE', DEFAULT_CACHE_SIZE))
        self.max_entries = max(max_entries, 1)
        self.min_unique_days = min_unique_days
        self.recent_days = recent_days
        self._cache: "OrderedDict[str, InsightsReport]" = OrderedDict()

    def _record_payload(self, record: Record) -> Any:
        if isinstance(record, CheckIn):
            return record.model_dump(mode="json")
        return record

    def fingerprint(self, records: Sequence[Record], window: TimeWindow, today: date) -> str:
        """
        Content hash of everything a report depends on.

        Args:
            records: Check-ins as passed to analyze
            window: Resolved time window
            today: Reference day

        Returns:
            Hex SHA-256 digest
        """
        digest = hashlib.sha256()
        header = {
            "window": window.value,
            "today": today.isoformat(),
            "min_unique_days": self.min_unique_days,
            "recent_days": self.recent_days
        }
        digest.update(json.dumps(header, sort_keys=True).encode("utf-8"))
        for record in records:
            payload = json.dumps(self._record_payload(record), sort_keys=True, default=str)
            digest.update(b"\x1e")
            digest.update(payload.encode("utf-8"))
        return digest.hexdigest()

    def _build_report(self, records: Sequence[Record], window: TimeWindow, today: date) -> InsightsReport:
        check_ins = normalize_check_ins(records)
        windowed = filter_by_window(check_ins, window, today)

        return InsightsReport(
            window=window,
            reference_date=today,
            baseline_confidence=baseline_confidence(check_ins),
            check_in_count=len(check_ins),
            skipped_count=len(records) - len(check_ins),
            triggers=analyze_trigger_patterns(
                check_ins,
                window,
                today,
                min_unique_days=self.min_unique_days,
                recent_days=self.recent_days
            ),
            foods=analyze_food_reactions(check_ins, window.days, today),
            products=analyze_product_reactions(check_ins, window.days, today),
            treatments=analyze_treatments(windowed),
            improvements=analyze_improvement_correlations(check_ins)
        )

    def analyze(
        self,
        records: Iterable[Record],
        window: Union[TimeWindow, str] = TimeWindow.ALL,
        today: Optional[date] = None
    ) -> InsightsReport:
        """
        Return the insights report for a check-in log and window.

        Args:
            records: CheckIn models or raw mappings
            window: Selected time window (week, month or all)
            today: Reference day, defaults to the current date

        Returns:
            Immutable InsightsReport, from the cache when the same log, window and day
            were analyzed before

        Raises:
            InvalidTimeWindowError: If the window is not recognized
        """
        records = list(records)
        window = resolve_window(window)
        today = today or date.today()
        key = self.fingerprint(records, window, today)

        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            logger.debug("Returning cached insights report", extra={
                "window": window.value,
                "cache_hit": True
            })
            return cached

        logger.info("Computing insights report", extra={
            "window": window.value,
            "records": len(records),
            "cache_hit": False
        })
        try:
            report = self._build_report(records, window, today)
        except Exception:
            logger.exception("Error computing insights report", extra={
                "window": window.value,
                "records": len(records)
            })
            raise

        self._cache[key] = report
        while len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)
        return report

    def clear(self) -> None:
        """Drop every cached report."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
