# ============================================================================
# src/transcript_analyzer/core/reconciler.py
# ============================================================================
"""
Result Reconciliation

The model is non-deterministic and tends to miss some findings on any one
pass, so the same transcript is analyzed several times concurrently and the
passes are merged.

Pipeline:
1. Fan out run_count independent analyze(file_name, text) calls
2. Join all of them; any failure fails the whole reconciliation
3. Concatenate the runs in dispatch order (run 1 first)
4. Deduplicate by excerpt signature
5. Resolve each finding's date: its own date, else the date in the file
   name, else the placeholder

Usage:
    reconciler = ResultReconciler()
    findings = await reconciler.reconcile(file_name, text, client.analyze)
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from ..config import analysis_settings, reconciliation_settings
from ..utils.exceptions import AnalysisError, ConfigurationError, MalformedResponseError
from .date_normalizer import normalize_date
from .deduplicator import deduplicate_findings
from .findings import Finding, RawFinding

logger = logging.getLogger(__name__)

T = TypeVar("T")

AnalyzeFn = Callable[[str, str], Awaitable[Sequence[Union[RawFinding, Dict[str, Any]]]]]


async def fan_out(
    capability: Callable[..., Awaitable[T]],
    run_count: int,
    *args: Any
) -> List[T]:
    """
    Run `capability(*args)` run_count times concurrently and join them.

    Results come back in dispatch order whatever the completion order.
    All-or-nothing: the first failure propagates and the calls still in
    flight are cancelled.

    Args:
        capability: Async callable to invoke
        run_count: Number of independent calls (>= 1)
        *args: Arguments passed to every call

    Returns:
        One result per call, in dispatch order
    """
    if run_count < 1:
        raise ValueError(f"run_count must be at least 1, got {run_count}")

    tasks = [asyncio.ensure_future(capability(*args)) for _ in range(run_count)]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise


def _coerce_run(run: Any, run_index: int) -> List[RawFinding]:
    """Validate one run's output as a list of RawFinding (dicts are converted)."""
    if not isinstance(run, (list, tuple)):
        raise MalformedResponseError(
            f"Analysis run {run_index} returned {type(run).__name__}, expected a list of findings"
        )

    items = []
    for item in run:
        if isinstance(item, RawFinding):
            items.append(item)
        elif isinstance(item, dict):
            items.append(RawFinding.from_dict(item))
        else:
            raise MalformedResponseError(
                f"Analysis run {run_index} returned a {type(item).__name__} where a finding object was expected"
            )
    return items


class ResultReconciler:
    """
    Merges several independent analysis runs into one result set.

    Config options:
        run_count: Independent runs per transcript (default: ANALYSIS_RUN_COUNT)
        default_year: Year for month/day-only dates (default: DEFAULT_YEAR)
        date_placeholder: Date for findings with no resolvable date
            (default: DATE_PLACEHOLDER)
        signature_length: Excerpt prefix used as identity (default: SIGNATURE_LENGTH)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

        self.run_count = self.config.get('run_count', analysis_settings.ANALYSIS_RUN_COUNT)
        self.default_year = self.config.get('default_year', reconciliation_settings.DEFAULT_YEAR)
        self.date_placeholder = self.config.get('date_placeholder', reconciliation_settings.DATE_PLACEHOLDER)
        self.signature_length = self.config.get('signature_length', reconciliation_settings.SIGNATURE_LENGTH)

        if self.run_count < 1:
            raise ConfigurationError(f"run_count must be at least 1, got {self.run_count}")

    async def reconcile(
        self,
        file_name: str,
        source_text: str,
        analyze: AnalyzeFn,
        run_count: Optional[int] = None
    ) -> List[Finding]:
        """
        Analyze one transcript run_count times and reconcile the results.

        The caller guarantees source_text is not blank.

        Args:
            file_name: Name of the source file (used as a date fallback)
            source_text: Transcript text
            analyze: Async analysis capability, analyze(file_name, text)
            run_count: Override the configured number of runs

        Returns:
            Deduplicated findings in first-occurrence order, dates resolved

        Raises:
            AnalysisError: Any run failed; no partial results are returned
        """
        run_count = self.run_count if run_count is None else run_count
        if run_count < 1:
            raise ConfigurationError(f"run_count must be at least 1, got {run_count}")

        logger.info(f"Reconciling {run_count} analysis runs for '{file_name or '(untitled)'}'")
        start_time = time.perf_counter()

        try:
            runs = await fan_out(analyze, run_count, file_name, source_text)
        except AnalysisError as e:
            logger.error(f"Analysis run failed, discarding all runs: {e}")
            raise
        except Exception as e:
            logger.error(f"Analysis run failed, discarding all runs: {e}")
            raise AnalysisError(f"Analysis failed: {e}", cause=e) from e

        merged: List[RawFinding] = []
        for index, run in enumerate(runs, start=1):
            items = _coerce_run(run, index)
            logger.debug(f"Run {index} returned {len(items)} findings")
            merged.extend(items)

        unique = deduplicate_findings(merged, self.signature_length)
        findings = self.resolve_dates(unique, file_name)

        logger.info(
            f"Reconciliation complete: {len(merged)} raw -> {len(findings)} unique findings "
            f"in {time.perf_counter() - start_time:.2f}s"
        )

        return findings

    def resolve_dates(self, items: Sequence[RawFinding], file_name: str) -> List[Finding]:
        """Replace each date with the canonical form, falling back to the file name date."""
        file_date = normalize_date(file_name, self.default_year)

        return [
            item.with_date(
                normalize_date(item.date, self.default_year)
                or file_date
                or self.date_placeholder
            )
            for item in items
        ]
