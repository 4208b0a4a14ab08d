# ============================================================================
# tests/unit/test_reconciler.py
# ============================================================================
"""
Tests for multi-run reconciliation
"""

import asyncio
import dataclasses

import pytest

from transcript_analyzer.core.findings import Finding, RawFinding
from transcript_analyzer.core.reconciler import ResultReconciler, fan_out
from transcript_analyzer.utils.exceptions import (
    AnalysisError,
    ConfigurationError,
    MalformedResponseError,
)

CONFIG = {"run_count": 2, "default_year": "2025", "date_placeholder": "-"}


# ----------------------------------------------------------------------------
# fan_out
# ----------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_fan_out_returns_results_in_dispatch_order():
    """Later-dispatched calls that finish first do not reorder the results"""
    delays = iter([0.05, 0.0, 0.02])

    async def capability(label):
        index = next(counter)
        await asyncio.sleep(next(delays))
        return f"{label}-{index}"

    counter = iter(range(3))
    results = await fan_out(capability, 3, "run")

    assert results == ["run-0", "run-1", "run-2"]


@pytest.mark.asyncio
async def test_fan_out_rejects_zero_runs():
    async def capability():
        return 1

    with pytest.raises(ValueError):
        await fan_out(capability, 0)


@pytest.mark.asyncio
async def test_fan_out_propagates_failure_and_cancels_pending():
    state = {"cancelled": False, "calls": 0}

    async def capability():
        state["calls"] += 1
        if state["calls"] == 1:
            raise RuntimeError("boom")
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise

    with pytest.raises(RuntimeError, match="boom"):
        await fan_out(capability, 2)

    await asyncio.sleep(0.01)
    assert state["cancelled"] is True


# ----------------------------------------------------------------------------
# ResultReconciler
# ----------------------------------------------------------------------------

def test_reconciler_defaults_from_settings():
    from transcript_analyzer.config import analysis_settings, reconciliation_settings

    reconciler = ResultReconciler()
    assert reconciler.run_count == analysis_settings.ANALYSIS_RUN_COUNT
    assert reconciler.date_placeholder == reconciliation_settings.DATE_PLACEHOLDER


def test_reconciler_rejects_invalid_run_count():
    with pytest.raises(ConfigurationError):
        ResultReconciler({"run_count": 0})


@pytest.mark.asyncio
async def test_cross_run_duplicates_merged(make_analyze):
    """Both runs report the same finding: one result"""
    analyze = make_analyze(
        [{"excerpt": "x", "date": ""}],
        [{"excerpt": "x", "date": ""}],
    )

    findings = await ResultReconciler(CONFIG).reconcile("", "text", analyze)

    assert len(findings) == 1
    assert findings[0].excerpt == "x"


@pytest.mark.asyncio
async def test_runs_called_with_same_input(make_analyze):
    analyze = make_analyze([], [], [])

    await ResultReconciler(CONFIG).reconcile("a.txt", "transcript", analyze, run_count=3)

    assert analyze.calls == [("a.txt", "transcript")] * 3


@pytest.mark.asyncio
async def test_failing_run_fails_everything(make_analyze, monologue_finding):
    """No finding from the successful run leaks out"""
    cause = ConnectionError("network down")
    analyze = make_analyze([monologue_finding], cause)

    with pytest.raises(AnalysisError) as exc_info:
        await ResultReconciler(CONFIG).reconcile("a.txt", "text", analyze)

    assert exc_info.value.cause is cause
    assert exc_info.value.__cause__ is cause
    assert "network down" in str(exc_info.value)


@pytest.mark.asyncio
async def test_analysis_error_propagates_unchanged(make_analyze):
    error = MalformedResponseError("not an array")
    analyze = make_analyze([], error)

    with pytest.raises(MalformedResponseError) as exc_info:
        await ResultReconciler(CONFIG).reconcile("a.txt", "text", analyze)

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_merge_order_is_run_order(make_analyze):
    """Run 1's items come first even when run 1 finishes last"""
    analyze = make_analyze(
        [{"excerpt": "a"}, {"excerpt": "b"}],
        [{"excerpt": "c"}, {"excerpt": "a"}, {"excerpt": "d"}],
        delays=[0.05, 0.0],
    )

    findings = await ResultReconciler(CONFIG).reconcile("", "text", analyze)

    assert [f.excerpt for f in findings] == ["a", "b", "c", "d"]


@pytest.mark.asyncio
async def test_own_date_wins_over_file_name(make_analyze, rally_finding):
    analyze = make_analyze([rally_finding], [])

    findings = await ResultReconciler(CONFIG).reconcile("2024-01-01_x.txt", "text", analyze)

    assert findings[0].date == "2025/03/07"


@pytest.mark.asyncio
async def test_file_name_date_fallback(make_analyze):
    analyze = make_analyze([{"excerpt": "a", "date": "不明"}], [])

    findings = await ResultReconciler(CONFIG).reconcile("診察_2024年12月1日.docx", "text", analyze)

    assert findings[0].date == "2024/12/01"


@pytest.mark.asyncio
async def test_placeholder_when_no_date(make_analyze):
    analyze = make_analyze([{"excerpt": "a"}], [])

    findings = await ResultReconciler(CONFIG).reconcile("transcript.txt", "text", analyze)

    assert findings[0].date == "-"


@pytest.mark.asyncio
async def test_configured_placeholder(make_analyze):
    analyze = make_analyze([{"excerpt": "a"}], [])
    reconciler = ResultReconciler({**CONFIG, "date_placeholder": ""})

    findings = await reconciler.reconcile("transcript.txt", "text", analyze)

    assert findings[0].date == ""


@pytest.mark.asyncio
async def test_month_day_uses_configured_year(make_analyze):
    analyze = make_analyze([{"excerpt": "a", "date": "3月7日"}], [])
    reconciler = ResultReconciler({**CONFIG, "default_year": "2026"})

    findings = await reconciler.reconcile("", "text", analyze)

    assert findings[0].date == "2026/03/07"


@pytest.mark.asyncio
async def test_no_findings_is_empty_list(make_analyze):
    analyze = make_analyze([], [])

    assert await ResultReconciler(CONFIG).reconcile("a.txt", "text", analyze) == []


@pytest.mark.asyncio
async def test_results_are_immutable_findings(make_analyze, monologue_finding):
    analyze = make_analyze([monologue_finding], [monologue_finding])

    findings = await ResultReconciler(CONFIG).reconcile("a.txt", "text", analyze)

    assert all(isinstance(f, Finding) for f in findings)
    with pytest.raises(dataclasses.FrozenInstanceError):
        findings[0].date = "2020/01/01"


@pytest.mark.asyncio
async def test_dict_items_accepted():
    async def analyze(file_name, text):
        return [{"excerpt": "a", "receptionNumber": 7}]

    findings = await ResultReconciler({**CONFIG, "run_count": 1}).reconcile("", "text", analyze)

    assert findings[0].reception_number == 7


@pytest.mark.asyncio
async def test_non_list_run_is_malformed():
    async def analyze(file_name, text):
        return None

    with pytest.raises(MalformedResponseError):
        await ResultReconciler(CONFIG).reconcile("", "text", analyze)


@pytest.mark.asyncio
async def test_non_object_item_is_malformed():
    async def analyze(file_name, text):
        return ["just text"]

    with pytest.raises(MalformedResponseError):
        await ResultReconciler(CONFIG).reconcile("", "text", analyze)


@pytest.mark.asyncio
async def test_end_to_end_file_name_date(make_analyze):
    """Same finding from both runs, date only in the file name"""
    raw = {"date": "", "excerpt": "患者: ...", "type": "monologue", "summary": "..."}
    analyze = make_analyze([raw], [raw])

    findings = await ResultReconciler(CONFIG).reconcile("2025-03-07_patient.txt", "text", analyze)

    assert len(findings) == 1
    assert findings[0].date == "2025/03/07"
    assert findings[0].type == "monologue"


@pytest.mark.asyncio
async def test_new_run_does_not_touch_previous_results(make_analyze):
    reconciler = ResultReconciler(CONFIG)
    first = await reconciler.reconcile("", "text", make_analyze([{"excerpt": "a"}], []))
    snapshot = list(first)

    await reconciler.reconcile("", "text", make_analyze([{"excerpt": "b"}], []))

    assert first == snapshot
    assert isinstance(first[0], RawFinding)


@pytest.mark.asyncio
async def test_truncated_run_fails_everything(make_analyze, monologue_finding):
    """One run with cut-off output discards the complete run as well"""
    from transcript_analyzer.llm.base import parse_findings

    async def truncated(file_name, text):
        return parse_findings('[{"excerpt": "a"}, {"excerpt": "b", "summary": "tru')

    complete = make_analyze([monologue_finding])
    calls = iter([complete, truncated])

    async def analyze(file_name, text):
        return await next(calls)(file_name, text)

    with pytest.raises(MalformedResponseError):
        await ResultReconciler(CONFIG).reconcile("a.txt", "text", analyze)
