# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import asyncio

import pytest

from transcript_analyzer.core.findings import RawFinding


@pytest.fixture
def sample_transcript():
    """Short consultation transcript"""
    return """
    医師: 今日はどうされましたか？
    患者: 最近眠れなくて、夜中に何度も目が覚めてしまうんです。
    医師: それはいつ頃からですか？
    患者: 先月の引っ越しの後からだと思います。仕事も忙しくなって。
    """


@pytest.fixture
def monologue_finding():
    """Finding as reported by the model (wire keys)"""
    return {
        "date": "",
        "receptionNumber": "1024",
        "type": "モノローグ",
        "excerpt": "患者: 最近眠れなくて、夜中に何度も目が覚めてしまうんです。",
        "summary": "【不眠の訴え】患者が睡眠の問題について続けて話している",
    }


@pytest.fixture
def rally_finding():
    return {
        "date": "2025年3月7日",
        "receptionNumber": 1024,
        "type": "ラリー",
        "excerpt": "医師: それはいつ頃からですか？ 患者: 先月の引っ越しの後からだと思います。",
        "summary": "【発症時期の確認】短いやり取りが続いている",
    }


@pytest.fixture
def make_analyze():
    """
    Build a fake analysis capability returning one canned run per call.

    Each element of `runs` is a list of findings or an exception to raise.
    The returned function records every call in `.calls`.
    """
    def factory(*runs, delays=None):
        state = {"index": 0}
        calls = []

        async def analyze(file_name, text):
            index = state["index"]
            state["index"] += 1
            calls.append((file_name, text))

            if delays:
                await asyncio.sleep(delays[index])

            result = runs[index]
            if isinstance(result, BaseException):
                raise result
            return [
                RawFinding.from_dict(item) if isinstance(item, dict) else item
                for item in result
            ]

        analyze.calls = calls
        return analyze

    return factory
