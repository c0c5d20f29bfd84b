"""Tests for fan_out — join on all tasks, fail if any failed, no cancellation."""

import asyncio

import pytest

from writepath.core.fan_out import fan_out


async def _value(v, delay=0.0):
    await asyncio.sleep(delay)
    return v


async def _fail(exc, delay=0.0):
    await asyncio.sleep(delay)
    raise exc


async def test_returns_results_keyed_by_name_in_launch_order():
    results = await fan_out({"a": _value(1, 0.02), "b": _value(2), "c": _value(3)})
    assert results == {"a": 1, "b": 2, "c": 3}
    assert list(results) == ["a", "b", "c"]


async def test_runs_operations_concurrently():
    started = []

    async def op(name):
        started.append(name)
        await asyncio.sleep(0.01)
        return len(started)

    results = await fan_out({"x": op("x"), "y": op("y")})
    assert results == {"x": 2, "y": 2}


async def test_failure_does_not_cancel_siblings():
    finished = []

    async def slow():
        await asyncio.sleep(0.05)
        finished.append("slow")
        return "done"

    with pytest.raises(ValueError):
        await fan_out({"bad": _fail(ValueError("boom")), "slow": slow()})
    assert finished == ["slow"]


async def test_first_failure_in_launch_order_is_raised():
    with pytest.raises(KeyError):
        await fan_out({
            "ok": _value(1),
            "first": _fail(KeyError("first"), 0.05),
            "second": _fail(ValueError("second")),
        })


async def test_empty_mapping():
    assert await fan_out({}) == {}
