from __future__ import annotations

import pytest

from backend.app.utils.timeouts import retry_async


@pytest.mark.anyio
async def test_retry_async_success() -> None:
    calls = {"count": 0}

    async def _fn() -> str:
        calls["count"] += 1
        return "ok"

    result = await retry_async(_fn, attempts=3, delay=0.01)

    assert result == "ok"
    assert calls["count"] == 1


@pytest.mark.anyio
async def test_retry_async_exhausts_attempts() -> None:
    async def _fn() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await retry_async(_fn, attempts=2, delay=0)


@pytest.mark.anyio
async def test_retry_async_only_retries_listed_errors() -> None:
    calls = {"count": 0}

    async def _fn() -> None:
        calls["count"] += 1
        raise KeyError("not retried")

    with pytest.raises(KeyError):
        await retry_async(_fn, attempts=3, delay=0, retry_on=(ConnectionError,))

    assert calls["count"] == 1


@pytest.mark.anyio
async def test_retry_async_recovers_after_failure() -> None:
    calls = {"count": 0}

    async def _fn() -> str:
        calls["count"] += 1
        if calls["count"] < 3:
            raise ConnectionError("flaky")
        return "ok"

    assert await retry_async(_fn, attempts=3, delay=0, retry_on=(ConnectionError,)) == "ok"
    assert calls["count"] == 3
