# tests/utils/test_retry.py
from unittest.mock import AsyncMock, patch

import pytest

from ogs_client.config.settings import RetrySettings
from ogs_client.exceptions import TransportError
from ogs_client.utils.retry import is_transient, retry_from_settings, retry_with_backoff

@pytest.mark.asyncio
async def test_returns_first_success():
    func = AsyncMock(return_value="ok")
    assert await retry_with_backoff(attempts=3)(func)("a", b=1) == "ok"
    func.assert_awaited_once_with("a", b=1)

@pytest.mark.asyncio
async def test_backoff_doubles_and_is_capped():
    func = AsyncMock(side_effect=[ConnectionError(), ConnectionError(), ConnectionError(), "ok"])
    decorated = retry_with_backoff(attempts=4, initial_backoff_s=1.0, max_backoff_s=3.0, jitter_factor=0)(func)
    with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
        assert await decorated() == "ok"
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0, 3.0]

@pytest.mark.asyncio
async def test_non_transient_errors_propagate_immediately():
    func = AsyncMock(side_effect=TransportError("forbidden", uri="/api/v1/me", status=403))
    with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
        with pytest.raises(TransportError):
            await retry_with_backoff(attempts=5)(func)()
    func.assert_awaited_once()
    sleep.assert_not_awaited()

@pytest.mark.asyncio
async def test_reraises_after_last_attempt():
    func = AsyncMock(side_effect=TimeoutError("slow"))
    with patch("asyncio.sleep", new_callable=AsyncMock):
        with pytest.raises(TimeoutError):
            await retry_with_backoff(attempts=2)(func)()
    assert func.await_count == 2

@pytest.mark.asyncio
async def test_retry_from_settings_uses_attempts():
    func = AsyncMock(side_effect=ConnectionError())
    decorated = retry_from_settings(RetrySettings(attempts=4, initial_backoff_s=0, jitter_factor=0), "test")(func)
    with patch("asyncio.sleep", new_callable=AsyncMock):
        with pytest.raises(ConnectionError):
            await decorated()
    assert func.await_count == 4

@pytest.mark.asyncio
async def test_server_errors_are_retried():
    func = AsyncMock(side_effect=[TransportError("bad gateway", uri="/api/v1/me", status=502), "ok"])
    with patch("asyncio.sleep", new_callable=AsyncMock):
        assert await retry_with_backoff(attempts=3)(func)() == "ok"
    assert func.await_count == 2

@pytest.mark.asyncio
async def test_transport_error_without_status_is_not_retried():
    func = AsyncMock(side_effect=TransportError("refused"))
    with pytest.raises(TransportError):
        await retry_with_backoff(attempts=3)(func)()
    func.assert_awaited_once()

def test_is_transient():
    transient = (ConnectionError,)
    assert is_transient(ConnectionResetError(), transient)
    assert is_transient(TransportError("down", status=503), transient)
    assert not is_transient(TransportError("missing", status=404), transient)
    assert not is_transient(ValueError(), transient)
