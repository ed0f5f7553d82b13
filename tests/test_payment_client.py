"""Tests for the payment gateway client.

Covers:
- Bypass mode: empty API key skips HTTP entirely
- Succeeded charge: token returned
- Declined charge: gateway failure reason surfaced
- Timeout, HTTP error and connection error: failed outcome, never raised
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from armora.booking.collaborators import PaymentCollaborator
from armora.integrations.payments.client import PaymentGatewayClient
from armora.integrations.payments.schemas import ChargeRequest
from armora.schemas.events import EventType

SUMMARY = {"selected_service": "executive", "secure_destination": "Heathrow Airport"}

# ── Helpers ──────────────────────────────────────────────────────────


def _make_response(payload: dict, status_code: int = 200) -> MagicMock:
    """Build a mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.raise_for_status = MagicMock()  # no-op for 200
    return resp


def _client() -> PaymentGatewayClient:
    client = PaymentGatewayClient()
    client._api_key = "test-key"  # not bypass mode
    return client


def _wire_http(mock_client_cls: MagicMock, mock_http: AsyncMock) -> None:
    mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=mock_http)
    mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)


# ── Client tests ─────────────────────────────────────────────────────


class TestBypassMode:
    @pytest.mark.asyncio()
    async def test_bypass_skips_http(self):
        """Empty API key → success with a bypass token, no HTTP call."""
        client = PaymentGatewayClient()
        client._api_key = ""

        with patch("httpx.AsyncClient") as mock_client_cls:
            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        mock_client_cls.assert_not_called()
        assert outcome.success is True
        assert outcome.token.startswith("bypass_")


class TestSucceededCharge:
    @pytest.mark.asyncio()
    async def test_charge_succeeded(self):
        """Gateway returns status=succeeded with token."""
        client = _client()
        mock_response = _make_response({"status": "succeeded", "token": "ch_123"})

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock) as mock_emit,
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=mock_response)
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is True
        assert outcome.token == "ch_123"

        kwargs = mock_http.post.call_args.kwargs
        assert kwargs["json"]["amount"] == "150.00"
        assert kwargs["json"]["currency"] == "GBP"
        assert kwargs["json"]["summary"] == SUMMARY
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["headers"]["Idempotency-Key"] == kwargs["json"]["idempotency_key"]

        event_types = [c.args[0].event_type for c in mock_emit.await_args_list]
        assert event_types == [EventType.EXTERNAL_API_CALL, EventType.EXTERNAL_API_RESPONSE]


class TestDeclinedCharge:
    @pytest.mark.asyncio()
    async def test_charge_declined(self):
        """status=declined → failure with the gateway's reason."""
        client = _client()
        mock_response = _make_response({"status": "declined", "failure_reason": "Card declined"})

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=mock_response)
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert outcome.failure_reason == "Card declined"

    @pytest.mark.asyncio()
    async def test_succeeded_without_token(self):
        """A success status with no token is not a confirmed charge."""
        client = _client()
        mock_response = _make_response({"status": "Succeeded"})

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=mock_response)
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert outcome.failure_reason == "Payment succeeded"


class TestTransportErrors:
    @pytest.mark.asyncio()
    async def test_timeout(self):
        """httpx.TimeoutException → failed outcome, retry message."""
        client = _client()

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(side_effect=httpx.TimeoutException("timeout"))
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert "did not respond" in outcome.failure_reason

    @pytest.mark.asyncio()
    async def test_http_error(self):
        """HTTP 502 → failed outcome naming the status code."""
        client = _client()
        mock_response = _make_response({}, status_code=502)
        mock_response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("bad gateway", request=MagicMock(), response=mock_response),
        )

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=mock_response)
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert outcome.failure_reason == "Payment declined by provider (HTTP 502)"

    @pytest.mark.asyncio()
    async def test_connection_error(self):
        """httpx.ConnectError → failed outcome, unreachable message."""
        client = _client()

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(side_effect=httpx.ConnectError("refused"))
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert "unreachable" in outcome.failure_reason


    @pytest.mark.asyncio()
    async def test_non_json_body(self):
        """A 200 response whose body is not JSON → failed outcome, not an exception."""
        client = _client()
        mock_response = _make_response({})
        mock_response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=mock_response)
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert outcome.failure_reason == "Payment provider sent an unreadable response"

    @pytest.mark.asyncio()
    async def test_json_body_not_an_object(self):
        """A JSON list instead of an object → failed outcome."""
        client = _client()
        mock_response = _make_response(["succeeded", "ch_123"])

        with (
            patch("armora.integrations.payments.client.emit", new_callable=AsyncMock),
            patch("httpx.AsyncClient") as mock_client_cls,
        ):
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=mock_response)
            _wire_http(mock_client_cls, mock_http)

            outcome = await client.charge(Decimal("150.00"), SUMMARY)

        assert outcome.success is False
        assert outcome.failure_reason == "Payment provider sent an unreadable response"

class TestChargeRequest:
    def test_currency_normalized(self):
        request = ChargeRequest(amount=Decimal("75.00"), currency=" gbp ", idempotency_key="k")
        assert request.currency == "GBP"


class TestCollaboratorConformance:
    def test_client_is_payment_collaborator(self):
        assert isinstance(PaymentGatewayClient(), PaymentCollaborator)
