"""Async httpx client for the payment gateway charge endpoint."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Any

import httpx

from armora.config import settings
from armora.events import emit
from armora.integrations.payments.schemas import ChargeRequest, ChargeResponse
from armora.schemas.booking import PaymentOutcome
from armora.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

# Gateway response field names
_FIELD_STATUS = "status"
_FIELD_TOKEN = "token"
_FIELD_FAILURE = "failure_reason"
_STATUS_SUCCEEDED = "succeeded"


class PaymentGatewayClient:
    """Thin async wrapper around the gateway charge endpoint.

    Endpoint: POST {payment_api_url}
    Auth: Bearer API key

    Implements the PaymentCollaborator interface. Transport problems and
    unreadable responses are returned as failed outcomes so the booking
    flow can offer a retry.
    """

    def __init__(self) -> None:
        self._url = settings.payment.payment_api_url
        self._api_key = settings.payment.payment_api_key
        self._currency = settings.booking.currency
        self._timeout = httpx.Timeout(settings.payment.payment_timeout, connect=5.0)

    @property
    def _bypass_mode(self) -> bool:
        """Return True if API key is not configured (dev/test bypass)."""
        return not self._api_key

    async def charge(self, amount: Decimal, summary: dict[str, Any]) -> PaymentOutcome:
        """Charge ``amount`` and return the gateway outcome.

        In bypass mode (no API key configured) returns a success outcome with
        a ``bypass_`` token without making any HTTP request. Useful for
        local development.
        """
        if self._bypass_mode:
            logger.debug("Payment bypass mode active (no API key configured)")
            return PaymentOutcome(success=True, token=f"bypass_{uuid.uuid4().hex}")

        request = ChargeRequest(
            amount=amount,
            currency=self._currency,
            idempotency_key=uuid.uuid4().hex,
            summary=summary,
        )

        await emit(SystemEvent(
            event_type=EventType.EXTERNAL_API_CALL,
            data={"integration": "payment_gateway", "amount": str(amount)},
            source_module="integrations.payments.client",
        ))

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._url,
                    json=request.model_dump(mode="json"),
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Idempotency-Key": request.idempotency_key,
                    },
                )
                response.raise_for_status()
                payload = response.json()
                if not isinstance(payload, dict):
                    msg = f"expected a JSON object, got {type(payload).__name__}"
                    raise ValueError(msg)

        except httpx.TimeoutException:
            logger.warning("Payment gateway timeout (amount=%s)", amount)
            await emit(SystemEvent(
                event_type=EventType.EXTERNAL_API_RESPONSE,
                data={"integration": "payment_gateway", "error": "timeout"},
                source_module="integrations.payments.client",
            ))
            return PaymentOutcome(success=False, failure_reason="Payment provider did not respond, please try again")

        except httpx.HTTPStatusError as exc:
            logger.warning("Payment gateway HTTP error %s", exc.response.status_code)
            await emit(SystemEvent(
                event_type=EventType.EXTERNAL_API_RESPONSE,
                data={"integration": "payment_gateway", "error": f"http_{exc.response.status_code}"},
                source_module="integrations.payments.client",
            ))
            return PaymentOutcome(
                success=False,
                failure_reason=f"Payment declined by provider (HTTP {exc.response.status_code})",
            )

        except httpx.RequestError as exc:
            logger.warning("Payment gateway unreachable: %s", exc)
            await emit(SystemEvent(
                event_type=EventType.EXTERNAL_API_RESPONSE,
                data={"integration": "payment_gateway", "error": "connection"},
                source_module="integrations.payments.client",
            ))
            return PaymentOutcome(success=False, failure_reason="Payment provider unreachable, please try again")

        except ValueError as exc:
            logger.warning("Payment gateway sent an unreadable response: %s", exc)
            await emit(SystemEvent(
                event_type=EventType.EXTERNAL_API_RESPONSE,
                data={"integration": "payment_gateway", "error": "invalid_response"},
                source_module="integrations.payments.client",
            ))
            return PaymentOutcome(success=False, failure_reason="Payment provider sent an unreadable response")

        result = self._parse_response(payload)

        await emit(SystemEvent(
            event_type=EventType.EXTERNAL_API_RESPONSE,
            data={"integration": "payment_gateway", "status": result.status},
            source_module="integrations.payments.client",
        ))

        if result.status == _STATUS_SUCCEEDED and result.token:
            return PaymentOutcome(success=True, token=result.token)
        return PaymentOutcome(
            success=False,
            failure_reason=result.failure_reason or f"Payment {result.status}",
        )

    def _parse_response(self, payload: dict) -> ChargeResponse:
        """Parse the gateway JSON response into a ChargeResponse."""
        status = str(payload.get(_FIELD_STATUS) or "unknown").strip().lower()
        token: str | None = payload.get(_FIELD_TOKEN) or None
        failure: str | None = payload.get(_FIELD_FAILURE) or None
        return ChargeResponse(
            status=status,
            token=token,
            failure_reason=failure,
            raw_response=payload,
        )


# Module-level singleton
payment_client = PaymentGatewayClient()
