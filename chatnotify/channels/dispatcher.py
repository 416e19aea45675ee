"""Delivery of assembled messages: test-mode logging and HTTP transport."""

import json
import logging

from chatnotify.channels import ChannelPayload, DeliveryResult, DeliveryStatus
from chatnotify.errors import DeliveryError
from chatnotify.http import HttpClient, HttpResponse

logger = logging.getLogger(__name__)


def log_message(label: str, message: dict) -> DeliveryResult:
    """Log a fully assembled message instead of sending it."""
    logger.info(
        "%s message: %s",
        label,
        json.dumps(message, default=str),
        extra={"label": label, "payload": message},
    )
    return DeliveryResult(status=DeliveryStatus.LOGGED)


def check_status(response: HttpResponse) -> None:
    if not 200 <= response.status_code < 300:
        raise DeliveryError(
            f"Unexpected status {response.status_code}",
            status_code=response.status_code,
            body=response.body,
        )


def check_api_body(response: HttpResponse) -> None:
    """Web API calls answer 200 and report failures in the JSON body."""
    check_status(response)
    try:
        parsed = json.loads(response.body)
    except ValueError:
        raise DeliveryError(
            "Response body is not JSON",
            status_code=response.status_code,
            body=response.body,
        )
    if parsed.get("error") or parsed.get("ok") is False:
        raise DeliveryError(
            f"API error: {parsed.get('error', 'unknown')}",
            status_code=response.status_code,
            body=response.body,
        )


async def send_payload(
    payload: ChannelPayload,
    message: dict,
    label: str,
    http_client: HttpClient,
    check_response=check_status,
) -> DeliveryResult:
    """
    Send a single payload via HTTP.

    Never raises: rejected and failed deliveries are logged together with
    the message and returned as a FAILED result.
    """
    response = None
    try:
        response = await http_client.request(payload)
        check_response(response)
    except DeliveryError as e:
        logger.error(
            "%s delivery rejected: %s status=%s body=%s message=%s",
            label,
            e,
            e.status_code,
            e.body[:500],
            json.dumps(message, default=str),
        )
        return DeliveryResult(
            status=DeliveryStatus.FAILED,
            status_code=e.status_code,
            error=str(e),
        )
    except Exception as e:
        logger.error(
            "%s delivery failed: %s status=%s body=%s message=%s",
            label,
            e,
            response.status_code if response else None,
            response.body[:500] if response else None,
            json.dumps(message, default=str),
            exc_info=True,
        )
        return DeliveryResult(
            status=DeliveryStatus.FAILED,
            status_code=response.status_code if response else None,
            error=str(e),
        )

    logger.debug("Sent %s message to %s", label, payload.url)
    return DeliveryResult(status=DeliveryStatus.SENT, status_code=response.status_code)
