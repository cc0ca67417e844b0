#!/usr/bin/env python3
"""
Webhook transport for report delivery.

Posts a structured message plus file attachments to a pre-shared webhook
URL as multipart form data, the way Discord-compatible webhooks expect
it: the message JSON in ``payload_json`` and one ``files[n]`` part per
attachment.
"""

import asyncio
import json
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, Protocol, Sequence
from urllib.parse import urlparse

import aiohttp

from ..core.config_error import ConfigValidationError
from .models import WebhookMessage

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Delivery to the webhook failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class WebhookTransport(Protocol):
    """Anything that can deliver a message with attachments."""

    async def send(self, message: WebhookMessage, attachments: Sequence[Path]) -> None:
        """Deliver the message; raise TransportError on failure."""
        ...


class DiscordWebhookTransport:
    """
    Sends webhook messages with aiohttp.

    Each send opens its own ClientSession; reports are rare enough that a
    pooled session would mostly sit idle.
    """

    def __init__(self, url: str, timeout_seconds: float = 30.0, user_agent: str = "ReplayReport/1.0"):
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigValidationError("Webhook URL must be an http(s) URL", invalid_fields=["webhook_url"])

        self.url = url
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent

        # Log initialization without exposing the webhook token
        logger.info(f"Webhook transport initialized for host {parsed.netloc}")

    def _build_form(self, message: WebhookMessage, attachments: Sequence[Path], stack: ExitStack) -> aiohttp.FormData:
        form = aiohttp.FormData()
        form.add_field("payload_json", json.dumps(message.to_dict()), content_type="application/json")

        for index, path in enumerate(attachments):
            path = Path(path)
            handle = stack.enter_context(open(path, "rb"))
            form.add_field(
                f"files[{index}]",
                handle,
                filename=path.name,
                content_type="application/octet-stream",
            )
        return form

    async def send(self, message: WebhookMessage, attachments: Sequence[Path] = ()) -> None:
        """
        Post the message and attachments.

        Raises:
            TransportError: on network errors, timeouts, unreadable
                attachments or a non-2xx response
        """
        headers = {"User-Agent": self.user_agent}

        try:
            with ExitStack() as stack:
                form = self._build_form(message, attachments, stack)
                async with aiohttp.ClientSession() as session:
                    async with session.post(
                        self.url,
                        data=form,
                        headers=headers,
                        timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                    ) as response:
                        if 200 <= response.status < 300:
                            logger.debug(f"Webhook accepted message ({response.status})")
                            return
                        error_text = await response.text()
                        raise TransportError(
                            f"Webhook returned {response.status}: {error_text[:200]}",
                            status=response.status,
                        )
        except TransportError:
            raise
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timeout after {self.timeout_seconds}s sending webhook") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Error sending webhook: {e}") from e
        except OSError as e:
            # Missing or unreadable attachment
            raise TransportError(f"Cannot read attachment: {e}") from e


def create_transport(url: Optional[str], timeout_seconds: float = 30.0) -> Optional[DiscordWebhookTransport]:
    """Build a transport for ``url``, or None when reporting is not configured."""
    if not url:
        logger.info("No report webhook configured, reports will not be sent")
        return None
    return DiscordWebhookTransport(url, timeout_seconds=timeout_seconds)
