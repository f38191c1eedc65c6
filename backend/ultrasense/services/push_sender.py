"""Push notification sender service using the Expo push API."""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

# Expo rejects requests with more than 100 messages
MAX_MESSAGES_PER_REQUEST = 100

_EXPO_TOKEN_RE = re.compile(r"^Expo(nent)?PushToken\[.+\]$")
_UUID_TOKEN_RE = re.compile(
    r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$", re.IGNORECASE
)


class PushDeliveryError(Exception):
    """Raised when the push gateway could not accept a batch."""


def is_expo_push_token(token: Any) -> bool:
    """Check whether a value looks like a token the Expo push API accepts."""
    if not isinstance(token, str):
        return False
    return bool(_EXPO_TOKEN_RE.match(token) or _UUID_TOKEN_RE.match(token))


@dataclass
class PushMessage:
    """A single Expo push message."""
    to: str
    body: str
    data: dict = field(default_factory=dict)
    title: Optional[str] = None
    sound: str = "default"
    priority: str = "high"
    experience_id: Optional[str] = None

    def to_payload(self) -> dict:
        """Serialize to the JSON shape the Expo API expects."""
        payload = {
            "to": self.to,
            "sound": self.sound,
            "priority": self.priority,
            "body": self.body,
            "data": self.data,
        }
        if self.title:
            payload["title"] = self.title
        if self.experience_id:
            payload["_experienceId"] = self.experience_id
        return payload


def chunk_messages(
    messages: List[PushMessage],
    size: int = MAX_MESSAGES_PER_REQUEST,
) -> Iterator[List[PushMessage]]:
    """Split messages into request-sized chunks."""
    for start in range(0, len(messages), size):
        yield messages[start:start + size]


class PushSenderService:
    """Service for sending push notifications via the Expo push gateway."""

    def __init__(
        self,
        url: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.push_api_url
        self.access_token = access_token if access_token is not None else settings.push_access_token
        self.timeout = timeout if timeout is not None else settings.push_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/json",
                "Accept-Encoding": "gzip, deflate",
                "Content-Type": "application/json",
            }
            if self.access_token:
                headers["Authorization"] = f"Bearer {self.access_token}"
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post_chunk(self, chunk: List[PushMessage]) -> List[dict]:
        client = self._get_client()
        try:
            response = await client.post(
                self.url,
                json=[message.to_payload() for message in chunk],
            )
        except httpx.HTTPError as e:
            raise PushDeliveryError(f"Push gateway request failed: {e}") from e

        if response.status_code >= 400:
            raise PushDeliveryError(
                f"Push gateway returned {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise PushDeliveryError("Push gateway returned invalid JSON") from e

        if body.get("errors"):
            raise PushDeliveryError(f"Push gateway rejected request: {body['errors']}")

        tickets = body.get("data") or []
        for message, ticket in zip(chunk, tickets):
            if ticket.get("status") == "error":
                logger.warning(
                    f"Push ticket error: {ticket.get('message')} "
                    f"(token: {message.to[:16]}...)"
                )
        return tickets

    async def send_batch(self, messages: List[PushMessage]) -> List[dict]:
        """Send a batch of messages, chunked to the gateway's request limit.

        Args:
            messages: Messages to deliver

        Returns:
            Push tickets returned by the gateway, in message order

        Raises:
            PushDeliveryError: If the gateway could not be reached or
                rejected a request. Chunks after the failing one are not sent.
        """
        tickets: List[dict] = []
        for chunk in chunk_messages(messages):
            tickets.extend(await self._post_chunk(chunk))
        return tickets


# Global instance
push_sender_service = PushSenderService()
