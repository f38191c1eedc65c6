"""Alerter service - fans distance alerts out to push tokens grouped by experience."""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models import PushRegistration
from .push_sender import PushMessage, PushSenderService, is_expo_push_token, push_sender_service
from .storage import list_registrations

logger = logging.getLogger(__name__)

UNKNOWN_GROUP = "unknown"


@dataclass
class FanOutResult:
    """Outcome of one alert fan-out."""
    groups_attempted: int = 0
    groups_delivered: int = 0
    groups_failed: int = 0
    tokens_dropped: int = 0


def group_tokens(registrations: Iterable[PushRegistration]) -> Dict[str, List[str]]:
    """Partition tokens by experience id.

    Registrations without an experience id land in the "unknown" group.
    Groups keep the order in which they were first seen.
    """
    groups: Dict[str, List[str]] = {}
    for registration in registrations:
        key = registration.experience_id or UNKNOWN_GROUP
        groups.setdefault(key, []).append(registration.token)
    return groups


def format_alert_body(distance: float) -> str:
    return f"Alert 🚨 Distance too high: {distance:.2f} cm!"


class AlerterService:
    """Service for sending threshold alerts to registered devices."""

    def __init__(self, push_client: Optional[PushSenderService] = None):
        self.push_client = push_client or push_sender_service

    def build_messages(
        self,
        experience_id: str,
        tokens: List[str],
        distance: float,
    ) -> tuple[List[PushMessage], int]:
        """Build one message per valid token of a group.

        Returns:
            Tuple of (messages, dropped_count). Tokens the push gateway would
            reject are dropped rather than sent.
        """
        messages = []
        dropped = 0
        body = format_alert_body(distance)

        for token in tokens:
            if not is_expo_push_token(token):
                logger.warning(f"Dropping invalid push token {str(token)[:16]}... ({experience_id})")
                dropped += 1
                continue
            messages.append(PushMessage(
                to=token,
                title=settings.push_title,
                body=body,
                data={"distance": distance},
                experience_id=experience_id,
            ))

        return messages, dropped

    async def fan_out(
        self,
        registrations: Iterable[PushRegistration],
        distance: float,
    ) -> FanOutResult:
        """Send one push batch per experience group.

        A failure delivering one group is logged and does not stop the
        remaining groups. Nothing is retried.
        """
        result = FanOutResult()

        for experience_id, tokens in group_tokens(registrations).items():
            messages, dropped = self.build_messages(experience_id, tokens, distance)
            result.tokens_dropped += dropped
            if not messages:
                continue

            result.groups_attempted += 1
            try:
                tickets = await self.push_client.send_batch(messages)
            except Exception as e:
                result.groups_failed += 1
                logger.error(f"Error sending push notifications for {experience_id}: {e}")
                continue

            result.groups_delivered += 1
            logger.info(
                f"Push notifications sent for {experience_id}: "
                f"{len(messages)} messages, {len(tickets)} tickets"
            )

        return result

    async def notify_threshold_crossed(
        self,
        session: AsyncSession,
        distance: float,
    ) -> FanOutResult:
        """Alert every registered device that a reading crossed the threshold."""
        registrations = await list_registrations(session)

        if not registrations:
            logger.debug("No registered push tokens for distance alert")
            return FanOutResult()

        result = await self.fan_out(registrations, distance)
        logger.info(
            f"Distance alert {distance:.2f} cm: {result.groups_delivered}/"
            f"{result.groups_attempted} groups delivered, "
            f"{result.tokens_dropped} tokens dropped"
        )
        return result


# Global instance
alerter_service = AlerterService()
