"""
Shared data models for the Slack deploy bot
"""

import logging
from typing import Any, Dict, Optional
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class MentionEvent(BaseModel):
    """Model for an app_mention event"""
    user_id: str
    channel_id: Optional[str] = None
    text: str = ""

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> 'MentionEvent':
        """Create MentionEvent from a raw Slack event payload"""
        return cls(
            user_id=event["user"],
            channel_id=event.get("channel"),
            text=event.get("text", "")
        )


class DeployRequestContext(BaseModel):
    """
    Context captured when the Deploy button is clicked.

    Travels through the confirmation modal as private_metadata so the outcome
    can be reported to the channel and message the request came from.
    """
    model_config = ConfigDict(populate_by_name=True)

    channel_id: Optional[str] = Field(default=None, alias="channelId")
    message_ts: Optional[str] = Field(default=None, alias="messageTs")
    # Slack sends the submitting user with every payload, so it is never serialized
    user_id: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def from_action_body(cls, body: Dict[str, Any]) -> 'DeployRequestContext':
        """Capture context from a block_actions payload"""
        channel = body.get("channel") or {}
        message = body.get("message") or {}
        container = body.get("container") or {}
        user = body.get("user") or {}

        return cls(
            channel_id=channel.get("id") or container.get("channel_id"),
            message_ts=message.get("ts") or container.get("message_ts"),
            user_id=user.get("id")
        )

    @classmethod
    def from_private_metadata(cls, metadata: Optional[str],
                              user_id: Optional[str] = None) -> 'DeployRequestContext':
        """Decode modal private_metadata; malformed metadata yields a channel-less context"""
        if not metadata:
            logger.warning("Deploy confirmation submitted without private metadata")
            return cls(user_id=user_id)

        try:
            context = cls.model_validate_json(metadata)
        except ValidationError as e:
            logger.warning(f"Could not parse deploy request metadata {metadata!r}: {e}")
            return cls(user_id=user_id)

        context.user_id = user_id
        return context

    def to_private_metadata(self) -> str:
        """Encode as compact JSON for modal private_metadata"""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def has_channel(self) -> bool:
        return bool(self.channel_id)

    def can_update_message(self) -> bool:
        """Check if the originating message can be updated in place"""
        return bool(self.channel_id and self.message_ts)


class DeploymentStatus(str, Enum):
    TRIGGERED = "triggered"
    FAILED = "failed"


class DeploymentResult(BaseModel):
    """Model for the outcome of a deployment trigger"""
    status: DeploymentStatus
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    triggered_at: datetime = Field(default_factory=datetime.now)
    duration_ms: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == DeploymentStatus.TRIGGERED


def is_valid_deployment_password(submitted: Optional[str], expected: Optional[str]) -> bool:
    """Exact string comparison; an unconfigured password never matches"""
    if not expected or submitted is None:
        return False
    return submitted == expected
