"""Bot message relay routes"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from discord_gateway.core.config import Settings, get_settings
from discord_gateway.core.dependencies import get_discord_api
from discord_gateway.core.errors import (
    ConfigError,
    GatewayError,
    InternalError,
    SendFailure,
    ValidationError,
)
from discord_gateway.services import DiscordAPIClient
from discord_gateway.services.discord_api import response_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])

REQUIRED_FIELDS_ERROR = "channelId and message are required"


class SendRequest(BaseModel):
    channel_id: str | None = Field(default=None, alias="channelId")
    message: str | None = None


class SendResponse(BaseModel):
    success: bool
    message: str
    data: Any


def _parse_send_request(body: Any, default_channel_id: str) -> SendRequest:
    """Validate the body; an omitted channelId falls back to the default channel"""
    try:
        send_request = SendRequest.model_validate(body)
    except PydanticValidationError as e:
        details = [
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError(REQUIRED_FIELDS_ERROR, details=details) from e

    if "channel_id" not in send_request.model_fields_set:
        send_request.channel_id = default_channel_id

    if not send_request.channel_id or not send_request.message:
        raise ValidationError(REQUIRED_FIELDS_ERROR)

    return send_request


def _send_failure(status_code: int, channel_id: str, data: Any) -> SendFailure:
    """Translate a rejected send into an error with troubleshooting hints"""
    error_message = "Failed to send message to Discord"
    troubleshooting: list[str] = []

    if status_code == 401:
        error_message = "Unauthorized: Discord Bot Token is invalid or not set correctly."
        troubleshooting = [
            "Check DISCORD_BOT_TOKEN in your environment or .env file",
            "Verify the token is correct in Discord Developer Portal",
            "Make sure the token hasn't been regenerated",
        ]
    elif status_code == 403:
        error_message = "Forbidden: Bot doesn't have permission to send messages to this channel."
        troubleshooting = [
            f"Verify the bot is invited to the server (channel ID: {channel_id})",
            "Check bot permissions: 'Send Messages' and 'View Channels'",
            "Verify channel permissions allow the bot to send messages",
            "Make sure the bot role has access to the channel",
            "Check if the channel is a text channel (not voice or category)",
        ]
    elif status_code == 404:
        error_message = "Channel not found: Invalid channel ID."
        troubleshooting = [
            f"Verify the channel ID is correct: {channel_id}",
            "Make sure developer mode is enabled to copy channel ID",
            "Check if the channel exists and is accessible",
        ]

    return SendFailure(
        error_message,
        status_code,
        details=data,
        troubleshooting=troubleshooting,
        extra={"channelId": channel_id},
    )


@router.post("/send", response_model=SendResponse)
async def send_message(
    request: Request,
    discord_api: DiscordAPIClient = Depends(get_discord_api),
    settings: Settings = Depends(get_settings),
) -> SendResponse:
    """Send a message to a Discord channel as the bot"""
    try:
        bot_token = settings.discord_bot_token
        if not bot_token:
            raise ConfigError("DISCORD_BOT_TOKEN is not configured")

        body = await request.json()
        send_request = _parse_send_request(body, settings.default_channel_id)
        channel_id = send_request.channel_id or ""

        response = await discord_api.send_message(channel_id, send_request.message or "", bot_token)
        data = response_payload(response)

        if not response.is_success:
            logger.warning(f"Discord rejected message to {channel_id}: {response.status_code}")
            raise _send_failure(response.status_code, channel_id, data)

    except GatewayError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error sending message: {e}")
        raise InternalError("Internal server error", details=str(e)) from e

    logger.info(f"Message sent to channel {channel_id}")
    return SendResponse(success=True, message="Message sent successfully", data=data)
