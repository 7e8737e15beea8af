"""
Slack Deploy Bot
Handles mentions, the Deploy button and the password confirmation modal
"""

import logging
from typing import Optional

from slack_bolt.async_app import AsyncApp
from slack_sdk.web.async_client import AsyncWebClient
from slack_sdk.errors import SlackApiError

from shared.config import Settings, get_settings
from shared.deployment import DeploymentClient, DeploymentTriggerError
from shared.models import (
    MentionEvent, DeployRequestContext, DeploymentResult, DeploymentStatus,
    is_valid_deployment_password
)
from slack_bot.views import (
    DEPLOY_ACTION_ID, CONFIRMATION_CALLBACK_ID, PASSWORD_BLOCK_ID, INVALID_PASSWORD_MESSAGE,
    build_deploy_prompt, build_confirmation_modal, build_confirmed_message,
    build_triggered_message, build_failure_text, extract_submitted_password
)

logger = logging.getLogger(__name__)


async def handle_app_mention(event, say):
    """Reply to a mention with the Deploy button"""
    mention = MentionEvent.from_event(event)
    text, blocks = build_deploy_prompt(mention.user_id)

    try:
        await say(text=text, blocks=blocks)
        logger.info(f"Deploy prompt posted for user {mention.user_id} in {mention.channel_id}")
    except SlackApiError as e:
        logger.error(f"Error posting deploy prompt: {e}")


async def acknowledge_deploy_button(ack):
    await ack()


async def handle_deploy_button(body, client: AsyncWebClient):
    """Open the confirmation modal, or deploy straight away when confirmation is disabled"""
    deploy_request = DeployRequestContext.from_action_body(body)
    settings = get_settings()

    if not settings.require_confirmation:
        await execute_deployment(client, deploy_request)
        return

    try:
        await client.views_open(
            trigger_id=body["trigger_id"],
            view=build_confirmation_modal(deploy_request)
        )
        logger.info(f"Deploy confirmation opened for user {deploy_request.user_id}")
    except SlackApiError as e:
        logger.error(f"Error opening deploy confirmation: {e}")
        if deploy_request.has_channel() and deploy_request.user_id:
            await notify_user(
                client, deploy_request,
                f"Could not open the deployment confirmation: {e.response.get('error', e)}"
            )


async def validate_deploy_submission(ack, view):
    """Accept the modal, or keep it open with an error on the password field"""
    password = extract_submitted_password(view)

    if is_valid_deployment_password(password, get_settings().deployment_password):
        await ack()
    else:
        await ack(
            response_action="errors",
            errors={PASSWORD_BLOCK_ID: INVALID_PASSWORD_MESSAGE}
        )


async def run_confirmed_deployment(body, view, client: AsyncWebClient):
    """Runs after the submission has been acknowledged"""
    password = extract_submitted_password(view)
    if not is_valid_deployment_password(password, get_settings().deployment_password):
        return

    deploy_request = DeployRequestContext.from_private_metadata(
        view.get("private_metadata"),
        user_id=body["user"]["id"]
    )
    await execute_deployment(client, deploy_request)


async def execute_deployment(client: AsyncWebClient, deploy_request: DeployRequestContext,
                             deployment_client: Optional[DeploymentClient] = None) -> DeploymentResult:
    """Fire the deployment webhook and report the outcome"""
    deployment_client = deployment_client or DeploymentClient()
    logger.info(f"Deployment requested by {deploy_request.user_id} from {deploy_request.channel_id}")

    try:
        result = await deployment_client.trigger()
    except DeploymentTriggerError as e:
        await report_failure(client, deploy_request, e)
        return DeploymentResult(status=DeploymentStatus.FAILED, error_message=str(e))

    await report_success(client, deploy_request)
    return result


async def report_success(client: AsyncWebClient, deploy_request: DeployRequestContext):
    settings = get_settings()
    user_id = deploy_request.user_id

    if deploy_request.can_update_message():
        text, blocks = build_confirmed_message(user_id)
        try:
            await client.chat_update(
                channel=deploy_request.channel_id,
                ts=deploy_request.message_ts,
                text=text,
                blocks=blocks
            )
        except SlackApiError as e:
            logger.error(f"Error updating deploy prompt: {e}")

    text, blocks = build_triggered_message(user_id, settings.deployment_eta_minutes)

    if not deploy_request.has_channel():
        await notify_user(client, deploy_request, text)
        return

    try:
        await client.chat_postMessage(
            channel=deploy_request.channel_id,
            text=text,
            blocks=blocks
        )
    except SlackApiError as e:
        logger.error(f"Error announcing deployment: {e}")


async def report_failure(client: AsyncWebClient, deploy_request: DeployRequestContext, error: Exception):
    """Failures only go to the invoking user; the original message is left alone"""
    await notify_user(client, deploy_request, build_failure_text(error))


async def notify_user(client: AsyncWebClient, deploy_request: DeployRequestContext, text: str):
    """Ephemeral message in the originating channel, or a DM when the channel is unknown"""
    if not deploy_request.user_id:
        logger.error(f"Cannot notify user, no user id available: {text}")
        return

    try:
        if deploy_request.has_channel():
            await client.chat_postEphemeral(
                channel=deploy_request.channel_id,
                user=deploy_request.user_id,
                text=text
            )
        else:
            await client.chat_postMessage(channel=deploy_request.user_id, text=text)
    except SlackApiError as e:
        logger.error(f"Error notifying user {deploy_request.user_id}: {e}")


async def log_request(body, next):
    """Log all incoming requests for debugging"""
    logger.info(f"Received Slack request: {body.get('type', 'unknown')}")
    await next()


async def handle_error(error, body, client: AsyncWebClient):
    """Handle uncaught errors"""
    logger.error(f"Slack app error: {error}")
    logger.error(f"Request body: {body}")

    # Send error notification to admin channel if configured
    admin_channel = get_settings().slack_admin_channel
    if admin_channel:
        try:
            await client.chat_postMessage(
                channel=admin_channel,
                text=f"⚠️ Deploy bot error: {str(error)[:500]}"
            )
        except SlackApiError as e:
            logger.error(f"Failed to send error notification: {e}")


def create_app(settings: Settings = None) -> AsyncApp:
    """Create and configure the Slack app with all handlers"""
    settings = settings or get_settings()

    app = AsyncApp(
        token=settings.slack_bot_token,
        signing_secret=settings.slack_signing_secret or None,
        # FaaS hosting only runs code until the HTTP response is sent
        process_before_response=settings.is_production()
    )

    app.middleware(log_request)
    app.error(handle_error)

    app.event("app_mention")(handle_app_mention)
    app.action(DEPLOY_ACTION_ID)(
        ack=acknowledge_deploy_button,
        lazy=[handle_deploy_button]
    )
    app.view(CONFIRMATION_CALLBACK_ID)(
        ack=validate_deploy_submission,
        lazy=[run_confirmed_deployment]
    )

    logger.info("✅ Slack app configured with all handlers")
    return app
