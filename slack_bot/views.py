"""
Block Kit builders for deploy prompts, the confirmation modal and outcome messages
"""

from typing import Any, Dict, List, Optional, Tuple

from slack_sdk.models.blocks import (
    Block, SectionBlock, InputBlock, ContextBlock,
    MarkdownTextObject, PlainTextObject
)
from slack_sdk.models.blocks.block_elements import ButtonElement, PlainTextInputElement
from slack_sdk.models.views import View

from shared.models import DeployRequestContext

DEPLOY_ACTION_ID = "deploy_button"
DEPLOY_BUTTON_VALUE = "deploy"
CONFIRMATION_CALLBACK_ID = "deploy_confirmation_view"
PASSWORD_BLOCK_ID = "deployment_password_block"
PASSWORD_ACTION_ID = "deployment_password"

INVALID_PASSWORD_MESSAGE = "Invalid deployment password. Please try again."


def build_deploy_prompt(user_id: str) -> Tuple[str, List[Block]]:
    """Message posted in reply to a mention, with the Deploy button"""
    text = f"Hello <@{user_id}>, click here to deploy!"
    blocks = [
        SectionBlock(
            text=MarkdownTextObject(text=text),
            accessory=ButtonElement(
                text=PlainTextObject(text="Deploy", emoji=True),
                action_id=DEPLOY_ACTION_ID,
                value=DEPLOY_BUTTON_VALUE
            )
        )
    ]
    return text, blocks


def build_confirmation_modal(deploy_request: DeployRequestContext) -> View:
    """Password modal carrying the request context in private_metadata"""
    return View(
        type="modal",
        callback_id=CONFIRMATION_CALLBACK_ID,
        title=PlainTextObject(text="Deployment Confirmation", emoji=True),
        submit=PlainTextObject(text="Deploy", emoji=True),
        close=PlainTextObject(text="Cancel", emoji=True),
        private_metadata=deploy_request.to_private_metadata(),
        blocks=[
            SectionBlock(
                text=MarkdownTextObject(
                    text="Please enter the deployment password to confirm:"
                )
            ),
            InputBlock(
                block_id=PASSWORD_BLOCK_ID,
                element=PlainTextInputElement(
                    action_id=PASSWORD_ACTION_ID,
                    placeholder=PlainTextObject(text="Enter password")
                ),
                label=PlainTextObject(text="Password", emoji=True)
            )
        ]
    )


def build_confirmed_message(user_id: str) -> Tuple[str, List[Block]]:
    """Replacement for the original prompt once the deploy has been triggered"""
    text = f":white_check_mark: Deployment confirmed by <@{user_id}>"
    blocks = [
        SectionBlock(text=MarkdownTextObject(text=text)),
        ContextBlock(
            elements=[
                MarkdownTextObject(text="The Deploy button has been used for this request.")
            ]
        )
    ]
    return text, blocks


def build_triggered_message(user_id: str, eta_minutes: int) -> Tuple[str, List[Block]]:
    """Channel announcement that a deployment has started"""
    text = (
        f"Deployment triggered by <@{user_id}>! :rocket:\n"
        f"It will take about {eta_minutes} minutes."
    )
    blocks = [
        SectionBlock(text=MarkdownTextObject(text=f":white_check_mark: {text}"))
    ]
    return text, blocks


def build_failure_text(error: Any) -> str:
    return f"Failed to start deployment: {error}"


def extract_submitted_password(view: Dict[str, Any]) -> Optional[str]:
    """Read the password from a view_submission payload"""
    values = (view.get("state") or {}).get("values") or {}
    field = (values.get(PASSWORD_BLOCK_ID) or {}).get(PASSWORD_ACTION_ID) or {}
    return field.get("value")
