"""
Unit tests for shared.models module
"""

import json

import pytest
from datetime import datetime
from shared.models import (
    MentionEvent, DeployRequestContext, DeploymentResult, DeploymentStatus,
    is_valid_deployment_password
)


class TestMentionEvent:
    def test_from_event(self):
        """Test MentionEvent creation from a raw app_mention payload"""
        mention = MentionEvent.from_event({
            "type": "app_mention",
            "user": "U1",
            "channel": "C1",
            "text": "<@UBOT> deploy please"
        })

        assert mention.user_id == "U1"
        assert mention.channel_id == "C1"
        assert mention.text == "<@UBOT> deploy please"

    def test_from_event_without_text(self):
        mention = MentionEvent.from_event({"user": "U1"})

        assert mention.channel_id is None
        assert mention.text == ""


class TestDeployRequestContext:
    def test_from_action_body(self):
        """Test context capture from a block_actions payload"""
        body = {
            "type": "block_actions",
            "trigger_id": "T1",
            "user": {"id": "U1"},
            "channel": {"id": "C1"},
            "message": {"ts": "123.45"}
        }

        context = DeployRequestContext.from_action_body(body)

        assert context.channel_id == "C1"
        assert context.message_ts == "123.45"
        assert context.user_id == "U1"
        assert context.can_update_message() is True

    def test_from_action_body_uses_container(self):
        body = {
            "user": {"id": "U1"},
            "container": {"type": "message", "channel_id": "C9", "message_ts": "999.1"}
        }

        context = DeployRequestContext.from_action_body(body)

        assert context.channel_id == "C9"
        assert context.message_ts == "999.1"

    def test_to_private_metadata(self):
        """Test compact camelCase encoding without the user id"""
        context = DeployRequestContext(channel_id="C1", message_ts="123.45", user_id="U1")

        metadata = context.to_private_metadata()

        assert metadata == '{"channelId":"C1","messageTs":"123.45"}'
        assert json.loads(metadata) == {"channelId": "C1", "messageTs": "123.45"}

    def test_to_private_metadata_omits_missing_timestamp(self):
        context = DeployRequestContext(channel_id="C1")

        assert json.loads(context.to_private_metadata()) == {"channelId": "C1"}

    def test_private_metadata_round_trip(self):
        original = DeployRequestContext(channel_id="C1", message_ts="123.45", user_id="U1")

        decoded = DeployRequestContext.from_private_metadata(
            original.to_private_metadata(), user_id="U1"
        )

        assert decoded == original

    @pytest.mark.parametrize("metadata", [None, "", "not-json", "C1", '{"channelId": 5}', "[]"])
    def test_malformed_metadata_yields_channelless_context(self, metadata):
        """Test malformed metadata falls back instead of raising"""
        context = DeployRequestContext.from_private_metadata(metadata, user_id="U1")

        assert context.user_id == "U1"
        assert context.has_channel() is False
        assert context.can_update_message() is False

    def test_channel_without_timestamp_cannot_update(self):
        context = DeployRequestContext.from_private_metadata('{"channelId":"C1"}', user_id="U1")

        assert context.has_channel() is True
        assert context.can_update_message() is False


class TestDeploymentResult:
    def test_triggered_result(self):
        result = DeploymentResult(status=DeploymentStatus.TRIGGERED, status_code=202)

        assert result.success is True
        assert result.error_message is None
        assert isinstance(result.triggered_at, datetime)

    def test_failed_result(self):
        result = DeploymentResult(status=DeploymentStatus.FAILED, error_message="boom")

        assert result.success is False
        assert result.status == "failed"


class TestPasswordCheck:
    def test_exact_match(self):
        assert is_valid_deployment_password("s3cret", "s3cret") is True

    @pytest.mark.parametrize("submitted", ["S3CRET", "s3cret ", " s3cret", "", "wrong"])
    def test_mismatch(self, submitted):
        assert is_valid_deployment_password(submitted, "s3cret") is False

    def test_missing_submission(self):
        assert is_valid_deployment_password(None, "s3cret") is False

    def test_unconfigured_password_never_matches(self):
        assert is_valid_deployment_password("", "") is False
        assert is_valid_deployment_password("anything", None) is False
