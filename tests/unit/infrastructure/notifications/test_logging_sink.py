import uuid

import pytest

from warden.infrastructure.notifications import LoggingNotificationSink
from warden.infrastructure.notifications.password_reset_notifier import build_password_reset_message


def test_password_reset_message_envelope():
    message = build_password_reset_message("alice@example.com", "token-1")

    assert message == {
        "to": "alice@example.com",
        "subject": "Forgot Password",
        "template": "forgot-password",
        "params": {"reset_password_token": "token-1"},
    }


@pytest.mark.asyncio
async def test_sink_logs_without_claiming_delivery(mocker):
    logger = mocker.patch("warden.infrastructure.notifications.password_reset_notifier.logger")
    sink = LoggingNotificationSink(topic="resets")

    handle = await sink.send_password_reset_email("alice@example.com", "secret-token")

    uuid.UUID(handle)
    logger.info.assert_called_once()
    event = logger.info.call_args.args[0]
    fields = logger.info.call_args.kwargs
    assert event == "notification_logged"
    assert fields["handle"] == handle
    assert fields["topic"] == "resets"
    assert "alice@example.com" not in fields.values()
    assert "secret-token" not in repr(fields)
