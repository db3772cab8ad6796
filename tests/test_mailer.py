import smtplib
from unittest.mock import MagicMock, patch

import pytest

from leadrelay.channels import mailer
from leadrelay.models.delivery import ChannelStatus


def _smtp_mock(mock_cls):
    smtp = MagicMock()
    mock_cls.return_value.__enter__.return_value = smtp
    return smtp


@pytest.fixture
def config(make_config):
    return make_config(
        smtp_host="smtp.example.com",
        smtp_username="leads@example.com",
        smtp_password="secret",
        lead_to_email="owner@example.com",
    )


@patch("leadrelay.channels.mailer.smtplib.SMTP_SSL")
def test_skips_when_smtp_is_not_configured(mock_ssl, make_config):
    result = mailer.send("hello", make_config(smtp_host="smtp.example.com"))
    assert result.status is ChannelStatus.SKIPPED
    assert result.to_response() == {"ok": False, "skipped": True}
    mock_ssl.assert_not_called()


@patch("leadrelay.channels.mailer.smtplib.SMTP_SSL")
def test_sends_over_implicit_tls_on_port_465(mock_ssl, config):
    smtp = _smtp_mock(mock_ssl)
    result = mailer.send("Lead body", config)

    mock_ssl.assert_called_once_with("smtp.example.com", 465, timeout=config.smtp_timeout)
    smtp.login.assert_called_once_with("leads@example.com", "secret")
    smtp.starttls.assert_not_called()
    message = smtp.send_message.call_args.args[0]
    assert message["From"] == "Website Leads <leads@example.com>"
    assert message["To"] == "owner@example.com"
    assert message["Subject"] == "New website lead"
    assert message.get_content().strip() == "Lead body"

    assert result.ok
    assert result.message_id == message["Message-ID"]
    assert result.to_response() == {"ok": True, "messageId": message["Message-ID"]}


@patch("leadrelay.channels.mailer.smtplib.SMTP")
def test_upgrades_with_starttls_on_other_ports(mock_smtp, config):
    smtp = _smtp_mock(mock_smtp)
    result = mailer.send("Lead body", config.model_copy(update={"smtp_port": 587}))

    mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=config.smtp_timeout)
    smtp.starttls.assert_called_once_with()
    assert result.ok


@patch("leadrelay.channels.mailer.smtplib.SMTP")
def test_server_without_starttls_fails_before_login(mock_smtp, config):
    smtp = _smtp_mock(mock_smtp)
    smtp.starttls.side_effect = smtplib.SMTPNotSupportedError(
        "STARTTLS extension not supported by server."
    )
    result = mailer.send("Lead body", config.model_copy(update={"smtp_port": 25}))

    smtp.login.assert_not_called()
    smtp.send_message.assert_not_called()
    assert result.status is ChannelStatus.FAILED
    assert "STARTTLS extension not supported" in result.reason


@patch("leadrelay.channels.mailer.smtplib.SMTP_SSL")
def test_multiple_recipients(mock_ssl, config):
    smtp = _smtp_mock(mock_ssl)
    multi = config.model_copy(update={"lead_to_email": "a@example.com, b@example.com,"})
    mailer.send("Lead body", multi)

    message = smtp.send_message.call_args.args[0]
    assert message["To"] == "a@example.com, b@example.com"


@patch("leadrelay.channels.mailer.smtplib.SMTP_SSL")
def test_authentication_error_becomes_failure(mock_ssl, config):
    smtp = _smtp_mock(mock_ssl)
    smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad credentials")
    result = mailer.send("Lead body", config)

    assert result.status is ChannelStatus.FAILED
    assert result.reason.startswith("Email send failed")
    assert "Bad credentials" in result.reason


@patch("leadrelay.channels.mailer.smtplib.SMTP_SSL")
def test_connection_error_becomes_failure(mock_ssl, config):
    mock_ssl.side_effect = ConnectionRefusedError("Connection refused")
    result = mailer.send("Lead body", config)

    assert result.to_response() == {
        "ok": False,
        "error": "Email send failed: Connection refused",
    }
