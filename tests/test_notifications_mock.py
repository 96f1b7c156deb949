import pytest
import requests
from unittest.mock import MagicMock, patch

from chiso_bookings.core.config import settings
from chiso_bookings.models.booking import StoredBooking
from chiso_bookings.services.notification_service import (
    NOT_CONFIGURED_ERROR,
    format_long_date,
    render_html_body,
    render_text_body,
    send_confirmation_email,
)


@pytest.fixture
def booking():
    return StoredBooking(
        id="CHISO-1700000000000-abc123",
        name="Ada <Obi>",
        email="ada@example.com",
        date="2030-03-07",
        time="10:00",
        partySize=3,
        preferences={
            "pancakeType": "blueberry",
            "eggStyle": "none",
            "sides": ["fruit", "toast"],
            "meat": "ham",
            "additions": [],
        },
    )


@pytest.fixture
def resend_key():
    with patch.object(settings, "RESEND_API_KEY", "re_test_key"):
        yield


@patch("chiso_bookings.services.notification_service.requests.post")
def test_send_confirmation_mocked(mock_post, booking, resend_key):
    mock_post.return_value = MagicMock(status_code=200)

    result = send_confirmation_email(booking)

    assert result.sent is True
    assert result.error is None
    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == settings.RESEND_API_URL
    assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"
    assert kwargs["json"]["to"] == "ada@example.com"
    assert "Booking Confirmation" in kwargs["json"]["subject"]
    assert "CHISO-1700000000000-abc123" in kwargs["json"]["html"]
    assert "Confirmation ID: CHISO-1700000000000-abc123" in kwargs["json"]["text"]


@patch("chiso_bookings.services.notification_service.requests.post")
def test_non_2xx_is_soft_failure(mock_post, booking, resend_key):
    mock_post.return_value = MagicMock(status_code=422, text="invalid from")

    result = send_confirmation_email(booking)

    assert result.sent is False
    assert "422" in result.error


@patch("chiso_bookings.services.notification_service.requests.post")
def test_network_error_is_soft_failure(mock_post, booking, resend_key):
    mock_post.side_effect = requests.ConnectionError("connection refused")

    result = send_confirmation_email(booking)

    assert result.sent is False
    assert "connection refused" in result.error


@patch("chiso_bookings.services.notification_service.requests.post")
def test_missing_api_key_skips_provider(mock_post, booking):
    with patch.object(settings, "RESEND_API_KEY", ""):
        result = send_confirmation_email(booking)

    assert result.sent is False
    assert result.error == NOT_CONFIGURED_ERROR
    mock_post.assert_not_called()


def test_bodies_skip_none_choices_and_escape_html(booking):
    text = render_text_body(booking, "Eat with Chiso")
    html_body = render_html_body(booking, "Eat with Chiso")

    assert "- Pancakes: blueberry" in text
    assert "- Eggs" not in text
    assert "- Meat: ham" in text
    assert "- Sides: fruit, toast" in text
    assert "Party Size: 3" in text
    assert "Ada &lt;Obi&gt;" in html_body
    assert "<Obi>" not in html_body


def test_format_long_date():
    assert format_long_date("2030-03-07") == "Thursday, March 7, 2030"
    assert format_long_date("garbage") == "garbage"
