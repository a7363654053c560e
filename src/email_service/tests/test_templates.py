import base64
import json

from src.email_service.qr import check_in_payload, generate_qr_code_data_url
from src.email_service.templates import EmailTemplates

WEDDING = {
    "couple_names": "Diamond & Babatunde",
    "wedding_date": "December 13, 2025",
    "wedding_location": "Lagos, Nigeria",
}


def test_render_received():
    html_body, text_body = EmailTemplates.render(
        EmailTemplates.RECEIVED_HTML,
        EmailTemplates.RECEIVED_TEXT,
        guest_name="Ada",
        **WEDDING,
    )

    assert "Dear Ada," in html_body
    assert "Dear Ada," in text_body
    assert "Diamond &amp; Babatunde" in html_body
    assert "Diamond & Babatunde" in text_body
    assert "Lagos, Nigeria" in text_body


def test_render_escapes_html_only():
    html_body, text_body = EmailTemplates.render(
        EmailTemplates.REJECTED_HTML,
        EmailTemplates.REJECTED_TEXT,
        guest_name="<script>alert(1)</script>",
        **WEDDING,
    )

    assert "<script>" not in html_body
    assert "&lt;script&gt;" in html_body
    assert "<script>alert(1)</script>" in text_body


def test_check_in_payload():
    payload = json.loads(check_in_payload("rsvp-1", "Ada", "0801"))

    assert payload == {"rsvpID": "rsvp-1", "guestName": "Ada", "phone": "0801"}


def test_generate_qr_code_data_url():
    data_url = generate_qr_code_data_url(check_in_payload("rsvp-1", "Ada", "0801"))

    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    assert base64.b64decode(data_url[len(prefix):]).startswith(b"\x89PNG")
