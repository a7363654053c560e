from dataclasses import dataclass
from html import escape


@dataclass
class EmailTemplates:
    LAYOUT_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        {body}

        <p>With love,<br>{couple_names}</p>

        <hr style="border: none; border-top: 1px solid #ddd; margin: 30px 0;">

        <p style="font-size: 12px; color: #888; text-align: center;">
            {wedding_date} &middot; {wedding_location}
        </p>
    </body>
    </html>
    """

    LAYOUT_TEXT = """
    {body}

    With love,
    {couple_names}

    {wedding_date} - {wedding_location}
    """

    CONFIRMED_SUBJECT = "Your RSVP is Confirmed - See you there!"
    CONFIRMED_HTML = """
        <div style="text-align: center; margin-bottom: 30px;">
            <h1 style="color: #d4a373;">You're on the list!</h1>
        </div>

        <p>Dear {guest_name},</p>

        <p>Your RSVP has been confirmed. We can't wait to celebrate with you!</p>

        <div style="background-color: #fefae0; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p><strong>Guests:</strong> {number_of_guests}</p>
            <p><strong>Phone:</strong> {phone}</p>
        </div>

        <p>Please present this code at the entrance:</p>

        <div style="text-align: center; margin: 30px 0;">
            <img src="{qr_code_url}" alt="Check-in QR code" width="256" height="256">
        </div>
    """
    CONFIRMED_TEXT = """
    Dear {guest_name},

    Your RSVP has been confirmed. We can't wait to celebrate with you!

    - Guests: {number_of_guests}
    - Phone: {phone}

    Your check-in code is attached to the HTML version of this email.
    """

    RECEIVED_SUBJECT = "We've Received Your RSVP!"
    RECEIVED_HTML = """
        <p>Dear {guest_name},</p>

        <p>Thank you for your RSVP! We have received it and will confirm your spot shortly.</p>
    """
    RECEIVED_TEXT = """
    Dear {guest_name},

    Thank you for your RSVP! We have received it and will confirm your spot shortly.
    """

    REJECTED_SUBJECT = "An Update on Your RSVP"
    REJECTED_HTML = """
        <p>Dear {guest_name},</p>

        <p>Thank you for your interest in celebrating with us. Unfortunately we are
        unable to confirm your RSVP due to limited space.</p>
    """
    REJECTED_TEXT = """
    Dear {guest_name},

    Thank you for your interest in celebrating with us. Unfortunately we are
    unable to confirm your RSVP due to limited space.
    """

    @classmethod
    def render(cls, html_content: str, text_content: str, **context) -> tuple[str, str]:
        """Fill a content template and wrap it in the shared layout."""
        layout_context = {
            "couple_names": context.pop("couple_names"),
            "wedding_date": context.pop("wedding_date"),
            "wedding_location": context.pop("wedding_location"),
        }
        html_context = {key: escape(str(value)) for key, value in context.items()}
        html_layout_context = {key: escape(value) for key, value in layout_context.items()}
        html_body = cls.LAYOUT_HTML.format(
            body=html_content.format(**html_context), **html_layout_context
        )
        text_body = cls.LAYOUT_TEXT.format(body=text_content.format(**context), **layout_context)
        return html_body, text_body
