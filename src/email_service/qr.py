import base64
import json
from io import BytesIO

import qrcode


def check_in_payload(rsvp_id: str, guest_name: str, phone: str) -> str:
    """Data scanned at the door to look up the RSVP."""
    return json.dumps({"rsvpID": rsvp_id, "guestName": guest_name, "phone": phone})


def generate_qr_code_data_url(data: str) -> str:
    """Render ``data`` as a PNG QR code and return it as a data URL for inline HTML."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, "PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
