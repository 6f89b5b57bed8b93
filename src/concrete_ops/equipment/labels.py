"""QR labels stuck on equipment; scanning one resolves the equipment by its qr_code."""
from __future__ import annotations

import io
import secrets

import qrcode


def new_qr_code() -> str:
    return f"EQ-{secrets.token_hex(4).upper()}"


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
