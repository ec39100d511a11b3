from __future__ import annotations

import io
from typing import IO, Optional

import qrcode
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError


def school_checkin_token(secret: str, school_id: int) -> str:
    """Text encoded in a school's teacher check-in QR code."""
    return f"{secret}:{int(school_id)}"


def render_qr_png(data: str) -> io.BytesIO:
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
    buf.seek(0)
    return buf


def decode_qr_image(stream: IO[bytes]) -> Optional[str]:
    """First QR payload found in an uploaded image, or None.

    Raises ValidationError when the upload is not a readable image.
    """
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError):
        raise ValidationError("Invalid image", field="image")

    # pyzbar loads the native zbar library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    try:
        return decoded[0].data.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise ValidationError("Invalid image", field="image")
