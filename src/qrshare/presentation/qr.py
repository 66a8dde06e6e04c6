"""QR code rendering for the share URL."""

from __future__ import annotations

import base64
import io

import qrcode
import qrcode.constants


def _build(url: str, box_size: int, border: int) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(url)
    qr.make(fit=True)
    return qr


def make_qr_png(url: str, box_size: int = 10, border: int = 4) -> bytes:
    """Render ``url`` as a QR code PNG."""
    img = _build(url, box_size, border).make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def make_qr_data_url(url: str, box_size: int = 10, border: int = 4) -> str:
    """Render ``url`` as a QR code embeddable in an <img> tag."""
    encoded = base64.b64encode(make_qr_png(url, box_size, border)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def render_qr_ascii(url: str, border: int = 2) -> str:
    """Render ``url`` as a QR code made of terminal block characters."""
    out = io.StringIO()
    _build(url, box_size=1, border=border).print_ascii(out=out, invert=True)
    return out.getvalue()
