"""Presentation of the share URL: QR code images and the status page."""

from qrshare.presentation.page import render_status_page
from qrshare.presentation.qr import make_qr_data_url, make_qr_png, render_qr_ascii

__all__ = ["make_qr_data_url", "make_qr_png", "render_qr_ascii", "render_status_page"]
