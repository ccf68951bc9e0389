"""QR code rendering for tickets (PNG data URI, rendered in-process)."""

import base64
import io

import qrcode

from utils.error_handling import EncodingError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class QrCodeEncoder:
    """Encode a payload string into a scannable PNG data URI."""

    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def encode(self, payload: str) -> str:
        if not payload:
            raise EncodingError("QR payload must not be empty")
        try:
            qr = qrcode.QRCode(
                version=None,
                error_correction=qrcode.constants.ERROR_CORRECT_M,
                box_size=self.box_size,
                border=self.border,
            )
            qr.add_data(payload)
            qr.make(fit=True)
            img = qr.make_image(fill_color="black", back_color="white")

            buffer = io.BytesIO()
            img.save(buffer, format="PNG")
        except (ValueError, OSError) as exc:
            logger.error("QR encoding failed", extra={"error": str(exc)})
            raise EncodingError() from exc

        encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
        return f"data:image/png;base64,{encoded}"
