# payrecon/clients/ocr.py
import io
import logging

import pytesseract
from PIL import Image, UnidentifiedImageError

from ..errors import TransientExternalError, ValidationError

logger = logging.getLogger(__name__)


class TesseractOcr:
    def __init__(self, lang="spa", timeout=5.0):
        self.lang = lang
        self.timeout = timeout

    def extract_text(self, image_bytes: bytes) -> str:
        """Run Tesseract on image bytes and return the raw text."""
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError("cannot open image", {"error": str(e)}) from e

        # Convert palette/CMYK modes to RGB for Tesseract compatibility
        if image.mode not in ("RGB", "L", "RGBA"):
            image = image.convert("RGB")

        try:
            text = pytesseract.image_to_string(image, lang=self.lang, timeout=self.timeout)
        except RuntimeError as e:
            # pytesseract signals its timeout as a bare RuntimeError
            raise TransientExternalError("OCR failed", {"error": str(e)}) from e
        except (pytesseract.TesseractError, OSError) as e:
            raise TransientExternalError("OCR failed", {"error": str(e)}) from e
        return text.strip()
