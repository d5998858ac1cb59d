# payrecon/clients/storage.py
import logging
import os
import uuid
from datetime import datetime

from werkzeug.utils import secure_filename

from ..errors import TransientExternalError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Receipt images on a local directory, served under ``public_base``."""

    def __init__(self, root, public_base="/files"):
        self.root = root
        self.public_base = public_base.rstrip("/")

    def store(self, data: bytes, filename: str | None = None) -> str:
        name = secure_filename(filename or "") or "receipt"
        location = f"pending/{datetime.utcnow():%Y%m%d}-{uuid.uuid4().hex[:12]}-{name}"
        path = os.path.join(self.root, location)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise TransientExternalError("could not store receipt image", {"error": str(e)}) from e
        logger.info("stored receipt image %s (%d bytes)", location, len(data))
        return location

    def public_url(self, location: str) -> str:
        return f"{self.public_base}/{location}"
