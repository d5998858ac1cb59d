import os


def _csv(value):
    return [v.strip() for v in (value or "").split(",") if v.strip()]


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS")) or "*"

    # Reconciliation
    PAYMENT_TOLERANCE = int(os.getenv("PAYMENT_TOLERANCE", "1000"))
    MIN_RECEIPT_TEXT_LENGTH = int(os.getenv("MIN_RECEIPT_TEXT_LENGTH", "30"))
    CURRENCY = os.getenv("CURRENCY", "ARS")

    # External collaborators
    EXTERNAL_TIMEOUT = float(os.getenv("EXTERNAL_TIMEOUT", "5"))
    STORAGE_DIR = os.getenv("STORAGE_DIR")
    STORAGE_PUBLIC_URL = os.getenv("STORAGE_PUBLIC_URL", "/files")
    TIENDANUBE_API_URL = os.getenv("TIENDANUBE_API_URL", "https://api.tiendanube.com/v1")
    TIENDANUBE_STORE_ID = os.getenv("TIENDANUBE_STORE_ID")
    TIENDANUBE_ACCESS_TOKEN = os.getenv("TIENDANUBE_ACCESS_TOKEN")
    TIENDANUBE_CLIENT_SECRET = os.getenv("TIENDANUBE_CLIENT_SECRET", "")
    BOTMAKER_API_URL = os.getenv(
        "BOTMAKER_API_URL", "https://api.botmaker.com/v2.0/chats-actions/trigger-intent"
    )
    BOTMAKER_CHANNEL_ID = os.getenv("BOTMAKER_CHANNEL_ID")
    BOTMAKER_ACCESS_TOKEN = os.getenv("BOTMAKER_ACCESS_TOKEN")
    NOTIFICATIONS_ENABLED = os.getenv("NOTIFICATIONS_ENABLED", "1") not in ("0", "false", "no")
    # empty list = deliver to every phone
    NOTIFY_ALLOWLIST = _csv(os.getenv("NOTIFY_ALLOWLIST"))

    @staticmethod
    def init_app(app):

        if not os.getenv("DATABASE_URL"):
            os.makedirs(app.instance_path, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'payrecon.db')}"
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")

        if not app.config.get("STORAGE_DIR"):
            app.config["STORAGE_DIR"] = os.path.join(app.instance_path, "receipts")
