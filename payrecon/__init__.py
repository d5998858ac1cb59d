import logging

from flask import Flask, send_from_directory

from .extensions import db, cors, migrate
from .config import Config
from .errors import ReconcileError
from .utils.api import ok, err


def create_app(test_config=None, clients=None):
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_object(Config)
    Config.init_app(app)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Init extensions
    db.init_app(app)
    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})
    migrate.init_app(app, db)

    from .clients import EXTENSION_KEY, build_clients
    app.extensions[EXTENSION_KEY] = clients or build_clients(app.config)

    # Register blueprints
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .receipt import bp as receipt_bp; app.register_blueprint(receipt_bp)
    from .webhook import bp as webhook_bp; app.register_blueprint(webhook_bp)

    from .cli import register_cli
    register_cli(app)

    @app.errorhandler(ReconcileError)
    def handle_reconcile_error(e):
        return err(e.message, e.status_code, e.data)

    @app.get("/")
    def health():
        return ok("API running", {"ok": True})

    @app.get("/files/<path:location>")
    def stored_file(location):
        return send_from_directory(app.config["STORAGE_DIR"], location)

    with app.app_context():
        from . import model  # noqa: F401
        db.create_all()

    return app
