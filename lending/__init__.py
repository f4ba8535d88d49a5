import click
from flask import Flask, jsonify

from lending.config import Config
from lending.errors import LendingError
from lending.extensions import db, migrate, jwt, mail


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # 0) <int:...> route ids bounded to the id column range; must precede blueprint registration
    from lending.utils.params import IdConverter
    app.url_map.converters["int"] = IdConverter

    # 1) Models must be imported before db/migrate see the metadata
    from lending.models import (  # noqa: F401
        book,
        book_transaction,
        notification_log,
        resident,
        specialty,
        transaction_metadata,
        user,
    )

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    # 2) Lending engine, configured once per app
    from lending.services.transaction_engine import TransactionEngine
    app.extensions["transaction_engine"] = TransactionEngine(
        max_borrowed_books=app.config["MAX_BORROWED_BOOKS"],
        default_loan_days=app.config["DEFAULT_LOAN_DAYS"],
    )

    # 3) API blueprints
    from lending.controllers.auth_controller import auth_bp
    from lending.controllers.book_controller import book_bp
    from lending.controllers.notification_controller import notif_bp
    from lending.controllers.resident_controller import resident_bp
    from lending.controllers.specialty_controller import specialty_bp
    from lending.controllers.transaction_controller import transaction_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(resident_bp, url_prefix="/residents")
    app.register_blueprint(specialty_bp, url_prefix="/specialties")
    app.register_blueprint(transaction_bp, url_prefix="/transactions")
    app.register_blueprint(notif_bp, url_prefix="/notifications")

    @app.errorhandler(LendingError)
    def handle_lending_error(e):
        return jsonify(e.to_dict()), e.http_status

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.cli.command("init-db")
    def init_db():
        """Create all tables (development only; use flask db upgrade elsewhere)."""
        db.create_all()
        click.echo("Tables created.")

    # 4) Overdue reminders
    from lending.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
