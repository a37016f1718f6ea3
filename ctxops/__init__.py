from flask import Flask, current_app, jsonify
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from config import Config
from .extensions import db, login_manager
from . import models  # ensure models are registered with SQLAlchemy
from .routes import (
    auth,
    dashboard,
    documents,
    errors,
    health,
    inventory,
    machinery,
    operations,
    purchasing,
    sales,
)
from .services import init_services
from .utils.logging import configure_logging

BLUEPRINTS = (
    errors,
    health,
    auth,
    dashboard,
    machinery,
    purchasing,
    inventory,
    sales,
    documents,
    operations,
)


def _parse_default_warehouses(raw: str) -> list[tuple[str, str | None]]:
    warehouses = []
    for entry in (raw or "").split(";"):
        if not entry.strip():
            continue
        name, _, location = entry.partition("|")
        name = name.strip()
        if name:
            warehouses.append((name, location.strip() or None))
    return warehouses


def _seed_warehouses(raw: str) -> None:
    """Seed the configured warehouses the first time the table is empty."""

    if db.session.execute(select(func.count(models.Warehouse.id))).scalar():
        return

    seeded = _parse_default_warehouses(raw)
    db.session.add_all(
        models.Warehouse(name=name, location=location) for name, location in seeded
    )
    db.session.commit()
    current_app.logger.info("Seeded %s default warehouses", len(seeded))


def _seed_admin(username: str, password: str) -> None:
    """Create the administrative account when it does not exist yet.

    Several workers can boot against the same database at once, so a unique
    violation from a concurrent insert is retried as a lookup.
    """

    if not username:
        return

    lookup = select(models.User).where(models.User.username == username)
    for attempt in range(3):
        if db.session.execute(lookup).scalar_one_or_none() is not None:
            return
        admin = models.User(username=username, role="admin")
        admin.set_password(password or username)
        db.session.add(admin)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if attempt == 2:
                raise
        else:
            current_app.logger.info("Created admin account %s", username)
            return


def _bootstrap_database(app: Flask) -> str | None:
    """Create tables and seed reference data.

    Returns a user-facing message when the database cannot be used, ``None``
    when it is ready.
    """

    try:
        with db.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except OperationalError as exc:
        reason = str(getattr(exc, "orig", exc)).strip()
        app.logger.error("Database unreachable at startup: %s", reason or "unknown error")
        db.session.remove()
        message = "Cannot reach the database configured by DB_URL."
        return f"{message} ({reason})" if reason else message

    try:
        db.create_all()
        _seed_warehouses(app.config.get("DEFAULT_WAREHOUSES", ""))
        _seed_admin(app.config.get("ADMIN_USER", ""), app.config.get("ADMIN_PASSWORD", ""))
    except SQLAlchemyError:
        app.logger.exception("Schema creation or seeding failed")
        db.session.rollback()
        db.session.remove()
        return "The database schema could not be prepared; see the application log."
    return None


def create_app(config_override=None):
    app = Flask(__name__)

    # environment first, explicit overrides (tests, scripts) win
    app.config.from_object(Config)
    if config_override:
        app.config.update(config_override)

    if app.config.get("SQLALCHEMY_DATABASE_URI", "").startswith("sqlite:///:memory:"):
        # one shared connection, otherwise each checkout sees an empty database
        engine_options = app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {})
        engine_options.setdefault("poolclass", StaticPool)
        engine_options.setdefault("connect_args", {}).setdefault("check_same_thread", False)

    configure_logging(app)

    db.init_app(app)
    login_manager.init_app(app)
    init_services(app, lambda: db.session)

    @login_manager.user_loader
    def load_user(user_id: str):
        try:
            return db.session.get(models.User, int(user_id))
        except (TypeError, ValueError):
            return None
        except OperationalError:
            current_app.logger.warning("User lookup skipped: database unavailable")
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    with app.app_context():
        database_error = _bootstrap_database(app)
    app.config["DATABASE_AVAILABLE"] = database_error is None
    app.config["DATABASE_ERROR"] = database_error

    for module in BLUEPRINTS:
        app.register_blueprint(module.bp)

    return app
