from flask import Flask
from config import Config
from forum.extensions import db, migrate, login_manager


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get("LOG_LEVEL", "INFO"))

    is_dev = flask_app.config.get("IS_DEV", False)
    is_testing = flask_app.config.get("TESTING", False)

    if not (is_dev or is_testing):
        if not flask_app.config.get("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY is not set")
        if not flask_app.config.get("SQLALCHEMY_DATABASE_URI"):
            raise RuntimeError("DATABASE_URL is not set")
        flask_app.config["AUTO_CREATE_DB"] = False

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    login_manager.init_app(flask_app)

    # registers the models in the metadata and the Flask-Login user loader
    from forum import models  # noqa: F401

    # dev only: schema normally comes from `flask db upgrade`
    if flask_app.config.get("AUTO_CREATE_DB", False):
        try:
            with flask_app.app_context():
                from sqlalchemy import inspect
                engine = db.engine
                inspector = inspect(engine)
                tables = inspector.get_table_names()

                if not tables:
                    flask_app.logger.warning("AUTO_CREATE_DB=1: creating tables (empty db).")
                    db.create_all()

                    inspector = inspect(engine)
                    flask_app.logger.warning(f"AUTO_CREATE_DB: tables now: {inspector.get_table_names()}")
        except Exception:
            flask_app.logger.exception("AUTO_CREATE_DB: error creating tables.")

    return flask_app
