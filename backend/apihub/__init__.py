from typing import Iterable
from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .errors import register_error_handlers
from .connectors.base import SourceConnector
from .connectors.registry import EXTENSION_KEY as CONNECTORS_KEY, ConnectorRegistry
from .application.sessions.editing_session import (
    EXTENSION_KEY as SESSIONS_KEY,
    EditingSessionManager,
)
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(
    config_name: str = "development",
    connectors: Iterable[SourceConnector] = (),
) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # Hub services, built once from config
    # -------------------------------------------------
    app.extensions[SESSIONS_KEY] = EditingSessionManager(
        app.config["SECRET_KEY"],
        secret_length=app.config["EDITING_SESSION_SECRET_LENGTH"],
    )
    app.extensions[CONNECTORS_KEY] = ConnectorRegistry(connectors)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/hub.yaml", methods=["GET"], endpoint="openapi_hub")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "hub_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("hub_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/hub.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "API Design Hub",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
