from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from flask import Flask
from flask_apispec import FlaskApiSpec
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

from moneyflow import models  # noqa: F401
from moneyflow.controllers.goal import (
    GoalCollectionResource,
    GoalResource,
    GoalStatsResource,
    goal_bp,
    register_goal_dependencies,
)
from moneyflow.controllers.health_controller import health_bp
from moneyflow.docs.api_documentation import API_INFO, TAGS
from moneyflow.extensions.database import db
from moneyflow.extensions.error_handlers import register_error_handlers
from moneyflow.extensions.goal_sync_cli import register_goal_sync_commands
from moneyflow.extensions.jwt_callbacks import register_jwt_callbacks

jwt = JWTManager()


def create_app() -> Flask:
    from config import Config, load_runtime_config, validate_security_configuration

    validate_security_configuration()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    app.config.from_mapping(load_runtime_config())

    # Environment variables prefixed with FLASK_ override everything else.
    app.config.from_prefixed_env()

    db.init_app(app)
    Migrate(app, db)
    jwt.init_app(app)
    register_jwt_callbacks(jwt)

    if app.config.get("AUTO_CREATE_DB"):
        with app.app_context():
            db.create_all()

    app.config.update(
        {
            "APISPEC_SPEC": APISpec(
                title=API_INFO["title"],
                version=API_INFO["version"],
                openapi_version="3.0.2",
                plugins=[MarshmallowPlugin()],
                info={
                    "description": API_INFO["description"],
                    "contact": API_INFO["contact"],
                    "license": API_INFO["license"],
                },
                components={
                    "securitySchemes": {
                        "BearerAuth": {
                            "type": "http",
                            "scheme": "bearer",
                            "bearerFormat": "JWT",
                            "description": "Access token issued by the auth provider",
                        }
                    }
                },
                tags=TAGS,
            ),
            "APISPEC_SWAGGER_URL": "/docs/swagger/",
            "APISPEC_SWAGGER_UI_URL": "/docs/",
            "APISPEC_OPTIONS": {"security": [{"BearerAuth": []}]},
        }
    )
    docs = FlaskApiSpec(app)

    register_error_handlers(app)
    register_goal_dependencies(app)
    register_goal_sync_commands(app)

    # Blueprints must be registered before their endpoints are documented.
    app.register_blueprint(health_bp)
    app.register_blueprint(goal_bp)

    docs.register(GoalCollectionResource, blueprint="goal", endpoint="goal_collection")
    docs.register(GoalStatsResource, blueprint="goal", endpoint="goal_stats")
    docs.register(GoalResource, blueprint="goal", endpoint="goal_resource")

    app.logger.info("MoneyFlow goals API created")
    return app


__all__ = ["create_app", "jwt"]
