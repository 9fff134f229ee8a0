from typing import Any

from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from flask import Flask
from flask_apispec import FlaskApiSpec
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

from finance_tracker.controllers.achievement import (
    AchievementCheckResource,
    AchievementCollectionResource,
    AchievementLeaderboardResource,
    achievement_bp,
    register_achievement_dependencies,
)
from finance_tracker.controllers.auth_controller import (
    AuthResource,
    LogoutResource,
    RegisterResource,
    auth_bp,
)
from finance_tracker.controllers.goal import (
    GoalCollectionResource,
    GoalContributionResource,
    GoalResource,
    GoalStatusResource,
    goal_bp,
    register_goal_dependencies,
)
from finance_tracker.controllers.health_controller import health_bp
from finance_tracker.controllers.ledger import (
    LedgerEntryCollectionResource,
    LedgerEntryResource,
    ledger_bp,
    register_ledger_dependencies,
)
from finance_tracker.docs.api_documentation import API_INFO, TAGS
from finance_tracker.extensions.achievement_trigger import (
    register_achievement_trigger,
)
from finance_tracker.extensions.database import db
from finance_tracker.extensions.error_handlers import register_error_handlers
from finance_tracker.extensions.jwt_callbacks import register_jwt_callbacks
from finance_tracker.models.goal import Goal  # noqa: F401
from finance_tracker.models.ledger_entry import LedgerEntry  # noqa: F401
from finance_tracker.models.user import User  # noqa: F401
from finance_tracker.models.user_achievement import UserAchievement  # noqa: F401

jwt = JWTManager()

_DOCUMENTED_RESOURCES = (
    (RegisterResource, "auth", "registerresource"),
    (AuthResource, "auth", "authresource"),
    (LogoutResource, "auth", "logoutresource"),
    (GoalCollectionResource, "goal", "goal_collection"),
    (GoalResource, "goal", "goal_resource"),
    (GoalContributionResource, "goal", "goal_contribution"),
    (GoalStatusResource, "goal", "goal_status"),
    (LedgerEntryCollectionResource, "ledger", "ledger_entry_collection"),
    (LedgerEntryResource, "ledger", "ledger_entry_resource"),
    (AchievementCheckResource, "achievement", "achievement_check"),
    (AchievementCollectionResource, "achievement", "achievement_collection"),
    (AchievementLeaderboardResource, "achievement", "achievement_leaderboard"),
)


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    from config import Config, validate_security_configuration

    validate_security_configuration()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    app.config.from_prefixed_env()
    if config_overrides:
        app.config.update(config_overrides)

    db.init_app(app)
    Migrate(app, db)
    jwt.init_app(app)

    # Development convenience; production schemas are managed by Flask-Migrate.
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
                    "license": API_INFO["license"],
                },
                components={
                    "securitySchemes": {
                        "BearerAuth": {
                            "type": "http",
                            "scheme": "bearer",
                            "bearerFormat": "JWT",
                            "description": "Token returned by /auth/login",
                        }
                    }
                },
                tags=TAGS,
            ),
            "APISPEC_SWAGGER_URL": "/docs/swagger/",
            "APISPEC_SWAGGER_UI_URL": "/docs/",
        }
    )
    docs = FlaskApiSpec(app)

    register_error_handlers(app)
    register_jwt_callbacks(jwt)
    register_achievement_trigger(app)
    register_goal_dependencies(app)
    register_ledger_dependencies(app)
    register_achievement_dependencies(app)

    # Blueprints must be registered before their resources are documented.
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(goal_bp)
    app.register_blueprint(ledger_bp)
    app.register_blueprint(achievement_bp)

    for resource, blueprint, endpoint in _DOCUMENTED_RESOURCES:
        docs.register(resource, blueprint=blueprint, endpoint=endpoint)

    return app


__all__ = ["create_app"]
