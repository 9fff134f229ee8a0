from datetime import timedelta
from typing import Any
from uuid import UUID

from flask import Blueprint, Response, current_app
from flask_apispec import doc, use_kwargs
from flask_apispec.views import MethodResource
from flask_jwt_extended import (
    create_access_token,
    get_jti,
    get_jwt_identity,
    jwt_required,
)
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from finance_tracker.controllers.response_contract import (
    error_response,
    success_response,
)
from finance_tracker.extensions.database import db
from finance_tracker.models.user import User
from finance_tracker.schemas.auth_schema import AuthSchema
from finance_tracker.schemas.user_schemas import UserRegistrationSchema

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _public_user(user: User) -> dict[str, Any]:
    return {"id": str(user.id), "name": user.name, "email": user.email}


class RegisterResource(MethodResource):
    @doc(
        description="Create a new user account",
        tags=["Authentication"],
        responses={
            201: {"description": "User created"},
            400: {"description": "Validation error"},
            409: {"description": "Email already registered"},
        },
    )  # type: ignore[misc]
    @use_kwargs(UserRegistrationSchema, location="json")  # type: ignore[misc]
    def post(self, **validated_data: Any) -> Response:
        email = validated_data["email"].strip().lower()
        if User.query.filter_by(email=email).first():
            return error_response(
                status_code=409,
                message="Email already registered",
                error_code="CONFLICT",
            )

        user = User(
            name=validated_data["name"].strip(),
            email=email,
            password=generate_password_hash(validated_data["password"]),
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return error_response(
                status_code=409,
                message="Email already registered",
                error_code="CONFLICT",
            )

        current_app.logger.info("user_registered user_id=%s", user.id)
        return success_response(
            status_code=201,
            message="User created successfully",
            data={"user": _public_user(user)},
        )


class AuthResource(MethodResource):
    @doc(
        description="Log in with email or name plus password",
        tags=["Authentication"],
        responses={
            200: {"description": "Login successful"},
            400: {"description": "Missing credentials"},
            401: {"description": "Invalid credentials"},
        },
    )  # type: ignore[misc]
    @use_kwargs(AuthSchema, location="json")  # type: ignore[misc]
    def post(self, **kwargs: Any) -> Response:
        email = kwargs.get("email")
        name = kwargs.get("name")
        password = kwargs["password"]

        user = (
            User.query.filter_by(email=email.strip().lower()).first()
            if email
            else User.query.filter_by(name=name).first()
        )
        if not user or not check_password_hash(user.password, password):
            return error_response(
                status_code=401,
                message="Invalid credentials",
                error_code="UNAUTHORIZED",
            )

        token = create_access_token(
            identity=str(user.id),
            expires_delta=timedelta(
                hours=current_app.config["JWT_ACCESS_TOKEN_HOURS"]
            ),
        )
        user.current_jti = get_jti(token)
        db.session.commit()
        return success_response(
            status_code=200,
            message="Login successful",
            data={"token": token, "user": _public_user(user)},
        )


class LogoutResource(MethodResource):
    @doc(
        description="Revoke the current JWT",
        tags=["Authentication"],
        security=[{"BearerAuth": []}],
        responses={200: {"description": "Logout successful"}},
    )  # type: ignore[misc]
    @jwt_required()  # type: ignore[misc]
    def post(self) -> Response:
        user = db.session.get(User, UUID(get_jwt_identity()))
        if user:
            user.current_jti = None
            db.session.commit()
        return success_response(
            status_code=200,
            message="Logout successful",
            data={},
        )


auth_bp.add_url_rule(
    "/register", view_func=RegisterResource.as_view("registerresource")
)
auth_bp.add_url_rule("/login", view_func=AuthResource.as_view("authresource"))
auth_bp.add_url_rule("/logout", view_func=LogoutResource.as_view("logoutresource"))
