from marshmallow import Schema, ValidationError, fields, validates_schema


class AuthSchema(Schema):
    """Credentials accepted by the login endpoint."""

    email = fields.String(
        load_default=None,
        metadata={"description": "User email", "example": "jane.doe@email.com"},
    )
    name = fields.String(
        load_default=None,
        metadata={"description": "User name (alternative to email)"},
    )
    password = fields.String(required=True, load_only=True)

    @validates_schema
    def validate_principal(self, data: dict, **kwargs: object) -> None:
        if not data.get("email") and not data.get("name"):
            raise ValidationError("Provide an email or a name.", field_name="email")
