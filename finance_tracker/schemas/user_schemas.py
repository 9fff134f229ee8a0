from marshmallow import Schema, fields, validate


class UserRegistrationSchema(Schema):
    """Payload for creating a new account"""

    name = fields.Str(
        required=True,
        validate=validate.Length(min=2, max=128),
        metadata={"description": "Full name", "example": "Jane Doe"},
    )
    email = fields.Email(
        required=True,
        metadata={"description": "Unique email address"},
    )
    password = fields.Str(
        required=True,
        load_only=True,
        metadata={
            "description": (
                "At least 10 characters with one uppercase letter, "
                "one digit and one symbol"
            )
        },
        validate=validate.Regexp(
            r"^(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).{10,}$",
            error=(
                "Password must have at least 10 characters, one uppercase "
                "letter, one digit and one symbol."
            ),
        ),
    )
