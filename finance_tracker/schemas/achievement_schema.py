from marshmallow import Schema, fields


class AchievementSchema(Schema):
    class Meta:
        name = "Achievement"

    achievement_id = fields.Int()
    name = fields.Str()
    description = fields.Str()
    category = fields.Str()
    icon = fields.Str()
    points = fields.Int()
    earned_at = fields.DateTime()


class AchievementCheckResultSchema(Schema):
    class Meta:
        name = "AchievementCheckResult"

    new_achievements = fields.List(fields.Nested(AchievementSchema))
    total_achievements = fields.Int()
    total_points = fields.Int()
    message = fields.Str()
