from flask import Blueprint

achievement_bp = Blueprint("achievement", __name__, url_prefix="/achievements")
