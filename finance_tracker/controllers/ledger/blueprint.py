from flask import Blueprint

ledger_bp = Blueprint("ledger", __name__, url_prefix="/ledger")
