from __future__ import annotations

from .blueprint import ledger_bp
from .resources import LedgerEntryCollectionResource, LedgerEntryResource

_ROUTES_REGISTERED = False


def register_ledger_routes() -> None:
    global _ROUTES_REGISTERED
    if _ROUTES_REGISTERED:
        return

    ledger_bp.add_url_rule(
        "/entries",
        view_func=LedgerEntryCollectionResource.as_view("ledger_entry_collection"),
        methods=["GET", "POST"],
    )
    ledger_bp.add_url_rule(
        "/entries/<uuid:entry_id>",
        view_func=LedgerEntryResource.as_view("ledger_entry_resource"),
        methods=["DELETE"],
    )

    _ROUTES_REGISTERED = True


register_ledger_routes()
