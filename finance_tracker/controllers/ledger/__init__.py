from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import ledger_bp
from .dependencies import (
    LedgerDependencies,
    get_ledger_dependencies,
    register_ledger_dependencies,
)
from .resources import LedgerEntryCollectionResource, LedgerEntryResource

__all__ = [
    "ledger_bp",
    "LedgerDependencies",
    "register_ledger_dependencies",
    "get_ledger_dependencies",
    "LedgerEntryCollectionResource",
    "LedgerEntryResource",
]
