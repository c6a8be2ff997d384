"""Service package public API definitions.

The HTTP client imports ``app.services.exceptions``, which executes this
module first. The service implementations in turn import
``app.clients.pos``, so importing them eagerly here would create a circular
import at start up. They are resolved lazily on first attribute access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "BillingReportService",
    "BillingService",
    "MenuService",
]

_SERVICE_MODULES = {
    "BillingReportService": "report",
    "BillingService": "bills",
    "MenuService": "menu",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .bills import BillingService as BillingService
    from .menu import MenuService as MenuService
    from .report import BillingReportService as BillingReportService
