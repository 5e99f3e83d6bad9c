"""
Estoque configuration.

Usage in settings.py:
    ESTOQUE = {
        "DRIFT_TOLERANCE": "0.01",
        "DEFAULT_OPERATOR": "Sistema",
        "AUDIT_CHUNK_SIZE": 200,
        "LOW_STOCK_WARNINGS": True,
    }
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from django.conf import settings


@dataclass
class EstoqueSettings:
    """Estoque configuration settings."""

    # Max |stored - computed| still considered consistent by the auditor
    DRIFT_TOLERANCE: str = "0.01"

    # Operator recorded on movements when none is given
    DEFAULT_OPERATOR: str = "Sistema"

    # Iterator chunk size for audit_all
    AUDIT_CHUNK_SIZE: int = 200

    # Log stock.low when an outbound movement reaches estoque_minimo
    LOW_STOCK_WARNINGS: bool = True

    @property
    def drift_tolerance(self) -> Decimal:
        return Decimal(str(self.DRIFT_TOLERANCE))


def get_estoque_settings() -> EstoqueSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "ESTOQUE", {})
    return EstoqueSettings(**{
        k: v for k, v in user_settings.items()
        if k in EstoqueSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_estoque_settings(), name)


estoque_settings = _LazySettings()
