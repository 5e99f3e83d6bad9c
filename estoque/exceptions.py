"""
Exceptions for Estoque.

All errors are StockError with a structured code for programmatic handling.
Subclasses narrow the kind of failure so callers can catch only what they
handle; catching StockError still catches everything.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Exception carrying a machine-readable code plus context data.

    Subclasses provide ``_default_messages`` keyed by code.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class StockError(BaseError):
    """
    Structured exception for stock operations.

    Usage:
        try:
            stock.record_movement(produto, 'venda', 30)
        except StockError as e:
            if e.code == 'INSUFFICIENT_QUANTITY':
                print(f"Só tem {e.available} disponível")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INSUFFICIENT_QUANTITY': 'Quantidade insuficiente no estoque',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser positiva)',
        'INVALID_KIND': 'Tipo de movimentação inválido',
        'REASON_REQUIRED': 'Motivo é obrigatório',
        'REASON_TOO_LONG': 'Motivo excede o tamanho máximo',
        'OPERATOR_TOO_LONG': 'Nome do operador excede o tamanho máximo',
        'PRODUCT_NOT_FOUND': 'Produto não encontrado',
        'MOVEMENT_NOT_FOUND': 'Movimentação não encontrada',
        'STORE_ERROR': 'Falha ao acessar o banco de dados',
    }

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class NotFoundError(StockError):
    """Referenced product or movement does not exist."""


class InsufficientStockError(StockError):
    """Outbound quantity exceeds the current balance. Nothing was written."""


class StockValidationError(StockError):
    """Bad input rejected before touching the database."""


class StoreError(StockError):
    """The database call itself failed. ``data['detail']`` has the raw message."""
