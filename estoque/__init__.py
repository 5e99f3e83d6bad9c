"""
Django Estoque — Livro-razão de movimentações e auditoria de saldo.

Uso:
    from estoque import stock, StockError

    stock.record_movement(produto, 'entrada', 100)
    stock.record_movement(produto, 'venda', 30)   # saldo 70
    stock.audit_product(produto).matches         # True
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from estoque.service import Estoque
        return Estoque
    elif name == 'StockError':
        from estoque.exceptions import StockError
        return StockError
    elif name == 'Product':
        from estoque.models.product import Product
        return Product
    elif name == 'Movement':
        from estoque.models.movement import Movement
        return Movement
    elif name == 'BalanceCorrection':
        from estoque.models.correction import BalanceCorrection
        return BalanceCorrection
    elif name == 'MovementKind':
        from estoque.models.enums import MovementKind
        return MovementKind
    elif name == 'StockStatus':
        from estoque.models.enums import StockStatus
        return StockStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'StockError',
    'Product',
    'Movement',
    'BalanceCorrection',
    'MovementKind',
    'StockStatus',
]

__version__ = '0.1.0'
