"""
Estoque Models.

Core models for stock control:
- Product: What is counted, with its cached balance
- Movement: Ledger of quantity changes
- BalanceCorrection: Explicit overrides of the cached balance
"""

from estoque.models.correction import BalanceCorrection
from estoque.models.enums import OUTBOUND_KINDS, MovementKind, StockStatus
from estoque.models.movement import Movement
from estoque.models.product import Product

__all__ = [
    'MovementKind',
    'StockStatus',
    'OUTBOUND_KINDS',
    'Product',
    'Movement',
    'BalanceCorrection',
]
