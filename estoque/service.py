"""
Stock Service — The single public interface for all stock operations.

Usage:
    from estoque import stock, StockError

    stock.record_movement(produto, 'entrada', 100, operator='Alice')
    stock.record_movement(produto, 'venda', 30)
    stock.balance(produto)  # 70
    stock.audit_all().discrepancies  # []

Async views can await the a-prefixed variants:
    result = await stock.arecord_movement(produto.pk, 'venda', 2)
"""

from asgiref.sync import sync_to_async

from estoque.services.audit import StockAudit
from estoque.services.movements import StockLedger
from estoque.services.queries import StockQueries


class Estoque(StockQueries, StockLedger, StockAudit):
    """
    Single interface for all stock operations.

    Parameter convention: (product, kind, quantity, ...)
    Follows natural language: "Record a sale of 30 for product P"

    IMPORTANT: All state-changing methods use atomic transactions
    with row locking on the product. See each method's docstring.
    """

    # ══════════════════════════════════════════════════════════════
    # ASYNC
    # ══════════════════════════════════════════════════════════════

    @classmethod
    async def arecord_movement(cls, product, kind, quantity, operator: str = '', note: str = ''):
        return await sync_to_async(cls.record_movement)(product, kind, quantity, operator, note)

    @classmethod
    async def adelete_movement(cls, movement):
        return await sync_to_async(cls.delete_movement)(movement)

    @classmethod
    async def acorrect_stock(cls, product, new_balance, reason: str, operator: str = ''):
        return await sync_to_async(cls.correct_stock)(product, new_balance, reason, operator)

    @classmethod
    async def aaudit_product(cls, product):
        return await sync_to_async(cls.audit_product)(product)

    @classmethod
    async def aaudit_all(cls, products=None):
        return await sync_to_async(cls.audit_all)(products)
