"""
Stock services — modular organization of stock operations.

Re-exports the public classes:
    from estoque.services import StockQueries, StockLedger, StockAudit
"""

from estoque.services.audit import AuditReport, AuditResult, Discrepancy, StockAudit
from estoque.services.movements import MovementResult, ReversalResult, StockLedger
from estoque.services.queries import StockQueries

__all__ = [
    'StockQueries',
    'StockLedger',
    'StockAudit',
    'MovementResult',
    'ReversalResult',
    'AuditResult',
    'AuditReport',
    'Discrepancy',
]
