"""
Enums for Estoque models.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class MovementKind(models.TextChoices):
    """
    Kind of stock movement.

    ENTRADA is the only inbound kind: it increases the balance.
    Every other kind is outbound and requires enough balance.
    """
    ENTRADA = 'entrada', _('Entrada')
    SAIDA = 'saida', _('Saída')
    VENDA = 'venda', _('Venda')
    USO = 'uso', _('Uso Interno')
    AVARIA = 'avaria', _('Avarias')

    @property
    def is_inbound(self) -> bool:
        return self == MovementKind.ENTRADA

    @property
    def is_outbound(self) -> bool:
        return self != MovementKind.ENTRADA

    def signed(self, quantity: Decimal) -> Decimal:
        """Quantity with the sign this kind applies to the balance."""
        return quantity if self.is_inbound else -quantity


OUTBOUND_KINDS = frozenset(kind for kind in MovementKind if kind.is_outbound)


class StockStatus(models.TextChoices):
    """Balance situation relative to the reorder threshold."""
    ESGOTADO = 'esgotado', _('Esgotado')  # balance <= 0
    BAIXO = 'baixo', _('Baixo')           # balance <= estoque_minimo
    NORMAL = 'normal', _('Normal')
