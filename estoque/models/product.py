"""
Product model — what is counted, with its cached balance.
"""

from decimal import Decimal

from django.db import models
from django.db.models import F
from django.utils.translation import gettext_lazy as _


class ProductQuerySet(models.QuerySet):
    """QuerySet with helpers for balance queries."""

    def low_stock(self):
        """Products at or below their reorder threshold."""
        return self.filter(estoque_atual__lte=F('estoque_minimo'))

    def out_of_stock(self):
        return self.filter(estoque_atual__lte=0)


class Product(models.Model):
    """
    Stocked product.

    Performance:
    - estoque_atual is a cache updated atomically by the ledger
    - Read is O(1), not O(N)
    - Use stock.audit_product() to compare it against the movement history
    """

    nome = models.CharField(
        max_length=200,
        verbose_name=_('Nome'),
    )
    unidade_medida = models.CharField(
        max_length=20,
        default='unidade',
        verbose_name=_('Unidade de Medida'),
        help_text=_('Ex: unidade, kg'),
    )

    # Balance cache (updated atomically by the ledger)
    estoque_atual = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Estoque Atual'),
    )
    estoque_minimo = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Estoque Mínimo'),
        help_text=_('Abaixo ou igual a este valor o estoque é considerado baixo'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('Produto')
        verbose_name_plural = _('Produtos')
        ordering = ['nome']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(estoque_minimo__gte=0),
                name='estoque_product_minimo_non_negative',
            ),
        ]

    @property
    def balance(self) -> Decimal:
        """Current balance — O(1) cache read."""
        return self.estoque_atual

    @property
    def is_low(self) -> bool:
        return self.estoque_atual <= self.estoque_minimo

    def __str__(self) -> str:
        return f"{self.nome} ({self.unidade_medida})"
