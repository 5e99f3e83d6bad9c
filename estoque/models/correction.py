"""
BalanceCorrection model — explicit administrative override of a balance.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class BalanceCorrection(models.Model):
    """
    Manual override of Product.estoque_atual, kept apart from Movement.

    A correction is not a movement: it does not count as stock coming in or
    going out. It records what the balance was, what the history implied
    and what a person decided it should be, and why.

    The auditor adds ``adjustment`` on top of the movement history, so a
    product corrected through stock.correct_stock() audits clean afterwards
    while the correction itself stays visible here.
    """

    product = models.ForeignKey(
        'estoque.Product',
        on_delete=models.PROTECT,
        related_name='corrections',
        verbose_name=_('Produto'),
    )
    old_value = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Estoque Anterior'),
    )
    new_value = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Novo Estoque'),
    )
    computed_value = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Estoque Calculado'),
        help_text=_('Saldo implícito no histórico no momento da correção'),
    )
    reason = models.CharField(
        max_length=255,
        verbose_name=_('Motivo'),
    )
    operador = models.CharField(
        max_length=120,
        blank=True,
        default='',
        verbose_name=_('Operador'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    class Meta:
        verbose_name = _('Correção de Estoque')
        verbose_name_plural = _('Correções de Estoque')
        ordering = ['-created_at']

    @property
    def adjustment(self) -> Decimal:
        """Amount the history must be shifted by to reach new_value."""
        return self.new_value - self.computed_value

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Correções de estoque são imutáveis.")
        if not self.reason:
            raise ValueError("Motivo é obrigatório")
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product}: {self.old_value} → {self.new_value} ({self.reason})"
