"""
Movement model — ledger of quantity changes against a product.
"""

from decimal import Decimal

from django.db import models, transaction
from django.db.models import Case, F, Sum, When
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from estoque.models.enums import MovementKind


def signed_quantity_sum():
    """Aggregate expression: Σ(+quantidade for entrada, -quantidade otherwise)."""
    return Coalesce(
        Sum(
            Case(
                When(tipo=MovementKind.ENTRADA, then=F('quantidade')),
                default=-F('quantidade'),
                output_field=models.DecimalField(max_digits=12, decimal_places=3),
            )
        ),
        Decimal('0'),
        output_field=models.DecimalField(max_digits=12, decimal_places=3),
    )


class MovementQuerySet(models.QuerySet):

    def for_product(self, product):
        return self.filter(product=product)

    def inbound(self):
        return self.filter(tipo=MovementKind.ENTRADA)

    def outbound(self):
        return self.exclude(tipo=MovementKind.ENTRADA)

    def signed_total(self) -> Decimal:
        """Sum of signed quantities (entrada positive, the rest negative)."""
        return self.aggregate(t=signed_quantity_sum())['t']

    def delete(self):
        raise ValueError(
            "Exclusão em massa não reverte o estoque. "
            "Use stock.delete_movement() para cada movimentação."
        )

    delete.alters_data = True
    delete.queryset_only = True


class Movement(models.Model):
    """
    Record of one quantity change.

    Rules:
    - Never update(): a saved movement is immutable
    - delete() removes the row and reverses its delta in one transaction
    - QuerySet.delete() is refused (it would skip the reversal)
    - Updates Product.estoque_atual atomically on save()

    Together with BalanceCorrection, this is the ONLY model that changes
    a product's balance. Use stock.record_movement() / stock.delete_movement()
    so locking and stock checks happen first.
    """

    product = models.ForeignKey(
        'estoque.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Produto'),
    )
    tipo = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        verbose_name=_('Tipo'),
    )
    quantidade = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantidade'),
        help_text=_('Sempre positiva. O tipo define o sinal.'),
    )
    operador = models.CharField(
        max_length=120,
        blank=True,
        default='',
        verbose_name=_('Operador'),
    )
    observacao = models.TextField(
        blank=True,
        default='',
        verbose_name=_('Observação'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    objects = MovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Movimentação')
        verbose_name_plural = _('Movimentações')
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantidade__gt=0),
                name='estoque_movement_quantidade_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['product', 'created_at'], name='estoque_mov_prod_created_idx'),
            models.Index(fields=['tipo', 'created_at'], name='estoque_mov_tipo_created_idx'),
        ]

    @property
    def kind(self) -> MovementKind:
        return MovementKind(self.tipo)

    @property
    def delta(self) -> Decimal:
        """Signed effect on the balance."""
        return self.kind.signed(self.quantidade)

    def save(self, *args, **kwargs):
        """Save movement and apply its delta to the product atomically."""
        if self.pk:
            raise ValueError(
                "Movimentações são imutáveis. "
                "Para corrigir, exclua e registre novamente."
            )

        with transaction.atomic():
            super().save(*args, **kwargs)

            from estoque.models.product import Product

            Product.objects.filter(pk=self.product_id).update(
                estoque_atual=F('estoque_atual') + self.delta,
                updated_at=timezone.now(),
            )

    def delete(self, *args, **kwargs):
        """
        Remove the movement and reverse its delta on the product.

        Raises Movement.DoesNotExist if the row is already gone (stale
        instance), without touching the balance.
        """
        pk, delta = self.pk, self.delta

        with transaction.atomic():
            from estoque.models.product import Product

            deleted, per_model = super().delete(*args, **kwargs)
            if not deleted:
                raise Movement.DoesNotExist(f"Movimentação {pk} já foi excluída.")

            Product.objects.filter(pk=self.product_id).update(
                estoque_atual=F('estoque_atual') - delta,
                updated_at=timezone.now(),
            )
            return deleted, per_model

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.get_tipo_display()}"
