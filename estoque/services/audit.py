"""
Stock audit — recompute balances from history and report drift.

Read-only: nothing here writes to the database. Drift is returned as data,
never raised, and never corrected automatically (see stock.correct_stock).

Usage:
    from estoque import stock

    report = stock.audit_all()
    for d in report.discrepancies:
        print(d.product_name, d.stored, d.computed, d.difference)
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.db.models import DecimalField, Sum
from django.db.models.functions import Coalesce

from estoque.conf import estoque_settings
from estoque.models.correction import BalanceCorrection
from estoque.models.movement import Movement, signed_quantity_sum
from estoque.models.product import Product
from estoque.services.common import get_product, store_errors

logger = logging.getLogger('estoque')


@dataclass(frozen=True)
class Discrepancy:
    """Cached balance disagrees with the history."""

    product_id: int
    product_name: str
    stored: Decimal
    computed: Decimal
    difference: Decimal  # stored - computed

    def as_dict(self) -> dict:
        return {
            'product_id': self.product_id,
            'product_name': self.product_name,
            'stored': str(self.stored),
            'computed': str(self.computed),
            'difference': str(self.difference),
        }


@dataclass(frozen=True)
class AuditResult:
    product_id: int
    matches: bool
    discrepancy: Discrepancy | None = None


@dataclass
class AuditReport:
    checked: int = 0
    discrepancies: list[Discrepancy] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.discrepancies

    def as_dict(self) -> dict:
        return {
            'checked': self.checked,
            'consistent': self.is_consistent,
            'discrepancies': [d.as_dict() for d in self.discrepancies],
        }


def _correction_total(queryset) -> Decimal:
    """Σ(new_value - computed_value) over corrections."""
    totals = queryset.aggregate(
        new=Coalesce(Sum('new_value'), Decimal('0'), output_field=DecimalField()),
        computed=Coalesce(Sum('computed_value'), Decimal('0'), output_field=DecimalField()),
    )
    return totals['new'] - totals['computed']


def _compare(product: Product, computed: Decimal, tolerance: Decimal) -> AuditResult:
    stored = product.estoque_atual
    difference = stored - computed
    if abs(difference) <= tolerance:
        return AuditResult(product_id=product.pk, matches=True)

    discrepancy = Discrepancy(
        product_id=product.pk,
        product_name=product.nome,
        stored=stored,
        computed=computed,
        difference=difference,
    )
    logger.warning(
        "stock.audit.drift",
        extra={
            "product_id": product.pk,
            "stored": str(stored),
            "computed": str(computed),
            "difference": str(difference),
        },
    )
    return AuditResult(product_id=product.pk, matches=False, discrepancy=discrepancy)


class StockAudit:
    """Read-only consistency checks."""

    @classmethod
    def computed_balance(cls, product) -> Decimal:
        """
        Balance implied by history.

        computed = Σ signed movement quantities + Σ correction adjustments

        Order independent: only sums are involved.
        """
        movements = Movement.objects.filter(product=product).signed_total()
        corrections = _correction_total(BalanceCorrection.objects.filter(product=product))
        return movements + corrections

    @classmethod
    def audit_product(cls, product) -> AuditResult:
        """
        Compare one product's cached balance with its history.

        Drift when |stored - computed| > DRIFT_TOLERANCE.

        Raises:
            NotFoundError('PRODUCT_NOT_FOUND')
            StoreError('STORE_ERROR')
        """
        with store_errors('audit_product'):
            fresh = get_product(product)
            computed = cls.computed_balance(fresh)
        return _compare(fresh, computed, estoque_settings.drift_tolerance)

    @classmethod
    def audit_all(cls, products=None) -> AuditReport:
        """
        Audit every product (or the given queryset).

        Products are read in chunks; each chunk costs two grouped queries
        (movements, corrections) regardless of its size.

        Returns:
            AuditReport with one Discrepancy per drifting product
        """
        qs = products if products is not None else Product.objects.all()
        chunk_size = estoque_settings.AUDIT_CHUNK_SIZE
        tolerance = estoque_settings.drift_tolerance
        report = AuditReport()

        with store_errors('audit_all'):
            chunk = []
            for product in qs.order_by('pk').iterator(chunk_size=chunk_size):
                chunk.append(product)
                if len(chunk) >= chunk_size:
                    cls._audit_chunk(chunk, tolerance, report)
                    chunk = []
            if chunk:
                cls._audit_chunk(chunk, tolerance, report)

        logger.info(
            "stock.audit.completed",
            extra={
                "checked": report.checked,
                "discrepancies": len(report.discrepancies),
            },
        )
        return report

    @classmethod
    def _audit_chunk(cls, products: list[Product], tolerance: Decimal, report: AuditReport):
        ids = [p.pk for p in products]

        movement_totals = {
            row['product_id']: row['total']
            for row in Movement.objects.filter(product_id__in=ids)
            .order_by()
            .values('product_id')
            .annotate(total=signed_quantity_sum())
        }
        correction_totals = {
            row['product_id']: row['new'] - row['computed']
            for row in BalanceCorrection.objects.filter(product_id__in=ids)
            .order_by()
            .values('product_id')
            .annotate(new=Sum('new_value'), computed=Sum('computed_value'))
        }

        for product in products:
            computed = (
                movement_totals.get(product.pk, Decimal('0'))
                + correction_totals.get(product.pk, Decimal('0'))
            )
            result = _compare(product, computed, tolerance)
            report.checked += 1
            if result.discrepancy is not None:
                report.discrepancies.append(result.discrepancy)
