"""
Stock queries — read-only operations.

All methods are classmethod on Estoque and use no locking.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from estoque.models.enums import StockStatus
from estoque.models.movement import Movement
from estoque.models.product import Product
from estoque.services.common import get_product, parse_kind, product_pk


def _start_of_day(day: date) -> datetime:
    moment = datetime.combine(day, time.min)
    if settings.USE_TZ:
        return timezone.make_aware(moment)
    return moment


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def balance(cls, product) -> Decimal:
        """Cached balance, freshly read."""
        return get_product(product).estoque_atual

    @classmethod
    def list_movements(cls, product=None, kind=None,
                       start: date | None = None, end: date | None = None):
        """
        Movements, newest first.

        Args:
            product: Product instance or pk (None = all)
            kind: MovementKind or value (None = all)
            start: First day included
            end: Last day included (whole day)
        """
        qs = Movement.objects.select_related('product')

        if product is not None:
            qs = qs.filter(product_id=product_pk(product))

        if kind:
            qs = qs.filter(tipo=parse_kind(kind))

        if start is not None:
            qs = qs.filter(created_at__gte=_start_of_day(start))

        if end is not None:
            qs = qs.filter(created_at__lt=_start_of_day(end + timedelta(days=1)))

        return qs.order_by('-created_at', '-pk')

    @classmethod
    def movements_since(cls, days: int = 30) -> int:
        """Number of movements in the last ``days`` days."""
        since = timezone.now() - timedelta(days=days)
        return Movement.objects.filter(created_at__gte=since).count()

    @classmethod
    def low_stock(cls):
        """Products at or below estoque_minimo, lowest balance first."""
        return Product.objects.low_stock().order_by('estoque_atual', 'nome')

    @classmethod
    def stock_status(cls, product) -> StockStatus:
        """esgotado (<= 0), baixo (<= estoque_minimo) or normal."""
        if not isinstance(product, Product):
            product = get_product(product)
        if product.estoque_atual <= 0:
            return StockStatus.ESGOTADO
        if product.estoque_atual <= product.estoque_minimo:
            return StockStatus.BAIXO
        return StockStatus.NORMAL
