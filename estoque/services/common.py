"""
Helpers shared by the stock services.
"""

from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import DatabaseError

from estoque.exceptions import NotFoundError, StockValidationError, StoreError
from estoque.models.enums import MovementKind
from estoque.models.product import Product

# Matches DecimalField(max_digits=12, decimal_places=3)
QUANTITY_STEP = Decimal('0.001')
QUANTITY_LIMIT = Decimal('1000000000')


def to_decimal(value, field: str = 'quantidade') -> Decimal:
    """
    Coerce user input to a finite Decimal that fits the quantity columns.

    Floats go through str() so 0.1 stays 0.1. The result is rounded
    half-up to 3 decimal places, the precision the database stores.

    Raises:
        StockValidationError('INVALID_QUANTITY'): If not a finite number,
            or 10^9 or larger in magnitude
    """
    if isinstance(value, bool) or value is None:
        raise StockValidationError('INVALID_QUANTITY', field=field, requested=value)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise StockValidationError('INVALID_QUANTITY', field=field, requested=value)
    if not result.is_finite() or abs(result) >= QUANTITY_LIMIT:
        raise StockValidationError('INVALID_QUANTITY', field=field, requested=value)
    return result.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


def check_length(value: str, model, field: str, code: str) -> str:
    """
    Raises:
        StockValidationError(code): If value exceeds the column's max_length
    """
    max_length = model._meta.get_field(field).max_length
    if len(value) > max_length:
        raise StockValidationError(code, field=field, length=len(value), max_length=max_length)
    return value


def parse_kind(kind) -> MovementKind:
    """
    Raises:
        StockValidationError('INVALID_KIND'): If not one of the five kinds
    """
    try:
        return MovementKind(kind)
    except ValueError:
        raise StockValidationError(
            'INVALID_KIND',
            requested=kind,
            expected=list(MovementKind.values),
        )


def product_pk(product) -> int:
    """Accept a Product instance or its primary key."""
    return product.pk if isinstance(product, Product) else product


def get_product(product, lock: bool = False) -> Product:
    """
    Fresh read of a product from the database.

    Args:
        product: Product instance or primary key
        lock: select_for_update() (caller must be inside transaction.atomic())

    Raises:
        NotFoundError('PRODUCT_NOT_FOUND')
    """
    pk = product_pk(product)
    qs = Product.objects.select_for_update() if lock else Product.objects.all()
    try:
        return qs.get(pk=pk)
    except (Product.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('PRODUCT_NOT_FOUND', product_id=pk)


@contextmanager
def store_errors(operation: str):
    """Surface database failures as StoreError with the raw message."""
    try:
        yield
    except DatabaseError as exc:
        raise StoreError('STORE_ERROR', operation=operation, detail=str(exc)) from exc
