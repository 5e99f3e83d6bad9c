"""
Stock movements — state-changing operations (record, delete, correct).

All methods use transaction.atomic() and lock the product row, so the
balance check, the ledger write and the balance update commit together.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from estoque.conf import estoque_settings
from estoque.exceptions import InsufficientStockError, NotFoundError, StockValidationError
from estoque.models.correction import BalanceCorrection
from estoque.models.enums import MovementKind
from estoque.models.movement import Movement
from estoque.services.audit import StockAudit
from estoque.services.common import (
    check_length,
    get_product,
    parse_kind,
    store_errors,
    to_decimal,
)

logger = logging.getLogger('estoque')


@dataclass(frozen=True)
class MovementResult:
    """Created movement plus the product balance right after it."""

    movement: Movement
    balance: Decimal

    def as_dict(self) -> dict:
        return {
            'movement_id': self.movement.pk,
            'product_id': self.movement.product_id,
            'tipo': self.movement.tipo,
            'quantidade': str(self.movement.quantidade),
            'balance': str(self.balance),
        }


@dataclass(frozen=True)
class ReversalResult:
    """Deleted movement identity plus the reverted balance."""

    movement_id: int
    product_id: int
    kind: MovementKind
    quantity: Decimal
    balance: Decimal

    def as_dict(self) -> dict:
        return {
            'movement_id': self.movement_id,
            'product_id': self.product_id,
            'tipo': str(self.kind),
            'quantidade': str(self.quantity),
            'balance': str(self.balance),
        }


class StockLedger:
    """State-changing stock movement methods."""

    @classmethod
    def record_movement(cls, product, kind, quantity,
                        operator: str = '', note: str = '') -> MovementResult:
        """
        Record a movement and apply it to the product balance.

        entrada adds quantity; saida, venda, uso and avaria subtract it and
        require balance >= quantity.

        Args:
            product: Product instance or primary key
            kind: MovementKind or its value ('entrada', 'venda', ...)
            quantity: Positive number (Decimal, int, str or float)
            operator: Who did it (defaults to DEFAULT_OPERATOR)
            note: Free text

        Raises:
            StockValidationError('INVALID_KIND'|'INVALID_QUANTITY'): Before any query
            NotFoundError('PRODUCT_NOT_FOUND')
            InsufficientStockError('INSUFFICIENT_QUANTITY'): Nothing is written
            StoreError('STORE_ERROR')

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on Product
            - Movement.save() updates estoque_atual with F()
        """
        kind = parse_kind(kind)
        quantity = to_decimal(quantity)
        if quantity <= 0:
            raise StockValidationError('INVALID_QUANTITY', requested=quantity)
        check_length(operator or '', Movement, 'operador', 'OPERATOR_TOO_LONG')

        with store_errors('record_movement'), transaction.atomic():
            locked = get_product(product, lock=True)

            if kind.is_outbound and locked.estoque_atual < quantity:
                raise InsufficientStockError(
                    'INSUFFICIENT_QUANTITY',
                    product_id=locked.pk,
                    available=locked.estoque_atual,
                    requested=quantity,
                )

            movement = Movement.objects.create(
                product=locked,
                tipo=kind,
                quantidade=quantity,
                operador=operator or estoque_settings.DEFAULT_OPERATOR,
                observacao=note or '',
            )
            locked.refresh_from_db(fields=['estoque_atual', 'estoque_minimo', 'updated_at'])

        logger.info(
            "stock.movement.recorded",
            extra={
                "product_id": locked.pk,
                "movement_id": movement.pk,
                "tipo": str(kind),
                "qty": str(quantity),
                "balance": str(locked.estoque_atual),
            },
        )
        if kind.is_outbound and locked.is_low and estoque_settings.LOW_STOCK_WARNINGS:
            logger.warning(
                "stock.low",
                extra={
                    "product_id": locked.pk,
                    "balance": str(locked.estoque_atual),
                    "min_quantity": str(locked.estoque_minimo),
                },
            )
        return MovementResult(movement=movement, balance=locked.estoque_atual)

    @classmethod
    def delete_movement(cls, movement) -> ReversalResult:
        """
        Delete a movement and reverse its effect on the balance.

        Reversal subtracts quantidade for entrada and adds it back for every
        outbound kind. The product row is locked first and the movement is
        re-read under that lock, so concurrent deletes of the same movement
        reverse it once; the loser gets MOVEMENT_NOT_FOUND.

        Args:
            movement: Movement instance or primary key

        Raises:
            NotFoundError('MOVEMENT_NOT_FOUND')
            StoreError('STORE_ERROR')
        """
        pk = movement.pk if isinstance(movement, Movement) else movement

        with store_errors('delete_movement'), transaction.atomic():
            try:
                product_id = Movement.objects.values_list('product_id', flat=True).get(pk=pk)
            except (Movement.DoesNotExist, ValueError, TypeError):
                raise NotFoundError('MOVEMENT_NOT_FOUND', movement_id=pk)

            locked = get_product(product_id, lock=True)

            # a concurrent delete may have committed while we waited
            found = Movement.objects.select_for_update().filter(pk=pk).first()
            if found is None:
                raise NotFoundError('MOVEMENT_NOT_FOUND', movement_id=pk)
            found.delete()
            locked.refresh_from_db(fields=['estoque_atual', 'updated_at'])

        result = ReversalResult(
            movement_id=pk,
            product_id=locked.pk,
            kind=found.kind,
            quantity=found.quantidade,
            balance=locked.estoque_atual,
        )
        logger.info(
            "stock.movement.reversed",
            extra={
                "product_id": locked.pk,
                "movement_id": pk,
                "tipo": found.tipo,
                "qty": str(found.quantidade),
                "balance": str(locked.estoque_atual),
            },
        )
        return result

    @classmethod
    def correct_stock(cls, product, new_balance, reason: str,
                      operator: str = '') -> BalanceCorrection | None:
        """
        Overwrite the balance by hand, keeping an audit record.

        Never creates a Movement. The correction stores the balance the
        history implied, so later audits measure drift from the corrected
        value.

        Returns:
            The BalanceCorrection, or None when the balance already matches

        Raises:
            StockValidationError('REASON_REQUIRED'|'REASON_TOO_LONG'|'INVALID_QUANTITY')
            NotFoundError('PRODUCT_NOT_FOUND')
        """
        if not reason or not reason.strip():
            raise StockValidationError('REASON_REQUIRED')
        check_length(reason.strip(), BalanceCorrection, 'reason', 'REASON_TOO_LONG')
        check_length(operator or '', BalanceCorrection, 'operador', 'OPERATOR_TOO_LONG')
        new_balance = to_decimal(new_balance, field='new_balance')
        if new_balance < 0:
            raise StockValidationError('INVALID_QUANTITY', field='new_balance', requested=new_balance)

        with store_errors('correct_stock'), transaction.atomic():
            locked = get_product(product, lock=True)
            old_value = locked.estoque_atual

            if old_value == new_balance:
                return None

            correction = BalanceCorrection.objects.create(
                product=locked,
                old_value=old_value,
                new_value=new_balance,
                computed_value=StockAudit.computed_balance(locked),
                reason=reason.strip(),
                operador=operator or estoque_settings.DEFAULT_OPERATOR,
            )
            locked.estoque_atual = new_balance
            locked.save(update_fields=['estoque_atual', 'updated_at'])

        logger.warning(
            "stock.corrected",
            extra={
                "product_id": locked.pk,
                "correction_id": correction.pk,
                "old": str(old_value),
                "new": str(new_balance),
                "computed": str(correction.computed_value),
                "reason": correction.reason,
            },
        )
        return correction
