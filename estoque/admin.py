"""
Estoque Admin.

Provides views for production debugging:
- Product: list + edit (balance is read-only), "audit" action
- Movement: read-only ledger; deleting goes through the ledger and reverses
- BalanceCorrection: read-only audit trail of manual overrides
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from estoque.exceptions import StockError
from estoque.models import BalanceCorrection, Movement, Product

logger = logging.getLogger(__name__)


# =========================================================================
# PRODUCT ADMIN
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — estoque_atual only changes via the ledger."""

    list_display = ['nome', 'unidade_medida', 'estoque_atual', 'estoque_minimo', 'status_display']
    search_fields = ['nome']
    readonly_fields = ['estoque_atual', 'created_at', 'updated_at']
    actions = ['audit_products']

    @admin.display(description=_('Situação'))
    def status_display(self, obj):
        from estoque import stock
        return stock.stock_status(obj).label

    @admin.action(description=_('Auditar estoque dos selecionados'))
    def audit_products(self, request, queryset):
        from estoque import stock

        report = stock.audit_all(queryset)
        if report.is_consistent:
            self.message_user(
                request,
                _('{count} produto(s) auditado(s), nenhuma divergência.').format(count=report.checked),
                messages.SUCCESS,
            )
            return

        for d in report.discrepancies:
            self.message_user(
                request,
                _('{name}: banco={stored}, calculado={computed}, diferença={difference}').format(
                    name=d.product_name, stored=d.stored,
                    computed=d.computed, difference=d.difference,
                ),
                messages.WARNING,
            )


# =========================================================================
# MOVEMENT ADMIN (read-only, deletion reverses)
# =========================================================================

@admin.register(Movement)
class MovementAdmin(admin.ModelAdmin):
    """Movement admin — read-only. Deleting reverts the balance."""

    list_display = ['created_at', 'product', 'tipo', 'quantidade', 'operador', 'observacao']
    list_filter = ['tipo', 'created_at']
    search_fields = ['product__nome', 'operador', 'observacao']
    readonly_fields = ['product', 'tipo', 'quantidade', 'operador', 'observacao', 'created_at']
    date_hierarchy = 'created_at'
    list_select_related = ['product']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def delete_model(self, request, obj):
        self._delete_movements(request, [obj])

    def delete_queryset(self, request, queryset):
        self._delete_movements(request, queryset)

    def _delete_movements(self, request, movements):
        from estoque import stock

        for movement in movements:
            try:
                stock.delete_movement(movement)
            except StockError as exc:
                logger.warning("admin: failed to delete movement %s: %s", movement.pk, exc)
                request._estoque_delete_failed = True
                self.message_user(request, str(exc), messages.ERROR)

    def message_user(self, request, message, level=messages.INFO, *args, **kwargs):
        # Django reports success after delete_model/delete_queryset return
        if level == messages.SUCCESS and getattr(request, '_estoque_delete_failed', False):
            return
        super().message_user(request, message, level, *args, **kwargs)


# =========================================================================
# BALANCE CORRECTION ADMIN (read-only)
# =========================================================================

@admin.register(BalanceCorrection)
class BalanceCorrectionAdmin(admin.ModelAdmin):
    """Correction admin — read-only. Use the correct_stock command to add."""

    list_display = ['created_at', 'product', 'old_value', 'new_value', 'computed_value', 'reason', 'operador']
    search_fields = ['product__nome', 'reason']
    readonly_fields = ['product', 'old_value', 'new_value', 'computed_value',
                       'reason', 'operador', 'created_at']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
