"""
Tests for management commands and admin wiring.
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.contrib import admin, messages
from django.contrib.messages.storage.fallback import FallbackStorage
from django.core.management import call_command
from django.core.management.base import CommandError

from estoque.models import BalanceCorrection, Movement, Product


pytestmark = pytest.mark.django_db


class TestAuditStockCommand:

    def test_consistent(self, stocked_product):
        out = StringIO()

        call_command('audit_stock', stdout=out)

        assert 'todos consistentes' in out.getvalue()

    def test_reports_drift(self, stocked_product):
        Product.objects.filter(pk=stocked_product.pk).update(estoque_atual=Decimal('90'))
        out = StringIO()

        call_command('audit_stock', stdout=out)

        assert 'Farinha' in out.getvalue()
        assert '1 divergência(s)' in out.getvalue()

    def test_fail_on_drift(self, stocked_product):
        Product.objects.filter(pk=stocked_product.pk).update(estoque_atual=Decimal('90'))

        with pytest.raises(CommandError):
            call_command('audit_stock', '--fail-on-drift', stdout=StringIO())

    def test_single_product(self, stocked_product):
        out = StringIO()

        call_command('audit_stock', '--product', str(stocked_product.pk), stdout=out)

        assert '1 produto(s)' in out.getvalue()

    def test_unknown_product(self, db):
        with pytest.raises(CommandError):
            call_command('audit_stock', '--product', '999999', stdout=StringIO())


class TestCorrectStockCommand:

    def test_corrects(self, stocked_product):
        out = StringIO()

        call_command('correct_stock', str(stocked_product.pk), '42.5',
                     '--reason', 'Inventário', '--operator', 'Bob', stdout=out)

        stocked_product.refresh_from_db()
        assert stocked_product.estoque_atual == Decimal('42.5')
        assert BalanceCorrection.objects.get().operador == 'Bob'

    def test_invalid_balance(self, stocked_product):
        with pytest.raises(CommandError):
            call_command('correct_stock', str(stocked_product.pk), 'abc',
                         '--reason', 'X', stdout=StringIO())


class TestAdmin:

    def test_models_registered(self):
        for model in (Product, Movement, BalanceCorrection):
            assert admin.site.is_registered(model)

    def test_admin_delete_reverses(self, stocked_product, rf):
        from estoque import stock

        result = stock.record_movement(stocked_product, 'venda', Decimal('10'))
        model_admin = admin.site._registry[Movement]

        model_admin.delete_queryset(rf.post('/'), Movement.objects.filter(pk=result.movement.pk))

        assert stock.balance(stocked_product) == Decimal('100')

    def test_failed_delete_hides_success_message(self, stocked_product, rf):
        """Only the error reaches the user when the ledger refuses a delete."""
        from estoque import stock

        result = stock.record_movement(stocked_product, 'venda', Decimal('10'))
        stale = Movement.objects.get(pk=result.movement.pk)
        stock.delete_movement(result.movement)

        request = rf.post('/')
        request.session = {}
        request._messages = FallbackStorage(request)
        model_admin = admin.site._registry[Movement]

        model_admin.delete_model(request, stale)
        model_admin.message_user(request, 'excluído com sucesso', messages.SUCCESS)

        levels = [m.level for m in request._messages]
        assert levels == [messages.ERROR]
        assert stock.balance(stocked_product) == Decimal('100')
