"""
Tests for the consistency audit (audit_product, audit_all).
"""

from decimal import Decimal

import pytest

from estoque import stock
from estoque.exceptions import NotFoundError
from estoque.models import BalanceCorrection, Product


pytestmark = pytest.mark.django_db


def _force_balance(product, value):
    """Write estoque_atual behind the ledger's back."""
    Product.objects.filter(pk=product.pk).update(estoque_atual=value)


class TestAuditProduct:
    """Tests for stock.audit_product()."""

    def test_product_without_movements_matches(self, product):
        result = stock.audit_product(product)

        assert result.matches is True
        assert result.discrepancy is None

    def test_ledger_only_history_matches(self, stocked_product):
        """Balances mutated only via record/delete never drift."""
        stock.record_movement(stocked_product, 'venda', Decimal('30'))
        r = stock.record_movement(stocked_product, 'entrada', Decimal('12.5'))
        stock.record_movement(stocked_product, 'avaria', Decimal('2'))
        stock.delete_movement(r.movement)
        stock.record_movement(stocked_product, 'uso', Decimal('0.75'))

        result = stock.audit_product(stocked_product)

        assert result.matches is True
        assert stock.computed_balance(stocked_product) == Decimal('67.25')

    def test_drift_reported(self, make_product):
        """Scenario D: stored 999, history 40 -> difference 959."""
        p = make_product(nome='Cimento', balance=Decimal('40'))
        _force_balance(p, Decimal('999'))

        result = stock.audit_product(p)

        assert result.matches is False
        d = result.discrepancy
        assert d.product_id == p.pk
        assert d.product_name == 'Cimento'
        assert d.stored == Decimal('999')
        assert d.computed == Decimal('40')
        assert d.difference == Decimal('959')

    def test_negative_difference(self, make_product):
        """difference is stored - computed, so it can be negative."""
        p = make_product(balance=Decimal('40'))
        _force_balance(p, Decimal('35'))

        d = stock.audit_product(p).discrepancy

        assert d.difference == Decimal('-5')

    def test_within_tolerance_matches(self, make_product):
        p = make_product(balance=Decimal('40'))
        _force_balance(p, Decimal('40.005'))

        assert stock.audit_product(p).matches is True

    def test_tolerance_is_configurable(self, make_product, settings):
        settings.ESTOQUE = {'DRIFT_TOLERANCE': '5'}
        p = make_product(balance=Decimal('40'))
        _force_balance(p, Decimal('44'))

        assert stock.audit_product(p).matches is True

    def test_audit_does_not_write(self, make_product):
        p = make_product(balance=Decimal('40'))
        _force_balance(p, Decimal('999'))

        stock.audit_product(p)

        p.refresh_from_db()
        assert p.estoque_atual == Decimal('999')
        assert BalanceCorrection.objects.count() == 0

    def test_missing_product(self, db):
        with pytest.raises(NotFoundError):
            stock.audit_product(424242)

    def test_discrepancy_as_dict(self, make_product):
        p = make_product(nome='Areia', balance=Decimal('1'))
        _force_balance(p, Decimal('3'))

        data = stock.audit_product(p).discrepancy.as_dict()

        assert data['product_id'] == p.pk
        assert data['product_name'] == 'Areia'
        assert Decimal(data['difference']) == Decimal('2')


class TestAuditWithCorrections:
    """Corrections shift the expected balance; movements stay pure."""

    def test_correction_clears_drift(self, make_product):
        p = make_product(balance=Decimal('40'))
        _force_balance(p, Decimal('999'))
        assert stock.audit_product(p).matches is False

        stock.correct_stock(p, Decimal('38'), 'Contagem física')

        assert stock.audit_product(p).matches is True
        assert stock.computed_balance(p) == Decimal('38')

    def test_movements_after_correction_still_match(self, make_product):
        p = make_product(balance=Decimal('40'))
        stock.correct_stock(p, Decimal('50'), 'Sobra no inventário')

        stock.record_movement(p, 'venda', Decimal('20'))
        r = stock.record_movement(p, 'entrada', Decimal('5'))
        stock.delete_movement(r.movement)

        assert stock.balance(p) == Decimal('30')
        assert stock.audit_product(p).matches is True

    def test_direct_write_after_correction_is_drift(self, make_product):
        p = make_product(balance=Decimal('40'))
        stock.correct_stock(p, Decimal('50'), 'Sobra')
        _force_balance(p, Decimal('7'))

        d = stock.audit_product(p).discrepancy

        assert d.computed == Decimal('50')
        assert d.difference == Decimal('-43')


class TestAuditAll:
    """Tests for stock.audit_all()."""

    def test_one_of_three_drifting(self, make_product):
        """Scenario E: 3 products, 1 with drift -> exactly 1 discrepancy."""
        make_product(nome='A', balance=Decimal('10'))
        b = make_product(nome='B', balance=Decimal('20'))
        make_product(nome='C', balance=Decimal('30'))
        _force_balance(b, Decimal('25'))

        report = stock.audit_all()

        assert report.checked == 3
        assert report.is_consistent is False
        assert len(report.discrepancies) == 1
        assert report.discrepancies[0].product_id == b.pk
        assert report.discrepancies[0].difference == Decimal('5')

    def test_all_consistent(self, make_product):
        for i in range(3):
            make_product(nome=f'P{i}', balance=Decimal(i + 1))

        report = stock.audit_all()

        assert report.is_consistent
        assert report.as_dict() == {'checked': 3, 'consistent': True, 'discrepancies': []}

    def test_empty_catalog(self, db):
        report = stock.audit_all()

        assert report.checked == 0
        assert report.is_consistent

    def test_chunking_covers_every_product(self, make_product, settings):
        settings.ESTOQUE = {'AUDIT_CHUNK_SIZE': 2}
        products = [make_product(nome=f'P{i}', balance=Decimal('5')) for i in range(5)]
        _force_balance(products[0], Decimal('1'))
        _force_balance(products[4], Decimal('9'))

        report = stock.audit_all()

        assert report.checked == 5
        assert {d.product_id for d in report.discrepancies} == {products[0].pk, products[4].pk}

    def test_restricted_queryset(self, make_product):
        a = make_product(nome='A', balance=Decimal('1'))
        b = make_product(nome='B', balance=Decimal('1'))
        _force_balance(b, Decimal('2'))

        report = stock.audit_all(Product.objects.filter(pk=a.pk))

        assert report.checked == 1
        assert report.is_consistent

    def test_all_with_corrections(self, make_product):
        a = make_product(nome='A', balance=Decimal('10'))
        make_product(nome='B', balance=Decimal('10'))
        stock.correct_stock(a, Decimal('4'), 'Quebra não registrada')
        stock.record_movement(a, 'venda', Decimal('1'))

        assert stock.audit_all().is_consistent
