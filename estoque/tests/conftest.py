"""
Pytest fixtures for Estoque tests.
"""

from decimal import Decimal

import pytest

from estoque.models import Product


@pytest.fixture
def product(db):
    """Fresh product, balance 0."""
    return Product.objects.create(
        nome='Parafuso 6mm',
        unidade_medida='unidade',
        estoque_minimo=Decimal('10'),
    )


@pytest.fixture
def make_product(db):
    """Factory for products with a starting balance built from an entrada."""
    from estoque import stock

    def _make(nome='Produto', balance=Decimal('0'), minimo=Decimal('0'), unidade='unidade'):
        p = Product.objects.create(nome=nome, unidade_medida=unidade, estoque_minimo=minimo)
        if balance:
            stock.record_movement(p, 'entrada', balance, operator='Setup', note='Saldo inicial')
            p.refresh_from_db()
        return p

    return _make


@pytest.fixture
def stocked_product(make_product):
    """Product at balance 100, minimum 10."""
    return make_product(nome='Farinha', balance=Decimal('100'), minimo=Decimal('10'), unidade='kg')
