"""
Management command to audit cached balances against movement history.

Usage:
    python manage.py audit_stock
    python manage.py audit_stock --product 42
    python manage.py audit_stock --fail-on-drift
"""

from django.core.management.base import BaseCommand, CommandError

from estoque import stock
from estoque.exceptions import StockError


class Command(BaseCommand):
    """Audit stock command."""

    help = 'Verifica a consistência do estoque com o histórico de movimentações'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            type=int,
            help='Audita apenas o produto com este ID'
        )
        parser.add_argument(
            '--fail-on-drift',
            action='store_true',
            help='Termina com erro se houver divergências'
        )

    def handle(self, *args, **options):
        try:
            if options['product'] is not None:
                result = stock.audit_product(options['product'])
                checked = 1
                discrepancies = [result.discrepancy] if result.discrepancy else []
            else:
                report = stock.audit_all()
                checked = report.checked
                discrepancies = report.discrepancies
        except StockError as exc:
            raise CommandError(str(exc))

        for d in discrepancies:
            self.stdout.write(self.style.WARNING(
                f'{d.product_name} (#{d.product_id}): banco={d.stored} '
                f'calculado={d.computed} diferença={d.difference}'
            ))

        if not discrepancies:
            self.stdout.write(
                self.style.SUCCESS(f'{checked} produto(s) verificado(s), todos consistentes')
            )
            return

        summary = f'{len(discrepancies)} divergência(s) em {checked} produto(s)'
        if options['fail_on_drift']:
            raise CommandError(summary)
        self.stdout.write(summary)
