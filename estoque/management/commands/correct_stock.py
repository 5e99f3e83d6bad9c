"""
Management command to overwrite a product balance by hand.

Usage:
    python manage.py correct_stock 42 37.5 --reason "Inventário físico"
"""

from django.core.management.base import BaseCommand, CommandError

from estoque import stock
from estoque.exceptions import StockError


class Command(BaseCommand):
    """Correct stock command."""

    help = 'Corrige manualmente o estoque de um produto (registra a correção)'

    def add_arguments(self, parser):
        parser.add_argument('product_id', type=int)
        parser.add_argument('new_balance')
        parser.add_argument(
            '--reason',
            required=True,
            help='Motivo da correção'
        )
        parser.add_argument(
            '--operator',
            default='',
            help='Quem está corrigindo'
        )

    def handle(self, *args, **options):
        try:
            correction = stock.correct_stock(
                options['product_id'],
                options['new_balance'],
                reason=options['reason'],
                operator=options['operator'],
            )
        except StockError as exc:
            raise CommandError(str(exc))

        if correction is None:
            self.stdout.write('Estoque já está neste valor, nada a corrigir')
            return

        self.stdout.write(self.style.SUCCESS(
            f'Estoque corrigido de {correction.old_value} para {correction.new_value}'
        ))
