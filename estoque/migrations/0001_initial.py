"""
Initial migration for Estoque models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Estoque models: Product, Movement, BalanceCorrection."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=200, verbose_name='Nome')),
                ('unidade_medida', models.CharField(default='unidade', help_text='Ex: unidade, kg', max_length=20, verbose_name='Unidade de Medida')),
                ('estoque_atual', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Estoque Atual')),
                ('estoque_minimo', models.DecimalField(decimal_places=3, default=Decimal('0'), help_text='Abaixo ou igual a este valor o estoque é considerado baixo', max_digits=12, verbose_name='Estoque Mínimo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Produto',
                'verbose_name_plural': 'Produtos',
                'ordering': ['nome'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('estoque_minimo__gte', 0)), name='estoque_product_minimo_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo', models.CharField(choices=[('entrada', 'Entrada'), ('saida', 'Saída'), ('venda', 'Venda'), ('uso', 'Uso Interno'), ('avaria', 'Avarias')], max_length=20, verbose_name='Tipo')),
                ('quantidade', models.DecimalField(decimal_places=3, help_text='Sempre positiva. O tipo define o sinal.', max_digits=12, verbose_name='Quantidade')),
                ('operador', models.CharField(blank=True, default='', max_length=120, verbose_name='Operador')),
                ('observacao', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='estoque.product', verbose_name='Produto')),
            ],
            options={
                'verbose_name': 'Movimentação',
                'verbose_name_plural': 'Movimentações',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='estoque_mov_prod_created_idx'),
                    models.Index(fields=['tipo', 'created_at'], name='estoque_mov_tipo_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantidade__gt', 0)), name='estoque_movement_quantidade_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BalanceCorrection',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('old_value', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Estoque Anterior')),
                ('new_value', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Novo Estoque')),
                ('computed_value', models.DecimalField(decimal_places=3, help_text='Saldo implícito no histórico no momento da correção', max_digits=12, verbose_name='Estoque Calculado')),
                ('reason', models.CharField(max_length=255, verbose_name='Motivo')),
                ('operador', models.CharField(blank=True, default='', max_length=120, verbose_name='Operador')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='corrections', to='estoque.product', verbose_name='Produto')),
            ],
            options={
                'verbose_name': 'Correção de Estoque',
                'verbose_name_plural': 'Correções de Estoque',
                'ordering': ['-created_at'],
            },
        ),
    ]
