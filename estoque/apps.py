"""Django app configuration for Estoque."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class EstoqueConfig(AppConfig):
    """Configuration for Estoque app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "estoque"
    verbose_name = _("Controle de Estoque")
