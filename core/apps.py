import logging
from django.apps import AppConfig
from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core'

    def ready(self):
        # connection.vendor reads the backend name only; no query is issued
        logger.info('[startup] DB=%s TIME_ZONE=%s', connection.vendor, settings.TIME_ZONE)
