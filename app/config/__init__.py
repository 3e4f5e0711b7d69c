# =============================================================================
# Django Project Configuration Package
# =============================================================================
# Settings, URLs, WSGI application and Celery configuration.
#
# The Celery app is imported here so shared_task functions bind to it when
# Django starts.
# =============================================================================

from config.celery import app as celery_app

__all__ = ("celery_app",)
