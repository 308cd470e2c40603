"""
Django project package for the cloth shop POS.
"""

from .celery import app as celery_app

__all__ = ("celery_app",)
