"""Celery configuration."""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.dev"),
)

app = Celery("distrinet")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule
app.conf.beat_schedule = {
    "verify-sale-profit-distribution": {
        "task": "sales.tasks.verify_profit_distribution_task",
        "schedule": crontab(minute=30, hour=2),  # Daily at 2:30am
    },
    "warm-business-assistant-cache": {
        "task": "assistant.tasks.warm_recommendations_cache",
        "schedule": crontab(minute=0, hour="*/4"),  # Every 4 hours
    },
}
