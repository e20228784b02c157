from celery import Celery
from app.core.settings import get_settings

settings = get_settings()

celery_app = Celery(
    "ai_accountant",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks.budget_tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    result_expires=3600,
)

# Periodic re-convergence of budget spent_amount (run with `celery beat`)
celery_app.conf.beat_schedule = {
    "reconcile-budget-spent": {
        "task": "app.tasks.budget_tasks.reconcile_budgets",
        "schedule": float(settings.budget_reconcile_interval_seconds),
    },
}
