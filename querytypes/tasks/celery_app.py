from celery import Celery
from querytypes.core.config import settings

celery_app = Celery("querytypes", broker=settings.redis_url, backend=settings.redis_url, include=["querytypes.tasks.jobs"])
celery_app.conf.update(task_track_started=True, result_expires=3600, broker_connection_retry_on_startup=True, task_acks_late=True,)
