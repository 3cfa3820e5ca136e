import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'app.settings')

app = Celery('pokemarket')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

# Celery Beat Schedule
app.conf.beat_schedule = {
    # Close auctions every 5 minutes
    'close-ended-auctions': {
        'task': 'marketplace.tasks.close_ended_auctions',
        'schedule': crontab(minute='*/5'),
    },
}
