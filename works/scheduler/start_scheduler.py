from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings

scheduler = BackgroundScheduler(timezone=settings.TIME_ZONE)


def start_scheduler():
    if scheduler.running:
        return

    # DjangoJobStore records executions itself
    from django_apscheduler.jobstores import DjangoJobStore

    scheduler.add_jobstore(DjangoJobStore(), 'default')
    scheduler.add_job(
        'works.jobs:run_period_generation_job',
        trigger=CronTrigger(
            hour=getattr(settings, 'RECURRING_WORK_JOB_HOUR', 2),
            minute=getattr(settings, 'RECURRING_WORK_JOB_MINUTE', 0),
            timezone=settings.TIME_ZONE,
        ),  # runs daily, 2:00 AM by default
        id='period_generation_job',
        replace_existing=True,
    )
    scheduler.start()
