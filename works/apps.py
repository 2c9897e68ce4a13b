from django.apps import AppConfig


class WorksConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'works'

    def ready(self):
        import works.signals
        import sys
        # Avoid running scheduler in migrations, shell, tests etc
        if 'runserver' not in sys.argv and 'gunicorn' not in sys.argv:
            return
        from works.scheduler.start_scheduler import start_scheduler
        start_scheduler()
