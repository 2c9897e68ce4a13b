from datetime import date
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from freezegun import freeze_time

from works.models import WorkPeriodInstance


@pytest.fixture
def recurring_works(make_work):
    return [
        make_work(title="GST Return"),
        make_work(title="TDS Return", frequency="quarterly", start_day=1, start_month=4),
        make_work(title="Payroll", frequency="weekly", weekday=""),
        make_work(title="Closed engagement", is_active=False),
    ]


def test_job_summary(recurring_works):
    from works.jobs import run_period_generation_job

    summary = run_period_generation_job(reference_date=date(2025, 5, 15))

    assert summary == {"created": 2, "skipped": 0, "invalid": 1, "failed": 0}
    assert set(WorkPeriodInstance.objects.values_list("work__title", "period_start")) == {
        ("GST Return", date(2025, 4, 10)),
        ("TDS Return", date(2025, 1, 1)),
    }


def test_job_is_idempotent(recurring_works):
    from works.jobs import run_period_generation_job

    run_period_generation_job(reference_date=date(2025, 5, 15))
    summary = run_period_generation_job(reference_date=date(2025, 5, 20))

    assert summary == {"created": 0, "skipped": 2, "invalid": 1, "failed": 0}
    assert WorkPeriodInstance.objects.count() == 2


def test_one_failing_work_does_not_stop_the_batch(recurring_works, monkeypatch):
    from works import jobs

    original = jobs.generate_periods_and_tasks

    def flaky(work_id, reference_date):
        if work_id == recurring_works[0].id:
            raise RuntimeError("boom")
        return original(work_id, reference_date)

    monkeypatch.setattr(jobs, "generate_periods_and_tasks", flaky)

    summary = jobs.run_period_generation_job(reference_date=date(2025, 5, 15))

    assert summary == {"created": 1, "skipped": 0, "invalid": 1, "failed": 1}


@freeze_time("2025-03-15 06:00")
def test_command_defaults_to_today(recurring_works):
    out = StringIO()

    call_command("generate_periods", stdout=out)

    assert "Created 2, skipped 0, invalid 1, failed 0" in out.getvalue()
    assert WorkPeriodInstance.objects.get(work=recurring_works[0]).period_start == date(2025, 2, 10)


def test_command_for_one_work(recurring_works):
    out = StringIO()

    call_command("generate_periods", "--work", str(recurring_works[1].id), "--date", "2025-07-02", stdout=out)

    assert "Created 1, skipped 0, invalid 0, failed 0" in out.getvalue()
    assert WorkPeriodInstance.objects.get().period_start == date(2025, 4, 1)


def test_command_rejects_bad_date(db):
    with pytest.raises(CommandError):
        call_command("generate_periods", "--date", "2025-13-01")


def test_scheduler_registers_the_daily_job(monkeypatch, settings):
    from apscheduler.schedulers.background import BackgroundScheduler

    from works.scheduler import start_scheduler as scheduler_module

    settings.RECURRING_WORK_JOB_HOUR = 3
    test_scheduler = BackgroundScheduler(timezone=settings.TIME_ZONE)
    monkeypatch.setattr(scheduler_module, "scheduler", test_scheduler)
    monkeypatch.setattr(test_scheduler, "start", lambda: None)

    scheduler_module.start_scheduler()

    job = test_scheduler.get_job("period_generation_job")
    assert job.func_ref == "works.jobs:run_period_generation_job"
    assert "hour='3'" in str(job.trigger)
    assert "minute='0'" in str(job.trigger)
