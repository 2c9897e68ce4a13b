from dataclasses import asdict
from datetime import date
from types import SimpleNamespace

import pytest
from django.contrib.auth.models import User

from works.models import Work, WorkTaskTemplate
from works.scheduler.errors import DuplicatePeriod


class FakeStore:
    """
    In-memory stand-in for DjangoWorkStore.

    `fail_find` / `fail_insert` are lists of exceptions raised, in order,
    by the next calls to find_instance / insert_instances.
    """

    def __init__(self, fail_find=None, fail_insert=None):
        self.rows = {}
        self.fail_find = list(fail_find or [])
        self.fail_insert = list(fail_insert or [])
        self.find_calls = 0
        self.insert_calls = 0

    def find_instance(self, work_id, period_start):
        self.find_calls += 1
        if self.fail_find:
            raise self.fail_find.pop(0)
        return self.rows.get((work_id, period_start))

    def insert_instances(self, period, tasks):
        self.insert_calls += 1
        if self.fail_insert:
            raise self.fail_insert.pop(0)
        key = (period.work_id, period.period_start)
        if key in self.rows:
            raise DuplicatePeriod("unique_work_period_start")
        instance = SimpleNamespace(pk=len(self.rows) + 1, **asdict(period))
        self.rows[key] = instance
        return instance, list(tasks)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def failing_store():
    def make(fail_find=None, fail_insert=None):
        return FakeStore(fail_find=fail_find, fail_insert=fail_insert)
    return make


@pytest.fixture
def user(db):
    return User.objects.create_user(username="accountant", password="secret")


@pytest.fixture
def make_work(db):
    def make(templates=(), **fields):
        fields.setdefault("title", "GST Return")
        fields.setdefault("client_name", "Acme Traders")
        fields.setdefault("frequency", "monthly")
        fields.setdefault("start_day", 10)
        fields.setdefault("effective_start_date", date(2025, 1, 1))
        fields.setdefault("due_offset_type", "days")
        fields.setdefault("due_offset_value", 10)
        fields.setdefault("due_anchor", "period_end")
        work = Work.objects.create(**fields)
        for index, template_fields in enumerate(templates):
            template_fields = dict(template_fields)
            template_fields.setdefault("sort_order", index)
            WorkTaskTemplate.objects.create(work=work, **template_fields)
        return work
    return make
