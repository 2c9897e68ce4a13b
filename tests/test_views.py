from datetime import date

import pytest
from django.urls import reverse

from works.scheduler.errors import StoreUnavailable
from works.tasks import period_generation

TEMPLATES = ({"title": "Collect invoices"},)


@pytest.fixture
def work(make_work):
    return make_work(templates=TEMPLATES)


@pytest.fixture
def logged_in(client, user):
    client.force_login(user)
    return client


def test_preview_requires_login(client, work):
    response = client.get(reverse("preview_work_periods", args=[work.id]))
    assert response.status_code == 302


def test_preview_lists_periods(logged_in, work):
    response = logged_in.get(
        reverse("preview_work_periods", args=[work.id]),
        {"reference_date": "2025-03-15", "count": 2},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["reference_date"] == "2025-03-15"
    assert [period["period_start"] for period in data["periods"]] == ["2025-02-10", "2025-03-10"]
    assert data["periods"][0]["due_date"] == "2025-03-20"
    assert data["periods"][0]["tasks"][0]["title"] == "Collect invoices - Feb 2025"


def test_preview_count_is_capped(logged_in, work):
    response = logged_in.get(
        reverse("preview_work_periods", args=[work.id]),
        {"reference_date": "2025-03-15", "count": 500},
    )
    assert len(response.json()["periods"]) == 24


@pytest.mark.parametrize("params", [{"count": "many"}, {"reference_date": "15/03/2025"}])
def test_preview_rejects_bad_parameters(logged_in, work, params):
    response = logged_in.get(reverse("preview_work_periods", args=[work.id]), params)

    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidRequest"


def test_preview_reports_unresolved_period(logged_in, work):
    response = logged_in.get(
        reverse("preview_work_periods", args=[work.id]),
        {"reference_date": "2024-06-01"},
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "UnresolvedPeriod"


def test_preview_of_missing_work(logged_in, db):
    response = logged_in.get(reverse("preview_work_periods", args=[9999]))
    assert response.status_code == 404


def test_generate_creates_then_skips(logged_in, work):
    url = reverse("generate_work_periods", args=[work.id])

    first = logged_in.post(url, {"reference_date": "2025-03-15"})
    second = logged_in.post(url, {"reference_date": "2025-03-15"})

    assert first.status_code == 201
    assert first.json()["period_start"] == "2025-02-10"
    assert first.json()["task_count"] == 1
    assert second.status_code == 200
    assert second.json()["skipped"] == "DuplicatePeriod"
    assert work.period_instances.get().period_start == date(2025, 2, 10)


def test_generate_requires_post(logged_in, work):
    response = logged_in.get(reverse("generate_work_periods", args=[work.id]))
    assert response.status_code == 405


def test_generate_reports_store_failure(logged_in, work, failing_store, monkeypatch):
    store = failing_store(fail_find=[StoreUnavailable("database is locked"), StoreUnavailable("database is locked")])
    monkeypatch.setattr(period_generation, "DjangoWorkStore", lambda: store)

    response = logged_in.post(
        reverse("generate_work_periods", args=[work.id]),
        {"reference_date": "2025-03-15"},
    )

    assert response.status_code == 503
    assert response.json()["error"] == {"kind": "StoreUnavailable", "message": "database is locked"}
    assert response.json()["created"] is None
    assert store.find_calls == 2
    assert not work.period_instances.exists()
