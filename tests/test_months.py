from collections import Counter
from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shift_planner.repositories import employee as employee_repo
from shift_planner.repositories import schedule as schedule_repo
from shift_planner.repositories import shift_type as shift_type_repo
from shift_planner.schemas.schedule import ScheduleMonthUpdate
from shift_planner.services.planning import parse_month
from shift_planner.services.scheduler import GeneratedAssignment

from .factories import build_employee_create, build_month_create, build_shift_type_create


@pytest.mark.anyio("asyncio")
async def test_schedule_month_crud(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        march = await schedule_repo.create_month(session, build_month_create())
        await schedule_repo.create_month(session, build_month_create(month="2026-04"))
        await session.commit()

        months = await schedule_repo.list_months(session)
        assert [item.month for item in months] == ["2026-04", "2026-03"]
        assert march.status == "draft"

        found = await schedule_repo.get_month_by_label(session, "2026-03")
        assert found is not None and found.id == march.id

        updated = await schedule_repo.update_month(session, march, ScheduleMonthUpdate(status="published"))
        await session.commit()
        assert updated.status == "published"

        await schedule_repo.delete_month(session, updated)
        await session.commit()
        assert await schedule_repo.get_month_by_label(session, "2026-03") is None


@pytest.mark.anyio("asyncio")
async def test_replace_assignments_drops_previous_run(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        employee = await employee_repo.create_employee(session, build_employee_create())
        shift_type = await shift_type_repo.create_shift_type(session, build_shift_type_create())
        schedule_month = await schedule_repo.create_month(session, build_month_create())
        await session.commit()

        first_run = [
            GeneratedAssignment(employee_id=employee.id, date=f"2026-03-0{day}", shift_type_id=shift_type.id)
            for day in (1, 2, 3)
        ]
        await schedule_repo.replace_assignments(session, schedule_month, first_run)
        await session.commit()

        second_run = [GeneratedAssignment(employee_id=employee.id, date="2026-03-02", shift_type_id=shift_type.id)]
        stored = await schedule_repo.replace_assignments(session, schedule_month, second_run)
        await session.commit()

        assert [item.date for item in stored] == [date(2026, 3, 2)]
        assignments = await schedule_repo.list_assignments(session, schedule_month.id)
        assert [(item.employee_id, item.date) for item in assignments] == [(employee.id, date(2026, 3, 2))]

        fetched = await schedule_repo.get_assignment(session, schedule_month.id, assignments[0].id)
        assert fetched is not None
        assert await schedule_repo.get_assignment(session, schedule_month.id + 1, assignments[0].id) is None


@pytest.mark.anyio("asyncio")
async def test_month_api_validation_and_conflicts(api_client: AsyncClient) -> None:
    created = await api_client.post("/api/months/", json={"month": "2026-3"})
    assert created.status_code == 201
    assert created.json()["month"] == "2026-03"
    assert created.json()["status"] == "draft"

    duplicate = await api_client.post("/api/months/", json={"month": "2026-03"})
    assert duplicate.status_code == 409

    for invalid in ("2026-13", "March", "2026-00", "0-03", "0000-03", "20260-03", "2026-03-01"):
        response = await api_client.post("/api/months/", json={"month": invalid})
        assert response.status_code == 422

    month_id = created.json()["id"]
    published = await api_client.put(f"/api/months/{month_id}", json={"status": "published"})
    assert published.status_code == 200
    assert published.json()["status"] == "published"

    missing = await api_client.post("/api/months/999/generate")
    assert missing.status_code == 404

    deleted = await api_client.delete(f"/api/months/{month_id}")
    assert deleted.status_code == 204
    assert (await api_client.get("/api/months/")).json() == []


async def _seed_roster(api_client: AsyncClient) -> dict[str, int]:
    ids: dict[str, int] = {}
    for name in ("Alice", "Bob", "Carol"):
        response = await api_client.post("/api/employees/", json=build_employee_create(name=name).model_dump())
        ids[name] = response.json()["id"]
    shift_response = await api_client.post("/api/shift-types/", json=build_shift_type_create().model_dump())
    ids["closing"] = shift_response.json()["id"]
    await api_client.put(
        f"/api/employees/{ids['Alice']}/availabilities",
        json={"date": "2026-03-01", "is_unavailable": True},
    )
    month_response = await api_client.post("/api/months/", json=build_month_create().model_dump())
    ids["month"] = month_response.json()["id"]
    return ids


@pytest.mark.anyio("asyncio")
async def test_generate_month_schedule(api_client: AsyncClient) -> None:
    ids = await _seed_roster(api_client)

    response = await api_client.post(f"/api/months/{ids['month']}/generate")
    assert response.status_code == 200
    payload = response.json()

    assert payload["month"] == "2026-03"
    assignments = payload["assignments"]
    assert len(assignments) == 62
    assert all(item["date"].startswith("2026-03-") for item in assignments)
    assert all(item["shift_type_id"] == ids["closing"] for item in assignments)

    pairs = Counter((item["employee_id"], item["date"]) for item in assignments)
    assert max(pairs.values()) == 1

    first_day = sorted(item["employee_id"] for item in assignments if item["date"] == "2026-03-01")
    assert first_day == sorted([ids["Bob"], ids["Carol"]])

    critical = [item for item in payload["violations"] if item["severity"] == "critical"]
    assert critical == []

    statistics = payload["statistics"]
    assert statistics["closing_spread"] <= 2
    assert sum(item["closing_count"] for item in statistics["employees"]) == 62
    assert not any(item["is_flagged"] for item in statistics["employees"])


@pytest.mark.anyio("asyncio")
async def test_regenerate_replaces_previous_assignments(api_client: AsyncClient) -> None:
    ids = await _seed_roster(api_client)
    month_id = ids["month"]

    first = await api_client.post(f"/api/months/{month_id}/generate")
    second = await api_client.post(f"/api/months/{month_id}/generate")
    assert first.status_code == 200
    assert second.status_code == 200

    listed = await api_client.get(f"/api/months/{month_id}/assignments")
    assert listed.status_code == 200
    stored = listed.json()
    assert len(stored) == len(second.json()["assignments"]) == 62
    assert {item["id"] for item in stored} == {item["id"] for item in second.json()["assignments"]}

    removed = stored[0]
    delete_response = await api_client.delete(f"/api/months/{month_id}/assignments/{removed['id']}")
    assert delete_response.status_code == 204
    missing = await api_client.delete(f"/api/months/{month_id}/assignments/{removed['id']}")
    assert missing.status_code == 404

    statistics = await api_client.get(f"/api/months/{month_id}/statistics")
    assert statistics.status_code == 200
    body = statistics.json()
    assert body["month"] == "2026-03"
    assert sum(item["total_count"] for item in body["employees"]) == 61
    counts = [item["closing_count"] for item in body["employees"]]
    assert counts == sorted(counts, reverse=True)


@pytest.mark.anyio("asyncio")
async def test_generate_without_roster_reports_empty_schedule(api_client: AsyncClient) -> None:
    month_response = await api_client.post("/api/months/", json={"month": "2026-02"})
    month_id = month_response.json()["id"]

    response = await api_client.post(f"/api/months/{month_id}/generate")
    assert response.status_code == 200
    payload = response.json()
    assert payload["assignments"] == []
    assert [item["code"] for item in payload["violations"]] == ["empty-schedule"]
    assert payload["statistics"]["employees"] == []


@pytest.mark.anyio("asyncio")
async def test_health_endpoint(api_client: AsyncClient) -> None:
    response = await api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize(("label", "expected"), [("2026-03", (2026, 3)), ("2026-3", (2026, 3)), ("9999-12", (9999, 12))])
def test_parse_month_accepts_calendar_months(label: str, expected: tuple[int, int]) -> None:
    assert parse_month(label) == expected


@pytest.mark.parametrize("label", ["0-03", "0000-03", "2026-13", "2026", "2026-03-01", " 2026-03"])
def test_parse_month_rejects_out_of_range_or_malformed(label: str) -> None:
    with pytest.raises(ValueError):
        parse_month(label)
