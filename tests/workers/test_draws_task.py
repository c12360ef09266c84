from draw_engine.workers.tasks import draws


def test_schedule_upcoming_draw_task_wrapper(monkeypatch) -> None:
    async def fake_async() -> dict[str, object]:
        return {"local_date": "2025-06-03", "scheduled_total": 2}

    monkeypatch.setattr(draws, "schedule_upcoming_draw_async", fake_async)

    result = draws.schedule_upcoming_draw()
    assert result == {"local_date": "2025-06-03", "scheduled_total": 2}


def test_execute_due_draws_task_wrapper(monkeypatch) -> None:
    async def fake_async(*, batch_size: int) -> dict[str, object]:
        return {"batch_size": batch_size, "completed_total": 1}

    monkeypatch.setattr(draws, "execute_due_draws_async", fake_async)

    result = draws.execute_due_draws(batch_size=5)
    assert result == {"batch_size": 5, "completed_total": 1}


def test_execute_draw_task_wrapper(monkeypatch) -> None:
    async def fake_async(*, draw_id: int) -> dict[str, object]:
        return {"draw_id": draw_id, "status": "COMPLETED"}

    monkeypatch.setattr(draws, "execute_draw_async", fake_async)

    result = draws.execute_draw(draw_id=17)
    assert result == {"draw_id": 17, "status": "COMPLETED"}
