from draw_engine.workers.tasks.draws import execute_draw, execute_due_draws, schedule_upcoming_draw

__all__ = [
    "execute_draw",
    "execute_due_draws",
    "schedule_upcoming_draw",
]
