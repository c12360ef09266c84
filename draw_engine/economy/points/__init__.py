from draw_engine.economy.points.service import allocate_points, process_topup

__all__ = ["allocate_points", "process_topup"]
