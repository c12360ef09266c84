from draw_engine.core.errors import DrawEngineError, InvalidArgumentError, NotFoundError


class PointsError(DrawEngineError):
    pass


class UserNotFoundError(NotFoundError):
    pass


__all__ = ["InvalidArgumentError", "PointsError", "UserNotFoundError"]
