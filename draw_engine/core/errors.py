class DrawEngineError(Exception):
    pass


class InvalidArgumentError(DrawEngineError):
    pass


class NotFoundError(DrawEngineError):
    pass


class TransientStoreError(DrawEngineError):
    pass
