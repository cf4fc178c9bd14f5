"""Task function builders shared by the tests."""


def returns(value):
    """Build a sync task function returning ``value``."""
    def fn():
        return value
    return fn


def fails(message: str = "boom"):
    """Build an async task function that raises RuntimeError."""
    async def fn():
        raise RuntimeError(message)
    return fn
