"""Tests for perch._internal.invoke: sync/async handler calls."""

from perch._internal.invoke import invoke


class TestInvoke:
    def test_sync(self) -> None:
        assert invoke(lambda a, b=0: a + b, 1, b=2) == 3

    def test_async(self) -> None:
        async def handler(value: int) -> int:
            return value * 2

        assert invoke(handler, 21) == 42
