"""Tests for perch.routing.registry: first-wins endpoint table."""

import logging
import types

import pytest

from perch.errors import ConfigurationError
from perch.routing.endpoints import endpoint, infer_arity
from perch.routing.registry import EndpointRegistry


def _h1(data: object) -> None:
    pass


def _h2() -> None:
    pass


class TestRegister:
    def test_resolve(self) -> None:
        registry = EndpointRegistry()
        assert registry.register("save", _h1, 1) is True
        found = registry.resolve("save")
        assert found is not None
        assert found.handler is _h1
        assert found.arity == 1

    def test_unknown(self) -> None:
        assert EndpointRegistry().resolve("nope") is None

    def test_first_registration_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = EndpointRegistry()
        registry.register("save", _h1, 1)
        with caplog.at_level(logging.WARNING, logger="perch.endpoints"):
            assert registry.register("save", _h2, 0) is False
        found = registry.resolve("save")
        assert found is not None
        assert found.handler is _h1
        assert found.arity == 1
        assert "already bound" in caplog.text
        assert len(registry) == 1

    def test_infers_arity(self) -> None:
        registry = EndpointRegistry()
        registry.register("one", _h1)
        registry.register("zero", _h2)
        assert registry.resolve("one").arity == 1
        assert registry.resolve("zero").arity == 0

    def test_rejects_bad_arity(self) -> None:
        with pytest.raises(ConfigurationError):
            EndpointRegistry().register("save", _h1, 2)

    def test_accepts_uncallable_with_explicit_arity(self) -> None:
        registry = EndpointRegistry()
        assert registry.register("broken", "not a function", 0) is True
        assert "broken" in registry


class TestInferArity:
    def test_optional_parameter(self) -> None:
        def handler(data=None):
            return data

        assert infer_arity(handler) == 1

    def test_varargs(self) -> None:
        def handler(*args):
            return args

        assert infer_arity(handler) == 1

    def test_keyword_only_ignored(self) -> None:
        def handler(*, flag=False):
            return flag

        assert infer_arity(handler) == 0

    def test_too_many_required(self) -> None:
        def handler(a, b):
            return a, b

        with pytest.raises(ConfigurationError, match="requires 2 arguments"):
            infer_arity(handler)


class TestDiscover:
    def _module(self) -> types.ModuleType:
        module = types.ModuleType("fake_handlers")

        @endpoint("list")
        def show_list() -> None:
            pass

        @endpoint("save")
        def save(data: object) -> None:
            pass

        @endpoint("save")
        def save_again(data: object) -> None:
            pass

        def helper() -> None:
            pass

        for fn in (show_list, save, save_again, helper):
            fn.__module__ = module.__name__
            setattr(module, fn.__name__, fn)
        # Imported from elsewhere: not scanned
        module.foreign = endpoint("foreign")(_h2)
        return module

    def test_registers_marked_functions(self) -> None:
        registry = EndpointRegistry()
        module = self._module()
        assert registry.discover(module) == 2
        assert registry.names == ["list", "save"]
        assert registry.resolve("save").handler is module.save
        assert registry.resolve("list").arity == 0

    def test_single_function_source(self) -> None:
        registry = EndpointRegistry()

        @endpoint("ping")
        def ping() -> None:
            pass

        assert registry.discover(ping, _h1) == 1
        assert registry.names == ["ping"]
