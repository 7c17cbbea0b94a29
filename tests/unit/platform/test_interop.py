"""
Tests for default-export interop of external modules.
"""

import types

import pytest

from ssr_runtime.core.module import SSRModule
from ssr_runtime.platform.interop import (
    InteropModule,
    get_default_export,
    proxy_module,
    public_keys,
    read_member,
)


def make_module(name="fake_module", **members):
    module = types.ModuleType(name)
    for key, value in members.items():
        setattr(module, key, value)
    return module


class TestGetDefaultExport:
    """Test computation of the default export."""

    def test_nested_wrapper_is_unwrapped(self):
        """Test that a transpiled default nested one level deeper is found."""
        exports = {"__esModule": True, "default": {"__esModule": True, "default": 42}}

        assert get_default_export(exports) == 42

    def test_plain_module_is_its_own_default(self):
        exports = {"a": 1}

        assert get_default_export(exports) is exports

    def test_default_member_is_used(self):
        assert get_default_export({"default": "value", "other": 1}) == "value"

    def test_module_object_with_default_attribute(self):
        module = make_module(default="from-attr")

        assert get_default_export(module) == "from-attr"

    def test_module_object_without_default(self):
        module = make_module(helper=1)

        assert get_default_export(module) is module

    def test_wrapper_marker_on_module_object(self):
        inner = make_module("inner", default="deep")
        setattr(inner, "__esModule", True)
        outer = make_module("outer", default=inner)

        assert get_default_export(outer) == "deep"

    def test_none_default_is_kept(self):
        assert get_default_export({"default": None}) is None

    def test_ssr_module_default_is_unwrapped(self):
        """Test that project module objects count as wrapped declarative modules."""
        inner = SSRModule()
        inner["default"] = "component"

        assert get_default_export({"default": inner}) == "component"


class TestInteropModule:
    """Test the interop view over loaded modules."""

    def test_plain_module_reads(self):
        """Test default and named reads on a dynamic-require module."""
        view = proxy_module({"a": 1})

        assert view["default"] == {"a": 1}
        assert view["a"] == 1
        assert view.a == 1

    def test_named_reads_fall_back_to_default(self):
        exports = {"default": {"named": "from-default"}, "own": 1}
        view = proxy_module(exports)

        assert view["own"] == 1
        assert view["named"] == "from-default"
        assert view["absent"] is None

    def test_none_member_falls_back_to_default(self):
        view = proxy_module({"x": None, "default": {"x": "fallback"}})

        assert view["x"] == "fallback"

    def test_nested_wrapper_default(self):
        view = proxy_module({"__esModule": True, "default": {"__esModule": True, "default": 42}})

        assert view["default"] == 42

    def test_view_does_not_mutate_module(self):
        exports = {"a": 1}
        view = proxy_module(exports)

        _ = view["default"], view["missing"]

        assert exports == {"a": 1}
        with pytest.raises(AttributeError):
            view.a = 2
        with pytest.raises(TypeError):
            view["a"] = 2

    def test_module_object_view(self):
        module = make_module(dumps=len, _private=True)
        view = InteropModule(module)

        assert view["dumps"] is len
        assert view.module is module
        assert list(view) == ["dumps"]
        assert "dumps" in view
        assert "default" in view
        assert 1 not in view

    def test_dunder_attributes_are_not_proxied(self):
        view = proxy_module({"a": 1})

        with pytest.raises(AttributeError):
            view.__wrapped__

    def test_public_keys_respects_all(self):
        module = make_module(a=1, b=2)
        module.__all__ = ["b"]

        assert public_keys(module) == ["b"]

    def test_read_member_mapping_and_attribute(self):
        assert read_member({"k": 1}, "k") == 1
        assert read_member(make_module(k=2), "k") == 2
        assert read_member({}, "missing", "dflt") == "dflt"
