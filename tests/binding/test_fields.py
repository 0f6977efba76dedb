"""Tests for the field resolver: ordering, keys and declaration checks."""

from __future__ import annotations

from typing import Annotated

import pytest

from propbind.binding.errors import ConfigDeclarationError
from propbind.binding.fields import ordered_bindable_fields
from propbind.binding.metadata import Nested, Setting
from propbind.binding.model import Config


class Base(Config):
    first: Annotated[str | None, Setting()] = None
    shared: Annotated[str | None, Setting(descriptor="shared.key")] = None
    plain: str = "not bound"


class Derived(Base):
    second: Annotated[int, Setting(descriptor="second_key", default="2")] = 0
    override: Annotated[str | None, Setting(descriptor="shared.key")] = None
    _private: str = "hidden"


class Redeclared(Base):
    own: Annotated[str | None, Setting()] = None
    first: Annotated[str | None, Setting(descriptor="renamed")] = None


class Leaf(Config):
    value: Annotated[str | None, Setting()] = None


class Parent(Config):
    leaf: Annotated[Leaf | None, Nested(prefix="leaf.")] = None


class BothMarkers(Config):
    broken: Annotated[Leaf | None, Setting(), Nested(prefix="x.")] = None


class NestedNotConfig(Config):
    broken: Annotated[int, Nested(prefix="x.")] = 0


class TestOrdering:
    def test_ancestor_fields_first(self) -> None:
        names = [f.name for f in ordered_bindable_fields(Derived)]
        assert names == ["first", "shared", "second", "override"]

    def test_unannotated_and_private_fields_skipped(self) -> None:
        names = {f.name for f in ordered_bindable_fields(Derived)}
        assert "plain" not in names
        assert "_private" not in names

    def test_redeclared_field_moves_to_descendant(self) -> None:
        fields = ordered_bindable_fields(Redeclared)
        assert [f.name for f in fields] == ["shared", "own", "first"]
        assert fields[-1].key == "renamed"
        assert fields[-1].owner is Redeclared

    def test_owner_recorded(self) -> None:
        owners = {f.name: f.owner for f in ordered_bindable_fields(Derived)}
        assert owners["first"] is Base
        assert owners["second"] is Derived

    def test_cached(self) -> None:
        assert ordered_bindable_fields(Derived) is ordered_bindable_fields(Derived)


class TestKeys:
    def test_descriptor_or_name(self) -> None:
        keys = {f.name: f.key for f in ordered_bindable_fields(Derived)}
        assert keys == {
            "first": "first",
            "shared": "shared.key",
            "second": "second_key",
            "override": "shared.key",
        }

    def test_value_type_unwrapped(self) -> None:
        fields = {f.name: f for f in ordered_bindable_fields(Derived)}
        assert fields["first"].value_type is str
        assert fields["second"].value_type is int

    def test_nested_field(self) -> None:
        (leaf,) = ordered_bindable_fields(Parent)
        assert leaf.is_nested
        assert leaf.key == "leaf."
        assert leaf.value_type is Leaf


class TestDeclarationErrors:
    def test_both_markers(self) -> None:
        with pytest.raises(ConfigDeclarationError, match="both"):
            ordered_bindable_fields(BothMarkers)

    def test_nested_must_be_config(self) -> None:
        with pytest.raises(ConfigDeclarationError, match="not a Config"):
            ordered_bindable_fields(NestedNotConfig)
