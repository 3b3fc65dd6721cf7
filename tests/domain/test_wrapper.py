"""Tests for the ValueWrapper base and the generic Restrict wrapper."""

from __future__ import annotations

import copy
import dataclasses

import pytest

from propwrap.domain.wrapper import BoundValue, Restrict, ValueWrapper, wrapper_of
from propwrap.errors import CapabilityError


def adult(value: int) -> int:
    return max(18, min(value, 100))


class TestRestrict:
    def test_applies_rule_on_construction(self) -> None:
        sut = Restrict(17, adult)
        assert sut.value == 18

    def test_applies_rule_on_every_write(self) -> None:
        sut = Restrict(18, adult)
        sut.value = 17
        assert sut.value == 18
        sut.value = 101
        assert sut.value == 100
        sut.value = 50
        assert sut.value == 50

    def test_from_identity_starts_at_identity(self) -> None:
        sut = Restrict.from_identity(int, adult)
        assert sut.value == 18

    def test_from_identity_matches_explicit_identity(self) -> None:
        calls: list[str] = []

        def tracked(value: str) -> str:
            calls.append(value)
            return value.strip()

        implicit = Restrict.from_identity(str, tracked)
        explicit = Restrict("", tracked)
        assert implicit.value == explicit.value == ""
        assert calls == ["", ""]

    def test_from_identity_requires_identity(self) -> None:
        with pytest.raises(CapabilityError):
            Restrict.from_identity(object, lambda v: v)

    def test_rule_is_exposed(self) -> None:
        sut = Restrict(20, adult)
        assert sut.rule is adult

    def test_repr(self) -> None:
        assert repr(Restrict(20, adult)) == "Restrict(20)"


class Person:
    age = Restrict(18, adult)
    tags = Restrict.from_identity(list, lambda v: sorted(set(v)))


class TestDescriptor:
    def test_class_access_returns_wrapper(self) -> None:
        assert isinstance(Person.age, Restrict)

    def test_instance_reads_initial(self) -> None:
        assert Person().age == 18

    def test_instance_writes_are_restricted(self) -> None:
        person = Person()
        person.age = 120
        assert person.age == 100
        person.age = 3
        assert person.age == 18

    def test_instances_are_independent(self) -> None:
        first, second = Person(), Person()
        first.age = 40
        assert second.age == 18

    def test_mutable_initial_not_shared(self) -> None:
        first, second = Person(), Person()
        first.tags = ["b", "a", "b"]
        assert first.tags == ["a", "b"]
        assert second.tags == []

    def test_wrapper_of_returns_bound_box(self) -> None:
        person = Person()
        person.age = 30
        box = wrapper_of(person, "age")
        assert isinstance(box, BoundValue)
        assert box.value == 30
        box.value = 200
        assert person.age == 100

    def test_wrapper_of_rejects_plain_attribute(self) -> None:
        with pytest.raises(AttributeError):
            wrapper_of(Person(), "missing")

    def test_copied_owner_does_not_share_value(self) -> None:
        original = Person()
        original.age = 30
        twin = copy.copy(original)
        twin.age = 50
        assert original.age == 30
        assert twin.age == 50

    def test_value_lives_in_instance_dict(self) -> None:
        person = Person()
        person.age = 42
        assert 42 in vars(person).values()
        assert not any(isinstance(v, Restrict) for v in vars(person).values())

    def test_dataclass_with_unannotated_wrapper(self) -> None:
        @dataclasses.dataclass
        class Member:
            name: str
            age = Restrict(18, adult)

        member = Member("ada")
        assert member.age == 18
        member.age = 7
        assert member.age == 18
        assert Member("bob").age == 18

    def test_unattached_wrapper_cannot_bind(self) -> None:
        with pytest.raises(AttributeError, match="not attached"):
            Restrict(1, adult).bind(Person())


class TestValueWrapper:
    def test_subclass_commit_hook(self) -> None:
        class Upper(ValueWrapper[str]):
            def __init__(self, initial: str) -> None:
                self._value = initial

            def _commit(self, previous: str, new: str) -> str:
                return new.upper()

        sut = Upper("abc")
        assert sut.value == "abc"
        sut.value = "def"
        assert sut.value == "DEF"
