"""
Tests for participants and group set algebra.
"""

import pytest

from errors import DuplicateParticipantError, UnknownParticipantError
from groups import ParticipantGroup, group
from participants import Participant, ParticipantRegistry, new_participant


class TestParticipant:

    def test_identifier_is_stripped(self) -> None:
        assert new_participant("  Ben ").participant_id == "Ben"

    @pytest.mark.parametrize("bad", ["", "   ", None, 42])
    def test_empty_identifier_rejected(self, bad) -> None:
        with pytest.raises(ValueError):
            Participant(bad)

    def test_same_name_is_a_different_participant(self) -> None:
        assert Participant("Ben") != Participant("Ben")


class TestParticipantRegistry:

    def test_register_and_get(self) -> None:
        registry = ParticipantRegistry()
        ben = registry.register("Ben")
        assert registry.get("Ben") is ben
        assert ben in registry
        assert "Ben" in registry
        assert len(registry) == 1

    def test_registration_order_kept(self) -> None:
        registry = ParticipantRegistry()
        for name in ["Slava", "Ben", "Matt"]:
            registry.register(name)
        assert registry.ids() == ["Slava", "Ben", "Matt"]

    def test_duplicate_rejected(self) -> None:
        registry = ParticipantRegistry()
        registry.register("Ben")
        with pytest.raises(DuplicateParticipantError) as exc:
            registry.register("Ben")
        assert exc.value.participant_id == "Ben"

    def test_unknown_rejected(self) -> None:
        with pytest.raises(UnknownParticipantError):
            ParticipantRegistry().get("Ben")

    def test_lookalike_is_not_a_member(self) -> None:
        registry = ParticipantRegistry()
        registry.register("Ben")
        assert Participant("Ben") not in registry
        with pytest.raises(UnknownParticipantError):
            registry.require(Participant("Ben"))


class TestGroup:

    def test_duplicates_collapse(self, people) -> None:
        a, b = people["A"], people["B"]
        assert len(group(a, b, a)) == 2

    def test_accepts_collections(self, people) -> None:
        a, b, c = people["A"], people["B"], people["C"]
        assert group([a, b], group(c)).ids() == ["A", "B", "C"]

    def test_iteration_sorted_by_id(self, people) -> None:
        assert group(people["D"], people["A"], people["C"]).ids() == ["A", "C", "D"]

    def test_rejects_non_participants(self) -> None:
        with pytest.raises(TypeError):
            group("A")

    def test_equal_membership_groups_are_equal(self, people) -> None:
        a, b = people["A"], people["B"]
        assert group(a, b) == group(b, a)
        assert hash(group(a, b)) == hash(group(b, a))


class TestExcluding:

    def test_set_difference(self, people) -> None:
        everyone = group(*people.values())
        assert everyone.excluding(people["B"], people["D"]).ids() == ["A", "C"]

    def test_source_not_mutated(self, people) -> None:
        everyone = group(*people.values())
        everyone.excluding(people["A"])
        assert len(everyone) == 4

    def test_no_arguments_keeps_membership(self, people) -> None:
        everyone = group(*people.values())
        assert everyone.excluding() == everyone

    def test_missing_exclusions_ignored(self, people) -> None:
        ab = group(people["A"], people["B"])
        assert ab.excluding(people["C"]) == ab

    def test_excluding_everyone_gives_empty_group(self, people) -> None:
        ab = group(people["A"], people["B"])
        result = ab.excluding(ab)
        assert result.is_empty()
        assert isinstance(result, ParticipantGroup)
