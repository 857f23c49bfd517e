"""
Groups Module

Set algebra over participants, used to describe who benefits from an
expense ("everyone", "the Boston crew", "everyone except Dave").

Features:
    - Build a group from participants or collections of participants
    - Duplicates collapse (set semantics)
    - "All except X, Y" via set difference, never mutating the source

Classes:
    ParticipantGroup: Immutable set of participants.

Functions:
    group: Build a ParticipantGroup.
"""

from typing import Iterable, Iterator, Union

from participants import Participant


def _flatten(members) -> Iterator[Participant]:
    """Yield participants from a mix of participants and iterables of them."""
    for member in members:
        if isinstance(member, Participant):
            yield member
        elif isinstance(member, (ParticipantGroup, list, tuple, set, frozenset)):
            yield from _flatten(member)
        else:
            raise TypeError(f"expected Participant, got {type(member).__name__}")


class ParticipantGroup:
    """
    An immutable, de-duplicated set of participants.

    Iteration is ordered by participant_id so anything derived from a
    group (apportionment, reports) is reproducible.
    """

    __slots__ = ("_members",)

    def __init__(self, members: Iterable[Participant] = ()):
        self._members = frozenset(_flatten(members))

    def excluding(self, *exclusions: Union[Participant, Iterable[Participant]]) -> "ParticipantGroup":
        """
        Return a new group without the given participants.

        Exclusions that are not members are ignored. With no arguments the
        result has the same membership as this group.
        """
        return ParticipantGroup(self._members.difference(_flatten(exclusions)))

    def ids(self) -> list[str]:
        return [member.participant_id for member in self]

    def is_empty(self) -> bool:
        return not self._members

    def __contains__(self, participant) -> bool:
        return participant in self._members

    def __iter__(self) -> Iterator[Participant]:
        return iter(sorted(self._members, key=lambda p: p.participant_id))

    def __len__(self) -> int:
        return len(self._members)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParticipantGroup):
            return NotImplemented
        return self._members == other._members

    def __hash__(self) -> int:
        return hash(self._members)

    def __repr__(self) -> str:
        return f"ParticipantGroup({self.ids()})"


def group(*members: Union[Participant, Iterable[Participant]]) -> ParticipantGroup:
    """Build a group; accepts participants and/or collections of them."""
    return ParticipantGroup(members)
