"""
Participants Module

This module handles participant identity for the payment splitter.

Features:
    - Create participants with a unique identifier
    - Register participants for a trip (duplicates rejected)
    - Look up registered participants by identifier

Data Model:
    Participant:
        - participant_id: string (unique within a trip, e.g. a name)

    Balances are NOT stored on participants; they are owned by the
    Ledger in splitter.py.

Classes:
    Participant: A person taking part in a trip.
    ParticipantRegistry: Participants of one trip, keyed by identifier.

Functions:
    new_participant: Create a participant.
"""

from typing import Iterable, Iterator

from errors import DuplicateParticipantError, UnknownParticipantError


def _validate_non_empty_string(value: str, field_name: str) -> str:
    """
    Validate that a string is non-empty and return it stripped.

    Raises:
        ValueError: If value is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return value.strip()


class Participant:
    """
    Represents a participant in a trip.

    Participants compare by identity: two objects created with the same
    identifier are distinct, and registering both in one trip fails.

    Attributes:
        participant_id (str): Unique identifier for the participant.
    """

    __slots__ = ("_participant_id",)

    def __init__(self, participant_id: str):
        self._participant_id = _validate_non_empty_string(participant_id, "participant_id")

    @property
    def participant_id(self) -> str:
        return self._participant_id

    def __repr__(self) -> str:
        return f"Participant('{self._participant_id}')"

    def __str__(self) -> str:
        return self._participant_id


def new_participant(participant_id: str) -> Participant:
    """Create a participant with the given identifier."""
    return Participant(participant_id)


class ParticipantRegistry:
    """
    Participants of a single trip, in registration order.

    There is no removal operation: participants live as long as the trip.
    """

    def __init__(self, participants: Iterable[Participant] = ()):
        self._participants: dict[str, Participant] = {}
        for participant in participants:
            self.add(participant)

    def register(self, participant_id: str) -> Participant:
        """
        Create and register a participant.

        Raises:
            DuplicateParticipantError: If the identifier is already registered.
        """
        return self.add(Participant(participant_id))

    def add(self, participant: Participant) -> Participant:
        """Register an existing participant object."""
        if participant.participant_id in self._participants:
            raise DuplicateParticipantError(participant.participant_id)
        self._participants[participant.participant_id] = participant
        return participant

    def get(self, participant_id: str) -> Participant:
        """
        Look up a participant by identifier.

        Raises:
            UnknownParticipantError: If no such participant is registered.
        """
        try:
            return self._participants[participant_id]
        except KeyError:
            raise UnknownParticipantError(participant_id) from None

    def require(self, participant: Participant, context: str = "trip") -> Participant:
        """Ensure a participant object belongs to this registry."""
        if participant not in self:
            raise UnknownParticipantError(participant.participant_id, context)
        return participant

    def ids(self) -> list[str]:
        return list(self._participants)

    def __contains__(self, participant) -> bool:
        if isinstance(participant, Participant):
            return self._participants.get(participant.participant_id) is participant
        return participant in self._participants

    def __iter__(self) -> Iterator[Participant]:
        return iter(self._participants.values())

    def __len__(self) -> int:
        return len(self._participants)

    def __repr__(self) -> str:
        return f"ParticipantRegistry({self.ids()})"
