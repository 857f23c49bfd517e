"""
Dataset Module

Loads a trip from a JSON document, so trip data lives in data files instead
of code.

Document format:
    {
        "label": "Savannah",
        "year": 2022,
        "participants": ["Ben", "Elliot", ...],
        "groups": {
            "boston_crew": {"members": ["Ben", "Jason", ...]},
            "not_slava": {"group": "all", "except": ["Slava"]}
        },
        "expenses": [
            {"amount": 392.22, "payer": "Greg", "beneficiaries": "all"},
            {"amount": 88.90, "payer": "Ben",
             "beneficiaries": {"group": "all", "except": ["Dave"]}},
            {"amount": 14.51, "payer": "Evan", "beneficiaries": ["Dan"],
             "note": "drinks"}
        ]
    }

    "all" always names every participant. Beneficiaries can be a group
    name, a list of participant names, or an inline group.

Functions:
    parse_trip: Validate a raw document into a TripSpec.
    build_trip: Turn a TripSpec into a Trip.
    trip_from_dict: parse_trip + build_trip.
    load_trip: Read a JSON file and build the Trip.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from errors import DatasetError
from expenses import Expense
from groups import ParticipantGroup
from participants import ParticipantRegistry
from trip import Trip

logger = logging.getLogger(__name__)

ALL_GROUP = "all"


# =============================================================================
# Pydantic Models for Document Validation
# =============================================================================

class GroupSpec(BaseModel):
    """Either an explicit member list or another group minus some people."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    members: Optional[list[str]] = Field(None, description="Participant names")
    group: Optional[str] = Field(None, min_length=1, description="Name of the base group")
    except_: list[str] = Field(default_factory=list, alias="except", description="Names to leave out")

    @model_validator(mode="after")
    def _one_source(self) -> "GroupSpec":
        if (self.members is None) == (self.group is None):
            raise ValueError("group must have exactly one of 'members' or 'group'")
        return self


class ExpenseSpec(BaseModel):
    """One expense line of the document."""
    model_config = ConfigDict(extra="forbid")

    amount: Decimal = Field(..., gt=0, description="Expense amount (must be > 0)")
    payer: str = Field(..., min_length=1, description="Name of the participant who paid")
    beneficiaries: Union[str, list[str], GroupSpec] = Field(..., description="Who the cost is split between")
    note: Optional[str] = Field(None, description="Optional note")


class TripSpec(BaseModel):
    """A whole trip document."""
    model_config = ConfigDict(extra="forbid")

    label: str = Field(..., min_length=1, description="Trip name, e.g. a destination")
    year: int = Field(..., description="Year of the trip")
    participants: list[str] = Field(..., min_length=1, description="Participant names")
    groups: dict[str, GroupSpec] = Field(default_factory=dict, description="Named groups")
    expenses: list[ExpenseSpec] = Field(default_factory=list, description="Expenses in order")


# =============================================================================
# Building
# =============================================================================

class _GroupResolver:
    """Resolves group names and inline specs against a registry."""

    def __init__(self, registry: ParticipantRegistry, groups: dict[str, GroupSpec]):
        if ALL_GROUP in groups:
            raise DatasetError(f"group name '{ALL_GROUP}' is reserved")
        self._registry = registry
        self._specs = groups
        self._resolved = {ALL_GROUP: ParticipantGroup(registry)}
        self._resolving = set()

    def named(self, name: str) -> ParticipantGroup:
        if name in self._resolved:
            return self._resolved[name]
        if name not in self._specs:
            raise DatasetError(f"unknown group '{name}'")
        if name in self._resolving:
            raise DatasetError(f"group '{name}' is defined in terms of itself")

        self._resolving.add(name)
        try:
            resolved = self.build(self._specs[name])
        finally:
            self._resolving.discard(name)
        self._resolved[name] = resolved
        return resolved

    def people(self, names: list[str]) -> list:
        return [self._registry.get(name) for name in names]

    def build(self, spec: Union[str, list[str], GroupSpec]) -> ParticipantGroup:
        if isinstance(spec, str):
            return self.named(spec)
        if isinstance(spec, list):
            return ParticipantGroup(self.people(spec))
        if spec.members is not None:
            base = ParticipantGroup(self.people(spec.members))
        else:
            base = self.named(spec.group)
        return base.excluding(*self.people(spec.except_))


def parse_trip(data: dict) -> TripSpec:
    """
    Validate a raw trip document.

    Raises:
        DatasetError: If the document does not match the format.
    """
    try:
        return TripSpec.model_validate(data)
    except ValidationError as e:
        raise DatasetError(f"invalid trip document: {e}") from e


def build_trip(spec: TripSpec, tolerance: Optional[Decimal] = None) -> Trip:
    """
    Build a Trip from a validated document.

    Raises:
        DuplicateParticipantError: If a name is listed twice.
        UnknownParticipantError: If a group or expense names someone who
            is not a participant.
        InvalidExpenseError: If an expense resolves to no beneficiaries.
        DatasetError: If a group name is unknown or circular.
    """
    registry = ParticipantRegistry()
    for name in spec.participants:
        registry.register(name)

    resolver = _GroupResolver(registry, spec.groups)
    for name in spec.groups:
        resolver.named(name)

    expenses = [
        Expense(
            amount=item.amount,
            payer=registry.get(item.payer),
            beneficiaries=resolver.build(item.beneficiaries),
            note=item.note
        )
        for item in spec.expenses
    ]

    return Trip(spec.label, spec.year, registry, expenses, tolerance=tolerance)


def trip_from_dict(data: dict, tolerance: Optional[Decimal] = None) -> Trip:
    """Validate a raw document and build the trip."""
    return build_trip(parse_trip(data), tolerance=tolerance)


def load_trip(path: Union[str, Path], tolerance: Optional[Decimal] = None) -> Trip:
    """
    Load a trip from a JSON file.

    Raises:
        DatasetError: If the file cannot be read or parsed.
    """
    path = Path(path)
    logger.info("loading trip from %s", path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise DatasetError(f"cannot read {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise DatasetError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DatasetError(f"{path} must contain a JSON object")
    return trip_from_dict(data, tolerance=tolerance)
