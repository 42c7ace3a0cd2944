"""Machine lane DTOs."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import MAIN_LIST


class Machine(BaseModel):
    """A physical work station; its ``id`` doubles as the lane location."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    name: str

    @field_validator("id")
    @classmethod
    def id_must_be_a_lane(cls, v: str) -> str:
        if not v:
            raise ValueError("Machine id must not be empty.")
        if v == MAIN_LIST:
            raise ValueError(f"'{MAIN_LIST}' is reserved for the main list.")
        return v


class MachineList(BaseModel):
    """The configured machines, in display order."""

    model_config = ConfigDict(frozen=True)

    machines: List[Machine]

    @model_validator(mode="after")
    def no_duplicate_ids(self):
        ids = [machine.id for machine in self.machines]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate machine ids are not allowed.")
        return self

    @property
    def ids(self) -> list[str]:
        return [machine.id for machine in self.machines]
