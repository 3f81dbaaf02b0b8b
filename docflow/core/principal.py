"""Authenticated caller identity.

A Principal is resolved once per request by the identity provider and
passed explicitly into every workflow call.
"""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Roles known to the workflow."""
    
    MANAGER = "Manager"
    DALKON = "Dalkon"          # consulting reviewer
    ENGINEER = "Engineer"
    VENDOR = "Vendor"


@dataclass(frozen=True)
class Principal:
    """The acting user: id plus role, nothing else."""
    
    id: int
    role: Role
    
    def __post_init__(self):
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))
