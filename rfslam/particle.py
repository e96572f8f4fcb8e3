"""Particles for particle filters: a pose with an id, weight and payload."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field
from typing import Any, Optional

from .randomvec import RandomVec


@dataclass(eq=False)
class Particle:
    """A weighted pose hypothesis carrying optional user data.

    ``parent_id`` records the particle this one was spawned from during
    resampling; it starts out equal to ``id``.
    """

    pose: RandomVec
    id: int = 0
    weight: float = 0.0
    data: Optional[Any] = None
    parent_id: int = field(init=False)

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError("particle id must not be negative")
        self.parent_id = self.id

    def copy(self) -> Particle:
        """Return a copy with its own pose and a deep copy of the data."""
        clone = Particle(self.pose.copy(), self.id, self.weight, _copy.deepcopy(self.data))
        clone.parent_id = self.parent_id
        return clone

    def delete_data(self) -> None:
        """Drop the attached data."""
        self.data = None