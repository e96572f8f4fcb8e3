"""Random vectors split into a position part and an orientation part."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .randomvec import ArrayLike, RandomVec
from .timestamp import TimeStamp


class Pose(RandomVec):
    """A Gaussian random vector holding a position followed by an orientation.

    The first ``pos_dim`` entries are the position and the next ``rot_dim``
    entries the orientation. Their sum must equal the vector's dimension.
    """

    def __init__(
        self,
        x: Optional[ArrayLike] = None,
        cov: Optional[ArrayLike] = None,
        time: Optional[TimeStamp] = None,
        *,
        pos_dim: int,
        rot_dim: int,
    ) -> None:
        if pos_dim < 0 or rot_dim < 0:
            raise ValueError("component dimensions must not be negative")
        if x is None:
            x = np.zeros(pos_dim + rot_dim)
        super().__init__(x, cov, time)
        if pos_dim + rot_dim != self.ndim:
            raise ValueError(
                f"position ({pos_dim}) and rotation ({rot_dim}) dimensions "
                f"do not add up to the vector dimension ({self.ndim})"
            )
        self._pos_dim = pos_dim
        self._rot_dim = rot_dim

    @property
    def pos_dim(self) -> int:
        return self._pos_dim

    @property
    def rot_dim(self) -> int:
        return self._rot_dim

    def position(self) -> np.ndarray:
        """The position part of the vector."""
        if self._pos_dim == 0:
            raise ValueError("this pose has no position component")
        return self.x[: self._pos_dim].copy()

    def rotation(self) -> np.ndarray:
        """The orientation part of the vector."""
        if self._rot_dim == 0:
            raise ValueError("this pose has no rotation component")
        return self.x[self._pos_dim : self._pos_dim + self._rot_dim].copy()

    def copy(self) -> Pose:
        """Return an independent copy of this pose."""
        return super().copy()  # type: ignore[return-value]


def pose1d(
    x: Optional[ArrayLike] = None,
    cov: Optional[ArrayLike] = None,
    time: Optional[TimeStamp] = None,
) -> Pose:
    """A 1-d position with no orientation."""
    return Pose(x, cov, time, pos_dim=1, rot_dim=0)


def pose2d(
    x: Optional[ArrayLike] = None,
    cov: Optional[ArrayLike] = None,
    time: Optional[TimeStamp] = None,
) -> Pose:
    """A planar pose: x, y and heading. Also used for 2-d odometry."""
    return Pose(x, cov, time, pos_dim=2, rot_dim=1)


def pose3d(
    x: Optional[ArrayLike] = None,
    cov: Optional[ArrayLike] = None,
    time: Optional[TimeStamp] = None,
) -> Pose:
    """A spatial pose: three position and three orientation entries."""
    return Pose(x, cov, time, pos_dim=3, rot_dim=3)


def position2d(
    x: Optional[ArrayLike] = None,
    cov: Optional[ArrayLike] = None,
    time: Optional[TimeStamp] = None,
) -> Pose:
    """A planar position with no orientation."""
    return Pose(x, cov, time, pos_dim=2, rot_dim=0)


def position3d(
    x: Optional[ArrayLike] = None,
    cov: Optional[ArrayLike] = None,
    time: Optional[TimeStamp] = None,
) -> Pose:
    """A spatial position with no orientation."""
    return Pose(x, cov, time, pos_dim=3, rot_dim=0)


def measurement(
    x: ArrayLike,
    cov: Optional[ArrayLike] = None,
    time: Optional[TimeStamp] = None,
) -> RandomVec:
    """A measurement (or 1-d odometry input) of any dimension."""
    return RandomVec(x, cov, time)