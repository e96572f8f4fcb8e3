"""Gaussian random vectors with mean, covariance and timestamp."""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np

from .timestamp import TimeStamp

ArrayLike = Union[np.ndarray, list, tuple]

_default_rng = np.random.default_rng()


class RandomVec:
    """A Gaussian random vector with mean, covariance and a timestamp.

    ``cov`` may be a full square matrix, a 1-d array of diagonal entries,
    or ``None`` for a zero covariance. Inverse, determinant and Cholesky
    factor of the covariance are computed lazily and cached.
    """

    def __init__(
        self,
        x: ArrayLike,
        cov: Optional[ArrayLike] = None,
        time: Optional[TimeStamp] = None,
    ) -> None:
        x = np.array(x, dtype=float).reshape(-1)
        if x.size == 0:
            raise ValueError("a random vector needs at least one dimension")
        self._x = x
        self._cov = np.zeros((x.size, x.size))
        self._clear_cache()
        if cov is not None:
            self.cov = cov
        self.time = time if time is not None else TimeStamp()

    def _clear_cache(self) -> None:
        self._cov_inv: Optional[np.ndarray] = None
        self._cov_det: Optional[float] = None
        self._pdf_factor: Optional[float] = None
        self._cov_chol: Optional[np.ndarray] = None

    @property
    def x(self) -> np.ndarray:
        """The mean vector."""
        return self._x

    @x.setter
    def x(self, value: ArrayLike) -> None:
        value = np.array(value, dtype=float).reshape(-1)
        if value.shape != self._x.shape:
            raise ValueError(f"expected a vector of length {self._x.size}")
        self._x = value

    @property
    def cov(self) -> np.ndarray:
        """The covariance matrix."""
        return self._cov

    @cov.setter
    def cov(self, value: ArrayLike) -> None:
        value = np.array(value, dtype=float)
        n = self._x.size
        if value.ndim == 1:
            if value.size != n:
                raise ValueError(f"expected {n} diagonal entries")
            value = np.diag(value)
        elif value.shape != (n, n):
            raise ValueError(f"expected a {n}x{n} covariance matrix")
        self._cov = value
        self._clear_cache()

    @property
    def ndim(self) -> int:
        return self._x.size

    def __len__(self) -> int:
        return self._x.size

    def _check_index(self, n: int) -> None:
        if not 0 <= n < self._x.size:
            raise IndexError(f"index {n} out of range for dimension {self._x.size}")

    def __getitem__(self, n: int) -> float:
        self._check_index(n)
        return float(self._x[n])

    def __setitem__(self, n: int, value: float) -> None:
        self._check_index(n)
        self._x[n] = value

    def copy(self) -> RandomVec:
        """Return an independent copy, cached values included."""
        other = object.__new__(type(self))
        other.__dict__.update(self.__dict__)
        other._x = self._x.copy()
        other._cov = self._cov.copy()
        if self._cov_inv is not None:
            other._cov_inv = self._cov_inv.copy()
        if self._cov_chol is not None:
            other._cov_chol = self._cov_chol.copy()
        return other

    def cov_cholesky_lower(self) -> np.ndarray:
        """Lower-triangular Cholesky factor ``L`` with ``L @ L.T == cov``."""
        if self._cov_chol is None:
            if not np.any(self._cov):
                self._cov_chol = np.zeros_like(self._cov)
            else:
                try:
                    self._cov_chol = np.linalg.cholesky(self._cov)
                except np.linalg.LinAlgError as exc:
                    raise ValueError("covariance is not positive definite") from exc
        return self._cov_chol.copy()

    def cov_inv(self) -> np.ndarray:
        """Inverse of the covariance matrix."""
        if self._cov_inv is None:
            self._cov_inv = np.linalg.inv(self._cov)
        return self._cov_inv.copy()

    def cov_det(self) -> float:
        """Determinant of the covariance matrix."""
        if self._cov_det is None:
            self._cov_det = float(np.linalg.det(self._cov))
            self._pdf_factor = None
        return self._cov_det

    def mahalanobis_dist2(self, to: Union[RandomVec, ArrayLike]) -> float:
        """Squared Mahalanobis distance from the mean to ``to``."""
        target = to.x if isinstance(to, RandomVec) else np.asarray(to, dtype=float).reshape(-1)
        if self._cov_inv is None:
            self._cov_inv = np.linalg.inv(self._cov)
        e = target - self._x
        return float(e @ self._cov_inv @ e)

    def gaussian_likelihood(self, x_eval: Union[RandomVec, ArrayLike]) -> float:
        """Gaussian density of this vector's distribution at ``x_eval``."""
        if self._pdf_factor is None:
            det = self.cov_det()
            self._pdf_factor = math.sqrt((2 * math.pi) ** self._x.size * det)
        md2 = self.mahalanobis_dist2(x_eval)
        likelihood = math.exp(-0.5 * md2) / self._pdf_factor
        if math.isnan(likelihood):
            return 0.0
        return likelihood

    def _draw(self, rng: Optional[np.random.Generator]) -> np.ndarray:
        rng = rng if rng is not None else _default_rng
        noise = rng.standard_normal(self._x.size)
        return self._x + self.cov_cholesky_lower() @ noise

    def sample(self, rng: Optional[np.random.Generator] = None) -> RandomVec:
        """Draw a sample; covariance and time are carried over."""
        return RandomVec(self._draw(rng), self._cov.copy(), self.time)

    def sample_in_place(self, rng: Optional[np.random.Generator] = None) -> None:
        """Draw a sample and store it as the new mean."""
        self._x = self._draw(rng)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(x={self._x.tolist()}, time={self.time!r})"