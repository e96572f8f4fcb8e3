"""Joint compatibility branch and bound (JCBB) data association."""

from __future__ import annotations

import heapq
import itertools
import math
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence, Union

import numpy as np
from scipy.stats import chi2

from .randomvec import ArrayLike, RandomVec

_ZERO_TOLERANCE = 1e-12


def _as_vector(value: Union[RandomVec, ArrayLike]) -> np.ndarray:
    if isinstance(value, RandomVec):
        return value.x.copy()
    return np.asarray(value, dtype=float).reshape(-1)


def _as_matrix(value: Optional[ArrayLike]) -> Optional[np.ndarray]:
    if value is None:
        return None
    return np.atleast_2d(np.asarray(value, dtype=float))


class MeasurementModel(ABC):
    """What JCBB needs from a measurement model."""

    @abstractmethod
    def measure(self, pose, landmark):
        """Predict the measurement of ``landmark`` seen from ``pose``.

        Returns ``(z, jacobian_wrt_lmk, jacobian_wrt_pose)``. ``z`` is a
        vector or a :class:`RandomVec`; the pose Jacobian may be ``None``
        when the pose carries no uncertainty.
        """

    @abstractmethod
    def noise(self):
        """Return the additive measurement noise covariance matrix."""


class JCBBNode:
    """A node of the interpretation tree.

    It holds the association of measurement ``z_idx`` to landmark ``m_idx``
    (``-1`` for an outlier), together with the joint squared Mahalanobis
    distance, stacked innovation and inverse innovation covariance of all
    associations from the root down to this node.
    """

    def __init__(
        self,
        z_idx: int = -1,
        m_idx: int = -1,
        dist_mahalanobis2: float = 0.0,
        innovation: Optional[ArrayLike] = None,
        cov_inv: Optional[ArrayLike] = None,
        parent: Optional[JCBBNode] = None,
    ) -> None:
        self.z_idx = z_idx
        self.m_idx = m_idx
        self.dist_mahalanobis2 = float(dist_mahalanobis2)
        self.innovation = (
            np.zeros(0) if innovation is None else np.asarray(innovation, dtype=float).reshape(-1)
        )
        self.cov_inv = None if cov_inv is None else np.asarray(cov_inv, dtype=float)
        self.parent = parent
        self.children: list[JCBBNode] = []

    def add_child(
        self,
        z_idx: int,
        m_idx: int,
        dist_mahalanobis2: float,
        innovation: Optional[ArrayLike] = None,
        cov_inv: Optional[ArrayLike] = None,
    ) -> JCBBNode:
        """Create a child node below this one and return it."""
        child = JCBBNode(z_idx, m_idx, dist_mahalanobis2, innovation, cov_inv, parent=self)
        self.children.append(child)
        return child

    def lineage(self) -> Iterator[JCBBNode]:
        """Yield this node and its ancestors, stopping before the root."""
        node: Optional[JCBBNode] = self
        while node is not None and node.parent is not None:
            yield node
            node = node.parent

    def __lt__(self, other: JCBBNode) -> bool:
        if not isinstance(other, JCBBNode):
            return NotImplemented
        return self.dist_mahalanobis2 < other.dist_mahalanobis2

    def __repr__(self) -> str:
        return (
            f"JCBBNode(z_idx={self.z_idx}, m_idx={self.m_idx}, "
            f"dist_mahalanobis2={self.dist_mahalanobis2})"
        )


class JCBB:
    """Joint compatibility branch and bound data association.

    The search runs on construction. Without ``est_cov_dense`` the robot
    and landmark estimates are taken as uncorrelated and their covariances
    are read from ``robot.cov`` and each ``landmark.cov``; otherwise the
    dense matrix holds the robot block first, then one block per landmark.
    """

    def __init__(
        self,
        confidence_interval: float,
        measurement_model: MeasurementModel,
        measurements: Sequence[Union[RandomVec, ArrayLike]],
        robot: RandomVec,
        landmarks: Sequence[RandomVec],
        est_cov_dense: Optional[ArrayLike] = None,
    ) -> None:
        if not 0.0 <= confidence_interval <= 1.0:
            raise ValueError("confidence interval must lie in [0, 1]")
        self._confidence = float(confidence_interval)
        self._model = measurement_model
        self._z = [_as_vector(z) for z in measurements]
        self._robot = robot
        self._landmarks = list(landmarks)
        self._dense = None if est_cov_dense is None else np.asarray(est_cov_dense, dtype=float)
        self._q = _as_matrix(measurement_model.noise())

        if self._dense is not None and self._landmarks:
            size = robot.ndim + len(self._landmarks) * self._landmarks[0].ndim
            if self._dense.shape != (size, size):
                raise ValueError(f"dense estimate covariance must be {size}x{size}")

        self._robot_uncertain = not bool(
            np.all(np.abs(robot.cov) <= _ZERO_TOLERANCE)
        )

        self._best_count = 0
        self._best_dist = math.inf
        self._best_node: Optional[JCBBNode] = None
        self._queue: list[tuple[float, int, JCBBNode]] = []
        self._counter = itertools.count()

        self._predict()

        self._root = JCBBNode(innovation=np.zeros(0), cov_inv=np.zeros((0, 0)))
        if self._z:
            self._push(self._root)
            while self._queue:
                _, _, node = heapq.heappop(self._queue)
                self._branch(node)

        self._hypothesis = [-1] * len(self._z)
        if self._best_node is not None:
            for node in self._best_node.lineage():
                self._hypothesis[node.z_idx] = node.m_idx

    def association(self, z_idx: int) -> int:
        """Landmark index associated with measurement ``z_idx``, or -1."""
        if not 0 <= z_idx < len(self._hypothesis):
            raise IndexError(f"measurement index {z_idx} out of range")
        return self._hypothesis[z_idx]

    def associations(self) -> list[int]:
        """Landmark index for every measurement, -1 where unassociated."""
        return list(self._hypothesis)

    def _predict(self) -> None:
        self._z_predict: list[np.ndarray] = []
        self._h_lmk: list[np.ndarray] = []
        self._h_pose: list[Optional[np.ndarray]] = []
        for landmark in self._landmarks:
            z, h_lmk, h_pose = self._model.measure(self._robot, landmark)
            self._z_predict.append(_as_vector(z))
            self._h_lmk.append(_as_matrix(h_lmk))
            self._h_pose.append(_as_matrix(h_pose))

    def _pose_jacobian(self, m_idx: int) -> np.ndarray:
        h_pose = self._h_pose[m_idx]
        if h_pose is None:
            raise ValueError(
                "the measurement model gave no Jacobian w.r.t. the pose, "
                "but the pose estimate is uncertain"
            )
        return h_pose

    def _push(self, node: JCBBNode) -> None:
        heapq.heappush(self._queue, (-node.dist_mahalanobis2, next(self._counter), node))

    def _consider(self, node: JCBBNode, count: int, dist: float) -> None:
        if count > self._best_count or (count == self._best_count and dist < self._best_dist):
            self._best_count = count
            self._best_dist = dist
            self._best_node = node

    def _innovation_terms(
        self, m_idx: int, used: list[int], meas_dim: int
    ) -> tuple[np.ndarray, np.ndarray, bool]:
        """Cross covariance W with earlier associations, covariance C, joint flag."""
        q = self._q
        h_lmk = self._h_lmk[m_idx]
        n_prev = len(used)

        if self._dense is not None:
            p = self._dense
            rd = self._robot.ndim
            ld = self._landmarks[0].ndim
            h_pose = self._pose_jacobian(m_idx)
            lo, hi = rd + m_idx * ld, rd + (m_idx + 1) * ld
            hp = h_pose @ p[:rd, :] + h_lmk @ p[lo:hi, :]
            hp_r = hp[:, :rd]
            blocks = [
                hp_r @ self._pose_jacobian(u).T
                + hp[:, rd + u * ld : rd + (u + 1) * ld] @ self._h_lmk[u].T
                + q
                for u in used
            ]
            w = np.hstack(blocks) if blocks else np.zeros((meas_dim, 0))
            c = (
                h_pose @ p[:rd, :rd] @ h_pose.T
                + h_lmk @ p[lo:hi, lo:hi] @ h_lmk.T
                + q
            )
            return w, c, True

        p_mm = self._landmarks[m_idx].cov
        if self._robot_uncertain:
            h_pose = self._pose_jacobian(m_idx)
            block = h_pose @ self._robot.cov @ h_pose.T + q
            w = np.tile(block, (1, n_prev)) if n_prev else np.zeros((meas_dim, 0))
            c = block + h_lmk @ p_mm @ h_lmk.T
            return w, c, True

        w = np.zeros((meas_dim, meas_dim * n_prev))
        c = h_lmk @ p_mm @ h_lmk.T + q
        return w, c, False

    def _branch(self, node: JCBBNode) -> None:
        n_z = len(self._z)
        if node.z_idx != -1 and node.z_idx + 1 >= n_z:
            return

        used = [n.m_idx for n in node.lineage() if n.m_idx >= 0]
        used.reverse()
        used_set = set(used)
        n_assoc = len(used)
        innov_m = node.innovation
        d2_m = node.dist_mahalanobis2

        z_idx = node.z_idx + 1
        z_actual = self._z[z_idx]
        meas_dim = z_actual.size
        threshold = chi2.ppf(self._confidence, meas_dim * (1 + n_assoc))

        for m_idx in range(len(self._landmarks)):
            if m_idx in used_set:
                continue

            innov = z_actual - self._z_predict[m_idx]
            w, c, uncertain = self._innovation_terms(m_idx, used, meas_dim)
            joint = n_assoc > 0 and uncertain

            if joint:
                c_inv_m = node.cov_inv
                n_mat = np.linalg.inv(c - w @ c_inv_m @ w.T)
                l_mat = (-n_mat @ w) @ c_inv_m
                n_inv = np.linalg.inv(n_mat)
                k_mat = c_inv_m + l_mat.T @ n_inv @ l_mat
                d1 = innov_m @ l_mat.T @ n_inv @ l_mat @ innov_m
                d2 = 2 * innov @ l_mat @ innov_m
                d3 = innov @ n_mat @ innov
                dist = float(d2_m + d1 + d2 + d3)
            else:
                dist = float(d2_m + innov @ np.linalg.inv(c) @ innov)

            if not dist < threshold:
                continue

            if n_assoc == 0:
                cov_inv: Optional[np.ndarray] = np.linalg.inv(c)
            elif joint:
                cov_inv = np.block([[k_mat, l_mat.T], [l_mat, n_mat]])
            else:
                cov_inv = None

            child = node.add_child(
                z_idx, m_idx, dist, np.concatenate([innov_m, innov]), cov_inv
            )
            if z_idx + 1 < n_z:
                self._push(child)
            self._consider(child, n_assoc + 1, dist)

        outlier = node.add_child(
            z_idx,
            -1,
            d2_m,
            innov_m.copy(),
            None if node.cov_inv is None else node.cov_inv.copy(),
        )
        if z_idx + 1 < n_z:
            self._push(outlier)
        self._consider(outlier, n_assoc, d2_m)