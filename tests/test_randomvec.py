import math

import numpy as np
import pytest

from rfslam.randomvec import RandomVec
from rfslam.timestamp import TimeStamp


def test_defaults_are_zero():
    v = RandomVec([1.0, 2.0])
    assert len(v) == 2
    assert np.array_equal(v.cov, np.zeros((2, 2)))
    assert v.time == TimeStamp()


def test_diagonal_covariance_from_vector():
    v = RandomVec([0.0, 0.0, 0.0], [1.0, 2.0, 3.0])
    assert np.array_equal(v.cov, np.diag([1.0, 2.0, 3.0]))


def test_empty_vector_rejected():
    with pytest.raises(ValueError):
        RandomVec([])


def test_wrong_covariance_shape_rejected():
    with pytest.raises(ValueError):
        RandomVec([1.0, 2.0], np.eye(3))


def test_indexing_and_bounds():
    v = RandomVec([1.0, 2.0])
    v[1] = 5.0
    assert v[1] == 5.0
    assert v.x[1] == 5.0
    with pytest.raises(IndexError):
        v[2]
    with pytest.raises(IndexError):
        v[-1] = 0.0


def test_copy_is_independent():
    v = RandomVec([1.0, 2.0], [1.0, 1.0], TimeStamp(3, 0))
    c = v.copy()
    c[0] = 9.0
    c.cov = [4.0, 4.0]
    assert v[0] == 1.0
    assert np.array_equal(v.cov, np.eye(2))
    assert c.time == v.time


def test_cholesky_reconstructs_covariance():
    cov = np.array([[4.0, 1.0], [1.0, 3.0]])
    v = RandomVec([0.0, 0.0], cov)
    L = v.cov_cholesky_lower()
    assert np.allclose(L @ L.T, cov)
    assert np.allclose(np.triu(L, 1), 0.0)


def test_cholesky_rejects_indefinite():
    v = RandomVec([0.0, 0.0], np.array([[1.0, 2.0], [2.0, 1.0]]))
    with pytest.raises(ValueError):
        v.cov_cholesky_lower()


def test_inverse_and_determinant():
    cov = np.array([[2.0, 0.5], [0.5, 1.0]])
    v = RandomVec([0.0, 0.0], cov)
    assert np.allclose(v.cov_inv() @ cov, np.eye(2))
    assert math.isclose(v.cov_det(), float(np.linalg.det(cov)))


def test_cache_invalidated_when_covariance_changes():
    v = RandomVec([0.0, 0.0], [1.0, 1.0])
    first = v.cov_inv()
    v.cov = [4.0, 4.0]
    assert np.allclose(v.cov_inv() @ v.cov, np.eye(2))
    assert not np.allclose(first, v.cov_inv())


def test_singular_inverse_raises():
    v = RandomVec([0.0, 0.0])
    with pytest.raises(np.linalg.LinAlgError):
        v.cov_inv()


def test_mahalanobis_identity_is_squared_distance():
    v = RandomVec([1.0, 1.0], [1.0, 1.0])
    target = np.array([4.0, 5.0])
    assert math.isclose(v.mahalanobis_dist2(target), float(np.sum((target - v.x) ** 2)))
    other = RandomVec(target)
    assert math.isclose(v.mahalanobis_dist2(other), v.mahalanobis_dist2(target))


def test_mahalanobis_is_zero_at_mean():
    v = RandomVec([2.0, -1.0], np.array([[2.0, 0.3], [0.3, 1.0]]))
    assert v.mahalanobis_dist2(v.x) == 0.0


def test_likelihood_at_mean_of_standard_normal():
    v = RandomVec([0.0, 0.0], [1.0, 1.0])
    assert math.isclose(v.gaussian_likelihood([0.0, 0.0]), 1.0 / (2.0 * math.pi))


def test_likelihood_peaks_at_mean_and_vanishes_far_away():
    v = RandomVec([1.0, 2.0], [0.5, 0.5])
    peak = v.gaussian_likelihood(v.x)
    assert peak > v.gaussian_likelihood([1.5, 2.0])
    assert v.gaussian_likelihood([1e6, 1e6]) == 0.0


def test_sample_with_zero_covariance_returns_mean():
    v = RandomVec([3.0, 4.0], time=TimeStamp(7, 0))
    s = v.sample(np.random.default_rng(0))
    assert np.array_equal(s.x, v.x)
    assert s.time == v.time


def test_sample_statistics():
    cov = np.array([[2.0, 0.5], [0.5, 1.0]])
    v = RandomVec([1.0, -1.0], cov)
    rng = np.random.default_rng(42)
    draws = np.array([v.sample(rng).x for _ in range(20000)])
    assert np.allclose(draws.mean(axis=0), v.x, atol=0.05)
    assert np.allclose(np.cov(draws.T), cov, atol=0.1)


def test_sample_keeps_covariance_and_is_reproducible():
    v = RandomVec([0.0, 0.0], [1.0, 2.0])
    a = v.sample(np.random.default_rng(5))
    b = v.sample(np.random.default_rng(5))
    assert np.array_equal(a.x, b.x)
    assert np.array_equal(a.cov, v.cov)


def test_sample_in_place_moves_mean():
    v = RandomVec([0.0, 0.0], [1.0, 1.0])
    expected = v.sample(np.random.default_rng(11)).x
    v.sample_in_place(np.random.default_rng(11))
    assert np.array_equal(v.x, expected)