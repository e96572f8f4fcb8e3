# rfslam

Building blocks for landmark-based SLAM:

- `rfslam.timestamp.TimeStamp`: a seconds-and-nanoseconds timestamp. It stays normalised (`0 <= nsec < 1e9`) through `+` and `-`. It can be compared and hashed. `TimeStamp.from_seconds(...)` and `float(...)` convert between a timestamp and seconds.
- `rfslam.randomvec.RandomVec`: a Gaussian random vector with a mean `x`, a covariance `cov` and a `time`. `cov` may be given as a full matrix, as a 1-d array of diagonal entries, or left out, which gives a zero covariance. The class offers:
  - `mahalanobis_dist2(...)` and `gaussian_likelihood(...)`;
  - `cov_inv()`, `cov_det()` and `cov_cholesky_lower()`, which are cached until the covariance changes;
  - `sample(rng)`, which returns a new vector, and `sample_in_place(rng)`, which replaces the mean.
- `rfslam.pose.Pose`: a random vector whose first `pos_dim` entries are a position and whose next `rot_dim` entries are an orientation. It has `position()` and `rotation()`. The factories `pose1d`, `pose2d`, `pose3d`, `position2d`, `position3d` and `measurement` build the common shapes.
- `rfslam.particle.Particle`: a dataclass that holds a pose, an `id`, a `weight`, optional `data` and a `parent_id`. The `parent_id` starts out equal to `id`. `copy()` deep-copies the data, and `delete_data()` drops it.
- `rfslam.jcbb`: joint compatibility branch and bound data association. It provides `JCBB`, the tree node class `JCBBNode` and the abstract `MeasurementModel`.

## Install

```
pip install .
```

## Example

```python
import numpy as np
from rfslam.timestamp import TimeStamp
from rfslam.pose import pose2d, measurement

t = TimeStamp(1, 500_000_000) + TimeStamp.from_seconds(0.75)
print(float(t))  # 2.25

x = pose2d([1.0, 2.0, 0.1], np.diag([0.1, 0.1, 0.01]), t)
print(x.position(), x.rotation())  # [1. 2.] [0.1]

z = measurement([1.0, 0.0], np.eye(2))
print(z.mahalanobis_dist2([2.0, 0.0]))   # 1.0
print(z.gaussian_likelihood([1.0, 0.0]))

rng = np.random.default_rng(0)
draw = z.sample(rng)
```

## Data association

To use JCBB, subclass `MeasurementModel` and implement two methods:

- `measure(pose, landmark)` returns `(z, jacobian_wrt_lmk, jacobian_wrt_pose)`. The pose Jacobian may be `None` when the robot pose has zero covariance and no dense covariance is given.
- `noise()` returns the additive measurement noise covariance.

Landmarks and the robot pose are `RandomVec` objects (or `Pose` objects). Then run:

```python
from rfslam.jcbb import JCBB

jcbb = JCBB(0.95, model, measurements, robot, landmarks)
print(jcbb.associations())  # landmark index per measurement, -1 if unassociated
print(jcbb.association(0))
```

The search runs when the object is constructed. The confidence interval must lie in `[0, 1]`; any other value raises `ValueError`. Candidate associations are gated with the chi-square quantile for that confidence.

By default the robot and landmark estimates are treated as uncorrelated, and their covariances are read from `robot.cov` and each `landmark.cov`. If the estimates are correlated, pass the dense joint covariance as `est_cov_dense`. It holds the robot block first and then one block per landmark.

## What this package does not do

The package supplies no concrete motion or measurement models and no SLAM filter. It has no dataset readers or simulator, and no command-line program. You write measurement models yourself by subclassing `MeasurementModel`.

## Tests

```
pip install .[test]
pytest
```