"""Timestamps, Gaussian random vectors, poses, particles and JCBB data association for SLAM."""

__version__ = "0.1.0"
__all__ = ["timestamp", "randomvec", "pose", "particle", "jcbb"]