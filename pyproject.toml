[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rfslam"
version = "0.1.0"
description = "Timestamps, Gaussian random vectors, poses, particles and joint-compatibility data association for SLAM"
requires-python = ">=3.10"
keywords = ["slam", "robotics", "data-association", "jcbb", "gaussian", "particle-filter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rfslam"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
