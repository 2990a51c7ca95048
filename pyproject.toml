[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "omrss"
version = "0.1.0"
description = "Simulation of multicast routing and scheduling for TSN/AVB flows with Steiner tree, distance tree and ant colony (OSACO) planners"
requires-python = ">=3.10"
keywords = [
    "tsn",
    "time-sensitive networking",
    "avb",
    "multicast routing",
    "steiner tree",
    "ant colony optimization",
    "scheduling",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
    "Topic :: System :: Networking",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
omrss = "omrss.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["omrss"]

[tool.hatch.build.targets.sdist]
include = [
    "omrss",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
