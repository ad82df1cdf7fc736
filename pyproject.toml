[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trafficplan"
version = "0.1.0"
description = "Route and departure-time planning for cars on a road network of crosses and multi-channel roads, with a time-step traffic simulator."
requires-python = ">=3.10"
dependencies = []
keywords = ["traffic", "routing", "scheduling", "simulation", "road network", "shortest path"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trafficplan = "trafficplan.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["trafficplan"]

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
