[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "festsolve"
version = "0.1.0"
description = "Building blocks for Sokoban solvers: level parsing, push graphs, assignment distances, hotspots and parking plans."
requires-python = ">=3.10"
dependencies = []
keywords = ["sokoban", "puzzle", "solver", "push graph", "hungarian", "assignment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
festsolve-show = "festsolve.levels:main"

[tool.hatch.build.targets.wheel]
packages = ["festsolve"]

[tool.hatch.build.targets.sdist]
include = ["festsolve", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
