[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sodf"
version = "0.1.0"
description = "Object description toolkit: shape geometry, frame alignment, fluid fill computations, resource resolution, an entity-component database and a weighted directed graph"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["robotics", "geometry", "ecs", "fluid", "containers", "frames", "shortest-path"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sodf"]

[tool.pytest.ini_options]
addopts = "-ra"
