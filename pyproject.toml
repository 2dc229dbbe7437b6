[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "muonrate"
version = "0.1.0"
description = "Validate, convert, filter, histogram and rate-fit three-module detector event data"
requires-python = ">=3.10"
keywords = ["muon", "detector", "hodoscope", "histogram", "rate", "exponential fit"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
    "scipy",
    "matplotlib",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
muonrate = "muonrate.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["muonrate"]

[tool.pytest.ini_options]
addopts = "-ra"
