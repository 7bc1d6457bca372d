[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensorview"
version = "0.1.0"
description = "Simulated environmental sensor logging to SQLite with live graphs of temperature, humidity and illuminance"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["sensor", "sqlite", "visualization", "statistics", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sensorview-simulate = "sensorview.simulator:main"
sensorview-visualize = "sensorview.visualizer:main"
sensorview-analyze = "sensorview.gsl_visualizer:main"

[tool.hatch.build.targets.wheel]
packages = ["sensorview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
