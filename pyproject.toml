[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "steerkin"
version = "0.1.0"
description = "Numerical ODE integrators, modular simulation blocks and bicycle-model odometry for Ackermann-steered vehicles"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ode",
    "runge-kutta",
    "dormand-prince",
    "predictor-corrector",
    "integrator",
    "simulation",
    "kinematics",
    "bicycle-model",
    "odometry",
    "ackermann",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["steerkin"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
