"""ODE integrators, modular simulation blocks and bicycle-model odometry."""

__version__ = "0.1.0"

__all__ = [
    "integrators",
    "derivative",
    "modular",
    "modular_rk4",
    "modular_rtam3",
    "modular_pc233",
    "modular_dopri45",
    "bicycle",
    "steering",
    "odometry",
]