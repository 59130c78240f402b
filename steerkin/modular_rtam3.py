"""Third order, two pass real-time Adams-Moulton predictor-corrector for modular systems."""

from __future__ import annotations

from typing import Callable, Optional

from steerkin.modular import Blocks, Propagator, State, propagate, update


class RTAM3Propagator(Propagator):
    """Per-state predictor and corrector passes with a two-step derivative history."""

    def __call__(self, state: State, dt: float) -> None:
        memory = state.reserve(4)
        if self.pass_index == 0:
            memory[0] = state.x
            memory[1] = state.xd
            state.x = memory[0] + dt / 24 * (17 * state.xd - 7 * memory[2] + 2 * memory[3])
        elif self.pass_index == 1:
            state.x = memory[0] + dt / 18 * (20 * state.xd - 3 * memory[1] + memory[2])
            memory[3] = memory[2]
            memory[2] = memory[1]


class RTAM3Stepper:
    """Advances time to the half step, then to the full step."""

    def __init__(self) -> None:
        self.t0 = 0.0

    def __call__(self, pass_index: int, t: float, dt: float) -> float:
        if pass_index == 0:
            self.t0 = t
            return t + 0.5 * dt
        if pass_index == 1:
            return self.t0 + dt
        return t


class RTAM3:
    """Real-time third order Adams-Moulton integrator for a collection of modules.

    ``t`` holds the current stage time while a step runs. ``timing`` is
    called before every module update.
    """

    def __init__(self) -> None:
        self.timing: Optional[Callable[[], object]] = None
        self.propagator = RTAM3Propagator()
        self.stepper = RTAM3Stepper()
        self.t = 0.0

    def step(self, blocks: Blocks, t: float, dt: float) -> float:
        """Advance all module states by ``dt`` and return the new time."""
        self.t = t
        for pass_index in range(2):
            self.propagator.pass_index = pass_index
            update(blocks, self.timing)
            propagate(blocks, self.propagator, dt)
            self.t = self.stepper(pass_index, self.t, dt)
        return self.t