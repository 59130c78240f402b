"""Fourth order Runge-Kutta integration of modular systems."""

from __future__ import annotations

from typing import Callable, Optional

from steerkin.modular import Blocks, Propagator, State, postprop, propagate, update


class RK4Propagator(Propagator):
    """Per-state update for each of the four RK4 passes."""

    def __call__(self, state: State, dt: float) -> None:
        memory = state.reserve(5)
        stage = self.pass_index
        if stage == 0:
            memory[0] = state.x
            memory[1] = state.xd
            state.x = memory[0] + 0.5 * dt * memory[1]
        elif stage == 1:
            memory[2] = state.xd
            state.x = memory[0] + 0.5 * dt * memory[2]
        elif stage == 2:
            memory[3] = state.xd
            state.x = memory[0] + dt * memory[3]
        elif stage == 3:
            memory[4] = state.xd
            state.x = memory[0] + dt / 6.0 * (memory[1] + 2 * memory[2] + 2 * memory[3] + memory[4])


class RK4Stepper:
    """Advances time across the RK4 passes."""

    def __init__(self) -> None:
        self.t0 = 0.0

    def __call__(self, pass_index: int, t: float, dt: float) -> float:
        if pass_index == 0:
            self.t0 = t
            return t + 0.5 * dt
        if pass_index == 2:
            return self.t0 + dt
        return t


class RK4:
    """Four pass Runge-Kutta integrator for a collection of modules.

    ``t`` holds the current stage time while a step runs, so modules may
    read it. ``run_first`` is called before every module update.
    """

    def __init__(self) -> None:
        self.run_first: Optional[Callable[[], object]] = None
        self.propagator = RK4Propagator()
        self.stepper = RK4Stepper()
        self.t = 0.0

    def step(self, blocks: Blocks, t: float, dt: float) -> float:
        """Advance all module states by ``dt`` and return the new time."""
        self.t = t
        for pass_index in range(4):
            self.propagator.pass_index = pass_index
            update(blocks, self.run_first)
            propagate(blocks, self.propagator, dt)
            self.t = self.stepper(pass_index, self.t, dt)
            postprop(blocks)
        return self.t