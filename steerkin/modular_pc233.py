"""Real-time P-2/PC-3/C-3 predictor-corrector integration of modular systems.

The scheme has the error coefficient and order of the P-3/PC-3/C-3
Adams-Moulton predictor-corrector but is more stable.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from steerkin.modular import Blocks, Propagator, State, add_states, postprop, propagate, update
from steerkin.modular_rk4 import RK4

_MEMORY_SIZE = 5


def _memory(state: State) -> List[float]:
    """Give ``state`` exactly the scratch slots this scheme uses."""
    memory = state.reserve(_MEMORY_SIZE)
    del memory[_MEMORY_SIZE:]
    return memory


def _states(blocks: Blocks) -> List[State]:
    states: List[State] = []
    add_states(states, blocks)
    return states


class PC233Propagator(Propagator):
    """Per-state predictor and corrector passes at one third, two thirds and the full step."""

    _C0 = 1.0 / 18.0
    _C1 = 1.0 / 54.0
    _C2 = 1.0 / 4.0

    def __call__(self, state: State, dt: float) -> None:
        memory = _memory(state)
        if self.pass_index == 0:
            memory[0] = state.x
            memory[1] = state.xd
            state.x = memory[0] + self._C0 * dt * (7 * memory[1] - memory[4])
        elif self.pass_index == 1:
            memory[2] = state.xd
            state.x = memory[0] + self._C1 * dt * (39 * memory[2] - 4 * memory[1] + memory[4])
        elif self.pass_index == 2:
            memory[3] = state.xd
            state.x = memory[0] + self._C2 * dt * (memory[1] + 3 * memory[3])
            memory[4] = memory[1]


class PC233Stepper:
    """Advances time in thirds of a step, ending exactly on the full step."""

    def __init__(self) -> None:
        self.t0 = 0.0

    def __call__(self, pass_index: int, t: float, dt: float) -> float:
        if pass_index == 0:
            self.t0 = t
            return t + (1.0 / 3.0) * dt
        if pass_index == 1:
            return t + (1.0 / 3.0) * dt
        if pass_index == 2:
            return self.t0 + dt
        return t


class PC233:
    """Three pass predictor-corrector integrator for a collection of modules.

    The first step is taken by ``initializer`` (a modular RK4 by default),
    whose last stage derivative seeds the derivative history. ``t`` holds
    the current stage time while a step runs, so modules may read it.
    ``run_first`` is handed to the initializer for its updates.
    """

    def __init__(self, initializer: Optional[RK4] = None) -> None:
        self.run_first: Optional[Callable[[], object]] = None
        self.propagator = PC233Propagator()
        self.stepper = PC233Stepper()
        self.initializer = initializer if initializer is not None else RK4()
        self._initialized = False
        self._t = 0.0

    @property
    def t(self) -> float:
        """Current stage time, taken from the initializer until it has run."""
        return self._t if self._initialized else self.initializer.t

    def step(self, blocks: Blocks, t: float, dt: float) -> float:
        """Advance all module states by ``dt`` and return the new time."""
        if not self._initialized:
            if self.run_first is not None:
                self.initializer.run_first = self.run_first
            t = self.initializer.step(blocks, t, dt)
            for state in _states(blocks):
                _memory(state)[4] = state.xd
            self._t = t
            self._initialized = True
            return t

        self._t = t
        for pass_index in range(3):
            self.propagator.pass_index = pass_index
            update(blocks)
            propagate(blocks, self.propagator, dt)
            self._t = self.stepper(pass_index, self._t, dt)
            postprop(blocks)
        return self._t