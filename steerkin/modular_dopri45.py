"""Dormand-Prince 4(5) Runge-Kutta integration of modular systems with step control."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from steerkin.integrators import AdaptiveSettings
from steerkin.modular import Blocks, Propagator, State, add_states, postprop, propagate, update

_MEMORY_SIZE = 7


def _states(blocks: Blocks) -> List[State]:
    states: List[State] = []
    add_states(states, blocks)
    return states


class DOPRI45Propagator(Propagator):
    """Per-state update for each of the six Dormand-Prince passes.

    Memory slots: 0 start value, 1 first derivative, 2 second and sixth
    stage derivative, 3-5 the third to fifth, 6 the first-same-as-last one.
    """

    _C10 = 3.0 / 40.0
    _C11 = 9.0 / 40.0

    _C20 = 44.0 / 45.0
    _C21 = -56.0 / 15.0
    _C22 = 32.0 / 9.0

    _C30 = 19372.0 / 6561.0
    _C31 = -25360.0 / 2187.0
    _C32 = 64448.0 / 6561.0
    _C33 = -212.0 / 729.0

    _C40 = 9017.0 / 3168.0
    _C41 = -355.0 / 33.0
    _C42 = 46732.0 / 5247.0
    _C43 = 49.0 / 176.0
    _C44 = -5103.0 / 18656.0

    _C50 = 35.0 / 384.0
    _C52 = 500.0 / 1113.0
    _C53 = 125.0 / 192.0
    _C54 = -2187.0 / 6784.0
    _C55 = 11.0 / 84.0

    def __call__(self, state: State, dt: float) -> None:
        m = state.reserve(_MEMORY_SIZE)
        stage = self.pass_index
        if stage == 0:
            m[0] = state.x
            m[1] = state.xd
            state.x = m[0] + 0.2 * dt * m[1]
        elif stage == 1:
            m[2] = state.xd
            state.x = m[0] + dt * (self._C10 * m[1] + self._C11 * m[2])
        elif stage == 2:
            m[3] = state.xd
            state.x = m[0] + dt * (self._C20 * m[1] + self._C21 * m[2] + self._C22 * m[3])
        elif stage in (3, 4):
            if stage == 3:
                m[4] = state.xd
                state.x = m[0] + dt * (
                    self._C30 * m[1] + self._C31 * m[2] + self._C32 * m[3] + self._C33 * m[4]
                )
                # Pass 3 continues straight into the pass 4 update.
            m[5] = state.xd
            state.x = m[0] + dt * (
                self._C40 * m[1]
                + self._C41 * m[2]
                + self._C42 * m[3]
                + self._C43 * m[4]
                + self._C44 * m[5]
            )
        elif stage == 5:
            m[2] = state.xd
            state.x = m[0] + dt * (
                self._C50 * m[1]
                + self._C52 * m[3]
                + self._C53 * m[4]
                + self._C54 * m[5]
                + self._C55 * m[2]
            )


class DOPRI45Stepper:
    """Advances time through the Dormand-Prince stage times."""

    def __init__(self) -> None:
        self.t0 = 0.0

    def __call__(self, pass_index: int, t: float, dt: float) -> float:
        if pass_index == 0:
            self.t0 = t
            return t + 0.2 * dt
        if pass_index == 1:
            return self.t0 + (3.0 / 10.0) * dt
        if pass_index == 2:
            return self.t0 + (4.0 / 5.0) * dt
        if pass_index == 3:
            return self.t0 + (8.0 / 9.0) * dt
        if pass_index == 4:
            return self.t0 + dt
        return t


class DOPRI45:
    """Adaptive Dormand-Prince integrator for a collection of modules.

    ``t`` holds the current stage time while a step runs. If ``run_first``
    is set, its ``base_time_step(dt)`` is called whenever the step changes.
    """

    _E0 = 5179.0 / 57600.0
    _E2 = 7571.0 / 16695.0
    _E3 = 393.0 / 640.0
    _E4 = -92097.0 / 339200.0
    _E5 = 187.0 / 2100.0
    _E6 = 1.0 / 40.0

    def __init__(self) -> None:
        self.propagator = DOPRI45Propagator()
        self.stepper = DOPRI45Stepper()
        self.fsal_computed = False
        self.run_first: Optional[Any] = None
        self.t = 0.0

    def _time_step_changed(self, dt: float) -> None:
        if self.run_first is not None:
            self.run_first.base_time_step(dt)

    def system(self, blocks: Blocks, t: float, dt: float) -> float:
        """Take one fixed step of size ``dt`` and return the new time."""
        self.t = t
        if not self.fsal_computed:
            update(blocks)
            for state in _states(blocks):
                state.reserve(_MEMORY_SIZE)[1] = state.xd

        for pass_index in range(5):
            self.propagator.pass_index = pass_index
            update(blocks)
            propagate(blocks, self.propagator, dt)
            self.t = self.stepper(pass_index, self.t, dt)
            postprop(blocks)

        self.propagator.pass_index = 5
        update(blocks)
        propagate(blocks, self.propagator, dt)
        postprop(blocks)
        return self.t

    def step(
        self,
        blocks: Blocks,
        t: float,
        dt: float,
        settings: Optional[AdaptiveSettings] = None,
    ) -> Tuple[float, float]:
        """Take one error-controlled step; return the new time and next time step."""
        if settings is None:
            settings = AdaptiveSettings()
        abs_tol = settings.abs_tol
        rel_tol = settings.rel_tol

        t0 = t
        while True:
            t = self.system(blocks, t, dt)

            # The derivative at the end of the step is the next step's first (FSAL).
            update(blocks)
            states = _states(blocks)
            for state in states:
                state.reserve(_MEMORY_SIZE)[6] = state.xd

            e_max = 0.0
            for state in states:
                m = state.reserve(_MEMORY_SIZE)
                error = abs(
                    m[0]
                    + dt
                    * (
                        self._E0 * m[1]
                        + self._E2 * m[3]
                        + self._E3 * m[4]
                        + self._E4 * m[5]
                        + self._E5 * m[2]
                        + self._E6 * m[6]
                    )
                    - state.x
                )
                m[3] = error
                e = error / (abs_tol + rel_tol * (abs(m[0]) + 0.01 * abs(m[1])))
                e_max = max(e_max, e)

            if e_max > 1.0:
                dt *= max(0.9 * e_max ** (-1.0 / 3.0), 0.2)
                self._time_step_changed(dt)
                t = t0
                self.t = t0
                for state in states:
                    state.x = state.memory[0]
                continue
            break

        if e_max < 0.5:
            e_max = max(3.2e-4, e_max)
            dt *= 0.9 * e_max ** -0.2
            self._time_step_changed(dt)

        for state in states:
            memory = state.memory
            memory[1] = memory[6]

        self.fsal_computed = True
        return t, dt