"""Modules whose named attributes form integrable states."""

from __future__ import annotations

import abc
import enum
from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, Optional, Union


class _ElementRef:
    """Exposes one element of two list attributes of an owner as ``x`` and ``xd``."""

    def __init__(self, owner: Any, x_name: str, xd_name: str, index: int) -> None:
        self._owner = owner
        self._x_name = x_name
        self._xd_name = xd_name
        self._index = index

    @property
    def x(self) -> float:
        return getattr(self._owner, self._x_name)[self._index]

    @x.setter
    def x(self, value: float) -> None:
        getattr(self._owner, self._x_name)[self._index] = value

    @property
    def xd(self) -> float:
        return getattr(self._owner, self._xd_name)[self._index]

    @xd.setter
    def xd(self, value: float) -> None:
        getattr(self._owner, self._xd_name)[self._index] = value


class State:
    """A value and its derivative, held as two attributes of ``owner``.

    ``memory`` is scratch space for the integrator propagating the state.
    """

    def __init__(self, owner: Any, x_name: str, xd_name: str) -> None:
        self.owner = owner
        self.x_name = x_name
        self.xd_name = xd_name
        self.memory: List[float] = []

    @property
    def x(self) -> float:
        return getattr(self.owner, self.x_name)

    @x.setter
    def x(self, value: float) -> None:
        setattr(self.owner, self.x_name, value)

    @property
    def xd(self) -> float:
        return getattr(self.owner, self.xd_name)

    @xd.setter
    def xd(self, value: float) -> None:
        setattr(self.owner, self.xd_name, value)

    def reserve(self, size: int) -> List[float]:
        """Grow ``memory`` with zeros to at least ``size`` slots and return it."""
        if len(self.memory) < size:
            self.memory.extend([0.0] * (size - len(self.memory)))
        return self.memory


class Propagator(abc.ABC):
    """Advances a single state during one pass of an integration step."""

    def __init__(self) -> None:
        self.pass_index = 0

    @abc.abstractmethod
    def __call__(self, state: State, dt: float) -> None:
        """Propagate ``state`` over the time step ``dt`` for the current pass."""


class Phase(enum.Enum):
    LINK = enum.auto()
    INIT = enum.auto()
    UPDATE = enum.auto()
    POSTPROP = enum.auto()
    POSTCALC = enum.auto()


class Module:
    """A simulation block owning a set of states.

    Subclasses register states in ``init`` and compute derivatives in
    ``__call__``. The default hooks record the phase last entered in
    ``phase``.
    """

    def __init__(self) -> None:
        self.states: List[State] = []
        self.init_called = False
        self.phase: Optional[Phase] = None

    def make_state(self, x_name: str, xd_name: str) -> None:
        """Register the attributes ``x_name`` and ``xd_name`` as one state."""
        self.states.append(State(self, x_name, xd_name))

    def make_states(self, x_name: str, xd_name: str) -> None:
        """Register each element of two equally long list attributes as a state."""
        for index in range(len(getattr(self, x_name))):
            self.states.append(State(_ElementRef(self, x_name, xd_name, index), "x", "xd"))

    def add_states(self, ext_states: List[State]) -> None:
        """Append this module's states to ``ext_states``."""
        ext_states.extend(self.states)

    def link(self) -> None:
        """Connect to other modules; the default records the link phase."""
        self.phase = Phase.LINK

    def init(self) -> None:
        """Initialise the module; the default records the init phase."""
        self.phase = Phase.INIT

    def __call__(self) -> None:
        """Update derivatives; the default records the update phase."""
        self.phase = Phase.UPDATE

    def propagate(self, propagator: Propagator, dt: float) -> None:
        for state in self.states:
            propagator(state, dt)

    def postprop(self) -> None:
        """Calculations after each propagation pass; the default records the phase."""
        self.phase = Phase.POSTPROP

    def postcalc(self) -> None:
        """Calculations after each full integration step; the default records the phase."""
        self.phase = Phase.POSTCALC


Blocks = Union[Iterable[Module], Mapping]


def _modules(blocks: Blocks) -> Iterable[Module]:
    if isinstance(blocks, Mapping):
        return blocks.values()
    return blocks


def init_modules(blocks: Blocks) -> None:
    """Initialise every module that has not been initialised yet."""
    for block in _modules(blocks):
        if not block.init_called:
            block.init()
            block.init_called = True


def update(blocks: Blocks, run_first: Optional[Callable[[], Any]] = None) -> None:
    """Run ``run_first`` if given, then every module's derivative update."""
    if run_first is not None:
        run_first()
    for block in _modules(blocks):
        block()


def propagate(blocks: Blocks, propagator: Propagator, dt: float) -> None:
    for block in _modules(blocks):
        block.propagate(propagator, dt)


def postprop(blocks: Blocks) -> None:
    for block in _modules(blocks):
        block.postprop()


def postcalc(blocks: Blocks) -> None:
    for block in _modules(blocks):
        block.postcalc()


def add_states(states: List[State], blocks: Union[Module, Blocks]) -> None:
    """Append the states of one module, or of several, to ``states``."""
    if isinstance(blocks, Module):
        blocks = [blocks]
    for block in _modules(blocks):
        states.extend(block.states)