import pytest

from steerkin.modular import (
    Module,
    Propagator,
    State,
    add_states,
    init_modules,
    postcalc,
    postprop,
    propagate,
    update,
)


class EulerProp(Propagator):
    def __call__(self, state, dt):
        state.x = state.x + dt * state.xd


class Point(Module):
    def __init__(self, log=None, name="p"):
        super().__init__()
        self.pos = 1.0
        self.vel = 2.0
        self.log = log if log is not None else []
        self.name = name
        self.init_count = 0

    def init(self):
        self.init_count += 1
        self.make_state("pos", "vel")

    def __call__(self):
        self.log.append(("update", self.name))

    def postprop(self):
        self.log.append(("postprop", self.name))

    def postcalc(self):
        self.log.append(("postcalc", self.name))


class Holder:
    def __init__(self):
        self.a = 3.0
        self.b = 4.0


def test_state_reads_and_writes_owner_attributes():
    holder = Holder()
    state = State(holder, "a", "b")
    assert state.x == 3.0
    assert state.xd == 4.0
    state.x = 7.5
    state.xd = -1.0
    assert holder.a == 7.5
    assert holder.b == -1.0


def test_state_reserve_grows_memory_with_zeros():
    state = State(Holder(), "a", "b")
    memory = state.reserve(3)
    assert memory == [0.0, 0.0, 0.0]
    memory[1] = 5.0
    assert state.reserve(2) == [0.0, 5.0, 0.0]


def test_make_states_binds_list_elements():
    module = Module()
    module.xs = [1.0, 2.0, 3.0]
    module.ds = [0.1, 0.2, 0.3]
    module.make_states("xs", "ds")
    assert [s.x for s in module.states] == module.xs
    assert [s.xd for s in module.states] == module.ds
    module.states[2].x = 9.0
    assert module.xs == [1.0, 2.0, 9.0]


def test_propagator_is_abstract():
    with pytest.raises(TypeError):
        Propagator()


def test_init_modules_runs_init_once():
    a, b = Point(), Point()
    init_modules([a, b])
    init_modules([a, b])
    assert a.init_count == 1
    assert b.init_count == 1
    assert len(a.states) == 1


def test_update_runs_first_then_blocks_in_order():
    log = []
    blocks = [Point(log, "a"), Point(log, "b")]
    update(blocks, lambda: log.append(("first", None)))
    assert log == [("first", None), ("update", "a"), ("update", "b")]


def test_update_accepts_mapping_of_modules():
    log = []
    blocks = {"x": Point(log, "x"), "y": Point(log, "y")}
    for block in blocks.values():
        block.init()
    update(blocks)
    propagate(blocks, EulerProp(), 0.5)
    postprop(blocks)
    postcalc(blocks)
    assert log == [
        ("update", "x"),
        ("update", "y"),
        ("postprop", "x"),
        ("postprop", "y"),
        ("postcalc", "x"),
        ("postcalc", "y"),
    ]
    assert blocks["x"].pos == pytest.approx(2.0)
    assert blocks["y"].pos == pytest.approx(2.0)


def test_propagate_applies_to_every_state():
    a, b = Point(), Point()
    b.pos = 10.0
    init_modules([a, b])
    propagate([a, b], EulerProp(), 0.5)
    assert a.pos == pytest.approx(1.0 + 0.5 * 2.0)
    assert b.pos == pytest.approx(10.0 + 0.5 * 2.0)


def test_add_states_from_module_and_list():
    a, b = Point(), Point()
    init_modules([a, b])
    collected = []
    add_states(collected, a)
    assert collected == a.states
    add_states(collected, [a, b])
    assert collected == a.states + a.states + b.states
    own = []
    b.add_states(own)
    assert own == b.states