import math

import pytest

from steerkin.integrators import (
    DOPRI45,
    PC233,
    RK4,
    RTAM4,
    AdaptiveSettings,
    SystemChain,
)


def airy(x, xd, t):
    xd[0] = x[1]
    xd[1] = -t * x[0]


def exponential(x, xd, t):
    xd[0] = x[0]


def constant_rate(x, xd, t):
    xd[0] = 1.0


def still(x, xd, t):
    xd[0] = 0.0
    xd[1] = 0.0


def run(integrator, system, x, dt, t_end=10.0):
    t = 0.0
    while t < t_end:
        t = integrator.step(system, x, t, dt)
    return x, t


def catch_approx(value, eps):
    return pytest.approx(value, rel=eps, abs=eps)


def test_airy_rk4():
    x, _ = run(RK4(), airy, [1.0, 0.0], 0.001)
    assert x[0] == catch_approx(-0.200693641142, 1.0e-8)
    assert x[1] == catch_approx(-1.49817601143, 1.0e-8)


def test_airy_dopri45():
    x, _ = run(DOPRI45(), airy, [1.0, 0.0], 0.001)
    assert x[0] == catch_approx(-0.200693641142, 1.0e-8)
    assert x[1] == catch_approx(-1.49817601143, 1.0e-8)


def test_exponential_rk4():
    x, t = run(RK4(), exponential, [1.0], 0.001)
    assert x[0] == pytest.approx(math.exp(t), rel=1.0e-8)


def test_exponential_dopri45():
    x, t = run(DOPRI45(), exponential, [1.0], 0.001)
    assert x[0] == pytest.approx(math.exp(t), rel=1.0e-8)


def test_exponential_pc233():
    x, t = run(PC233(), exponential, [1.0], 0.001)
    assert x[0] == pytest.approx(math.exp(t), rel=1.0e-6)


def test_rk4_advances_time_and_keeps_state_length():
    x = [1.0, 0.0]
    t = RK4().step(airy, x, 0.5, 0.25)
    assert t == pytest.approx(0.75)
    assert len(x) == 2


def test_system_chain_matches_combined_system():
    def first(x, xd, t):
        xd[0] = x[1]

    def second(x, xd, t):
        xd[1] = -t * x[0]

    chain = SystemChain()
    chain.append(first)
    chain.append(second)

    x_chain = [1.0, 0.0]
    x_direct = [1.0, 0.0]
    rk_chain, rk_direct = RK4(), RK4()
    t_chain = t_direct = 0.0
    for _ in range(50):
        t_chain = rk_chain.step(chain, x_chain, t_chain, 0.01)
        t_direct = rk_direct.step(airy, x_direct, t_direct, 0.01)
    assert x_chain == x_direct
    assert t_chain == t_direct
    assert len(chain.functions) == 2


def test_system_chain_calls_in_order():
    calls = []
    chain = SystemChain()
    chain.append(lambda x, xd, t: calls.append("a"))
    chain.append(lambda x, xd, t: calls.append("b"))
    chain([0.0], [0.0], 0.0)
    assert calls == ["a", "b"]


def test_pc233_first_step_uses_initializer():
    initializer = RK4()
    pc = PC233(initializer)
    x_pc = [1.0]
    t_pc = pc.step(exponential, x_pc, 0.0, 0.1)

    reference = RK4()
    x_ref = [1.0]
    t_ref = reference.step(exponential, x_ref, 0.0, 0.1)

    assert x_pc == x_ref
    assert t_pc == t_ref
    assert initializer.xd == reference.xd


def test_pc233_constant_rate_is_exact():
    pc = PC233()
    x = [0.0]
    t = 0.0
    for _ in range(20):
        t = pc.step(constant_rate, x, t, 0.05)
    assert x[0] == pytest.approx(t)


def test_rtam4_still_system_keeps_state():
    integrator = RTAM4()
    x = [3.0, -2.0]
    t = 0.0
    for _ in range(5):
        t = integrator.step(still, x, t, 0.1)
    assert x == [3.0, -2.0]
    assert t > 0.0


def test_rtam4_constant_rate_tracks_time_after_warmup():
    integrator = RTAM4()
    x = [0.0]
    t = 0.0
    for _ in range(3):
        t = integrator.step(constant_rate, x, t, 0.01)
    offset = x[0] - t
    for _ in range(10):
        t = integrator.step(constant_rate, x, t, 0.01)
    assert x[0] - t == pytest.approx(offset, abs=1e-12)


def test_dopri45_adaptive_exponential_accuracy():
    integrator = DOPRI45()
    settings = AdaptiveSettings(abs_tol=1e-10, rel_tol=1e-10)
    x = [1.0]
    t, dt = 0.0, 0.01
    while t < 1.0:
        t, dt = integrator.step_adaptive(exponential, x, t, dt, settings)
    assert x[0] == pytest.approx(math.exp(t), rel=1e-7)


def test_dopri45_adaptive_grows_step_when_error_is_zero():
    integrator = DOPRI45()
    x = [2.0]
    t, dt = integrator.step_adaptive(constant_rate, x, 0.0, 0.1)
    assert t == pytest.approx(0.1)
    assert x[0] == pytest.approx(2.1)
    assert dt == pytest.approx(0.1 * 4.5)


def test_dopri45_adaptive_shrinks_step_on_large_error():
    def decay(x, xd, t):
        xd[0] = -50.0 * x[0]

    integrator = DOPRI45()
    settings = AdaptiveSettings(abs_tol=1e-6, rel_tol=1e-6)
    x = [1.0]
    t, dt = integrator.step_adaptive(decay, x, 0.0, 1.0, settings)
    assert 0.0 < t < 1.0
    assert dt < 1.0
    assert x[0] == pytest.approx(math.exp(-50.0 * t), abs=1e-5)


def test_dopri45_adaptive_default_settings_match_explicit():
    a, b = DOPRI45(), DOPRI45()
    xa, xb = [1.0, 0.0], [1.0, 0.0]
    ra = a.step_adaptive(airy, xa, 0.0, 0.05)
    rb = b.step_adaptive(airy, xb, 0.0, 0.05, AdaptiveSettings())
    assert ra == rb
    assert xa == xb