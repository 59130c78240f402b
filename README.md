# steerkin

Small, dependency-free numerical tools for simulating systems of ordinary
differential equations and for dead-reckoning the pose of an
Ackermann-steered vehicle with a rear-axle bicycle model.

## What is inside

- `steerkin.integrators`: integrators over a plain list state.
  `RK4` (fourth order Runge-Kutta), `PC233` (real-time predictor-corrector,
  first step taken by an `RK4` initializer), `RTAM4` (Adams-Moulton style
  update preceded by an internal `RK4` step on every call, so one call
  advances time by `2 * dt`) and `DOPRI45` (Dormand-Prince 4(5), with
  `step` for a fixed step and `step_adaptive` for an error-controlled step
  configured by `AdaptiveSettings`). `SystemChain` runs several derivative
  functions one after another as a single system.
- `steerkin.derivative`: `derivative(x, y, xest=None)` differentiates samples
  at unequally spaced points (secant for two samples, quadratic through the
  last three for more, zero for fewer than two); `derivative_vector(t, v)`
  does the same per dimension for a history of vectors.
- `steerkin.modular`: block-based simulation. A `Module` registers named
  attributes as states with `make_state` (two scalar attributes) or
  `make_states` (two equally long list attributes), computes derivatives in
  `__call__`, and is advanced by a modular integrator. Helpers
  `init_modules`, `update`, `propagate`, `postprop`, `postcalc` and
  `add_states` act on a list (or mapping) of modules. `Phase` names the
  simulation phases.
- `steerkin.modular_rk4`, `steerkin.modular_rtam3`, `steerkin.modular_pc233`,
  `steerkin.modular_dopri45`: integrators (`RK4`, `RTAM3`, `PC233`,
  `DOPRI45`) that step collections of modules, each with its propagator and
  stepper classes. The current stage time is exposed as the integrator's `t`
  attribute while a step runs. The modular `DOPRI45.step` is adaptive and
  returns the new time and the suggested next time step.
- `steerkin.bicycle`: `ControlInput`, `BicycleKinematics` and
  `SystemPropagator`, which integrates the bicycle model with `RK4`.
- `steerkin.steering`: `SteeringGeometry`, converting between inner-wheel
  and central steering angles (`central_to_inner`, `inner_to_central`) and
  from a speed and turn rate to an inner steering angle and turning radius
  (`twist_to_steering`).
- `steerkin.odometry`: `OdometryEstimator`, which produces `Odometry`
  records with a quaternion from `yaw_to_quaternion` and fixed covariances.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Integrating a system

A system is any callable `system(x, xd, t)` that writes the derivative of
state `x` into `xd`.

```python
from steerkin.integrators import RK4

def airy(x, xd, t):
    xd[0] = x[1]
    xd[1] = -t * x[0]

integrator = RK4()
x = [1.0, 0.0]
t = 0.0
while t < 10.0:
    t = integrator.step(airy, x, t, 0.001)
```

`step` advances the state in place and returns the new time.

An adaptive step returns both the new time and the next time step:

```python
from steerkin.integrators import DOPRI45, AdaptiveSettings

integrator = DOPRI45()
settings = AdaptiveSettings(abs_tol=1e-8, rel_tol=1e-8)
x = [1.0]
t, dt = 0.0, 0.01
while t < 1.0:
    t, dt = integrator.step_adaptive(lambda x, xd, t: xd.__setitem__(0, x[0]), x, t, dt, settings)
```

## Modular simulation

```python
from steerkin.modular import Module
from steerkin.modular_rk4 import RK4

class Exponential(Module):
    def __init__(self):
        super().__init__()
        self.value = 1.0
        self.deriv = 0.0

    def init(self):
        self.make_state("value", "deriv")

    def __call__(self):
        self.deriv = self.value

block = Exponential()
block.init()
integrator = RK4()
t = 0.0
while t < 1.0:
    t = integrator.step([block], t, 0.001)
```

## Vehicle odometry

```python
from steerkin.steering import SteeringGeometry
from steerkin.odometry import OdometryEstimator

geometry = SteeringGeometry(wheelbase=0.65, track=0.605)
estimator = OdometryEstimator(geometry, "odom", "base_link")
odom = estimator.update(linear_velocity=1.0, inner_steering_angle=0.2, dt=0.02)
print(odom.x, odom.y, odom.theta)
```

`update` raises `ValueError` for a non-positive `dt`.

## What this package does not do

It is a library only: it has no command-line program, does not talk to a
vehicle or a bus, and does not publish messages or transforms anywhere. Feeding
it measured speed and steering angle, and sending its `Odometry` records on,
is left to the caller.