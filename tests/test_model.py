import jax.numpy as jnp
import numpy as np
import pytest

from nlbridge import Model


def test_model_variables() -> None:
    model = Model(lambda x: jnp.sum(x))
    assert model.variable_count == 0
    model.add_variables([0.0, 1.0], [2.0, 3.0])
    model.add_variables(-1.0, 1.0)
    assert model.variable_count == 3
    assert np.array_equal(model.lower_bounds, [0.0, 1.0, -1.0])
    assert np.array_equal(model.upper_bounds, [2.0, 3.0, 1.0])

    # The bounds are returned as copies.
    model.lower_bounds[0] = 5.0
    assert model.lower_bounds[0] == 0.0


def test_model_invalid_bounds() -> None:
    model = Model(lambda x: jnp.sum(x))
    with pytest.raises(ValueError, match="vectors of the same size"):
        model.add_variables([0.0, 0.0], [1.0])
    with pytest.raises(ValueError, match="must not be larger"):
        model.add_variables([0.0, 2.0], [1.0, 1.0])
    assert model.variable_count == 0


def test_model_initial_point() -> None:
    model = Model(lambda x: jnp.sum(x))
    model.add_variables(
        [0.0, -np.inf, 1.0, -np.inf], [10.0, 4.0, np.inf, np.inf]
    )
    assert np.array_equal(model.initial_point(), [5.0, 4.0, 1.0, 0.0])


def test_model_constraints() -> None:
    model = Model(lambda x: jnp.sum(x))
    model.add_variables([0.0, 0.0], [1.0, 1.0])
    assert model.ineq_constraint is None
    assert model.eq_constraint is None

    model.add_ineq_constraint(lambda x: x[0] - 1.0)
    model.add_ineq_constraint(lambda x: jnp.stack([x[1], x[0] * x[1]]))
    model.add_eq_constraint(lambda x: x[0] + x[1])

    ineq = model.ineq_constraint
    eq = model.eq_constraint
    assert ineq is not None
    assert eq is not None
    x = jnp.array([2.0, 3.0])
    assert np.allclose(ineq(x), [1.0, 3.0, 6.0])
    assert np.allclose(eq(x), [5.0])
