from typing import Any, Callable, Sequence

import jax.numpy as jnp
import pytest

from nlbridge import Model


def pytest_addoption(parser: Any) -> Any:
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="run slow tests"
    )


def pytest_collection_modifyitems(config: Any, items: Sequence[Any]) -> None:
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


def _sqrt_objective(x: Any) -> Any:
    return jnp.where(x[1] >= 0, jnp.sqrt(jnp.abs(x[1])), jnp.inf)


def _cubic_constraint(x: Any, a: float, b: float) -> Any:
    return (a * x[0] + b) ** 3 - x[1]


@pytest.fixture(name="objective", scope="session")
def fixture_objective() -> Callable[[Any], Any]:
    return _sqrt_objective


@pytest.fixture(name="constraint", scope="session")
def fixture_constraint() -> Callable[[float, float], Callable[[Any], Any]]:
    def _constraint(a: float, b: float) -> Callable[[Any], Any]:
        return lambda x: _cubic_constraint(x, a, b)

    return _constraint


@pytest.fixture(name="make_model")
def fixture_make_model(
    objective: Any, constraint: Any
) -> Callable[..., Model]:
    def _make_model(
        lower_bounds: Sequence[float] = (0.0, 0.0),
        upper_bounds: Sequence[float] = (10.0, 10.0),
        *,
        block: bool = False,
    ) -> Model:
        model = Model(objective)
        model.add_variables(lower_bounds, upper_bounds)
        if block:
            first, second = constraint(2, 0), constraint(-1, 1)
            model.add_ineq_constraint(lambda x: jnp.stack([first(x), second(x)]))
        else:
            model.add_ineq_constraint(constraint(2, 0))
            model.add_ineq_constraint(constraint(-1, 1))
        return model

    return _make_model
