import pytest
from pydantic import ValidationError

from nlbridge.catalog import LOCAL_ALGORITHMS, META_ALGORITHMS, ZERO_ORDER_ALGORITHMS
from nlbridge.config import (
    NestedAlgorithm,
    NLoptAlgorithm,
    NLoptOptions,
    StandaloneAlgorithm,
)
from nlbridge.enums import Algorithm
from nlbridge.exceptions import InvalidAlgorithmError, MissingLocalOptimizerError


def test_options_defaults() -> None:
    options = NLoptOptions()
    assert options.ftol_rel == 1e-6
    assert options.ftol_abs == 1e-6
    assert options.xtol_rel == 1e-6
    assert options.xtol_abs == 1e-6
    assert options.suboptions is None
    assert dict(options.items()) == {
        "ftol_rel": 1e-6,
        "ftol_abs": 1e-6,
        "xtol_rel": 1e-6,
        "xtol_abs": 1e-6,
    }


def test_options_extra() -> None:
    options = NLoptOptions(xtol_rel=1e-4, maxeval=100, inner_maxeval=10)
    assert options.xtol_rel == 1e-4
    assert list(options.items())[-2:] == [("maxeval", 100), ("inner_maxeval", 10)]


def test_options_xtol_abs_vector() -> None:
    options = NLoptOptions(xtol_abs=[1e-3, 1e-4])
    assert options.xtol_abs == (1e-3, 1e-4)


def test_options_negative_tolerance() -> None:
    with pytest.raises(ValidationError):
        NLoptOptions(ftol_rel=-1.0)


def test_options_malformed_name() -> None:
    with pytest.raises(ValidationError, match="malformed option name: `max eval`"):
        NLoptOptions.model_validate({"max eval": 10})


def test_options_nested_extra() -> None:
    with pytest.raises(ValidationError, match="only `suboptions` may hold nested"):
        NLoptOptions(local={"ftol_rel": 1e-3})


def test_options_frozen() -> None:
    options = NLoptOptions()
    with pytest.raises(ValidationError):
        options.ftol_rel = 1e-3  # type: ignore[misc]


def test_options_suboptions() -> None:
    options = NLoptOptions(suboptions={"ftol_rel": 1e-3, "maxeval": 50})
    assert isinstance(options.suboptions, NLoptOptions)
    assert options.suboptions.ftol_rel == 1e-3
    assert options.suboptions.xtol_rel == 1e-6
    assert dict(options.suboptions.items())["maxeval"] == 50
    assert "suboptions" not in dict(options.items())


def test_options_merge() -> None:
    options = NLoptOptions(maxeval=100)
    merged = options.merge(ftol_rel=1e-3, suboptions={"xtol_rel": 1e-2})
    assert merged is not options
    assert merged.ftol_rel == 1e-3
    assert dict(merged.items())["maxeval"] == 100
    assert merged.suboptions is not None
    assert merged.suboptions.xtol_rel == 1e-2
    assert options.ftol_rel == 1e-6
    assert options.suboptions is None

    with pytest.raises(ValidationError):
        options.merge(xtol_rel=-1.0)


def test_algorithm_standalone() -> None:
    algorithm = NLoptAlgorithm("LD_MMA")
    assert isinstance(algorithm, StandaloneAlgorithm)
    assert algorithm.algorithm is Algorithm.LD_MMA
    assert algorithm.concrete is Algorithm.LD_MMA
    assert not algorithm.derivative_free


def test_algorithm_nested() -> None:
    algorithm = NLoptAlgorithm("AUGLAG", "LN_COBYLA")
    assert isinstance(algorithm, NestedAlgorithm)
    assert algorithm.algorithm is Algorithm.AUGLAG
    assert algorithm.local_optimizer is Algorithm.LN_COBYLA
    assert algorithm.concrete is Algorithm.LN_COBYLA
    assert algorithm.derivative_free

    algorithm = NLoptAlgorithm(Algorithm.G_MLSL_LDS, Algorithm.LD_LBFGS)
    assert isinstance(algorithm, NestedAlgorithm)
    assert not algorithm.derivative_free


def test_algorithm_nested_non_meta() -> None:
    # The local optimizer is ignored if the top-level algorithm is not a meta
    # algorithm.
    algorithm = NLoptAlgorithm("LD_LBFGS", "LN_COBYLA")
    assert isinstance(algorithm, NestedAlgorithm)
    assert algorithm.concrete is Algorithm.LD_LBFGS
    assert not algorithm.derivative_free

    algorithm = NLoptAlgorithm("LN_COBYLA", "LD_LBFGS")
    assert algorithm.concrete is Algorithm.LN_COBYLA
    assert algorithm.derivative_free


def test_algorithm_equality() -> None:
    assert NLoptAlgorithm("LD_MMA") == StandaloneAlgorithm(Algorithm.LD_MMA)
    assert NLoptAlgorithm("AUGLAG", "LD_SLSQP") == NestedAlgorithm(
        Algorithm.AUGLAG, Algorithm.LD_SLSQP
    )
    assert NLoptAlgorithm("AUGLAG", "LD_SLSQP") != NLoptAlgorithm(
        "AUGLAG", "LD_LBFGS"
    )


@pytest.mark.parametrize("algorithm", LOCAL_ALGORITHMS)
def test_algorithm_all_local(algorithm: Algorithm) -> None:
    config = NLoptAlgorithm(algorithm.value)
    assert config.algorithm is algorithm
    assert config.derivative_free == (algorithm in ZERO_ORDER_ALGORITHMS)


@pytest.mark.parametrize("algorithm", META_ALGORITHMS)
def test_algorithm_meta_without_local(algorithm: Algorithm) -> None:
    with pytest.raises(MissingLocalOptimizerError):
        NLoptAlgorithm(algorithm)
    with pytest.raises(MissingLocalOptimizerError):
        StandaloneAlgorithm(algorithm)


def test_algorithm_invalid() -> None:
    with pytest.raises(InvalidAlgorithmError, match=r"Did you mean AUGLAG\?"):
        NLoptAlgorithm("AUGLA")
    with pytest.raises(InvalidAlgorithmError, match=r"Did you mean LD_MMA\?"):
        StandaloneAlgorithm("LD_MM")  # type: ignore[arg-type]
    with pytest.raises(InvalidAlgorithmError):
        NestedAlgorithm(Algorithm.AUGLAG, Algorithm.G_MLSL)


def test_algorithm_frozen() -> None:
    algorithm = NLoptAlgorithm("LD_MMA")
    with pytest.raises(AttributeError):
        algorithm.algorithm = Algorithm.LD_SLSQP  # type: ignore[misc]
