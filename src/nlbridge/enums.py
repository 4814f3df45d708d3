"""Enumerations used within the `nlbridge` library."""

from enum import IntEnum, StrEnum


class Algorithm(StrEnum):
    """Enumerates the NLopt algorithms known to `nlbridge`.

    The values are the names of the corresponding constants in the `nlopt`
    module. The members fall into three disjoint groups, see
    [`nlbridge.catalog`][nlbridge.catalog]:

    - Meta algorithms, which drive a subordinate local optimizer.
    - Zero-order (derivative-free) algorithms.
    - First-order (gradient-based) algorithms.

    The declaration order is significant: it is the order in which algorithms
    are listed in error messages, and the order used to break ties when
    suggesting a replacement for a misspelled name.
    """

    G_MLSL = "G_MLSL"
    G_MLSL_LDS = "G_MLSL_LDS"
    AUGLAG = "AUGLAG"
    AUGLAG_EQ = "AUGLAG_EQ"

    GN_DIRECT = "GN_DIRECT"
    GN_DIRECT_L = "GN_DIRECT_L"
    GN_DIRECT_L_RAND = "GN_DIRECT_L_RAND"
    GN_DIRECT_NOSCAL = "GN_DIRECT_NOSCAL"
    GN_DIRECT_L_NOSCAL = "GN_DIRECT_L_NOSCAL"
    GN_DIRECT_L_RAND_NOSCAL = "GN_DIRECT_L_RAND_NOSCAL"
    GN_ORIG_DIRECT = "GN_ORIG_DIRECT"
    GN_ORIG_DIRECT_L = "GN_ORIG_DIRECT_L"
    GN_CRS2_LM = "GN_CRS2_LM"
    GN_AGS = "GN_AGS"
    GN_ESCH = "GN_ESCH"
    GN_ISRES = "GN_ISRES"
    LN_COBYLA = "LN_COBYLA"
    LN_BOBYQA = "LN_BOBYQA"
    LN_NEWUOA = "LN_NEWUOA"
    LN_NEWUOA_BOUND = "LN_NEWUOA_BOUND"
    LN_PRAXIS = "LN_PRAXIS"
    LN_NELDERMEAD = "LN_NELDERMEAD"
    LN_SBPLX = "LN_SBPLX"

    GD_STOGO = "GD_STOGO"
    GD_STOGO_RAND = "GD_STOGO_RAND"
    LD_CCSAQ = "LD_CCSAQ"
    LD_MMA = "LD_MMA"
    LD_SLSQP = "LD_SLSQP"
    LD_LBFGS = "LD_LBFGS"
    LD_TNEWTON = "LD_TNEWTON"
    LD_TNEWTON_PRECOND = "LD_TNEWTON_PRECOND"
    LD_TNEWTON_RESTART = "LD_TNEWTON_RESTART"
    LD_TNEWTON_PRECOND_RESTART = "LD_TNEWTON_PRECOND_RESTART"
    LD_VAR1 = "LD_VAR1"
    LD_VAR2 = "LD_VAR2"


class NLoptStatus(IntEnum):
    """Enumerates the termination codes reported by NLopt.

    The values match the `nlopt` result codes. Positive values indicate a
    successful termination, negative values a failure of some kind. A failure
    status is not an error: it is reported in the
    [`OptimizationResult`][nlbridge.optimization.OptimizationResult] and it is
    up to the caller to decide how to handle it.
    """

    SUCCESS = 1
    "Generic success."

    STOPVAL_REACHED = 2
    "The `stopval` option was reached."

    FTOL_REACHED = 3
    "The `ftol_rel` or `ftol_abs` tolerance was reached."

    XTOL_REACHED = 4
    "The `xtol_rel` or `xtol_abs` tolerance was reached."

    MAXEVAL_REACHED = 5
    "The `maxeval` limit was reached."

    MAXTIME_REACHED = 6
    "The `maxtime` limit was reached."

    FAILURE = -1
    "Generic failure."

    INVALID_ARGS = -2
    "Invalid arguments were passed to the engine."

    OUT_OF_MEMORY = -3
    "The engine ran out of memory."

    ROUNDOFF_LIMITED = -4
    "Progress was halted by round-off errors."

    FORCED_STOP = -5
    "The optimization was stopped by a forced termination."

    @property
    def is_success(self) -> bool:
        """Whether the status signals a successful termination."""
        return self.value > 0
