"""Configuration class for the NLopt options."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, NonNegativeFloat, model_validator

_SUBOPTIONS = "suboptions"


class NLoptOptions(BaseModel):
    """Configuration class for the options passed to the NLopt engine.

    `NLoptOptions` holds the named options that are applied to an NLopt
    problem before it is solved. The four stopping tolerances are always
    present and default to `1e-6`:

    - **`ftol_rel`**: Relative tolerance on the objective value.
    - **`ftol_abs`**: Absolute tolerance on the objective value.
    - **`xtol_rel`**: Relative tolerance on the variables.
    - **`xtol_abs`**: Absolute tolerance on the variables, either a single
      value or one value per variable.

    Any other keyword is stored verbatim and forwarded to the engine under
    the same name (for instance `maxeval`, `maxtime`, `stopval`, or an
    algorithm parameter such as `inner_maxeval`). Option names are checked
    against what the engine supports when the problem is assembled, before any
    evaluation takes place.

    The `suboptions` field holds a nested `NLoptOptions` object. It is only
    used when a meta algorithm is paired with a local optimizer, and is then
    applied to the local optimizer alone. If it is not given, the local
    optimizer receives the default tolerances.

    Objects of this class are immutable. Use [`merge`][nlbridge.config.NLoptOptions.merge]
    to derive a new object with some values replaced.

    Attributes:
        ftol_rel:   Relative objective tolerance (default: `1e-6`).
        ftol_abs:   Absolute objective tolerance (default: `1e-6`).
        xtol_rel:   Relative variable tolerance (default: `1e-6`).
        xtol_abs:   Absolute variable tolerance (default: `1e-6`).
        suboptions: Options for the local optimizer (optional).
    """

    ftol_rel: NonNegativeFloat = 1e-6
    ftol_abs: NonNegativeFloat = 1e-6
    xtol_rel: NonNegativeFloat = 1e-6
    xtol_abs: NonNegativeFloat | tuple[NonNegativeFloat, ...] = 1e-6
    suboptions: NLoptOptions | None = None

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        validate_default=True,
    )

    @model_validator(mode="after")
    def _check_extra(self) -> Self:
        for name, value in (self.__pydantic_extra__ or {}).items():
            if not name.isidentifier():
                msg = f"malformed option name: `{name}`"
                raise ValueError(msg)
            if isinstance(value, (dict, NLoptOptions)):
                msg = f"only `{_SUBOPTIONS}` may hold nested options, not `{name}`"
                raise ValueError(msg)
        return self

    def items(self) -> Iterator[tuple[str, Any]]:
        """Iterate over the options to apply to the engine.

        The standard tolerances come first, followed by the extra options in
        the order they were given. The nested `suboptions` entry is not
        included.

        Yields:
            Tuples of option names and values.
        """
        for name, value in self:
            if name != _SUBOPTIONS:
                yield name, value

    def merge(self, **overrides: Any) -> NLoptOptions:  # noqa: ANN401
        """Create a new options object with values replaced.

        The new object is validated in the same way as a freshly constructed
        one. A `suboptions` override may be given as a dictionary.

        Args:
            overrides: The option values to replace or add.

        Returns:
            A new options object.
        """
        values = dict(self)
        values.update(overrides)
        return NLoptOptions.model_validate(values)
