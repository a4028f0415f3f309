"""Runtime type checking shared by the whole package.

beartype's default configuration rejects an int where a float is hinted.
Scalar inputs such as masses, angles and rates are routinely written as
integer literals, so the package decorator follows the PEP 484 numeric
tower instead.

Example:
    >>> from polarflight.typecheck import beartype
    >>>
    >>> @beartype
    ... def dynamic_pressure(rho: float, airspeed: float) -> float:
    ...     return 0.5 * rho * airspeed ** 2
    >>>
    >>> dynamic_pressure(1, 10)
    50.0
"""

from beartype import BeartypeConf
from beartype import beartype as _beartype

beartype = _beartype(conf=BeartypeConf(is_pep484_tower=True))

__all__ = ["beartype"]
