"""
Sidecar resources: quantity validation and limits/requests assembly.

Valid notations:
https://kubernetes.io/docs/concepts/configuration/manage-compute-resources-container/#meaning-of-cpu

    <quantity>  ::= <sign><number><suffix>
    <number>    ::= <digits> | <digits>.<digits> | <digits>. | .<digits>
    <suffix>    ::= <binarySI> | <decimalExponent> | <decimalSI>
    <binarySI>  ::= Ki | Mi | Gi | Ti | Pi | Ei
    <decimalSI> ::= m | "" | k | M | G | T | P | E
    <decimalExponent> ::= e<signedInt> | E<signedInt>
"""

from __future__ import annotations

import logging
import re
from decimal import MAX_EMAX, MIN_EMIN, Decimal, Inexact, InvalidOperation, Overflow, localcontext

from agent_inject.core.models.agent import AgentConfig
from agent_inject.core.models.container import Quantity, ResourceList, ResourceSpec

logger = logging.getLogger(__name__)


_QUANTITY_RE = re.compile(
    r"(?P<number>[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[eE][+-]?[0-9]+|[mkMGTPE])?"
)

_BINARY_SI: dict[str, int] = {
    "Ki": 2 ** 10,
    "Mi": 2 ** 20,
    "Gi": 2 ** 30,
    "Ti": 2 ** 40,
    "Pi": 2 ** 50,
    "Ei": 2 ** 60,
}

_MAX_EXPONENT = 2 ** 31 - 1

_DECIMAL_SI: dict[str, int] = {
    "m": -3,
    "": 0,
    "k": 3,
    "M": 6,
    "G": 9,
    "T": 12,
    "P": 15,
    "E": 18,
}


class InvalidQuantity(ValueError):
    """Raised when a resource string does not match the quantity grammar."""

    def __init__(self, raw: str, field: str = "") -> None:
        self.raw = raw
        self.field = field
        where = f" for {field}" if field else ""
        super().__init__(
            f"Invalid resource quantity{where}: {raw!r} "
            "(expected e.g. '500m', '1', '128Mi', '1G')"
        )


def parse_quantity(raw: str, field: str = "") -> Quantity | None:
    """Parse a CPU/memory string into a ``Quantity``.

    Args:
        raw: Resource string such as ``"250m"`` or ``"64Mi"``.
        field: Name of the setting being parsed, used in the error.

    Returns:
        The parsed quantity, or ``None`` when ``raw`` is empty (unset).

    Raises:
        InvalidQuantity: If ``raw`` is not a valid quantity.
    """
    if raw == "":
        return None

    m = _QUANTITY_RE.fullmatch(raw)
    if m is None:
        raise InvalidQuantity(raw, field)

    number = Decimal(m.group("number"))
    suffix = m.group("suffix") or ""

    if suffix in _BINARY_SI:
        multiplier, exponent = _BINARY_SI[suffix], 0
    elif suffix in _DECIMAL_SI:
        multiplier, exponent = 1, _DECIMAL_SI[suffix]
    else:  # decimal exponent
        multiplier, exponent = 1, _parse_exponent(suffix[1:], raw, field)

    # Enough digits for the mantissa times 2**60, so the value stays exact
    with localcontext() as ctx:
        ctx.prec = len(number.as_tuple().digits) + 20
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        ctx.traps[Inexact] = True
        try:
            value = (number * multiplier).scaleb(exponent)
        except (Overflow, InvalidOperation, Inexact) as e:
            raise InvalidQuantity(raw, field) from e

    return Quantity(raw=raw, value=value)


def _parse_exponent(text: str, raw: str, field: str) -> int:
    """Parse the ``e<int>`` part; exponents beyond int32 are invalid."""
    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-").lstrip("0") or "0"
    if len(digits) > len(str(_MAX_EXPONENT)) or int(digits) > _MAX_EXPONENT:
        raise InvalidQuantity(raw, field)
    return sign * int(digits)


def build_resources(cfg: AgentConfig) -> ResourceSpec:
    """Build limits and requests for the sidecar.

    Fields are parsed in a fixed order (limit CPU, limit memory, request
    CPU, request memory) and the first invalid one raises; the rest are
    not looked at.

    Raises:
        InvalidQuantity: On the first invalid resource string.
    """
    limits = ResourceList(
        cpu=parse_quantity(cfg.limits_cpu, "limits.cpu"),
        memory=parse_quantity(cfg.limits_mem, "limits.memory"),
    )
    requests = ResourceList(
        cpu=parse_quantity(cfg.requests_cpu, "requests.cpu"),
        memory=parse_quantity(cfg.requests_mem, "requests.memory"),
    )
    logger.debug("Sidecar resources: limits=%s requests=%s", limits.to_dict(), requests.to_dict())
    return ResourceSpec(limits=limits, requests=requests)
