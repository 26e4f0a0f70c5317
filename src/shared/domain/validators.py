"""Pure input validators shared by every module.

No Django imports: these run identically inside services, DTOs and
tests.  Failures are reported as ``FieldError`` lists or raised as
``InvalidInput`` so the API renders them as ``validation_error``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Union

from validate_docbr import CPF

from modules.core.exceptions import FieldError, InvalidInput

TAX_ID_LENGTH = 11
SIGNATURE_MIN_LENGTH = 100
SIGNATURE_PREFIX = "data:image/"

_NON_DIGITS = re.compile(r"\D")
_CENTS = Decimal("0.01")


# ---------------------------------------------------------------------------
# Tax id (CPF)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TaxIdResult:
    valid: bool
    reason: Optional[str] = None


def normalize_tax_id(raw: Optional[str]) -> str:
    """Strip every non-digit character."""
    return _NON_DIGITS.sub("", raw or "")


def validate_tax_id(raw: Optional[str]) -> TaxIdResult:
    """Validate a CPF: 11 digits, not a repeated digit, both check digits.

    Check digits use weighted sums mod 11 (weights 10..2 for the first,
    11..2 for the second; a remainder-derived digit >= 10 becomes 0), as
    implemented by *validate-docbr*.
    """
    digits = normalize_tax_id(raw)
    if len(digits) != TAX_ID_LENGTH:
        return TaxIdResult(valid=False, reason="length")
    if len(set(digits)) == 1:
        return TaxIdResult(valid=False, reason="repeated_digits")
    if not CPF().validate(digits):
        return TaxIdResult(valid=False, reason="checksum")
    return TaxIdResult(valid=True)


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------


def parse_money(raw: Union[str, int, float, Decimal, None]) -> Decimal:
    """Parse a BRL-style amount into a ``Decimal`` with two places.

    Strings are read the Brazilian way: every ``.`` is a thousands
    separator and ``,`` is the decimal point, so ``"1.234,56"`` is
    1234.56 and ``"12.500"`` is 12500.00.  Numbers are taken as they are.
    ``None`` or a blank string is zero.  Anything else that does not
    parse, and negative amounts, raise ``InvalidInput``.
    """
    if raw is None:
        return Decimal("0.00")
    if isinstance(raw, bool):
        raise _money_error(raw)
    if isinstance(raw, (int, float, Decimal)):
        text = str(raw)
    else:
        text = str(raw).replace("R$", "").replace(" ", "").strip()
        if not text:
            return Decimal("0.00")
        text = text.replace(".", "").replace(",", ".")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise _money_error(raw) from None
    if not amount.is_finite() or amount < 0:
        raise _money_error(raw)
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _money_error(raw: Any) -> InvalidInput:
    return InvalidInput(
        "Invalid monetary value.",
        errors=[
            FieldError(
                field="value",
                code="invalid_money",
                detail=f"{raw!r} is not a valid monetary amount.",
            )
        ],
    )


# ---------------------------------------------------------------------------
# Required fields
# ---------------------------------------------------------------------------


def validate_required(fields: Mapping[str, Any]) -> List[FieldError]:
    """Return one ``FieldError`` per missing or blank field."""
    errors = []
    for name, value in fields.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(
                FieldError(
                    field=name, code="required", detail="This field is required."
                )
            )
    return errors


def require(fields: Mapping[str, Any]) -> None:
    """Raise ``InvalidInput`` when ``validate_required`` reports anything."""
    errors = validate_required(fields)
    if errors:
        raise InvalidInput("Required fields are missing.", errors=errors)


# ---------------------------------------------------------------------------
# Signature images
# ---------------------------------------------------------------------------


def validate_signature_image(raw: Any) -> str:
    """Accept only ``data:image/...`` URIs of a plausible size."""
    if (
        not isinstance(raw, str)
        or len(raw) < SIGNATURE_MIN_LENGTH
        or not raw.startswith(SIGNATURE_PREFIX)
    ):
        raise InvalidInput(
            "Invalid signature image.",
            errors=[
                FieldError(
                    field="image",
                    code="invalid_image",
                    detail="Signature must be a data:image URI.",
                )
            ],
        )
    return raw
