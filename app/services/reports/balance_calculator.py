# app/services/reports/balance_calculator.py
"""
Advance reconciliation for expense reports.

remainder = advance - total_spent
  > 0  traveler returns the surplus   (A_DEVOLVER)
  < 0  company pays the traveler back (A_RECEBER)
  = 0  settled                        (QUITADO)

Everything here is a pure function over Decimal amounts (2 places).
"""
from decimal import Decimal, localcontext
from typing import Iterable

from app.models.enums.reimbursement_direction import ReimbursementDirection
from app.schemas.reports.balance_schemas import (
    AdvanceValidation,
    BalanceComputation,
    BalanceDisplay,
    ReimbursementInfo,
)
from app.utils.decimal_utils import ZERO, as_decimal, format_brl, sum_decimals, to_decimal

MAX_ADVANCE = Decimal("100000.00")

_REIMBURSEMENT_LABELS = {
    ReimbursementDirection.OWED_TO_TRAVELER: ("A RECEBER", "green"),
    ReimbursementDirection.OWED_TO_COMPANY: ("A DEVOLVER", "red"),
    ReimbursementDirection.SETTLED: ("QUITADO", "gray"),
}


def compute_balance(advance, total_spent) -> BalanceComputation:
    advance = to_decimal(advance)
    total_spent = to_decimal(total_spent)
    with localcontext() as ctx:
        # wide enough that long amounts subtract without rounding
        ctx.prec = max(ctx.prec, advance.adjusted() + 4, total_spent.adjusted() + 4)
        remainder = advance - total_spent
        reimbursement_amount = abs(remainder)

    if remainder > 0:
        direction = ReimbursementDirection.OWED_TO_COMPANY
    elif remainder < 0:
        direction = ReimbursementDirection.OWED_TO_TRAVELER
    else:
        direction = ReimbursementDirection.SETTLED

    return BalanceComputation(
        advance=advance,
        total_spent=total_spent,
        remainder=remainder,
        # magnitude of what changes hands; zero only when settled
        reimbursement_amount=reimbursement_amount,
        direction=direction,
    )


def compute_balance_from_expenses(
    advance,
    expense_amounts: Iterable,
) -> BalanceComputation:
    return compute_balance(advance, sum_decimals(expense_amounts))


def format_reimbursement(computation: BalanceComputation) -> ReimbursementInfo:
    prefix, color = _REIMBURSEMENT_LABELS[computation.direction]
    settled = computation.direction == ReimbursementDirection.SETTLED
    amount = ZERO if settled else computation.reimbursement_amount

    return ReimbursementInfo(
        label=f"{prefix}: {format_brl(amount)}",
        color_tag=color,
        amount=amount,
        direction=computation.direction,
        status="processado" if settled else "pendente",
    )


def format_balance(remainder) -> BalanceDisplay:
    remainder = to_decimal(remainder)
    text = format_brl(remainder)

    if remainder > 0:
        return BalanceDisplay(text=f"+{text}", color_tag="green", status="positive")
    if remainder < 0:
        return BalanceDisplay(text=f"-{text}", color_tag="red", status="negative")
    return BalanceDisplay(text=text, color_tag="gray", status="zero")


def validate_advance(advance) -> AdvanceValidation:
    """Guard for user-entered advances; reports failure as a value."""
    # bounds apply to the amount as entered, before rounding to cents
    advance = as_decimal(advance)

    if advance < 0:
        return AdvanceValidation(
            valid=False,
            error="Advance cannot be negative",
            reason="negative",
        )

    if advance > MAX_ADVANCE:
        return AdvanceValidation(
            valid=False,
            error=f"Advance cannot exceed {format_brl(MAX_ADVANCE)}",
            reason="exceeds-maximum",
        )

    return AdvanceValidation(valid=True)
