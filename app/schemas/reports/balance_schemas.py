from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from decimal import Decimal

from app.models.enums.reimbursement_direction import ReimbursementDirection


ColorTag = Literal["green", "red", "gray"]


class BalanceComputation(BaseModel):
    model_config = ConfigDict(frozen=True)

    advance: Decimal
    total_spent: Decimal
    remainder: Decimal
    reimbursement_amount: Decimal
    direction: ReimbursementDirection


class ReimbursementInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    color_tag: ColorTag
    amount: Decimal
    direction: ReimbursementDirection
    status: Literal["pendente", "processado"]


class BalanceDisplay(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    color_tag: ColorTag
    status: Literal["positive", "negative", "zero"]


class AdvanceValidation(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    error: Optional[str] = None
    reason: Optional[Literal["negative", "exceeds-maximum"]] = None


# =====================================================
# RESPONSE BLOCK
# =====================================================
class ReportBalanceOut(BaseModel):
    balance: BalanceComputation
    reimbursement: ReimbursementInfo
    balance_display: BalanceDisplay
