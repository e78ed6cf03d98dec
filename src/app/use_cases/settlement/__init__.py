"""Settlement use cases"""
from .allocate_payment import AllocatePayment
from .preview_payment import PreviewPayment
from .overdue import EvaluateOverdue, evaluate_overdue
from .get_credit_status import GetCreditStatus
from .check_eligibility import CheckEligibility
from .list_ledger_lines import ListLedgerLines
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    PaymentCommandDTO,
    ChargeDTO,
    SettlementResultDTO,
    OverdueStatusDTO,
    DayBucketPreviewDTO,
    PaymentPreviewDTO,
    CreditStatusDTO,
    EligibilityDTO,
    LedgerLineDTO,
    ListLedgerLinesResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "AllocatePayment",
    "PreviewPayment",
    "EvaluateOverdue",
    "evaluate_overdue",
    "GetCreditStatus",
    "CheckEligibility",
    "ListLedgerLines",
    "ReconcileLedger",
    "PaymentCommandDTO",
    "ChargeDTO",
    "SettlementResultDTO",
    "OverdueStatusDTO",
    "DayBucketPreviewDTO",
    "PaymentPreviewDTO",
    "CreditStatusDTO",
    "EligibilityDTO",
    "LedgerLineDTO",
    "ListLedgerLinesResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
