from enum import Enum


class ReportStatus(str, Enum):
    in_progress = "in_progress"
    reimbursed = "reimbursed"
    closed = "closed"
