from enum import Enum


class ReimbursementDirection(str, Enum):
    OWED_TO_TRAVELER = "A_RECEBER"
    OWED_TO_COMPANY = "A_DEVOLVER"
    SETTLED = "QUITADO"
