from enum import Enum


class ActivityCode(str, Enum):
    # auth
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    REGISTER = "REGISTER"

    # users
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DEACTIVATE_USER = "DEACTIVATE_USER"
    REACTIVATE_USER = "REACTIVATE_USER"

    # categories
    CREATE_CATEGORY = "CREATE_CATEGORY"
    UPDATE_CATEGORY = "UPDATE_CATEGORY"
    DELETE_CATEGORY = "DELETE_CATEGORY"

    # vehicles
    CREATE_VEHICLE = "CREATE_VEHICLE"
    UPDATE_VEHICLE = "UPDATE_VEHICLE"
    DEACTIVATE_VEHICLE = "DEACTIVATE_VEHICLE"
    DELETE_VEHICLE = "DELETE_VEHICLE"

    # reports
    CREATE_REPORT = "CREATE_REPORT"
    UPDATE_REPORT = "UPDATE_REPORT"
    DELETE_REPORT = "DELETE_REPORT"
    REIMBURSE_REPORT = "REIMBURSE_REPORT"
    REVERSE_REIMBURSEMENT = "REVERSE_REIMBURSEMENT"

    # expenses
    CREATE_EXPENSE = "CREATE_EXPENSE"
    UPDATE_EXPENSE = "UPDATE_EXPENSE"
    DELETE_EXPENSE = "DELETE_EXPENSE"

    # receipts
    UPLOAD_RECEIPT = "UPLOAD_RECEIPT"
    DELETE_RECEIPT = "DELETE_RECEIPT"
