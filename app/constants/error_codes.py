# app/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ---------------- AUTH / USERS ----------------
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_INACTIVE = "USER_INACTIVE"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_EMAIL_EXISTS = "USER_EMAIL_EXISTS"
    USER_VERSION_CONFLICT = "USER_VERSION_CONFLICT"
    USER_SELF_DEACTIVATION = "USER_SELF_DEACTIVATION"

    # ---------------- CATEGORIES ----------------
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_NAME_EXISTS = "CATEGORY_NAME_EXISTS"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"
    CATEGORY_VERSION_CONFLICT = "CATEGORY_VERSION_CONFLICT"

    # ---------------- VEHICLES ----------------
    VEHICLE_NOT_FOUND = "VEHICLE_NOT_FOUND"
    VEHICLE_INACTIVE = "VEHICLE_INACTIVE"
    VEHICLE_IDENTIFICATION_EXISTS = "VEHICLE_IDENTIFICATION_EXISTS"
    VEHICLE_VERSION_CONFLICT = "VEHICLE_VERSION_CONFLICT"

    # ---------------- REPORTS ----------------
    REPORT_NOT_FOUND = "REPORT_NOT_FOUND"
    REPORT_HAS_EXPENSES = "REPORT_HAS_EXPENSES"
    REPORT_DATE_RANGE_INVALID = "REPORT_DATE_RANGE_INVALID"
    REPORT_ADVANCE_INVALID = "REPORT_ADVANCE_INVALID"
    REPORT_VERSION_CONFLICT = "REPORT_VERSION_CONFLICT"

    # ---------------- EXPENSES ----------------
    EXPENSE_NOT_FOUND = "EXPENSE_NOT_FOUND"
    EXPENSE_MILEAGE_FIELDS_REQUIRED = "EXPENSE_MILEAGE_FIELDS_REQUIRED"
    EXPENSE_VERSION_CONFLICT = "EXPENSE_VERSION_CONFLICT"

    # ---------------- RECEIPTS ----------------
    RECEIPT_NOT_FOUND = "RECEIPT_NOT_FOUND"
    RECEIPT_TOO_LARGE = "RECEIPT_TOO_LARGE"
    RECEIPT_TYPE_NOT_ALLOWED = "RECEIPT_TYPE_NOT_ALLOWED"
    RECEIPT_EMPTY = "RECEIPT_EMPTY"
