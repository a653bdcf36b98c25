from app.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_name} ({actor_email}) logged in",

    ActivityCode.LOGOUT:
        "{actor_name} ({actor_email}) logged out",

    ActivityCode.REGISTER:
        "{actor_name} ({actor_email}) registered",

    # ---------------- USERS ----------------
    ActivityCode.CREATE_USER:
        "{actor_name} ({actor_email}) created user {target_email} with role {target_role}",

    ActivityCode.UPDATE_USER:
        "{actor_name} ({actor_email}) updated user {target_email}: {changes}",

    ActivityCode.DEACTIVATE_USER:
        "{actor_name} ({actor_email}) deactivated user {target_email}",

    ActivityCode.REACTIVATE_USER:
        "{actor_name} ({actor_email}) reactivated user {target_email}",

    # ---------------- CATEGORIES ----------------
    ActivityCode.CREATE_CATEGORY:
        "{actor_name} ({actor_email}) created category {target_name}",

    ActivityCode.UPDATE_CATEGORY:
        "{actor_name} ({actor_email}) updated category {target_name}: {changes}",

    ActivityCode.DELETE_CATEGORY:
        "{actor_name} ({actor_email}) deleted category {target_name}",

    # ---------------- VEHICLES ----------------
    ActivityCode.CREATE_VEHICLE:
        "{actor_name} ({actor_email}) created vehicle {target_name} (R$ {rate_per_km}/km)",

    ActivityCode.UPDATE_VEHICLE:
        "{actor_name} ({actor_email}) updated vehicle {target_name}: {changes}",

    ActivityCode.DEACTIVATE_VEHICLE:
        "{actor_name} ({actor_email}) deactivated vehicle {target_name}",

    ActivityCode.DELETE_VEHICLE:
        "{actor_name} ({actor_email}) deleted vehicle {target_name}",

    # ---------------- REPORTS ----------------
    ActivityCode.CREATE_REPORT:
        "{actor_name} ({actor_email}) created report #{target_id} {target_name}",

    ActivityCode.UPDATE_REPORT:
        "{actor_name} ({actor_email}) updated report #{target_id}: {changes}",

    ActivityCode.DELETE_REPORT:
        "{actor_name} ({actor_email}) deleted report #{target_id} {target_name}",

    ActivityCode.REIMBURSE_REPORT:
        "{actor_name} ({actor_email}) reimbursed {count} expenses of report #{target_id}",

    ActivityCode.REVERSE_REIMBURSEMENT:
        "{actor_name} ({actor_email}) reversed reimbursement of {count} expenses of report #{target_id}",

    # ---------------- EXPENSES ----------------
    ActivityCode.CREATE_EXPENSE:
        "{actor_name} ({actor_email}) added expense #{target_id} of R$ {amount} to report #{report_id}",

    ActivityCode.UPDATE_EXPENSE:
        "{actor_name} ({actor_email}) updated expense #{target_id}: {changes}",

    ActivityCode.DELETE_EXPENSE:
        "{actor_name} ({actor_email}) deleted expense #{target_id} from report #{report_id}",

    # ---------------- RECEIPTS ----------------
    ActivityCode.UPLOAD_RECEIPT:
        "{actor_name} ({actor_email}) attached receipt {target_name} to expense #{expense_id}",

    ActivityCode.DELETE_RECEIPT:
        "{actor_name} ({actor_email}) removed receipt {target_name} from expense #{expense_id}",
}
