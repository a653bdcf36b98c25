# Users and audit
from app.models.users.user_models import User
from app.models.audit.activity_models import ActivityLog

# Masters
from app.models.masters.category_models import Category
from app.models.masters.vehicle_models import Vehicle

# Reports and expenses
from app.models.reports.report_models import Report
from app.models.expenses.expense_models import Expense, MileageExpense
from app.models.expenses.receipt_models import Receipt
