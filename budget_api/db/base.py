# Import every model so Base.metadata knows all tables (used by alembic and create_all)
from budget_api.db.session import Base  # noqa: F401
from budget_api.models.user import User  # noqa: F401
from budget_api.models.category import Category  # noqa: F401
from budget_api.models.transaction import Transaction  # noqa: F401
from budget_api.models.budget import Budget  # noqa: F401
from budget_api.models.goal import Goal  # noqa: F401
from budget_api.models.admin_log import AdminLog  # noqa: F401
