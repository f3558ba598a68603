"""ORM models exposed for metadata discovery."""
from fittrainer.db.models.plan_action_log import PlanActionLog

__all__ = ["PlanActionLog"]
