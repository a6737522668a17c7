"""
AnalyticsService -- plan-gated access to tenant rollups.

Only plans whose policy enables analytics may read the summary.  The gate
is checked before any query runs.
"""

from inventory_kernel.domain.context import TenantContext
from inventory_kernel.domain.dtos import AnalyticsSummary
from inventory_kernel.domain.policy import DEFAULT_PLAN_POLICIES, PlanPolicy
from inventory_kernel.exceptions import PlanRestrictedError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.tenant import Plan
from inventory_kernel.selectors.analytics_selector import AnalyticsSelector
from inventory_kernel.services.base import BaseService

logger = get_logger("services.analytics")


class AnalyticsService(BaseService):
    """Serves the analytics summary to plans that include it."""

    def __init__(
        self,
        storage,
        clock=None,
        plan_policies: dict[Plan, PlanPolicy] | None = None,
    ):
        super().__init__(storage, clock)
        self._plan_policies = dict(plan_policies or DEFAULT_PLAN_POLICIES)

    def get_summary(self, context: TenantContext) -> AnalyticsSummary:
        """
        Raises:
            PlanRestrictedError: the tenant's plan does not include analytics.
        """
        policy = self._plan_policies[Plan(context.plan)]
        if not policy.analytics_enabled:
            logger.warning(
                "analytics_access_denied",
                extra={"tenant_id": str(context.tenant_id), "plan": policy.plan.value},
            )
            raise PlanRestrictedError(plan=policy.plan.value, feature="analytics")

        with self.storage.atomic("analytics_summary") as session:
            return AnalyticsSelector(session).summary(context.tenant_id)
