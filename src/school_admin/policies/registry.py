from __future__ import annotations

from school_admin.policies.base import Policy
from school_admin.policies.category_policy import CategoryPolicy
from school_admin.policies.sale_policy import SalePolicy
from school_admin.policies.school_policy import SchoolPolicy
from school_admin.policies.user_policy import UserPolicy


class PolicyRegistry:
    def __init__(self, policies: list[Policy] | None = None):
        self._policies: dict[str, Policy] = {}
        for policy in policies or []:
            self.register(policy)

    def register(self, policy: Policy, resource_class: str | None = None) -> None:
        self._policies[resource_class or policy.resource_class] = policy

    def resolver_for(self, resource_class: str) -> Policy | None:
        return self._policies.get(resource_class)


def default_registry() -> PolicyRegistry:
    return PolicyRegistry([SchoolPolicy(), CategoryPolicy(), UserPolicy(), SalePolicy()])
