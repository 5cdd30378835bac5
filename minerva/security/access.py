"""
Access Checker

Evaluates an access policy (action -> ordered list of rules) against the
current user. Rules are referenced by name so that policies can be declared
as plain data on controllers and on library models; the callables behind the
names live in this checker.

Which policy applies to a request is decided by the model bridge and carried
on the request context. The checker only evaluates what it is handed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from minerva.constants.roles import RoleName, has_role_at_least
from minerva.exceptions import AccessDeniedError

if TYPE_CHECKING:
    from minerva.bridge.context import RequestContext

logger = logging.getLogger(__name__)

LOGIN_REDIRECT = "/users/login"


@dataclass(frozen=True)
class AccessRule:
    """One entry of a policy: the check to run and where to send failures."""

    rule: str
    redirect: str | None = None


AccessPolicy = dict[str, list[AccessRule]]
RuleCheck = Callable[[Any], bool]


def user_attr(user: Any, name: str) -> Any:
    """Read ``name`` from a session mapping or a user object; None when signed out."""
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get(name)
    return getattr(user, name, None)


def _role(user: Any) -> str | None:
    return user_attr(user, "role")


def allow_all(user: Any) -> bool:
    return True


def deny_all(user: Any) -> bool:
    return False


def allow_authenticated(user: Any) -> bool:
    return bool(user)


def allow_managers(user: Any) -> bool:
    return has_role_at_least(_role(user), RoleName.MANAGER)


def allow_administrators(user: Any) -> bool:
    return has_role_at_least(_role(user), RoleName.ADMINISTRATOR)


class AccessChecker:
    """Registry of named rules plus policy evaluation."""

    def __init__(self) -> None:
        self._rules: dict[str, RuleCheck] = {}
        self.add_rule("allowAll", allow_all)
        self.add_rule("denyAll", deny_all)
        self.add_rule("allowAuthenticated", allow_authenticated)
        self.add_rule("allowManagers", allow_managers)
        self.add_rule("allowAdministrators", allow_administrators)

    def add_rule(self, name: str, check: RuleCheck) -> None:
        """Register (or replace) the callable behind a rule name."""
        self._rules[name] = check

    def has_rule(self, name: str) -> bool:
        return name in self._rules

    def rule_names(self) -> list[str]:
        return sorted(self._rules)

    def allows(self, rule_name: str, user: Any) -> bool:
        """Run a single named rule; unknown names deny."""
        check = self._rules.get(rule_name)
        return check is not None and bool(check(user))

    def check(self, policy: AccessPolicy, action: str, user: Any) -> AccessRule | None:
        """
        Evaluate the rules for ``action`` in order.

        Returns the first failing rule, or None when access is granted.
        Actions without an entry in the policy are not restricted. A rule
        name with no registered check fails closed.
        """
        for rule in policy.get(action, []):
            check = self._rules.get(rule.rule)
            if check is None:
                logger.warning("Unknown access rule %r for action %r; denying", rule.rule, action)
                return rule
            if not check(user):
                return rule
        return None

    def enforce(self, context: RequestContext, user: Any) -> None:
        """Raise AccessDeniedError when the context's policy rejects the user."""
        failed = self.check(context.access_policy, context.action, user)
        if failed is not None:
            raise AccessDeniedError(action=context.action, rule=failed.rule, redirect=failed.redirect)


# Global checker; libraries may register extra rules on load.
access_checker = AccessChecker()
