from .access import LOGIN_REDIRECT, AccessChecker, AccessPolicy, AccessRule, access_checker

__all__ = ["LOGIN_REDIRECT", "AccessChecker", "AccessPolicy", "AccessRule", "access_checker"]
