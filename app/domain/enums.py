"""Enums shared across the domain layer."""

from enum import Enum


class UserRole(str, Enum):
    TRAINEE = "trainee"
    INTERVIEWER = "interviewer"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    HR_ADMIN = "hr_admin"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN, UserRole.HR_ADMIN})


class InterviewerStatus(str, Enum):
    APPROVED = "approved"
    PENDING_VERIFICATION = "pending_verification"
    REJECTED = "rejected"


class RouteClass(str, Enum):
    PUBLIC = "public"
    SKIP_REDIRECT = "skip_redirect"
    DASHBOARD = "dashboard"
    PROTECTED_OTHER = "protected_other"


class ActionKind(str, Enum):
    PROCEED = "proceed"     # render the requested view
    WAIT = "wait"           # render nothing, re-evaluate later
    REDIRECT = "redirect"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
