"""
Roles and Vocabulary Configuration
Defines the closed set of team roles, their presentation data and the
labels for tool difficulty, pricing and status values.
Used by the policy layer, the dashboard role directory and the seed script.
"""

from enum import Enum


class Role(str, Enum):
    OWNER = "owner"
    BACKEND = "backend"
    FRONTEND = "frontend"
    PM = "pm"
    QA = "qa"
    DESIGNER = "designer"


class ToolStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PricingModel(str, Enum):
    FREE = "free"
    FREEMIUM = "freemium"
    PAID = "paid"
    ENTERPRISE = "enterprise"


# Presentation data per role, keyed by the enum
ROLE_DIRECTORY = {
    Role.OWNER: {
        "display_name": "Owner",
        "icon": "shield",
        "color": "purple",
        "description": "Moderates tools, manages categories and reads the activity log"
    },
    Role.BACKEND: {
        "display_name": "Backend Developer",
        "icon": "wrench",
        "color": "green",
        "description": "Server-side development"
    },
    Role.FRONTEND: {
        "display_name": "Frontend Developer",
        "icon": "palette",
        "color": "blue",
        "description": "Client-side development"
    },
    Role.PM: {
        "display_name": "Project Manager",
        "icon": "bar-chart",
        "color": "orange",
        "description": "Planning and delivery"
    },
    Role.QA: {
        "display_name": "QA Engineer",
        "icon": "test-tube",
        "color": "red",
        "description": "Testing and quality"
    },
    Role.DESIGNER: {
        "display_name": "UI/UX Designer",
        "icon": "pen-tool",
        "color": "pink",
        "description": "Product and interface design"
    },
}

DIFFICULTY_LEVELS = {
    DifficultyLevel.BEGINNER: "Beginner",
    DifficultyLevel.INTERMEDIATE: "Intermediate",
    DifficultyLevel.ADVANCED: "Advanced",
}

PRICING_MODELS = {
    PricingModel.FREE: "Free",
    PricingModel.FREEMIUM: "Freemium",
    PricingModel.PAID: "Paid",
    PricingModel.ENTERPRISE: "Enterprise",
}

TOOL_STATUSES = {
    ToolStatus.PENDING: "Pending approval",
    ToolStatus.APPROVED: "Approved",
    ToolStatus.REJECTED: "Rejected",
}


def _check_exhaustive(table: dict, enum_cls) -> None:
    missing = set(enum_cls) - set(table)
    if missing:
        raise RuntimeError(f"{enum_cls.__name__} lookup table is missing: {sorted(m.value for m in missing)}")


for _table, _enum in (
    (ROLE_DIRECTORY, Role),
    (DIFFICULTY_LEVELS, DifficultyLevel),
    (PRICING_MODELS, PricingModel),
    (TOOL_STATUSES, ToolStatus),
):
    _check_exhaustive(_table, _enum)


def get_role_directory():
    """
    Returns the role lookup table as a list for API responses
    Format: [{"role": "owner", "display_name": "...", "icon": "...", "color": "...", "description": "..."}, ...]
    """
    return [{"role": role.value, **info} for role, info in ROLE_DIRECTORY.items()]


def get_capabilities(role: Role):
    """Capability flags the frontend uses for conditional rendering."""
    is_owner = role == Role.OWNER
    return {
        "submit_tools": True,
        "moderate_tools": is_owner,
        "view_activity_log": is_owner,
        "access_admin_panel": is_owner,
        "delete_categories": is_owner,
        "moderate_comments": is_owner,
        "change_roles": is_owner,
    }
