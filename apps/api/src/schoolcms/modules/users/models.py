"""
User Models

Database model for the principals that create and update content.
Credentials are owned by the identity service; this table only holds the
profile data needed for authorization and audit display names.
"""

from enum import Enum

from sqlalchemy import Boolean, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from schoolcms.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    SUPER_ADMIN = "super_admin"
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"
    FINANCE_OFFICER = "finance_officer"


# Roles allowed to manage website content
CONTENT_ADMIN_ROLES = frozenset({UserRole.SUPER_ADMIN, UserRole.SCHOOL_ADMIN})


class User(BaseModel):
    """
    User model for authorization and audit attribution.

    Careers and other content reference users by id in created_by /
    updated_by; there is no foreign key so audit history survives
    user removal.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )

    # Profile fields
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    middle_name: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role",
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.STUDENT,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def full_name(self) -> str:
        """First, middle and last name, skipping blanks."""
        return build_full_name(self.first_name, self.middle_name, self.last_name)


def build_full_name(*parts: str | None) -> str:
    return " ".join(part.strip() for part in parts if part and part.strip())
