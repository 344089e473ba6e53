"""
Career Models

Job postings shown on the school website. A posting is live only inside its
optional [starts_from, ends_at] window; see shared.lifecycle for the rules.
"""

from sqlalchemy import CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from schoolcms.modules.shared import WindowedModel


class Career(WindowedModel):
    """
    Career (job posting).

    Inherits:
    - id, created_at, updated_at (BaseModel)
    - created_by, updated_by (AuditMixin)
    - starts_from, ends_at, status (WindowedMixin)
    """

    __tablename__ = "careers"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    requirements: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_careers_created_at", "created_at"),
        CheckConstraint(
            "starts_from IS NULL OR ends_at IS NULL OR starts_from <= ends_at",
            name="ck_careers_window_order",
        ),
    )

    def __repr__(self) -> str:
        return f"<Career(id={self.id}, title={self.title}, status={self.status.value})>"
