"""SQLAlchemy model for the rules table.

Each row stores a rule string together with its canonical tree, serialized
as JSON text.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ruleforge.infrastructure.persistence.database import Base


class RuleModel(Base):
    """SQLAlchemy model for the rules table.

    Rows are written once when a rule is created or combined and never
    updated afterwards.

    Attributes:
        id: Primary key (UUID string).
        rule_string: The rule as submitted by the caller.
        ast: Canonical tree as JSON text.
        created_at: Timestamp when the rule was stored.
    """

    __tablename__ = "rules"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Rule ID (UUID)",
    )
    rule_string: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Rule expression as submitted",
    )
    ast: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Canonical rule tree (JSON)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Rule(id={self.id}, rule_string={self.rule_string!r})>"
