# 📄 File: flower/modules/watering/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes the table where every watering tap of every couple is stored.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy model of the append-only waterings table. The timestamp is assigned by the
# database (server default now()); the composite index serves the "today" range query and
# the "most recent" ordered query of a couple.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM column types
# - flower.shared.config.database (declarative base)
#
# 🔄 Connected Modules / Calls From:
# - migrations/env.py (target metadata)

from sqlalchemy import Column, DateTime, Index, Text
from sqlalchemy.sql import func

from flower.shared.config.database import DatabaseBase


class WateringModel(DatabaseBase):
    """One watering event of a couple."""
    __tablename__ = "waterings"

    # client-generated uuid so optimistic copies share the stored identity
    id = Column(Text, primary_key=True)
    couple_id = Column(Text, nullable=False)
    user_id = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_waterings_couple_id_timestamp", "couple_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<WateringModel(id={self.id}, couple_id={self.couple_id}, user_id={self.user_id})>"
