"""SQLAlchemy models for owner accounts and their login sessions."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func

from .session import Base


class OwnerRow(Base):
    __tablename__ = "owners"

    id = Column(String(64), primary_key=True)
    password_hash = Column(Text, nullable=False)
    name = Column(String(255), nullable=True)
    mail = Column(String(255), nullable=False)
    tel = Column(String(32), nullable=False)
    status = Column(String(16), default="ACTIVE", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class OwnerSessionRow(Base):
    __tablename__ = "owner_sessions"

    token = Column(String(128), primary_key=True)
    owner_id = Column(String(64), ForeignKey("owners.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
