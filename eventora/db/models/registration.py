from sqlalchemy import Column, DateTime, ForeignKey, func, Enum, Index, UniqueConstraint, Uuid
import uuid
from sqlalchemy.orm import relationship
from eventora.db.session import Base
from eventora.db.models.user import utcnow
import enum


class RegistrationStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Registration(Base):
    __tablename__ = "registrations"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    status = Column(Enum(RegistrationStatus), default=RegistrationStatus.CONFIRMED, nullable=False)
    registered_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", lazy="selectin")
    event = relationship("Event", lazy="selectin")

    # One registration row per user and event; cancelling flips the status
    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_event_user_registration'),
        Index('idx_registration_user', 'user_id'),
        Index('idx_registration_event', 'event_id'),
    )
