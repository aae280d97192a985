from sqlalchemy import Column, DateTime, ForeignKey, func, JSON, Uuid
import uuid
from eventora.db.session import Base
from eventora.db.models.user import utcnow


class UserPreferences(Base):
    __tablename__ = "user_preferences"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    interests = Column(JSON, nullable=False, default=list)
    location = Column(JSON, nullable=True)
    notification_settings = Column(JSON, nullable=True)
    privacy_settings = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
