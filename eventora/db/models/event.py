from sqlalchemy import (
    Column, Integer, String, Text, Float, DateTime, ForeignKey, func, Enum, Index, JSON, Uuid,
    UniqueConstraint,
)
import uuid
from sqlalchemy.orm import relationship
from eventora.db.session import Base
from eventora.db.models.user import utcnow
import enum


class LocationType(str, enum.Enum):
    physical = "physical"
    virtual = "virtual"
    hybrid = "hybrid"


class EventStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class EventCategory(Base):
    """A single category label attached to an event."""
    __tablename__ = "event_categories"
    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint('event_id', 'name', name='uq_event_category'),
        Index('idx_event_category_name', 'name'),
    )


class Event(Base):
    __tablename__ = "events"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    cover_image = Column(JSON, nullable=True)
    location_type = Column(Enum(LocationType), default=LocationType.physical, nullable=False)
    address = Column(String(500), nullable=True)
    city = Column(String(255), nullable=False)
    country = Column(String(255), nullable=False)
    coordinates = Column(JSON, nullable=True)
    virtual_link = Column(String(1024), nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    timezone = Column(String(64), nullable=False)
    capacity = Column(Integer, nullable=True)
    ticket_price = Column(Float, nullable=False, default=0)
    status = Column(Enum(EventStatus), default=EventStatus.PUBLISHED, nullable=False)
    creator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    creator = relationship("User", lazy="selectin")
    category_links = relationship(
        "EventCategory",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="EventCategory.id",
    )

    # Indexes for frequently queried fields
    __table_args__ = (
        Index('idx_event_start_time', 'start_time'),
        Index('idx_event_creator', 'creator_id'),
        Index('idx_event_status', 'status'),
        Index('idx_event_city', 'city'),
        Index('idx_event_created_at', 'created_at'),
    )

    @property
    def categories(self):
        return [link.name for link in self.category_links]

    @categories.setter
    def categories(self, names):
        # Existing rows are kept; re-adding a label would violate uq_event_category.
        existing = {link.name: link for link in self.category_links}
        links = []
        for name in names or []:
            name = str(name).strip()
            if not name or any(link.name == name for link in links):
                continue
            links.append(existing.get(name) or EventCategory(name=name))
        self.category_links = links
