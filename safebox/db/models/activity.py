from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from safebox.db.session import Base, utcnow


class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action = Column(String(512), nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="activities")
