from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from safebox.db.session import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    files = relationship("File", back_populates="user")
    activities = relationship("ActivityLog", back_populates="user")
