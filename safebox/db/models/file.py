from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from safebox.db.session import Base, utcnow


class File(Base):
    __tablename__ = "files"
    # One stored name per owner; backs the duplicate-upload check
    __table_args__ = (UniqueConstraint("user_id", "filename", name="uq_files_user_filename"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    file_path = Column(String(1024), nullable=False)  # relative to the uploads root
    file_type = Column(String(100), nullable=False)
    file_size = Column(BigInteger().with_variant(Integer, "sqlite"), nullable=False)
    favorite = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="files")
