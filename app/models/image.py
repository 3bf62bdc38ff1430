from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Image(Base):
    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    transformation_type = Column(String, nullable=False)
    public_id = Column(String, nullable=False, index=True)  # Cloudinary public_id (검색 필터 기준)
    secure_url = Column(String, nullable=False)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    config = Column(JSON, nullable=True)
    transformation_url = Column(String, nullable=True)
    aspect_ratio = Column(String, nullable=True)
    color = Column(String, nullable=True)
    prompt = Column(String, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # 생성 시 고정, 변경 불가
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    author = relationship("User", back_populates="images")
