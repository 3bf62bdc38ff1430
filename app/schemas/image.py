from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


# ✅ 요청 모델
class ImageCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    transformation_type: str
    public_id: str
    secure_url: str
    width: Optional[int] = None
    height: Optional[int] = None
    config: Optional[Dict[str, Any]] = None
    transformation_url: Optional[str] = None
    aspect_ratio: Optional[str] = None
    color: Optional[str] = None
    prompt: Optional[str] = None


class ImageUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None  # 경로의 image_id로 채워짐
    title: Optional[str] = None
    transformation_type: Optional[str] = None
    public_id: Optional[str] = None
    secure_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    config: Optional[Dict[str, Any]] = None
    transformation_url: Optional[str] = None
    aspect_ratio: Optional[str] = None
    color: Optional[str] = None
    prompt: Optional[str] = None

    # NOT NULL 컬럼은 생략만 가능, null로 비울 수 없음
    @field_validator("title", "transformation_type", "public_id", "secure_url")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


# ✅ 응답 모델 (SQLAlchemy 객체 → dict)
class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    # populate 허용 필드만
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    clerk_id: str


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    transformation_type: str
    public_id: str
    secure_url: str
    width: Optional[int] = None
    height: Optional[int] = None
    config: Optional[Dict[str, Any]] = None
    transformation_url: Optional[str] = None
    aspect_ratio: Optional[str] = None
    color: Optional[str] = None
    prompt: Optional[str] = None
    author_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ImageWithAuthorOut(ImageOut):
    author: AuthorOut


def serialize_image(image, with_author: bool = False) -> dict:
    schema = ImageWithAuthorOut if with_author else ImageOut
    return schema.model_validate(image).model_dump(mode="json")
