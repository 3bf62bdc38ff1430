from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session
import logging

from app.core.database import get_db
from app.core.exceptions import ImageActionError
from app.core.signals import ActionSignals
from app.schemas.image import ImageCreate, ImageUpdate
from app.services import image_service
from app.services.media_search import CloudinarySearchGateway, get_search_gateway

# ✅ 라우터 설정
router = APIRouter()

# ✅ 로거 설정
logger = logging.getLogger(__name__)


# ✅ 요청 모델
class AddImageRequest(BaseModel):
    image: ImageCreate
    user_id: int
    path: str


class UpdateImageRequest(BaseModel):
    image: ImageUpdate
    user_id: int
    path: str


# ✅ 1. 이미지 추가
@router.post("/images", status_code=201)
def add_image(request: AddImageRequest, response: Response, db: Session = Depends(get_db)):
    signals = ActionSignals()
    image = image_service.add_image(db, request.image.model_dump(), request.user_id, request.path, signals)
    response.headers.update(signals.headers())
    return image


# ✅ 2. 이미지 수정 (작성자 본인만)
@router.put("/images/{image_id}")
def update_image(image_id: int, request: UpdateImageRequest, response: Response, db: Session = Depends(get_db)):
    payload = request.image.model_dump(exclude_unset=True)
    payload["id"] = image_id
    signals = ActionSignals()
    image = image_service.update_image(db, payload, request.user_id, request.path, signals)
    response.headers.update(signals.headers())
    return image


# ✅ 3. 이미지 삭제 → 성공/실패와 무관하게 홈("/")으로 이동
@router.delete("/images/{image_id}")
def delete_image(image_id: int, db: Session = Depends(get_db)):
    signals = ActionSignals()
    try:
        image_service.delete_image(db, image_id, signals)
    except ImageActionError as e:
        logger.error(f"❌ 이미지 삭제 실패: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={"detail": e.message, "error": e.kind},
            headers={"Location": signals.redirect_to},
        )
    return RedirectResponse(url=signals.redirect_to, status_code=303)


# ✅ 4. 전체 이미지 목록 (검색 + 페이지네이션)
@router.get("/images")
def get_all_images(
    limit: int = Query(image_service.DEFAULT_PAGE_SIZE, ge=1),
    page: int = Query(1, ge=1),
    search_query: str = Query(""),
    db: Session = Depends(get_db),
    gateway: CloudinarySearchGateway = Depends(get_search_gateway),
):
    return image_service.get_all_images(db, gateway, limit=limit, page=page, search_query=search_query)


# ✅ 5. 이미지 단건 조회 (작성자 정보 포함)
@router.get("/images/{image_id}")
def get_image_by_id(image_id: int, db: Session = Depends(get_db)):
    return image_service.get_image_by_id(db, image_id)


# ✅ 6. 내 이미지 목록 (프론트 연동용)
@router.get("/my-images")
def get_my_images(
    user_id: int = Query(...),
    limit: int = Query(image_service.DEFAULT_PAGE_SIZE, ge=1),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
):
    """
    사용자의 이미지 목록을 최신 수정순으로 페이지 단위 반환
    """
    return image_service.get_user_images(db, user_id, limit=limit, page=page)
