"""
이미지 액션 (추가 / 수정 / 삭제 / 단건 조회 / 전체 목록 / 사용자 목록)

모든 함수는 SQLAlchemy Session을 첫 인자로 받고 JSON 직렬화 가능한 dict를 반환한다.
실패는 값 대신 예외로 전달된다 (NotFoundError / UnauthorizedError / UpstreamError).
"""
import logging
import math
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFoundError, UnauthorizedError, UpstreamError
from app.core.signals import ActionSignals
from app.models.image import Image
from app.models.user import User
from app.schemas.image import serialize_image
from app.services.media_search import build_search_expression

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 9
HOME_PATH = "/"

# 요청 payload에서 반영 가능한 필드 (id, author_id, 타임스탬프 제외)
EDITABLE_FIELDS = (
    "title",
    "transformation_type",
    "public_id",
    "secure_url",
    "width",
    "height",
    "config",
    "transformation_url",
    "aspect_ratio",
    "color",
    "prompt",
)


@contextmanager
def _store_errors(db: Session, action: str):
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ DB 에러 ({action}): {str(e)}")
        raise UpstreamError(f"Database error during {action}") from e


def _editable(image: dict) -> dict:
    return {key: value for key, value in image.items() if key in EDITABLE_FIELDS}


def _populate_author(query):
    return query.options(
        joinedload(Image.author).load_only(User.id, User.first_name, User.last_name, User.clerk_id)
    )


def _page(query, limit: int, page: int):
    skip_amount = (int(page) - 1) * limit
    return (
        _populate_author(query)
        .order_by(Image.updated_at.desc(), Image.id.desc())
        .offset(skip_amount)
        .limit(limit)
        .all()
    )


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def find_user(db: Session, user_id):
    return db.get(User, user_id)


def add_image(db: Session, image: dict, user_id, path: str, signals: ActionSignals) -> dict:
    with _store_errors(db, "add image"):
        author = find_user(db, user_id)
        if not author:
            logger.error(f"❌ 사용자 없음: {user_id}")
            raise NotFoundError("User not found")

        new_image = Image(**_editable(image), author_id=author.id)
        db.add(new_image)
        db.commit()
        db.refresh(new_image)

    logger.info(f"✅ 이미지 저장 완료 (Image ID: {new_image.id}, 사용자: {author.id})")
    signals.revalidate_path(path)
    return serialize_image(new_image)


def update_image(db: Session, image: dict, user_id, path: str, signals: ActionSignals) -> dict:
    with _store_errors(db, "update image"):
        image_to_update = db.get(Image, image.get("id"))

        if not image_to_update:
            logger.error(f"❌ 수정할 이미지 없음: {image.get('id')}")
            raise NotFoundError("Unauthorized or image not found")
        if str(image_to_update.author_id) != str(user_id):
            logger.error(f"❌ 수정 권한 없음: image_id={image_to_update.id}, user_id={user_id}")
            raise UnauthorizedError("Unauthorized or image not found")

        for key, value in _editable(image).items():
            setattr(image_to_update, key, value)
        db.commit()
        db.refresh(image_to_update)

    logger.info(f"✅ 이미지 수정 완료 (Image ID: {image_to_update.id})")
    signals.revalidate_path(path)
    return serialize_image(image_to_update)


def delete_image(db: Session, image_id, signals: ActionSignals) -> None:
    # 소유자 확인 없음 (호출 측에서 권한 보장)
    try:
        with _store_errors(db, "delete image"):
            image = db.get(Image, image_id)
            if not image:
                logger.error(f"❌ 삭제할 이미지 없음: {image_id}")
                raise NotFoundError("Image not found")

            db.delete(image)
            db.commit()
        logger.info(f"✅ 이미지 삭제 완료 (Image ID: {image_id})")
    finally:
        signals.redirect(HOME_PATH)


def get_image_by_id(db: Session, image_id) -> dict:
    logger.info(f"🖼️ 이미지 조회: image_id={image_id}")
    with _store_errors(db, "get image"):
        image = _populate_author(db.query(Image)).filter(Image.id == image_id).first()
        if not image:
            raise NotFoundError("Image not found")

        return serialize_image(image, with_author=True)


def get_all_images(db: Session, gateway, limit: int = DEFAULT_PAGE_SIZE, page: int = 1, search_query: str = "") -> dict:
    expression = build_search_expression(search_query)
    # 검색어가 없으면 결과를 쓰지 않으므로 폴더 조회 한 번만
    resource_ids = gateway.search(expression, follow_cursor=bool(search_query))

    with _store_errors(db, "list images"):
        query = db.query(Image)
        if search_query:
            query = query.filter(Image.public_id.in_(resource_ids))

        images = _page(query, limit, page)

        total_images = query.count()
        saved_images = db.query(Image).count()

        return {
            "data": [serialize_image(image, with_author=True) for image in images],
            "totalPage": total_pages(total_images, limit),
            "savedImages": saved_images,
        }


def get_user_images(db: Session, user_id, limit: int = DEFAULT_PAGE_SIZE, page: int = 1) -> dict:
    logger.info(f"📦 사용자 {user_id}의 이미지 조회 시도")
    with _store_errors(db, "list user images"):
        query = db.query(Image).filter(Image.author_id == user_id)

        images = _page(query, limit, page)
        total_images = query.count()

        return {
            "data": [serialize_image(image, with_author=True) for image in images],
            "totalPages": total_pages(total_images, limit),
        }
