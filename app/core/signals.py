import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class ActionSignals:
    """
    요청 단위로 프론트엔드에 전달할 알림 수집
    - revalidate_path: 해당 경로의 캐시 무효화
    - redirect: 액션 종료 후 이동할 위치
    """

    def __init__(self):
        self.revalidated_paths: List[str] = []
        self.redirect_to: Optional[str] = None

    def revalidate_path(self, path: str) -> None:
        if path and path not in self.revalidated_paths:
            self.revalidated_paths.append(path)
        logger.info(f"🔄 캐시 무효화 요청: {path}")

    def redirect(self, location: str) -> None:
        self.redirect_to = location
        logger.info(f"↪️ 리다이렉트 예약: {location}")

    def headers(self) -> dict:
        if not self.revalidated_paths:
            return {}
        return {"X-Revalidate-Path": ",".join(self.revalidated_paths)}
