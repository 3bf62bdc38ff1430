import logging
from typing import List, Optional

import requests

from app.core.config import get_cloudinary_credentials, get_cloudinary_timeout, get_media_folder
from app.core.exceptions import GatewayConfigError, UpstreamError

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"
MAX_RESULTS_PER_PAGE = 500


def build_search_expression(search_query: str = "", folder: Optional[str] = None) -> str:
    expression = f"folder={folder or get_media_folder()}"
    if search_query:
        expression += f" AND {search_query}"
    return expression


class CloudinarySearchGateway:
    """Cloudinary Search API 호출 → 매칭된 리소스의 public_id 목록 반환"""

    def __init__(self, cloud_name=None, api_key=None, api_secret=None, timeout=None, session=None):
        env_cloud_name, env_api_key, env_api_secret = get_cloudinary_credentials()
        self.cloud_name = cloud_name or env_cloud_name
        self.api_key = api_key or env_api_key
        self.api_secret = api_secret or env_api_secret
        self.timeout = timeout if timeout is not None else get_cloudinary_timeout()
        self.session = session or requests

    def _check_credentials(self):
        missing = [
            name
            for name, value in (
                ("CLOUDINARY_CLOUD_NAME", self.cloud_name),
                ("CLOUDINARY_API_KEY", self.api_key),
                ("CLOUDINARY_API_SECRET", self.api_secret),
            )
            if not value
        ]
        if missing:
            logger.error(f"❌ Cloudinary 환경 변수 누락: {', '.join(missing)}")
            raise GatewayConfigError(f"Missing Cloudinary configuration: {', '.join(missing)}")

    def search(self, expression: str, follow_cursor: bool = True) -> List[str]:
        """follow_cursor=False 이면 첫 페이지만 요청 (검색어 없는 목록 조회용)"""
        self._check_credentials()

        url = f"{CLOUDINARY_API_BASE}/{self.cloud_name}/resources/search"
        public_ids: List[str] = []
        next_cursor = None

        logger.info(f"🔍 Cloudinary 검색: {expression}")
        while True:
            payload = {"expression": expression, "max_results": MAX_RESULTS_PER_PAGE}
            if next_cursor:
                payload["next_cursor"] = next_cursor

            try:
                response = self.session.post(
                    url,
                    json=payload,
                    auth=(self.api_key, self.api_secret),
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                logger.error(f"❌ Cloudinary 요청 실패: {str(e)}")
                raise UpstreamError("Media search request failed") from e

            if response.status_code != 200:
                logger.error(f"❌ Cloudinary 응답 에러 ({response.status_code}): {response.text}")
                raise UpstreamError(f"Media search failed with status {response.status_code}")

            response_data = response.json()
            public_ids.extend(resource["public_id"] for resource in response_data.get("resources", []))

            next_cursor = response_data.get("next_cursor")
            if not next_cursor or not follow_cursor:
                break

        logger.info(f"✅ Cloudinary 검색 결과 {len(public_ids)}건")
        return public_ids


# FastAPI 의존성
def get_search_gateway() -> CloudinarySearchGateway:
    return CloudinarySearchGateway()
