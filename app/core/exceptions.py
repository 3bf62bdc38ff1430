class ImageActionError(Exception):
    """이미지 액션 실패 공통 베이스 (HTTP 상태 코드 포함)"""

    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ImageActionError):
    status_code = 404
    kind = "not_found"


class UnauthorizedError(ImageActionError):
    status_code = 403
    kind = "unauthorized"


class UpstreamError(ImageActionError):
    """DB 또는 Cloudinary 검색 실패"""

    status_code = 502
    kind = "upstream_failure"


class GatewayConfigError(UpstreamError):
    kind = "gateway_config"
