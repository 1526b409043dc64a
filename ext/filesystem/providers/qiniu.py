"""
Qiniu Provider

基于七牛官方 SDK, 支持公开/私有空间与客户端直传凭证
"""

from typing import Any
from uuid import uuid4

from loguru import logger
from qiniu import Auth, BucketManager, put_data, put_file

from ext.filesystem.base import BaseStorageProvider, UploadRequest
from ext.filesystem.exceptions import FileDeleteError, FileUploadError
from ext.filesystem.types import FileSystemProviderEnum, QiniuConfig

# 私有空间下载链接有效期(秒)
PRIVATE_URL_EXPIRES = 3600

# 七牛删除时资源不存在的状态码
QINIU_NO_SUCH_KEY_STATUS = 612


class QiniuProvider(BaseStorageProvider[QiniuConfig]):
    """七牛云存储 Provider"""

    provider_type = FileSystemProviderEnum.qiniu

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._auth = Auth(self.config.access_key, self.config.secret_key)
        self._bucket_manager = BucketManager(self._auth)

    def upload(self, request: UploadRequest) -> str:
        """上传文件, key 为空且无 catalog 时由七牛按内容 hash 分配"""
        key = request.effective_key
        if key is None and request.catalog:
            # 七牛不支持只指定目录, 用生成的文件名补齐
            key = request.build_key(f"{uuid4().hex}{request.extension}")

        token = self._auth.upload_token(self.config.bucket_name, key)
        mime_type = request.guess_mime_type()
        try:
            if request.file_path is not None:
                ret, info = put_file(token, key, str(request.file_path), mime_type=mime_type)
            else:
                ret, info = put_data(token, key, self._read_content(request), mime_type=mime_type)
        except OSError as e:
            raise FileUploadError(f"Qiniu upload failed for [{key}]: {e}") from e

        if ret is None or not info.ok():
            raise FileUploadError(
                f"Qiniu upload failed for [{key}]: status={info.status_code}, error={info.error}"
            )

        logger.debug(f"Qiniu uploaded {ret['key']} to bucket {self.config.bucket_name}")
        return self._build_url(ret["key"])

    def delete(self, key: str) -> bool:
        object_key = self._extract_key(key)
        try:
            _, info = self._bucket_manager.delete(self.config.bucket_name, object_key)
        except OSError as e:
            raise FileDeleteError(f"Qiniu delete failed for [{object_key}]: {e}") from e

        if info.status_code == QINIU_NO_SUCH_KEY_STATUS:
            return False
        if not info.ok():
            raise FileDeleteError(
                f"Qiniu delete failed for [{object_key}]: status={info.status_code}, error={info.error}"
            )
        return True

    def get_download_url(self, key: str) -> str:
        url = self._build_url(self._extract_key(key))
        if self.is_private:
            return self._auth.private_download_url(url, expires=PRIVATE_URL_EXPIRES)  # type: ignore[no-any-return]
        return url

    def create_upload_token(
        self,
        metadata: dict[str, Any] | None,
        expires: int,
        file_key: str | None = None,
    ) -> str:
        """生成上传凭证, metadata 作为上传策略（如 returnBody、callbackUrl）"""
        return self._auth.upload_token(  # type: ignore[no-any-return]
            self.config.bucket_name,
            key=file_key,
            expires=expires,
            policy=metadata or None,
        )
