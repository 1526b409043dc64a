"""
Aliyun OSS Provider

支持公开/私有 Bucket, 私有 Bucket 下载链接使用签名 URL, 上传凭证为 PostObject Policy
"""

import base64
import hmac
import json
from datetime import datetime, timedelta, timezone
from hashlib import sha1
from typing import Any
from uuid import uuid4

import oss2
from loguru import logger
from oss2.exceptions import OssError

from ext.filesystem.base import BaseStorageProvider, UploadRequest
from ext.filesystem.exceptions import FileDeleteError, FileUploadError
from ext.filesystem.types import AliyunOSSConfig, FileSystemProviderEnum

# 私有 Bucket 签名链接有效期(秒)
PRIVATE_URL_EXPIRES = 3600

# PostObject 上传大小上限(bytes)
MAX_POST_CONTENT_LENGTH = 1024 * 1024 * 1024


class AliyunOSSProvider(BaseStorageProvider[AliyunOSSConfig]):
    """阿里云 OSS Provider"""

    provider_type = FileSystemProviderEnum.aliyun_oss

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._auth = oss2.Auth(self.config.access_key, self.config.secret_key)
        self._bucket = oss2.Bucket(self._auth, self.config.endpoint, self.config.bucket_name)
        logger.info(f"Using Aliyun OSS bucket {self.config.bucket_name} at {self.config.endpoint}")

    @property
    def bucket(self) -> oss2.Bucket:
        return self._bucket

    def upload(self, request: UploadRequest) -> str:
        """上传文件, 未指定 key 时生成 uuid 文件名"""
        key = request.effective_key or request.build_key(f"{uuid4().hex}{request.extension}")
        headers = {"Content-Type": request.guess_mime_type()}
        try:
            if request.file_path is not None:
                self.bucket.put_object_from_file(key, str(request.file_path), headers=headers)
            elif request.content is not None:
                self.bucket.put_object(key, request.content, headers=headers)
            else:
                self.bucket.put_object(key, request.stream, headers=headers)
        except (OssError, OSError) as e:
            raise FileUploadError(f"Aliyun OSS upload failed for [{key}]: {e}") from e

        logger.debug(f"Aliyun OSS uploaded {key} to bucket {self.config.bucket_name}")
        return self._build_url(key)

    def delete(self, key: str) -> bool:
        """删除文件, OSS 删除不存在的对象也会成功, 因此先检查是否存在"""
        object_key = self._extract_key(key)
        try:
            if not self.bucket.object_exists(object_key):
                return False
            self.bucket.delete_object(object_key)
        except (OssError, OSError) as e:
            raise FileDeleteError(f"Aliyun OSS delete failed for [{object_key}]: {e}") from e
        return True

    def get_download_url(self, key: str) -> str:
        object_key = self._extract_key(key)
        if self.is_private:
            return self.bucket.sign_url(  # type: ignore[no-any-return]
                "GET", object_key, PRIVATE_URL_EXPIRES, slash_safe=True
            )
        return self._build_url(object_key)

    def create_upload_token(
        self,
        metadata: dict[str, Any] | None,
        expires: int,
        file_key: str | None = None,
    ) -> str:
        """生成 PostObject 直传凭证

        Returns:
            JSON 字符串, 包含 accessid / host / policy / signature / key / expire 以及 x-oss-meta-* 字段
        """
        expire_at = datetime.now(timezone.utc) + timedelta(seconds=expires)
        conditions: list[Any] = [
            ["content-length-range", 0, MAX_POST_CONTENT_LENGTH],
            {"bucket": self.config.bucket_name},
        ]
        if file_key:
            conditions.append(["eq", "$key", file_key])

        meta_fields = {f"x-oss-meta-{name}": str(value) for name, value in (metadata or {}).items()}
        for field_name, value in meta_fields.items():
            conditions.append({field_name: value})

        policy = {
            "expiration": expire_at.strftime("%Y-%m-%dT%H:%M:%S.000Z"),
            "conditions": conditions,
        }
        encoded_policy = base64.b64encode(json.dumps(policy).encode("utf-8")).decode("utf-8")
        signature = base64.b64encode(
            hmac.new(self.config.secret_key.encode("utf-8"), encoded_policy.encode("utf-8"), sha1).digest()
        ).decode("utf-8")

        token = {
            "accessid": self.config.access_key,
            "host": self.config.url_prefix,
            "policy": encoded_policy,
            "signature": signature,
            "expire": int(expire_at.timestamp()),
            "key": file_key,
            **meta_fields,
        }
        return json.dumps(token)
