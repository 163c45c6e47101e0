"""MinIO implementation of the StorageClient interface."""

from minio import Minio

from media_verifier.exceptions import StorageDownloadError
from media_verifier.logging import setup_logging

from .interfaces import StorageClient

logger = setup_logging()


class MinioStorageClient(StorageClient):
    """Reads uploaded media and thumbnails from MinIO."""

    def __init__(self, client: Minio):
        self._client = client

    def download(self, bucket_name: str, object_name: str) -> bytes:
        try:
            response = self._client.get_object(bucket_name, object_name)
            try:
                data = response.data
            finally:
                response.close()
                response.release_conn()
            logger.info(
                "File downloaded from MinIO",
                extra={
                    "bucket_name": bucket_name,
                    "object_name": object_name,
                    "size": len(data),
                },
            )
            return data
        except Exception as e:
            logger.exception(
                "MinIO download failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageDownloadError(object_name, e) from e

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        if not self._client.bucket_exists(bucket_name):
            self._client.make_bucket(bucket_name)
            logger.info("Bucket created", extra={"bucket_name": bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": bucket_name})
