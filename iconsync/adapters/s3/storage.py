"""
S3 asset store.

Each logical container maps to one bucket. boto3 is synchronous, so every call
runs in the default executor.
"""
import asyncio
from typing import Any, List, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ..interfaces import AssetNotFoundError, AssetStore, StoreAccessError

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3AssetStore(AssetStore):
    """
    Asset store for S3 mode.

    The boto3 client is created once per run by the caller and shared between
    the schema and icon stores.
    """

    def __init__(self, client: Any, bucket: str, container: str = None):
        """
        Initialize the S3 store.

        Args:
            client: boto3 S3 client
            bucket: Bucket holding the container's objects
            container: Logical container name (defaults to the bucket name)
        """
        self._client = client
        self._bucket = bucket
        self._container = container or bucket

    @property
    def container(self) -> str:
        return self._container

    @property
    def bucket(self) -> str:
        return self._bucket

    async def _call(self, func, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

    async def exists(self, key: str) -> bool:
        try:
            await self._call(self._client.head_object, Bucket=self._bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return False
            raise StoreAccessError(key, f"head_object failed on bucket {self._bucket}", e)
        except BotoCoreError as e:
            raise StoreAccessError(key, f"S3 transport error: {e}", e)

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await self._call(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            raise StoreAccessError(key, f"put_object failed on bucket {self._bucket}", e)
        except BotoCoreError as e:
            raise StoreAccessError(key, f"S3 transport error: {e}", e)

    async def get(self, key: str) -> bytes:
        try:
            response = await self._call(
                self._client.get_object, Bucket=self._bucket, Key=key
            )
            return await self._call(response["Body"].read)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise AssetNotFoundError(key, self._container)
            raise StoreAccessError(key, f"get_object failed on bucket {self._bucket}", e)
        except BotoCoreError as e:
            raise StoreAccessError(key, f"S3 transport error: {e}", e)

    async def list_keys(self) -> List[str]:
        keys: List[str] = []
        kwargs = {"Bucket": self._bucket}
        try:
            while True:
                response = await self._call(self._client.list_objects_v2, **kwargs)
                keys.extend(obj["Key"] for obj in response.get("Contents", []))
                if not response.get("IsTruncated"):
                    break
                kwargs["ContinuationToken"] = response["NextContinuationToken"]
        except (ClientError, BotoCoreError) as e:
            raise StoreAccessError(self._bucket, "list_objects_v2 failed", e)
        return sorted(keys)

    async def health_check(self) -> Tuple[bool, str]:
        try:
            await self._call(self._client.head_bucket, Bucket=self._bucket)
            return True, f"S3 bucket {self._bucket} accessible"
        except ClientError as e:
            return False, f"S3 bucket {self._bucket} not accessible: {_error_code(e)}"
        except BotoCoreError as e:
            return False, f"S3 health check failed: {str(e)}"


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))
