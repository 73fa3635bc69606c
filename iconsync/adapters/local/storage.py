"""
Local filesystem asset store.

Each container is a directory under the store root. Object content types are
kept in a ".meta" sidecar directory next to the objects.
"""
import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import List, Tuple

from ..interfaces import AssetNotFoundError, AssetStore, StoreAccessError

META_DIR = ".meta"


class LocalAssetStore(AssetStore):
    """
    Asset store for LOCAL mode.

    Writes are atomic: data goes to a temp file in the container directory
    and is moved into place with os.replace, so readers never see a partial
    object.
    """

    def __init__(self, root: str, container: str):
        """
        Initialize the local store.

        Args:
            root: Store root directory
            container: Container (subdirectory) name
        """
        self._container = container
        self._root = (Path(root) / container).resolve()

    @property
    def container(self) -> str:
        return self._container

    @property
    def root(self) -> Path:
        return self._root

    def _resolve_path(self, key: str) -> Path:
        """
        Resolve an object key to a path inside the container.

        Raises:
            StoreAccessError: If the key is empty or escapes the container
        """
        if not key or key.startswith(META_DIR):
            raise StoreAccessError(key, "Invalid object key")

        resolved = (self._root / key).resolve()
        if resolved.parent != self._root:
            raise StoreAccessError(key, "Path traversal attempt detected")

        return resolved

    def _meta_path(self, key: str) -> Path:
        return self._root / META_DIR / f"{key}.json"

    async def exists(self, key: str) -> bool:
        path = self._resolve_path(key)

        def _exists():
            try:
                return path.is_file()
            except OSError as e:
                raise StoreAccessError(key, f"Existence check failed: {e}", e)

        return await asyncio.get_running_loop().run_in_executor(None, _exists)

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._resolve_path(key)
        meta_path = self._meta_path(key)

        def _write():
            try:
                meta_path.parent.mkdir(parents=True, exist_ok=True)
                _atomic_write(path, data)
                _atomic_write(
                    meta_path,
                    json.dumps({"content_type": content_type, "size": len(data)}).encode(),
                )
            except OSError as e:
                raise StoreAccessError(key, f"Write failed: {e}", e)

        await asyncio.get_running_loop().run_in_executor(None, _write)

    async def get(self, key: str) -> bytes:
        path = self._resolve_path(key)

        def _read():
            try:
                return path.read_bytes()
            except FileNotFoundError:
                raise AssetNotFoundError(key, self._container)
            except OSError as e:
                raise StoreAccessError(key, f"Read failed: {e}", e)

        return await asyncio.get_running_loop().run_in_executor(None, _read)

    async def get_content_type(self, key: str) -> str:
        """Content type recorded when the object was written."""
        self._resolve_path(key)
        meta_path = self._meta_path(key)

        def _read_meta():
            try:
                return json.loads(meta_path.read_text())["content_type"]
            except FileNotFoundError:
                raise AssetNotFoundError(key, self._container)
            except (OSError, ValueError, KeyError) as e:
                raise StoreAccessError(key, f"Metadata read failed: {e}", e)

        return await asyncio.get_running_loop().run_in_executor(None, _read_meta)

    async def list_keys(self) -> List[str]:
        def _list():
            if not self._root.exists():
                return []
            return sorted(
                p.name for p in self._root.iterdir()
                if p.is_file() and not p.name.startswith(".")
            )

        return await asyncio.get_running_loop().run_in_executor(None, _list)

    async def health_check(self) -> Tuple[bool, str]:
        """
        Check if the container directory is usable.

        Creates the directory when missing, then verifies it can be listed.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            list(self._root.iterdir())
            return True, f"Local store accessible at {self._root}"
        except PermissionError:
            return False, f"Permission denied for store root: {self._root}"
        except Exception as e:
            return False, f"Store health check failed: {str(e)}"


def _atomic_write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
