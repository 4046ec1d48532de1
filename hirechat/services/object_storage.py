"""Object storage for uploaded resume files."""

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from jose import JWTError, jwt

from ..exceptions import StoreError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class SignedUrl:
    """A time-limited download URL and the moment it stops working."""
    url: str
    expires_at: datetime


class LocalObjectStorage:
    """
    Filesystem-backed object storage namespaced by candidate ID.

    Download URLs are signed with a short-lived JWT and re-derived on
    every read rather than stored.
    """

    def __init__(self, root_dir: str, public_base_url: str, secret_key: str, algorithm: str = "HS256"):
        self.root = Path(root_dir).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        self._secret_key = secret_key
        self._algorithm = algorithm

    @staticmethod
    def build_path(candidate_id: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
        """Build `{candidate_id}/{timestamp_ms}_{safe_filename}`."""
        timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
        safe_name = _UNSAFE_FILENAME_CHARS.sub("_", Path(filename or "resume.pdf").name).strip("._") or "resume.pdf"
        return f"{candidate_id}/{timestamp_ms}_{safe_name}"

    def _resolve(self, path: str) -> Path:
        full_path = (self.root / path).resolve()
        if self.root not in full_path.parents:
            raise StoreError("Invalid storage path")
        return full_path

    async def put(self, candidate_id: str, filename: str, data: bytes, content_type: str = "application/pdf") -> str:
        """
        Store a file under the candidate's namespace.

        Returns:
            Storage path of the new object

        Raises:
            StoreError: If the write fails
        """
        path = self.build_path(candidate_id, filename)
        full_path = self._resolve(path)

        def _write() -> None:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(full_path, "xb") as f:
                f.write(data)

        try:
            await asyncio.get_running_loop().run_in_executor(None, _write)
        except OSError as e:
            logger.error(f"Failed to store file {path}: {e}")
            raise StoreError("Failed to upload resume file")

        logger.info(f"Stored {len(data)} bytes ({content_type}) at {path}")
        return path

    async def read(self, path: str) -> bytes:
        """Read a stored file."""
        full_path = self._resolve(path)
        try:
            return await asyncio.get_running_loop().run_in_executor(None, full_path.read_bytes)
        except FileNotFoundError:
            raise StoreError("File not found", status_code=404)
        except OSError as e:
            logger.error(f"Failed to read file {path}: {e}")
            raise StoreError()

    async def delete(self, path: str) -> bool:
        """
        Delete a stored file. Deleting a missing file is not an error.

        Returns:
            True if a file was removed, False if none existed
        """
        full_path = self._resolve(path)

        def _remove() -> bool:
            try:
                full_path.unlink()
                return True
            except FileNotFoundError:
                return False

        try:
            removed = await asyncio.get_running_loop().run_in_executor(None, _remove)
        except OSError as e:
            logger.error(f"Failed to delete file {path}: {e}")
            raise StoreError("Failed to delete resume file")

        if removed:
            logger.info(f"Deleted stored file {path}")
        return removed

    def signed_url(self, path: str, expires_in: int) -> SignedUrl:
        """
        Create a signed download URL for a stored file.

        Args:
            path: Storage path
            expires_in: Lifetime in seconds

        Returns:
            SignedUrl with its explicit expiry
        """
        expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
        token = jwt.encode(
            {"sub": path, "typ": "file", "exp": expires_at},
            self._secret_key,
            algorithm=self._algorithm,
        )
        url = f"{self.public_base_url}/files/{quote(path)}?token={token}"
        return SignedUrl(url=url, expires_at=expires_at)

    def verify_token(self, token: str, path: str) -> bool:
        """Check that a download token is valid, unexpired and issued for this path."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            return False
        return payload.get("typ") == "file" and payload.get("sub") == path
