import logging
import tempfile
from pathlib import Path
from urllib.parse import unquote, urlparse

from shelf.domain.catalog.port.asset_storage import AssetStoragePort

logger = logging.getLogger(__name__)


class LocalAssetStorage(AssetStoragePort):
    """Local filesystem implementation of AssetStoragePort.

    Files are served back by the static file mount at ``url_prefix``; the
    returned reference is absolute when ``public_url`` is set.
    """

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads", public_url: str = "") -> None:
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.public_url = public_url.rstrip("/")
        # Path part of public_url, e.g. "/shelf" for "https://host.example/shelf"
        self._public_path = urlparse(self.public_url).path.rstrip("/")

    def _safe_path(self, filename: str) -> Path:
        """Resolve filename within upload_dir, rejecting path traversal attempts."""
        safe_name = Path(filename).name
        if not safe_name or safe_name != filename or safe_name in (".", ".."):
            raise ValueError(f"Invalid filename: {filename}")
        target = self.upload_dir / safe_name
        if not target.resolve().is_relative_to(self.upload_dir.resolve()):
            raise ValueError(f"Invalid filename: {filename}")
        return target

    def ref_for(self, filename: str) -> str:
        return f"{self.public_url}{self.url_prefix}/{filename}"

    def filename_for(self, ref: str) -> str | None:
        """Map a reference produced by ref_for back to its filename, None if foreign."""
        path = unquote(urlparse(ref).path)
        # Relative refs written before public_url was set also map back
        for base in (self._public_path, ""):
            prefix = f"{base}{self.url_prefix}/"
            if path.startswith(prefix):
                return path[len(prefix) :]
        return None

    async def save(self, name: str, content: bytes, content_type: str) -> str:
        target = self._safe_path(name)

        # Atomic write: write to temp file then rename
        fd, tmp_path = tempfile.mkstemp(dir=self.upload_dir, suffix=".part")
        try:
            with open(fd, "wb") as f:
                f.write(content)
            Path(tmp_path).rename(target)
        except Exception:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        return self.ref_for(name)

    async def delete(self, ref: str) -> None:
        filename = self.filename_for(ref)
        if filename is None:
            logger.debug("Not a local upload, nothing to delete: %.80s", ref)
            return
        self._safe_path(filename).unlink(missing_ok=True)
