"""Artifact downloads that share the client's rate limiter."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import requests

from errors import ArtifactUnavailableError, DownloadError
from models import Result
from rate_limiter import RateLimiter

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class ArtifactDownloader:
    """Saves the PDF linked from a ``Result`` to a local directory."""

    def __init__(
        self,
        session: requests.Session,
        limiter: RateLimiter,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.session = session
        self.limiter = limiter
        self.timeout_seconds = timeout_seconds

    def download(
        self,
        result: Result,
        dirpath: str | os.PathLike[str] = ".",
        filename: str | None = None,
    ) -> Path:
        """Download ``result``'s PDF and return the path it was written to.

        An existing file at the destination is replaced only once the new
        body has been fully written.

        Args:
            result:   Record exposing a ``pdf_url``.
            dirpath:  Destination directory; created if missing.
            filename: Optional override for ``result.default_filename("pdf")``.

        Raises:
            ArtifactUnavailableError: if the result links no PDF.
            DownloadError: on a non-200 status, a transport error, or a
                filesystem error while writing.
        """
        url = result.pdf_url
        if not url:
            raise ArtifactUnavailableError(f"PDF URL not available for {result.entry_id}")

        directory = Path(dirpath)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DownloadError(f"Cannot create download directory {directory}: {exc}", url) from exc

        target = directory / (filename or result.default_filename("pdf"))

        with self.limiter.slot():
            LOGGER.info("Downloading PDF: %s", url)
            try:
                response = self.session.get(url, timeout=self.timeout_seconds, stream=True)
            except requests.RequestException as exc:
                raise DownloadError(f"Failed to download PDF: {exc}", url) from exc

            try:
                if response.status_code != 200:
                    raise DownloadError(
                        f"Failed to download PDF: HTTP {response.status_code}",
                        url,
                        status=response.status_code,
                    )
                _write_atomically(response, target, url)
            finally:
                response.close()

        LOGGER.info("PDF saved to: %s", target)
        return target


def _write_atomically(response: requests.Response, target: Path, url: str) -> None:
    """Stream the body to a temp file next to ``target``, then move it into place."""
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".part")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    fh.write(chunk)
        os.replace(tmp_path, target)
    except (OSError, requests.RequestException) as exc:
        tmp_path.unlink(missing_ok=True)
        raise DownloadError(f"Failed to save PDF to {target}: {exc}", url) from exc
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
