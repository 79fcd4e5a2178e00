"""
Zipped notebook access.

A notebook archive holds one ``<doc>.content`` JSON file listing the page
order and one ``<doc>/<page-id>.rm`` record per page with ink on it.
"""

from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, Optional

from .errors import InputUnavailable

logger = logging.getLogger(__name__)


def page_ids_from_content(data: dict) -> list[str]:
    """
    Page ids in display order from parsed .content JSON.

    Handles both the simple ``pages`` list and the newer ``cPages`` format,
    where ``redir.value`` may override a page's position.
    """
    pages = data.get("pages")
    if isinstance(pages, list) and pages and isinstance(pages[0], str):
        return list(pages)

    ordered = []
    for i, page in enumerate(data.get("cPages", {}).get("pages", [])):
        page_id = page.get("id", "")
        if not page_id or "deleted" in page:
            continue
        redir = page.get("redir", {})
        position = redir.get("value", i) if isinstance(redir, dict) else i
        ordered.append((position, i, page_id))
    ordered.sort()
    return [page_id for _, _, page_id in ordered]


class NotebookArchive:
    """Read-only view of a zipped notebook."""

    def __init__(self, path: Path):
        self.path = Path(path)
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as e:
            raise InputUnavailable(f"Can't open notebook {self.path}: {e}") from e

        try:
            self.doc_id, self._page_ids = self._read_content()
        except InputUnavailable:
            self._zip.close()
            raise
        logger.debug("Opened %s: %d pages", self.path, len(self._page_ids))

    def _read_content(self) -> tuple[str, list[str]]:
        names = self._zip.namelist()
        content_files = [n for n in names if n.endswith(".content") and "/" not in n]
        if content_files:
            content_name = content_files[0]
            doc_id = content_name[:-len(".content")]
            try:
                data = json.loads(self._zip.read(content_name))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise InputUnavailable(f"Bad content file {content_name}: {e}") from e
            page_ids = page_ids_from_content(data)
            if page_ids:
                return doc_id, page_ids

        # No usable .content: fall back to whatever .rm records exist
        rm_files = sorted(n for n in names if n.endswith(".rm"))
        if not rm_files:
            raise InputUnavailable(f"No pages found in {self.path}")
        doc_id = rm_files[0].split("/")[0] if "/" in rm_files[0] else ""
        return doc_id, [Path(n).stem for n in rm_files]

    def page_ids(self) -> list[str]:
        return list(self._page_ids)

    def __len__(self) -> int:
        return len(self._page_ids)

    def _member(self, page_id: str) -> Optional[str]:
        name = f"{self.doc_id}/{page_id}.rm" if self.doc_id else f"{page_id}.rm"
        try:
            self._zip.getinfo(name)
        except KeyError:
            return None
        return name

    def has_ink(self, index: int) -> bool:
        return self._member(self._page_id(index)) is not None

    def _page_id(self, index: int) -> str:
        if not 0 <= index < len(self._page_ids):
            raise InputUnavailable(
                f"Page {index} out of range, notebook has {len(self._page_ids)}"
            )
        return self._page_ids[index]

    def read_page(self, index: int) -> Optional[bytes]:
        """Raw .rm record of a page, or None for a page without ink."""
        name = self._member(self._page_id(index))
        if name is None:
            return None
        try:
            return self._zip.read(name)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            raise InputUnavailable(f"Can't read page {index}: {e}") from e

    def open_page(self, index: int) -> BinaryIO:
        """Readable stream over a page record; empty for a page without ink."""
        data = self.read_page(index)
        return io.BytesIO(data or b"")

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> NotebookArchive:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
