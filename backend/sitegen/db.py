# Simple in-memory website store
import threading
from typing import Dict, List, Optional

from sitegen.models import ElementEdit, GeneratedSite


class WebsiteStore:
    """Volatile storage for generated sites and their per-element edits.

    One instance lives for the lifetime of the process and is shared by every
    request handler. Handlers run in a threadpool, so every operation takes the
    same lock; that keeps the read-modify-write in save_edit atomic.
    """

    def __init__(self):
        self._websites: Dict[str, GeneratedSite] = {}
        self._edits: Dict[str, List[ElementEdit]] = {}
        self._lock = threading.Lock()

    def save(self, site: GeneratedSite) -> None:
        """Insert or overwrite a site by id"""
        with self._lock:
            self._websites[site.id] = site

    def get(self, site_id: str) -> Optional[GeneratedSite]:
        with self._lock:
            return self._websites.get(site_id)

    def save_edit(self, edit: ElementEdit) -> None:
        """Replace the existing edit for the same element in place, or append"""
        with self._lock:
            edits = self._edits.setdefault(edit.site_id, [])
            for index, existing in enumerate(edits):
                if existing.element_id == edit.element_id:
                    edits[index] = edit
                    return
            edits.append(edit)

    def get_edits(self, site_id: str) -> List[ElementEdit]:
        with self._lock:
            return list(self._edits.get(site_id, []))

    def list_sites(self) -> List[GeneratedSite]:
        """All stored sites, newest first"""
        with self._lock:
            sites = list(self._websites.values())
        return sorted(sites, key=lambda site: site.created_at, reverse=True)

    def clear(self) -> None:
        """Drop every site and edit (useful for testing)"""
        with self._lock:
            self._websites.clear()
            self._edits.clear()
