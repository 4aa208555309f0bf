"""
Unit tests for the in-memory website store.
"""

import threading
from datetime import datetime, timedelta, timezone

from sitegen.db import WebsiteStore
from sitegen.models import ElementEdit, GeneratedSite


def _site(site_id="site-1", **kwargs):
    return GeneratedSite(
        id=site_id, pages={"index": "<div></div>"}, styles="", **kwargs
    )


def _edit(element_id, content=None, site_id="site-1", styles=None):
    return ElementEdit(
        site_id=site_id, element_id=element_id, content=content, styles=styles
    )


class TestSites:
    def test_save_and_get(self, store):
        site = _site()
        store.save(site)
        assert store.get("site-1") is site

    def test_get_unknown_returns_none(self, store):
        assert store.get("missing") is None

    def test_save_overwrites_by_id(self, store):
        store.save(_site())
        replacement = GeneratedSite(id="site-1", pages={"index": "new"}, styles="")
        store.save(replacement)
        assert store.get("site-1").pages == {"index": "new"}

    def test_list_sites_newest_first(self, store):
        now = datetime.now(timezone.utc)
        store.save(_site("old", created_at=now - timedelta(minutes=5)))
        store.save(_site("new", created_at=now))
        assert [site.id for site in store.list_sites()] == ["new", "old"]

    def test_clear(self, store):
        store.save(_site())
        store.save_edit(_edit("a", "x"))
        store.clear()
        assert store.get("site-1") is None
        assert store.get_edits("site-1") == []


class TestEdits:
    def test_get_edits_without_edits_is_empty(self, store):
        store.save(_site())
        assert store.get_edits("site-1") == []
        assert store.get_edits("never-created") == []

    def test_save_edit_appends_new_elements(self, store):
        store.save_edit(_edit("a", "1"))
        store.save_edit(_edit("b", "2"))
        assert [e.element_id for e in store.get_edits("site-1")] == ["a", "b"]

    def test_save_edit_is_idempotent_per_element(self, store):
        store.save_edit(_edit("a", "first"))
        store.save_edit(_edit("a", "first"))
        edits = store.get_edits("site-1")
        assert len(edits) == 1
        assert edits[0].content == "first"

    def test_save_edit_replaces_in_place(self, store):
        store.save_edit(_edit("a", "1"))
        store.save_edit(_edit("b", "2"))
        store.save_edit(_edit("a", "latest", styles={"color": "red"}))
        edits = store.get_edits("site-1")
        assert [e.element_id for e in edits] == ["a", "b"]
        assert edits[0].content == "latest"
        assert edits[0].styles == {"color": "red"}

    def test_edits_are_scoped_per_site(self, store):
        store.save_edit(_edit("a", "1", site_id="one"))
        store.save_edit(_edit("a", "2", site_id="two"))
        assert store.get_edits("one")[0].content == "1"
        assert store.get_edits("two")[0].content == "2"

    def test_get_edits_returns_a_copy(self, store):
        store.save_edit(_edit("a", "1"))
        store.get_edits("site-1").clear()
        assert len(store.get_edits("site-1")) == 1

    def test_concurrent_edits_are_not_lost(self, store):
        def worker(prefix):
            for i in range(200):
                store.save_edit(_edit(f"{prefix}-{i}", "x"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(store.get_edits("site-1")) == 800
