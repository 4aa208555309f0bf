import traceback
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

import config
from sitegen.db import WebsiteStore
from sitegen.errors import NotFound, UpstreamError
from sitegen.llm import CompletionClient, generate_site_payload
from sitegen.logger import get_logger
from sitegen.models import EditRequest, ElementEdit, GenerateRequest, GeneratedSite
from sitegen.utils import (
    EditApplicator,
    build_preview,
    parse_style_text,
    resolve_page_key,
)

logger = get_logger(__name__)


router = APIRouter()


# --- dependencies, wired up on app.state at startup ---


def get_store(request: Request) -> WebsiteStore:
    return request.app.state.store


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def get_applicator(request: Request) -> EditApplicator:
    return request.app.state.edit_applicator


def _require_site(store: WebsiteStore, site_id: str) -> GeneratedSite:
    site = store.get(site_id)
    if not site:
        raise NotFound("Website not found")
    return site


def _string_components(components) -> dict | None:
    """Keep only shared components whose markup is text"""
    if not isinstance(components, dict):
        return None
    kept = {name: markup for name, markup in components.items() if isinstance(markup, str)}
    dropped = sorted(set(components) - set(kept))
    if dropped:
        logger.warning(f"Dropping components without string markup: {dropped}")
    return kept or None


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.post("/api/website/generate")
def generate_website(
    request: GenerateRequest,
    store: WebsiteStore = Depends(get_store),
    client: CompletionClient = Depends(get_completion_client),
):
    """Generate a website from a natural-language description"""
    description = (request.description or "").strip()
    if not description:
        raise HTTPException(status_code=400, detail="Description is required")

    logger.info(f"Generating website for: {description[:200]}")
    try:
        payload = generate_site_payload(
            description, client, pages=request.pages, style=request.style
        )
        site = GeneratedSite(
            id=str(uuid.uuid4()),
            pages=payload.get("pages"),
            components=_string_components(payload.get("components")),
            styles=payload.get("styles") or "",
        )
    except Exception as e:
        logger.error(f"Generation error: {str(e)}", exc_info=True)
        body = {"error": "Failed to generate website", "details": str(e)}
        if isinstance(e, UpstreamError):
            body["status"] = e.status
            body["type"] = e.type
        if config.ENVIRONMENT != "production":
            body["stack"] = traceback.format_exc()
        return JSONResponse(status_code=500, content=body)

    store.save(site)
    logger.info(f"Website {site.id} created with pages: {list(site.pages.keys())}")

    return {"success": True, "website": site.summary()}


@router.get("/api/website")
def list_websites(store: WebsiteStore = Depends(get_store)):
    """List every generated website, newest first"""
    return {
        "success": True,
        "websites": [site.summary() for site in store.list_sites()],
    }


@router.get("/api/website/{site_id}")
def get_website(site_id: str, store: WebsiteStore = Depends(get_store)):
    """Get a website together with its stored element edits"""
    site = _require_site(store, site_id)
    return {
        "success": True,
        "website": site.to_json(),
        "edits": [edit.to_json() for edit in store.get_edits(site_id)],
    }


@router.get("/api/website/{site_id}/page/{page_name}")
def get_page(site_id: str, page_name: str, store: WebsiteStore = Depends(get_store)):
    """Get the raw markup of a single page"""
    site = _require_site(store, site_id)
    content = site.pages.get(page_name)
    if not content:
        raise NotFound("Page not found")
    return {"success": True, "content": content, "styles": site.styles}


@router.get("/api/website/{site_id}/preview/{page_name}")
def preview_page(
    site_id: str,
    page_name: str,
    store: WebsiteStore = Depends(get_store),
    applicator: EditApplicator = Depends(get_applicator),
):
    """Get a page with edits applied and editable elements marked"""
    site = _require_site(store, site_id)
    page_key = resolve_page_key(page_name, site.pages.keys())
    if page_key is None:
        raise NotFound("Page not found")
    preview = build_preview(site, page_key, store.get_edits(site_id), applicator)
    return {"success": True, **preview}


@router.api_route("/api/website/{site_id}/edit", methods=["PUT", "POST"])
def edit_element(
    site_id: str, request: EditRequest, store: WebsiteStore = Depends(get_store)
):
    """Save an edit for one element, replacing any earlier edit of it"""
    _require_site(store, site_id)
    # the edit form sends "property: value" lines, API clients send a mapping
    styles = dict(request.styles or {})
    if request.style_text:
        styles.update(parse_style_text(request.style_text))
    store.save_edit(
        ElementEdit(
            site_id=site_id,
            element_id=request.element_id,
            content=request.content,
            styles=styles or None,
        )
    )
    logger.info(f"Saved edit for element '{request.element_id}' on website {site_id}")
    return {"success": True}
