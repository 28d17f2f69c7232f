"""Catalog router.

Read-only endpoints over the update list, plus download actions.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from gorilla_archive.models.catalog import CatalogView, DownloadAction, Update
from gorilla_archive.preferences.dependencies import get_preferences_service
from gorilla_archive.preferences.service import PreferencesService
from .dependencies import get_catalog_service
from .scripts import SCRIPT_MEDIA_TYPE
from .service import CatalogService

router = APIRouter()


@router.get("/updates", response_model=List[Update], summary="List updates")
def list_updates(
    q: Optional[str] = Query(None, description="Case-insensitive search over name, version and manifest ID"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> List[Update]:
    """List updates, newest year first, optionally filtered."""
    return catalog.search(q)


@router.get("/view", response_model=CatalogView, summary="Grouped catalog view")
def catalog_view(
    q: Optional[str] = Query(None, description="Search query"),
    expanded: Optional[List[int]] = Query(None, description="Years to show expanded"),
    expand: Optional[Literal["all", "none"]] = Query(None, description="Expand or collapse every year"),
    toggle: Optional[int] = Query(None, description="Year to expand or collapse"),
    catalog: CatalogService = Depends(get_catalog_service),
    preferences: PreferencesService = Depends(get_preferences_service),
) -> CatalogView:
    """Updates grouped by year.

    Without ``expanded`` or ``expand`` the recent years are expanded when the
    auto-expand preference is on. ``toggle`` flips one year on top of that
    state; the result comes back as ``expanded_years``.
    """
    auto_expand = preferences.get().auto_expand if expanded is None and expand is None else False
    return catalog.build_view(q, expanded=expanded, expand=expand, toggle=toggle, auto_expand=auto_expand)


@router.get("/updates/{update_id}", response_model=Update, summary="Get one update")
def get_update(
    update_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Update:
    return catalog.get_update(update_id)


@router.post("/updates/{update_id}/download", response_model=DownloadAction, summary="Request a download")
def request_download(
    update_id: str,
    request: Request,
    catalog: CatalogService = Depends(get_catalog_service),
) -> DownloadAction:
    """Resolve the download for an update.

    Steam-depot updates point at a generated script; link updates carry
    their external URL.
    """
    script_url = str(request.url_for("download_script", update_id=update_id))
    return catalog.download_action(update_id, script_url=script_url)


@router.get("/updates/{update_id}/script", response_class=PlainTextResponse, summary="Download the SteamCMD script")
def download_script(
    update_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> PlainTextResponse:
    filename, script = catalog.render_script(update_id)
    return PlainTextResponse(
        script,
        media_type=SCRIPT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
