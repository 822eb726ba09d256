from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

from sitegrades.core.exceptions.exceptions import (
    InvalidDomainFormatError,
    SiteNotFoundError,
    StoreError,
)
from sitegrades.middleware.security import Security
from sitegrades.schemas.site import ErrorOut, SiteOut
from sitegrades.services.notifier import Notifier, get_notifier
from sitegrades.services.site_store import SiteStore, get_site_store
from sitegrades.utils.log import app_logger

router = APIRouter(prefix="/servers", tags=["Servers"])


@router.get(
    "",
    response_model=List[SiteOut],
    summary="List the most recently updated sites",
    responses={500: {"model": ErrorOut}},
)
def list_latest_sites(store: SiteStore = Depends(get_site_store)) -> List[SiteOut]:
    try:
        return store.retrieve_latest_sites()
    except StoreError as e:
        app_logger.error("api.servers.store_error", operation=e.operation, error=e.detail)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load sites. Please try again later.",
        )


@router.get(
    "/{domain}",
    response_model=SiteOut,
    summary="Get a site and its servers",
    responses={
        400: {"model": ErrorOut, "description": "Malformed domain"},
        404: {"model": ErrorOut, "description": "Unknown domain, a notification is sent"},
        500: {"model": ErrorOut},
    },
)
def get_site(
    domain: str,
    store: SiteStore = Depends(get_site_store),
    notifier: Notifier = Depends(get_notifier),
):
    """Return the stored grades of `domain` with its servers.

    Unknown domains answer 404 and trigger `Notifier.notify_unknown_domain`
    once, after the response is sent.
    """
    try:
        clean_domain = Security().normalize(domain)
    except InvalidDomainFormatError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"invalid domain: {domain}")

    try:
        site = store.fetch_site(clean_domain)
        servers = store.fetch_servers(clean_domain)
    except SiteNotFoundError:
        app_logger.info("api.servers.unknown_domain", domain=clean_domain)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"site not found: {clean_domain}"},
            background=BackgroundTask(notifier.notify_unknown_domain, clean_domain),
        )
    except StoreError as e:
        app_logger.error("api.servers.store_error", domain=clean_domain, operation=e.operation, error=e.detail)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load site. Please try again later.",
        )

    return SiteOut.from_row(site, servers)
