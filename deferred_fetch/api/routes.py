from fastapi import APIRouter, Depends, HTTPException, status
from deferred_fetch.core.config import Settings, gather_debug_info, get_settings
from deferred_fetch.fetch.base import OutputKind
from deferred_fetch.schemas import FetchRequest, FetchResult
from deferred_fetch.services.fetcher import Fetcher

router = APIRouter()

def get_fetcher(settings: Settings = Depends(get_settings)) -> Fetcher:
    return Fetcher(settings)

@router.post("/fetch/{kind}", response_model=FetchResult)
async def fetch(kind: OutputKind, request: FetchRequest, fetcher: Fetcher = Depends(get_fetcher)):
    """
    Fetch a URL and save it as html, json, text or markdown.

    The response only names the saved file and its content type. Fetch
    failures are reported in the body with isError=true, not as HTTP errors.
    """
    return await fetcher.fetch(request, kind)

@router.get("/debug/config")
async def debug_config(settings: Settings = Depends(get_settings)):
    """Download directory diagnostics, only available with DEBUG on"""
    if not settings.DEBUG:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return gather_debug_info(settings)

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Deferred Fetch"}
