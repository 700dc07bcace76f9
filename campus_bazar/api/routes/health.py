from fastapi import APIRouter, Depends

from campus_bazar.api.dependencies import get_preview_provider, get_session_registry
from campus_bazar.infrastructure.previews.object_url_registry import ObjectUrlRegistry
from campus_bazar.infrastructure.sessions.wizard_session_registry import WizardSessionRegistry

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    registry: WizardSessionRegistry = Depends(get_session_registry),
    previews: ObjectUrlRegistry = Depends(get_preview_provider),
) -> dict:  # type: ignore[type-arg]
    """Liveness plus a count of open wizards and unreleased previews."""
    return {
        "status": "healthy",
        "open_wizards": len(registry),
        "live_previews": previews.live_count,
    }
