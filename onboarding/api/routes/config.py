"""Config Routes — read-only access to gate, documentation, and questionnaire configs.

Invariants:
    - Served through ConfigLoader, so repeated reads within the TTL hit the cache
    - Missing config → 404; unreadable JSON → 400
"""

from fastapi import APIRouter, Depends

from onboarding.api.dependencies import get_config_loader
from onboarding.infrastructure.config_loader import ConfigLoader

router = APIRouter(prefix="/api/v1/config", tags=["config"])


@router.get("/gates")
async def get_gates(loader: ConfigLoader = Depends(get_config_loader)):
    return {"success": True, "data": await loader.load_gates()}


@router.get("/documentation")
async def get_documentation(loader: ConfigLoader = Depends(get_config_loader)):
    return {"success": True, "data": await loader.load_documentation()}


@router.get("/questionnaires/{questionnaire_id}")
async def get_questionnaire(
    questionnaire_id: str, loader: ConfigLoader = Depends(get_config_loader),
):
    return {"success": True, "data": await loader.load_questionnaire(questionnaire_id)}
