from fastapi import APIRouter, Depends, HTTPException

from ..deps import CredentialUpdate, ThemeUpdate, get_config
from ...services.config_provider import ConfigProvider

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/credential")
async def get_credential(config: ConfigProvider = Depends(get_config)):
    """Report whether an API key is configured (the key itself is never returned)"""
    return {"configured": config.has_credential()}


@router.put("/credential")
async def set_credential(update: CredentialUpdate, config: ConfigProvider = Depends(get_config)):
    try:
        config.set_credential(update.api_key)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"configured": True}


@router.delete("/credential")
async def clear_credential(config: ConfigProvider = Depends(get_config)):
    config.clear_credential()
    return {"configured": False}


@router.get("/theme")
async def get_theme(config: ConfigProvider = Depends(get_config)):
    return {"theme": config.get_theme()}


@router.put("/theme")
async def set_theme(update: ThemeUpdate, config: ConfigProvider = Depends(get_config)):
    try:
        config.set_theme(update.theme)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"theme": update.theme}
