"""Spreadsheet diagnostics. Only mounted when debug is on."""

from fastapi import APIRouter, Depends

from analyst_chat.services.context_loader import ContextLoader, get_context_loader

router = APIRouter()


@router.get("/files")
async def context_files(loader: ContextLoader = Depends(get_context_loader)):
    return {
        "dataDir": str(loader.data_dir),
        "dataDirExists": loader.data_dir.is_dir(),
        "results": loader.inspect(),
    }
