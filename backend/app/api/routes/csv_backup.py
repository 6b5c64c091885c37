"""CSV backup and restore endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.api.dependencies import get_ledger_service
from app.schemas import ImportResultSchema
from portfolio_ledger.service import LedgerService

router = APIRouter()


@router.get("/export")
async def export_csv(service: LedgerService = Depends(get_ledger_service)) -> Response:
    filename, text = service.export_csv()
    return Response(
        content=text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResultSchema)
async def import_csv(request: Request, service: LedgerService = Depends(get_ledger_service)) -> ImportResultSchema:
    """Replace the whole ledger with the uploaded CSV body.

    Empty or malformed files leave the ledger untouched; the response says why.
    """

    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CSV must be UTF-8") from exc
    return ImportResultSchema.model_validate(service.import_csv(text))
