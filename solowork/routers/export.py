"""Export router - JSON Lines download of everything a user owns."""
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from solowork.database import get_database
from solowork.routers.auth import get_current_user_id
from solowork.services.export_service import ExportService


router = APIRouter(prefix="/export", tags=["export"])


@router.get("")
async def export_data(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Stream an export of all clients, projects, tasks, rates, entries and invoices.

    One JSON document per line (application/x-ndjson).
    """
    service = ExportService(db)
    exported_at = datetime.utcnow()
    filename = f"solowork-export-{exported_at:%Y%m%d-%H%M%S}.jsonl"

    return StreamingResponse(
        service.export_lines(user_id, exported_at),
        media_type="application/x-ndjson",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
