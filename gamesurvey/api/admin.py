"""
Administrative endpoints: sheet setup, demo data and bulk reset.
"""

from fastapi import APIRouter, Query

from gamesurvey.api import store
from gamesurvey.utils.fake_data import seed_fake_data
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/setup")
def setup_sheets():
    """Create every sheet with its header row."""
    sheets = store.get_repository().setup_sheets()
    return {"success": True, "sheets": sheets, "message": "Setup completed successfully"}


@router.post("/seed")
def seed(count: int = Query(default=15, ge=1, le=500)):
    """Fill the workbook with fake players, surveys and sessions."""
    created = seed_fake_data(store.get_repository(), count)
    logger.info(f"Seeded {created}/{count} fake players")
    return {"success": True, "created": created, "requested": count}


@router.post("/clear")
def clear():
    """Delete every data row. Headers are kept."""
    cleared = store.get_repository().clear_all()
    return {"success": True, "cleared": cleared, "message": f"Cleared {len(cleared)} sheets"}
