from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from energy_portal.database import get_db
from energy_portal.models import Building, City, Recipient
from energy_portal.schemas import (
    BuildingCreate, BuildingUpdate, BuildingPause, BuildingResponse,
    RecipientCreate, RecipientUpdate, RecipientResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_building(db: Session, building_id: int) -> Building:
    building = db.query(Building).filter(Building.id == building_id).first()
    if not building:
        raise HTTPException(status_code=404, detail="Building not found")
    return building


@router.get("", response_model=List[BuildingResponse])
async def list_buildings(
    city_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List buildings, optionally for one city."""
    query = db.query(Building)
    if city_id is not None:
        query = query.filter(Building.city_id == city_id)
    return query.order_by(Building.name).offset(skip).limit(limit).all()


@router.post("", response_model=BuildingResponse)
async def create_building(building: BuildingCreate, db: Session = Depends(get_db)):
    if not db.query(City).filter(City.id == building.city_id).first():
        raise HTTPException(status_code=404, detail="City not found")

    db_building = Building(**building.model_dump())
    db.add(db_building)
    db.commit()
    db.refresh(db_building)
    return db_building


@router.get("/{building_id}", response_model=BuildingResponse)
async def get_building(building_id: int, db: Session = Depends(get_db)):
    return _get_building(db, building_id)


@router.put("/{building_id}", response_model=BuildingResponse)
async def update_building(
    building_id: int,
    building_update: BuildingUpdate,
    db: Session = Depends(get_db)
):
    building = _get_building(db, building_id)

    update_data = building_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(building, field, value)

    db.commit()
    db.refresh(building)
    return building


@router.delete("/{building_id}")
async def delete_building(building_id: int, db: Session = Depends(get_db)):
    """Delete a building and its recipients. Buildings with message or bill history are kept."""
    building = _get_building(db, building_id)

    try:
        for recipient in list(building.recipients):
            db.delete(recipient)
        db.delete(building)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Building {building_id} still has history, not deleted")
        raise HTTPException(status_code=409, detail="Building has history; deactivate it instead")
    return {"message": "Building deleted"}


@router.post("/{building_id}/pause")
async def pause_building(
    building_id: int,
    pause: Optional[BuildingPause] = None,
    db: Session = Depends(get_db)
):
    """Pause or resume alert delivery for a building."""
    building = _get_building(db, building_id)
    building.is_paused = pause.is_paused if pause else True
    db.commit()
    logger.info(f"Building {building_id} {'paused' if building.is_paused else 'activated'}")
    return {
        "id": building.id,
        "is_paused": building.is_paused,
        "message": "Building paused" if building.is_paused else "Building activated",
    }


@router.get("/{building_id}/recipients", response_model=List[RecipientResponse])
async def list_recipients(building_id: int, db: Session = Depends(get_db)):
    _get_building(db, building_id)
    return db.query(Recipient).filter(Recipient.building_id == building_id).order_by(Recipient.id).all()


@router.post("/{building_id}/recipients", response_model=RecipientResponse)
async def create_recipient(building_id: int, recipient: RecipientCreate, db: Session = Depends(get_db)):
    _get_building(db, building_id)
    db_recipient = Recipient(building_id=building_id, **recipient.model_dump())
    db.add(db_recipient)
    db.commit()
    db.refresh(db_recipient)
    return db_recipient


@router.put("/recipients/{recipient_id}", response_model=RecipientResponse)
async def update_recipient(recipient_id: int, recipient_update: RecipientUpdate, db: Session = Depends(get_db)):
    recipient = db.query(Recipient).filter(Recipient.id == recipient_id).first()
    if not recipient:
        raise HTTPException(status_code=404, detail="Recipient not found")

    update_data = recipient_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(recipient, field, value)

    db.commit()
    db.refresh(recipient)
    return recipient


@router.delete("/recipients/{recipient_id}")
async def delete_recipient(recipient_id: int, db: Session = Depends(get_db)):
    recipient = db.query(Recipient).filter(Recipient.id == recipient_id).first()
    if not recipient:
        raise HTTPException(status_code=404, detail="Recipient not found")
    db.delete(recipient)
    db.commit()
    return {"message": "Recipient deleted"}
