from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from energy_portal.config import settings
from energy_portal.database import get_db
from energy_portal.exceptions import TemplateError
from energy_portal.models import City, MessageKind
from energy_portal.providers import get_weather_provider
from energy_portal.schemas import (
    CityCreate, CityUpdate, CityResponse, ForecastResponse, MessageTemplateResponse, MessageTemplateUpdate,
)
from energy_portal.services.alert_service import grid_for
from energy_portal.services.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=List[CityResponse])
async def list_cities(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """List monitored cities."""
    return db.query(City).order_by(City.name).offset(skip).limit(limit).all()


@router.post("", response_model=CityResponse)
async def create_city(city: CityCreate, db: Session = Depends(get_db)):
    """Add a city to monitor."""
    db_city = City(**city.model_dump())
    db.add(db_city)
    db.commit()
    db.refresh(db_city)
    return db_city


@router.get("/{city_id}", response_model=CityResponse)
async def get_city(city_id: int, db: Session = Depends(get_db)):
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")
    return city


@router.put("/{city_id}", response_model=CityResponse)
async def update_city(
    city_id: int,
    city_update: CityUpdate,
    db: Session = Depends(get_db)
):
    """Update a city's grid point or alert thresholds."""
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")

    update_data = city_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(city, field, value)

    db.commit()
    db.refresh(city)
    return city


@router.get("/{city_id}/forecast", response_model=ForecastResponse)
def get_forecast(city_id: int, db: Session = Depends(get_db)):
    """Hourly forecast for the city's grid point."""
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")

    provider = get_weather_provider(settings.weather_provider)
    return ForecastResponse(
        city_id=city.id,
        office=city.nws_office,
        forecast=provider.get_hourly_forecast(grid_for(city)),
    )


@router.put("/{city_id}/templates/{kind}", response_model=MessageTemplateResponse)
async def save_template(
    city_id: int,
    kind: MessageKind,
    template: MessageTemplateUpdate,
    db: Session = Depends(get_db)
):
    """Override the message template for one kind in this city."""
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")

    try:
        return TemplateService(db).save_template(city_id, kind, template.content, template.subject)
    except TemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{city_id}/templates/{kind}")
async def reset_template(city_id: int, kind: MessageKind, db: Session = Depends(get_db)):
    """Deactivate the city's override so the built-in template is used again."""
    service = TemplateService(db)
    template = service.get_template(city_id, kind)
    if not template:
        raise HTTPException(status_code=404, detail="No active template override")
    service.deactivate_template(template.id)
    return {"message": f"{kind.value} template reset to default"}
