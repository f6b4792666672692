# backend/app/api/routers/locations.py
from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional

from app.api.deps import get_gateway, get_intake
from app.config import get_settings
from app.errors import NotFoundError
from app.schemas.location import CATEGORIES, RATING_MAX, RATING_MIN, LocationEntryOut
from app.services.images.intake import ImageIntake, is_empty_upload
from app.services.locations.gateway import LocationGateway

router = APIRouter()


@router.get("")
@router.get("/")
def list_locations(gateway: LocationGateway = Depends(get_gateway)):
    rows = gateway.list_all()
    return {
        "success": True,
        "count": len(rows),
        "data": [LocationEntryOut.from_row(r).to_json() for r in rows],
    }


# fixed paths come before /{location_id}
@router.get("/meta")
def location_meta():
    return {
        "success": True,
        "data": {
            "categories": list(CATEGORIES),
            "ratingRange": {"min": RATING_MIN, "max": RATING_MAX},
            "maxImageBytes": get_settings().max_image_bytes,
        },
    }


@router.get("/stats/summary")
def summary_stats(gateway: LocationGateway = Depends(get_gateway)):
    return {"success": True, "data": gateway.summary_stats().to_json()}


@router.get("/{location_id}")
def get_location(location_id: str, gateway: LocationGateway = Depends(get_gateway)):
    row = gateway.get_by_id(location_id)
    if row is None:
        raise NotFoundError()
    return {"success": True, "data": LocationEntryOut.from_row(row).to_json()}


@router.post("", status_code=201)
@router.post("/", status_code=201)
def create_location(
    location: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    dangerRating: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    locationRating: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    intake: ImageIntake = Depends(get_intake),
    gateway: LocationGateway = Depends(get_gateway),
):
    # 1) image first: a rejected upload stops here with nothing written
    filename = None
    if not is_empty_upload(image):
        filename = intake.accept(image.file, image.content_type, image.size, image.filename)

    # 2) validate + insert; the gateway removes the image again on failure
    fields = {
        "location": location,
        "type": type,
        "dangerRating": dangerRating,
        "description": description,
        "locationRating": locationRating,
        "latitude": latitude,
        "longitude": longitude,
    }
    row = gateway.create(fields, filename)
    return {
        "success": True,
        "message": "Location created successfully",
        "data": LocationEntryOut.from_row(row).to_json(),
    }


@router.delete("/{location_id}")
def delete_location(location_id: str, gateway: LocationGateway = Depends(get_gateway)):
    if not gateway.delete_by_id(location_id):
        raise NotFoundError()
    return {"success": True, "message": "Location deleted successfully"}
