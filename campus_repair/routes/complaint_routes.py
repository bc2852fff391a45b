from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from campus_repair.auth.credentials import Claims
from campus_repair.auth.dependencies import get_complaint_service, get_current_claims
from campus_repair.models.complaint import Complaint
from campus_repair.services.complaints import ComplaintService
from campus_repair.stores.photos import PhotoUpload

router = APIRouter(tags=['complaints'])


class UpdateComplaintRequest(BaseModel):
    status: str | None = None
    priority: str | None = None
    remarks: str | None = None


class ComplaintResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    location: str
    category: str
    status: str
    priority: str
    photo: str | None = None
    remarks: str = ''
    reported_by: int = Field(serialization_alias='reportedBy')
    student_name: str = Field(serialization_alias='studentName')
    student_email: str = Field(serialization_alias='studentEmail')
    created_at: datetime = Field(serialization_alias='createdAt')
    updated_at: datetime = Field(serialization_alias='updatedAt')


def serialize_complaint(complaint: Complaint) -> dict:
    return ComplaintResponse.model_validate(complaint).model_dump(by_alias=True, mode='json')


def _read_photo(photo: UploadFile | None) -> PhotoUpload | None:
    if photo is None or not photo.filename:
        return None
    return PhotoUpload(filename=photo.filename, content_type=photo.content_type, data=photo.file.read())


@router.post('', status_code=status.HTTP_201_CREATED)
def create_complaint(
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    location: str | None = Form(default=None),
    category: str | None = Form(default=None),
    photo: UploadFile | None = File(default=None),
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    complaint = service.submit(
        claims,
        title=title,
        description=description,
        location=location,
        category=category,
        photo=_read_photo(photo),
    )
    return {
        'success': True,
        'message': 'Complaint submitted successfully',
        'complaint': serialize_complaint(complaint),
    }


@router.get('/my')
def list_my_complaints(
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    complaints = service.list_mine(claims)
    return {
        'success': True,
        'count': len(complaints),
        'complaints': [serialize_complaint(complaint) for complaint in complaints],
    }


@router.get('')
def list_all_complaints(
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    complaints = service.list_all(claims)
    return {
        'success': True,
        'count': len(complaints),
        'complaints': [serialize_complaint(complaint) for complaint in complaints],
    }


@router.get('/stats/dashboard')
def dashboard_stats(
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    return {'success': True, 'stats': service.stats(claims)}


@router.get('/{complaint_id}')
def get_complaint(
    complaint_id: str,
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    complaint = service.get(claims, complaint_id)
    return {'success': True, 'complaint': serialize_complaint(complaint)}


@router.put('/{complaint_id}')
def update_complaint(
    complaint_id: str,
    data: UpdateComplaintRequest | None = None,
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    data = data or UpdateComplaintRequest()
    complaint = service.update(
        claims,
        complaint_id,
        status=data.status,
        priority=data.priority,
        remarks=data.remarks,
    )
    return {
        'success': True,
        'message': 'Complaint updated successfully',
        'complaint': serialize_complaint(complaint),
    }


@router.delete('/{complaint_id}')
def delete_complaint(
    complaint_id: str,
    claims: Claims = Depends(get_current_claims),
    service: ComplaintService = Depends(get_complaint_service),
):
    service.delete(claims, complaint_id)
    return {'success': True, 'message': 'Complaint deleted successfully'}
