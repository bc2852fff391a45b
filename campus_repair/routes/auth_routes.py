from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from campus_repair.auth.credentials import Claims
from campus_repair.auth.dependencies import get_current_claims, get_identity_service
from campus_repair.core.errors import OwnerNotFound
from campus_repair.models.user import ADMIN_ROLE, STUDENT_ROLE, User
from campus_repair.services.identity import IdentityService

router = APIRouter(tags=['auth'])


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = Field(default=None, alias='confirmPassword')
    student_id: str | None = Field(default=None, alias='studentId')
    department: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    student_id: str | None = Field(default=None, serialization_alias='studentId')
    department: str | None = None


def serialize_user(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True)


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, identity: IdentityService = Depends(get_identity_service)):
    token, user = identity.register(
        name=data.name,
        email=data.email,
        password=data.password,
        confirm_password=data.confirm_password,
        student_id=data.student_id,
        department=data.department,
    )
    return {
        'success': True,
        'message': 'Registration successful',
        'token': token,
        'user': serialize_user(user),
    }


@router.post('/login')
def login(data: LoginRequest, identity: IdentityService = Depends(get_identity_service)):
    token, user = identity.login(data.email, data.password, role=STUDENT_ROLE)
    return {
        'success': True,
        'message': 'Login successful',
        'token': token,
        'user': serialize_user(user),
    }


@router.post('/admin-login')
def admin_login(data: LoginRequest, identity: IdentityService = Depends(get_identity_service)):
    token, user = identity.login(data.email, data.password, role=ADMIN_ROLE)
    return {
        'success': True,
        'message': 'Admin login successful',
        'token': token,
        'user': serialize_user(user),
    }


@router.get('/me')
def me(
    claims: Claims = Depends(get_current_claims),
    identity: IdentityService = Depends(get_identity_service),
):
    user = identity.get_user(claims.user_id)
    if user is None:
        raise OwnerNotFound('User not found')
    return {'success': True, 'user': serialize_user(user)}
