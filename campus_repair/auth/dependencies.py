from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campus_repair.auth.credentials import Claims
from campus_repair.core.container import ServiceContainer
from campus_repair.core.errors import Unauthorized
from campus_repair.services.complaints import ComplaintService
from campus_repair.services.identity import IdentityService

security = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Application container not initialised.")
    return container


def get_identity_service(container: ServiceContainer = Depends(get_container)) -> IdentityService:
    return container.identity_service


def get_complaint_service(container: ServiceContainer = Depends(get_container)) -> ComplaintService:
    return container.complaint_service


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    container: ServiceContainer = Depends(get_container),
) -> Claims:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized()
    return container.credentials.verify_token(credentials.credentials)
