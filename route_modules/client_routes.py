"""
Client Routes - a trainer's client roster and dashboard.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
from auth import get_current_user, require_trainer
from models import AddClientRequest, ClientStatusUpdate, ManageClientsRequest
from models_orm import UserORM
from service_modules.client_service import ClientService, get_client_service

router = APIRouter()


@router.get("/api/trainer/clients")
async def get_clients(
    search: Optional[str] = None,
    status: Optional[str] = None,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Roster with a progress summary per client."""
    require_trainer(current_user)
    return service.get_trainer_clients(current_user.id, search=search, status=status)


@router.post("/api/trainer/clients")
async def add_client(
    data: AddClientRequest,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.add_client(current_user.id, data.email)


@router.put("/api/trainer/clients/{relationship_id}/status")
async def update_client_status(
    relationship_id: str,
    data: ClientStatusUpdate,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.update_client_status(current_user.id, relationship_id, data.status)


@router.delete("/api/trainer/clients/{relationship_id}")
async def remove_client(
    relationship_id: str,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.remove_client(current_user.id, relationship_id)


@router.get("/api/trainer/clients/{client_id}/details")
async def get_client_details(
    client_id: str,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Profile, recent progress and recent AI workouts of one client."""
    require_trainer(current_user)
    return service.get_client_details(current_user.id, client_id)


@router.get("/api/trainer/dashboard")
async def get_dashboard(
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_dashboard_stats(current_user.id)


@router.get("/api/users/search")
async def search_user(
    email: str,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    user = service.search_user_by_email(email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/api/manage-clients")
async def manage_clients(
    request: ManageClientsRequest,
    service: ClientService = Depends(get_client_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Single action endpoint: add, update or remove a roster entry."""
    require_trainer(current_user)

    if request.action == "add":
        return service.add_client(current_user.id, request.clientEmail)
    if request.action == "update":
        if not request.clientId or not request.status:
            raise HTTPException(status_code=400, detail="clientId and status are required")
        return service.update_client_status(current_user.id, request.clientId, request.status)
    if request.action == "remove":
        if not request.clientId:
            raise HTTPException(status_code=400, detail="clientId is required")
        return service.remove_client(current_user.id, request.clientId)

    raise HTTPException(status_code=400, detail=f"Unknown action: {request.action}")
