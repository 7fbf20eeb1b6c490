# app/modules/clients/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from .service import ClientsService
from .schemas import ClientCreateRequest, ClientResponse

router = APIRouter(prefix="/clients", tags=["Clients"])

@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar cliente. El teléfono es único (409 si ya existe).
    """
    service = ClientsService(db)
    return service.create_client(client_data)

@router.get("", response_model=List[ClientResponse])
async def list_clients(
    active_only: bool = True,
    db: Session = Depends(get_db)
):
    service = ClientsService(db)
    return service.list_clients(active_only)

@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: int, db: Session = Depends(get_db)):
    service = ClientsService(db)
    return service.get_client(client_id)
