# app/modules/clients/service.py
import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.shared.database.models import Client
from .repository import ClientsRepository
from .schemas import ClientCreateRequest

logger = logging.getLogger(__name__)

# Campos que una reserva pública puede refrescar en un cliente existente
REFRESHABLE_FIELDS = (
    "name", "street", "number", "neighborhood", "city", "state", "zip_code", "address_details"
)


class ClientsService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = ClientsRepository(db)

    def create_client(self, client_data: ClientCreateRequest) -> Client:
        if self.repository.get_by_phone(client_data.phone_number):
            raise ConflictError(
                "Ya existe un cliente registrado con este teléfono",
                details={"phone_number": client_data.phone_number}
            )

        try:
            client = self.repository.create({**client_data.model_dump(), "is_active": True})
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(client)
        logger.info(f"Cliente {client.id} creado")
        return client

    def get_client(self, client_id: int) -> Client:
        client = self.repository.get_by_id(client_id)
        if not client:
            raise NotFoundError(f"Cliente {client_id} no encontrado")
        return client

    def list_clients(self, active_only: bool = True) -> List[Client]:
        return self.repository.list_clients(active_only)

    def find_or_create_by_phone(self, client_data: ClientCreateRequest) -> Client:
        """
        Buscar por teléfono; si existe se actualizan nombre y dirección, si no
        se crea. Solo flush: corre dentro de la transacción del llamador.
        """
        client = self.repository.get_by_phone(client_data.phone_number)
        if client is None:
            return self.repository.create({**client_data.model_dump(), "is_active": True})

        changes = {
            field: value
            for field, value in client_data.model_dump(include=set(REFRESHABLE_FIELDS)).items()
            if value is not None
        }
        return self.repository.update(client, changes)
