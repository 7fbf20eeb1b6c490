# app/modules/clients/repository.py
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session

from app.shared.database.models import Client

class ClientsRepository:

    def __init__(self, db: Session):
        self.db = db

    def create(self, client_data: Dict[str, Any]) -> Client:
        client = Client(**client_data)
        self.db.add(client)
        self.db.flush()
        return client

    def get_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def get_by_phone(self, phone_number: str) -> Optional[Client]:
        return self.db.query(Client).filter(Client.phone_number == phone_number).first()

    def list_clients(self, active_only: bool = True) -> List[Client]:
        query = self.db.query(Client)
        if active_only:
            query = query.filter(Client.is_active.is_(True))
        return query.order_by(Client.name).all()

    def update(self, client: Client, update_data: Dict[str, Any]) -> Client:
        for field, value in update_data.items():
            setattr(client, field, value)
        self.db.flush()
        return client
