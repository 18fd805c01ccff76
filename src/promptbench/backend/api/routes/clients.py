"""Client profile routes."""

from litestar import Router, delete, get, post, put
from litestar.exceptions import NotFoundException, ValidationException

from ...core.state import AppState
from ...schemas import ClientCreate, ClientUpdate
from ...store import CLIENTS, utcnow


@get()
async def list_clients(bench: AppState) -> list[dict]:
    """All clients, newest first."""
    return await bench.store.query(CLIENTS, order_by="created_at", descending=True)


@post()
async def create_client(data: ClientCreate, bench: AppState) -> dict:
    now = utcnow()
    return await bench.store.add(CLIENTS, {**data.model_dump(), "created_at": now, "updated_at": now})


@get("/{client_id:str}")
async def get_client(client_id: str, bench: AppState) -> dict:
    """Fetch one client.

    Raises:
        ValidationException: If the id is blank
        NotFoundException: If the client does not exist
    """
    if not client_id.strip():
        raise ValidationException("Client ID is required")
    client = await bench.store.get(CLIENTS, client_id)
    if client is None:
        raise NotFoundException("Client not found")
    return client


@put("/{client_id:str}")
async def update_client(client_id: str, data: ClientUpdate, bench: AppState) -> dict:
    existing = await bench.store.get(CLIENTS, client_id)
    if existing is None:
        raise NotFoundException("Client not found")
    return await bench.store.update(CLIENTS, client_id, {**data.model_dump(), "updated_at": utcnow()})


@delete("/{client_id:str}", status_code=200)
async def delete_client(client_id: str, bench: AppState) -> dict:
    # Scenarios, runs and suggestions of the client are left in place.
    await bench.store.delete(CLIENTS, client_id)
    return {"success": True}


router = Router(
    path="/clients",
    route_handlers=[list_clients, create_client, get_client, update_client, delete_client],
)
