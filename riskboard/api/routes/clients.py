from fastapi import APIRouter, Depends, Query

from riskboard.api.deps import Paging, clients_repo, current_user
from riskboard.core.errors import BadRequest, Conflict, NotFound
from riskboard.models.client import Client
from riskboard.models.enums import ClientStatus
from riskboard.repositories.clients import ClientRepository
from riskboard.schemas.client import ClientCreate, ClientOut, ClientUpdate
from riskboard.schemas.common import ApiResponse, PageMeta, ok
from riskboard.services.audit import log_event

router = APIRouter(prefix="/clients", tags=["clients"])


def _require_client(clients: ClientRepository, client_id: int) -> Client:
    c = clients.get(client_id)
    if c is None:
        raise NotFound("Client not found", code="client_not_found")
    return c


def _check_unique(clients: ClientRepository, identification: str | None, email: str | None, exclude_id: int | None = None):
    dup = clients.find_duplicate(identification, email, exclude_id=exclude_id)
    if dup is None:
        return
    field = "identification" if identification and dup.identification == identification else "email"
    raise Conflict(f"A client with this {field} already exists", code="client_exists", details={"field": field})


@router.get("", response_model=ApiResponse[list[ClientOut]])
def list_clients(
    paging: Paging = Depends(),
    search: str | None = Query(default=None),
    status: ClientStatus | None = Query(default=None),
    min_score: int | None = Query(default=None, ge=300, le=850),
    max_score: int | None = Query(default=None, ge=300, le=850),
    clients: ClientRepository = Depends(clients_repo),
    u=Depends(current_user),
):
    rows, total = clients.list_page(
        paging.page,
        paging.limit,
        search=search,
        status=status.value if status else None,
        min_score=min_score,
        max_score=max_score,
    )
    return ok(rows, pagination=PageMeta.build(paging.page, paging.limit, total))


@router.get("/{client_id}", response_model=ApiResponse[ClientOut])
def get_client(client_id: int, clients: ClientRepository = Depends(clients_repo), u=Depends(current_user)):
    return ok(_require_client(clients, client_id))


@router.post("", response_model=ApiResponse[ClientOut], status_code=201)
def create_client(body: ClientCreate, clients: ClientRepository = Depends(clients_repo), u=Depends(current_user)):
    _check_unique(clients, body.identification, body.email)

    data = body.model_dump()
    data["status"] = body.status.value
    c = clients.add(Client(**data))

    log_event(
        clients.s,
        username=u.get("sub"),
        action="client.create",
        entity_type="client",
        entity_id=c.id,
        details={"identification": c.identification, "credit_score": c.credit_score},
    )
    return ok(c, message="Client created")


@router.put("/{client_id}", response_model=ApiResponse[ClientOut])
def update_client(
    client_id: int,
    body: ClientUpdate,
    clients: ClientRepository = Depends(clients_repo),
    u=Depends(current_user),
):
    c = _require_client(clients, client_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise BadRequest("No fields to update", code="no_changes")

    _check_unique(clients, changes.get("identification"), changes.get("email"), exclude_id=client_id)

    for k, v in changes.items():
        setattr(c, k, v.value if isinstance(v, ClientStatus) else v)
    c = clients.save(c)

    log_event(
        clients.s,
        username=u.get("sub"),
        action="client.update",
        entity_type="client",
        entity_id=c.id,
        details=changes,
    )
    return ok(c, message="Client updated")


@router.delete("/{client_id}", response_model=ApiResponse[None])
def delete_client(client_id: int, clients: ClientRepository = Depends(clients_repo), u=Depends(current_user)):
    c = _require_client(clients, client_id)
    if clients.loan_count(client_id) > 0:
        raise Conflict("Client has related loans and cannot be deleted", code="client_has_loans")
    if clients.payment_count(client_id) > 0:
        raise Conflict("Client has related payments and cannot be deleted", code="client_has_payments")

    details = {"identification": c.identification, "name": c.full_name}
    clients.delete(c)

    log_event(
        clients.s,
        username=u.get("sub"),
        action="client.delete",
        entity_type="client",
        entity_id=client_id,
        details=details,
    )
    return ok(message="Client deleted")
