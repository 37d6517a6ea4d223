"""Table API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.identity import Identity, resolve_identity
from api.schemas import (
    ActionRequest,
    ApiResponse,
    CreateRequest,
    JoinRequest,
    TableViewResponse,
)
from api.service import TableService, get_table_service
from api.signing import get_response_signer
from core.game.view import TableView

router = APIRouter()

CallerDep = Annotated[Identity, Depends(resolve_identity)]
ServiceDep = Annotated[TableService, Depends(get_table_service)]


def _respond(view: TableView) -> ApiResponse[TableViewResponse]:
    """Wrap a view in the signed success envelope."""
    data = TableViewResponse.model_validate(view)
    sig = get_response_signer().sign(data.model_dump_json())
    return ApiResponse[TableViewResponse](data=data, sig=sig)


@router.post("/create")
async def create_table(
    request: CreateRequest,
    caller: CallerDep,
    service: ServiceDep,
) -> ApiResponse[TableViewResponse]:
    """Open a solo or pvp table."""
    return _respond(await service.create_table(caller, request))


@router.post("/join")
async def join_table(
    request: JoinRequest,
    caller: CallerDep,
    service: ServiceDep,
) -> ApiResponse[TableViewResponse]:
    """Join a pvp table by code."""
    return _respond(await service.join_table(caller, request.code))


@router.post("/action")
async def table_action(
    request: ActionRequest,
    caller: CallerDep,
    service: ServiceDep,
) -> ApiResponse[TableViewResponse]:
    """Submit a bet, play or next-round intent."""
    return _respond(await service.act(caller, request))


@router.get("/{session_id}")
async def poll_table(
    session_id: str,
    caller: CallerDep,
    service: ServiceDep,
) -> ApiResponse[TableViewResponse]:
    """Get the latest table snapshot."""
    return _respond(await service.poll(caller, session_id))
