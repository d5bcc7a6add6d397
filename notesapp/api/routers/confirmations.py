"""Resolución de prompts de confirmación (cancelar o confirmar la acción destructiva)."""
from fastapi import APIRouter, Depends

from notesapp.api.deps import get_services, require_session
from notesapp.api.schemas.auth import ConfirmIn, ConfirmOut
from notesapp.core.exceptions import ConfirmationNotFound
from notesapp.services.confirm import CONFIRM, Confirmation
from notesapp.services.registry import Services

router = APIRouter(prefix="/confirmations", tags=["Confirmations"], dependencies=[Depends(require_session)])


@router.get("/{confirmation_id}", response_model=Confirmation, summary="Ver un prompt pendiente")
def get_confirmation(confirmation_id: str, services: Services = Depends(get_services)) -> Confirmation:
    prompt = services.confirmations.pending(confirmation_id)
    if prompt is None:
        raise ConfirmationNotFound("This confirmation is no longer available.")
    return prompt


@router.post("/{confirmation_id}", response_model=ConfirmOut, summary="Confirmar o cancelar")
async def resolve_confirmation(
    confirmation_id: str,
    payload: ConfirmIn,
    services: Services = Depends(get_services),
) -> ConfirmOut:
    await services.confirmations.resolve(confirmation_id, payload.choice)
    return ConfirmOut(choice=payload.choice, executed=payload.choice == CONFIRM)
