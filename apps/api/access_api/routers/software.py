from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_session
from ..core.current_user import Identity
from ..core.permissions import requires
from ..schemas.software import SoftwareCreateIn, SoftwareOut, SoftwareUpdateIn
from ..services import software as software_service


router = APIRouter(prefix="/software", tags=["software"])


@router.get("", response_model=list[SoftwareOut])
def list_software(
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("software:list")),
):
    return software_service.list_software(session, identity)


@router.get("/{software_id}", response_model=SoftwareOut)
def get_software(
    software_id: int,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("software:view")),
):
    return software_service.get_software(session, identity, software_id)


@router.post("", response_model=SoftwareOut, status_code=201)
def create_software(
    payload: SoftwareCreateIn,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("software:create")),
):
    return software_service.create_software(
        session,
        identity,
        name=payload.name,
        description=payload.description,
        access_levels=payload.access_levels,
    )


@router.put("/{software_id}", response_model=SoftwareOut)
def update_software(
    software_id: int,
    payload: SoftwareUpdateIn,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("software:update")),
):
    return software_service.update_software(
        session,
        identity,
        software_id,
        name=payload.name,
        description=payload.description,
        access_levels=payload.access_levels,
    )


@router.delete("/{software_id}")
def delete_software(
    software_id: int,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("software:delete")),
):
    software_service.delete_software(session, identity, software_id)
    return {"ok": True}
