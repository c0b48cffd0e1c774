from fastapi import APIRouter, Depends, status

from blockplanner.api.deps import get_repository
from blockplanner.db.repository import TimetableRepository
from blockplanner.schemas.session import SessionCreate, SessionOut, SessionUpdate
from blockplanner.services.session_validator import SessionValidator

router = APIRouter()


@router.post("/", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    repository: TimetableRepository = Depends(get_repository),
) -> SessionOut:
    session = SessionValidator(repository).create_session(payload)
    return SessionOut.from_model(session)


@router.put("/{session_id}", response_model=SessionOut)
def update_session(
    session_id: str,
    payload: SessionUpdate,
    repository: TimetableRepository = Depends(get_repository),
) -> SessionOut:
    session = SessionValidator(repository).update_session(session_id, payload)
    return SessionOut.from_model(session)


@router.delete("/{session_id}")
def delete_session(
    session_id: str,
    repository: TimetableRepository = Depends(get_repository),
) -> dict:
    SessionValidator(repository).delete_session(session_id)
    return {"success": True}
