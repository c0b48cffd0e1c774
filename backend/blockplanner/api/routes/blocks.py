import logging

from fastapi import APIRouter, Depends

from blockplanner.api.deps import get_repository
from blockplanner.core.exceptions import ResourceNotFoundError
from blockplanner.db.repository import TimetableRepository
from blockplanner.models.class_session import WEEKDAY_ORDER
from blockplanner.schemas.auto_assign import AutoAssignReport, AutoAssignRequest
from blockplanner.schemas.session import SessionOut
from blockplanner.services.assignment_builder import AssignmentBuilder

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auto-assign", response_model=AutoAssignReport)
def auto_assign_blocks(
    payload: AutoAssignRequest,
    repository: TimetableRepository = Depends(get_repository),
) -> AutoAssignReport:
    if not repository.get_blocks(payload.blockIds):
        raise ResourceNotFoundError("Block", ", ".join(payload.blockIds))
    report = AssignmentBuilder(repository).run(payload.blockIds)
    return report.to_payload()


@router.get("/{block_id}/sessions", response_model=list[SessionOut])
def list_block_sessions(
    block_id: str,
    repository: TimetableRepository = Depends(get_repository),
) -> list[SessionOut]:
    if repository.get_block(block_id) is None:
        raise ResourceNotFoundError("Block", block_id)
    sessions = repository.list_sessions_for_block(block_id)
    sessions.sort(key=lambda item: (WEEKDAY_ORDER[item.weekday], item.start_time))
    return [SessionOut.from_model(item) for item in sessions]
