from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Response, status

from auth import CurrentUser
from database import ScoreLedger, get_ledger
from errors import MissingParameterError
from models import Score, ScorePayload

router = APIRouter(prefix="/high-scores", tags=["Ranking"])


@router.post("", status_code=201)
def submit_score(
    current_user: CurrentUser,
    data: ScorePayload,
    ledger: Annotated[ScoreLedger, Depends(get_ledger)],
):
    # No se exige que userHandle coincida con el usuario del token
    ledger.submit(data)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("", response_model=List[Score])
def get_high_scores(
    ledger: Annotated[ScoreLedger, Depends(get_ledger)],
    level: Optional[str] = None,
    page: int = 1,
):
    if not level:
        raise MissingParameterError("level")
    return ledger.query(level, page)
