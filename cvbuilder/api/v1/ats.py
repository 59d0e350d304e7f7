from fastapi import APIRouter, Request

from cvbuilder.core.rate_limit import rate_limit
from cvbuilder.schemas.cv import CVContent
from cvbuilder.scoring import score_cv

router = APIRouter()


@router.post("/ats/score")
@rate_limit()
def ats_score(request: Request, payload: CVContent):
    _ = request
    return score_cv(payload).model_dump(by_alias=True)
