from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, Response

from cvbuilder.dependencies import get_current_user
from cvbuilder.schemas.cv import CVDocument
from cvbuilder.services import cv_service
from cvbuilder.services.cv_service import CVServiceError, PaymentRequiredError

router = APIRouter()


def _raise_cv_error(exc: CVServiceError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.get("/cv")
def list_cvs(user: dict[str, Any] = Depends(get_current_user)):
    return {"cvs": cv_service.list_cvs(user["id"])}


@router.get("/cv/pricing")
def cv_pricing():
    pricing = cv_service.current_pricing()
    return {"additionalCvPrice": pricing["additionalCvPrice"], "currency": pricing["currency"]}


@router.get("/cv/download/{cv_id}")
def download_cv(cv_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        filename, pdf_bytes = cv_service.export_cv_pdf(user["id"], cv_id)
    except CVServiceError as exc:
        _raise_cv_error(exc)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/cv", status_code=status.HTTP_201_CREATED)
def create_cv(payload: CVDocument, user: dict[str, Any] = Depends(get_current_user)):
    try:
        cv, message = cv_service.create_cv(user["id"], payload)
    except PaymentRequiredError as exc:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    except CVServiceError as exc:
        _raise_cv_error(exc)
    return {"cv": cv, "message": message}


@router.get("/cv/{cv_id}")
def get_cv(cv_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return {"cv": cv_service.get_cv(user["id"], cv_id)}
    except CVServiceError as exc:
        _raise_cv_error(exc)


@router.put("/cv/{cv_id}")
def update_cv(cv_id: str, payload: CVDocument, user: dict[str, Any] = Depends(get_current_user)):
    try:
        cv = cv_service.update_cv(user["id"], cv_id, payload)
    except CVServiceError as exc:
        _raise_cv_error(exc)
    return {"cv": cv, "message": "CV updated successfully"}


@router.delete("/cv/{cv_id}")
def delete_cv(cv_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        cv_service.delete_cv(user["id"], cv_id)
    except CVServiceError as exc:
        _raise_cv_error(exc)
    return {"message": "CV deleted successfully"}


@router.get("/cv/{cv_id}/ats-score")
def cv_ats_score(cv_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        result = cv_service.score_stored_cv(user["id"], cv_id)
    except CVServiceError as exc:
        _raise_cv_error(exc)
    return result.model_dump(by_alias=True)
