# File: fixapp/routers/issues.py
from fastapi import APIRouter, Depends, Query, HTTPException, UploadFile, File, Request, Form, Response
from sqlalchemy.orm import Session
from typing import List, Optional
from fixapp.core.ratelimit import limiter
from fixapp.db.session import get_db
from fixapp.models.issue import IssueCategory, IssueStatus
from fixapp.schemas.issue import IssueOut, IssueDetailOut, StatusUpdateIn, StatusUpdateOut, issue_out
from fixapp.services.issue_store import IssueStore

router = APIRouter(prefix="/issues", tags=["issues"])

MAX_BYTES = 5 * 1024 * 1024
ALLOWED = {"image/jpeg", "image/png", "image/webp", "image/heic"}


def get_store(db: Session = Depends(get_db)) -> IssueStore:
    return IssueStore(db)


@router.post("", response_model=IssueDetailOut, status_code=201)
@limiter.limit("10/minute")
def create_issue(
    request: Request,
    category: str = Form(...),
    description: Optional[str] = Form(None),
    lat: Optional[float] = Form(None),
    lng: Optional[float] = Form(None),
    photo: UploadFile | None = File(default=None),
    store: IssueStore = Depends(get_store),
):
    data = None
    content_type = None
    if photo is not None and photo.filename:
        if photo.content_type not in ALLOWED:
            raise HTTPException(status_code=400, detail="Unsupported image type")
        data = photo.file.read()
        if len(data) > MAX_BYTES:
            raise HTTPException(status_code=400, detail="Image exceeds 5MB")
        content_type = photo.content_type

    obj = store.create_issue(category, description, lat, lng, photo=data, photo_content_type=content_type)
    return issue_out(obj, detail=True)


@router.get("", response_model=List[IssueOut])
def list_issues(
    category: Optional[IssueCategory] = Query(default=None),
    status: Optional[IssueStatus] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=200),
    store: IssueStore = Depends(get_store),
):
    return [issue_out(i) for i in store.list_issues(category=category, status=status, search=search)]


@router.get("/track/{tracking_id}", response_model=IssueDetailOut)
def track_issue(tracking_id: str, store: IssueStore = Depends(get_store)):
    return issue_out(store.get_by_tracking_id(tracking_id), detail=True)


@router.get("/{issue_id}", response_model=IssueDetailOut)
def get_issue(issue_id: str, store: IssueStore = Depends(get_store)):
    return issue_out(store.get_issue(issue_id), detail=True)


@router.get("/{issue_id}/photo")
def get_issue_photo(issue_id: str, store: IssueStore = Depends(get_store)):
    obj = store.get_issue(issue_id)
    if not obj.photo:
        raise HTTPException(status_code=404, detail="Issue has no photo")
    return Response(content=obj.photo, media_type=obj.photo_content_type or "image/jpeg")


@router.get("/{issue_id}/updates", response_model=List[StatusUpdateOut])
def list_status_updates(issue_id: str, store: IssueStore = Depends(get_store)):
    return store.status_history(issue_id)


@router.post("/{issue_id}/updates", response_model=StatusUpdateOut, status_code=201)
def add_status_update(issue_id: str, body: StatusUpdateIn, store: IssueStore = Depends(get_store)):
    return store.append_status_update(issue_id, body.status, body.message)


@router.delete("/{issue_id}", status_code=204)
def delete_issue(issue_id: str, store: IssueStore = Depends(get_store)):
    store.delete_issue(issue_id)
    return Response(status_code=204)
