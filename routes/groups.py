from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.Group import Group
from models.GroupPost import GroupPost
from schemas import GroupWrite, GroupRead, GroupPostWrite, GroupPostRead
from utils.auth import SessionUser, require_premium
from utils.logger import setup_api_logger

# every endpoint here is premium only
router = APIRouter(prefix="/groups", tags=["Groups"], dependencies=[Depends(require_premium)])
logger = setup_api_logger()


def _get_group(db: Session, group_id: int) -> Group:
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def _group_to_read(group: Group, post_count: int) -> dict:
    return {
        "id": group.id,
        "name": group.name,
        "creator": {"id": group.creator.id, "name": group.creator.name, "avatar": group.creator.avatar},
        "post_count": post_count,
        "created_at": group.created_at,
    }


@router.get("", response_model=List[GroupRead])
def list_groups(db: Session = Depends(get_db)):
    groups = db.query(Group).order_by(Group.created_at.desc(), Group.id.desc()).all()
    counts = dict(
        db.query(GroupPost.group_id, func.count(GroupPost.id))
        .group_by(GroupPost.group_id)
        .all()
    )
    return [_group_to_read(g, counts.get(g.id, 0)) for g in groups]


@router.post("", response_model=GroupRead, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupWrite,
    current_user: SessionUser = Depends(require_premium),
    db: Session = Depends(get_db)
):
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Group name is required")

    if db.query(Group).filter(Group.name == name).first():
        raise HTTPException(status_code=400, detail="Group name already exists")

    group = Group(name=name, creator_id=current_user.id)
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Group %s created by %s", group.id, current_user.id)
    return _group_to_read(group, 0)


@router.get("/{group_id}")
def get_group(group_id: int, db: Session = Depends(get_db)):
    group = _get_group(db, group_id)
    data = _group_to_read(group, len(group.posts))
    data["posts"] = [GroupPostRead.model_validate(p) for p in group.posts]
    return data


@router.get("/{group_id}/posts", response_model=List[GroupPostRead])
def list_posts(group_id: int, db: Session = Depends(get_db)):
    group = _get_group(db, group_id)
    return group.posts


@router.post("/{group_id}/posts", response_model=GroupPostRead, status_code=status.HTTP_201_CREATED)
def create_post(
    group_id: int,
    payload: GroupPostWrite,
    current_user: SessionUser = Depends(require_premium),
    db: Session = Depends(get_db)
):
    group = _get_group(db, group_id)

    title = (payload.title or "").strip()
    content = (payload.content or "").strip()
    if not title or not content:
        raise HTTPException(status_code=400, detail="Title and content are required")

    post = GroupPost(
        group_id=group.id,
        author_id=current_user.id,
        title=title,
        content=content,
        location=payload.location,
    )
    if payload.post_date:
        post.post_date = payload.post_date

    db.add(post)
    db.commit()
    db.refresh(post)
    return post
