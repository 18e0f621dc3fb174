from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from database import get_db
from models.Blog import Blog
from models.Like import Like
from models.Wishlist import Wishlist
from schemas import BlogWrite, BlogRead, BlogDetail, WishlistItem
from utils.auth import SessionUser, get_current_user, get_optional_user

router = APIRouter(prefix="/blogs", tags=["Blogs"])
wishlist_router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


def _like_counts(db: Session, blog_ids: List[int]) -> dict:
    if not blog_ids:
        return {}
    return dict(
        db.query(Like.blog_id, func.count(Like.id))
        .filter(Like.blog_id.in_(blog_ids))
        .group_by(Like.blog_id)
        .all()
    )


def _user_marks(db: Session, model, user: Optional[SessionUser], blog_ids: List[int]) -> set:
    """Blog ids the user liked (model=Like) or wishlisted (model=Wishlist)."""
    if not user or not blog_ids:
        return set()
    rows = db.query(model.blog_id).filter(model.user_id == user.id, model.blog_id.in_(blog_ids)).all()
    return {blog_id for (blog_id,) in rows}


def _blog_to_read(blog: Blog, likes: int, is_liked: bool, is_wishlisted: bool) -> dict:
    return {
        "id": blog.id,
        "title": blog.title,
        "preview": blog.preview,
        "location": blog.location,
        "tags": blog.tags or [],
        "images": blog.images or [],
        "publish_date": blog.publish_date,
        "author": blog.author.name,
        "likes": likes,
        "is_liked": is_liked,
        "is_wishlisted": is_wishlisted,
    }


def _get_blog(db: Session, blog_id: int) -> Blog:
    blog = db.query(Blog).filter(Blog.id == blog_id).first()
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")
    return blog


@router.get("", response_model=List[BlogRead])
def list_blogs(
    search: Optional[str] = None,
    current_user: Optional[SessionUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    query = db.query(Blog)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(Blog.title.ilike(pattern), Blog.preview.ilike(pattern), Blog.location.ilike(pattern))
        )
    blogs = query.order_by(Blog.publish_date.desc(), Blog.id.desc()).all()

    ids = [b.id for b in blogs]
    likes = _like_counts(db, ids)
    liked = _user_marks(db, Like, current_user, ids)
    wishlisted = _user_marks(db, Wishlist, current_user, ids)

    return [_blog_to_read(b, likes.get(b.id, 0), b.id in liked, b.id in wishlisted) for b in blogs]


@router.post("", response_model=BlogDetail, status_code=status.HTTP_201_CREATED)
def create_blog(
    payload: BlogWrite,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    title = (payload.title or "").strip()
    content = (payload.content or "").strip()
    if not title or not content:
        raise HTTPException(status_code=400, detail="Title and content are required")

    blog = Blog(
        author_id=current_user.id,
        title=title,
        content=content,
        preview=Blog.build_preview(content),
        location=payload.location,
        tags=[],
        images=[],
    )
    if payload.publish_date:
        blog.publish_date = payload.publish_date

    db.add(blog)
    db.commit()
    db.refresh(blog)

    data = _blog_to_read(blog, 0, False, False)
    data["content"] = blog.content
    return data


@router.get("/{blog_id}", response_model=BlogDetail)
def get_blog(
    blog_id: int,
    current_user: Optional[SessionUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    blog = _get_blog(db, blog_id)
    likes = _like_counts(db, [blog.id]).get(blog.id, 0)
    data = _blog_to_read(
        blog,
        likes,
        blog.id in _user_marks(db, Like, current_user, [blog.id]),
        blog.id in _user_marks(db, Wishlist, current_user, [blog.id]),
    )
    data["content"] = blog.content
    return data


@router.post("/{blog_id}/like")
def toggle_like(
    blog_id: int,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    blog = _get_blog(db, blog_id)

    existing = db.query(Like).filter(Like.user_id == current_user.id, Like.blog_id == blog.id).first()
    if existing:
        db.delete(existing)
        is_liked = False
    else:
        db.add(Like(user_id=current_user.id, blog_id=blog.id))
        is_liked = True
    db.commit()

    likes = _like_counts(db, [blog.id]).get(blog.id, 0)
    return {"is_liked": is_liked, "likes": likes}


@router.post("/{blog_id}/wishlist")
def toggle_wishlist(
    blog_id: int,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    blog = _get_blog(db, blog_id)

    existing = db.query(Wishlist).filter(
        Wishlist.user_id == current_user.id,
        Wishlist.blog_id == blog.id
    ).first()
    if existing:
        db.delete(existing)
        is_wishlisted = False
    else:
        db.add(Wishlist(user_id=current_user.id, blog_id=blog.id))
        is_wishlisted = True
    db.commit()

    return {"is_wishlisted": is_wishlisted}


@wishlist_router.get("", response_model=List[WishlistItem])
def get_wishlist(current_user: SessionUser = Depends(get_current_user), db: Session = Depends(get_db)):
    items = (
        db.query(Wishlist)
        .filter(Wishlist.user_id == current_user.id)
        .order_by(Wishlist.added_at.desc(), Wishlist.id.desc())
        .all()
    )
    return [
        {
            "id": item.blog.id,
            "title": item.blog.title,
            "preview": item.blog.preview,
            "location": item.blog.location,
            "images": item.blog.images or [],
            "added_date": item.added_at,
        }
        for item in items
    ]
