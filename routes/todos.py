from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.TodoItem import TodoItem
from schemas import TodoItemUpdate, TodoItemRead
from routes.trips import require_participant
from utils.auth import SessionUser, get_current_user

router = APIRouter(prefix="/todos", tags=["Todo Items"])


def _get_todo(db: Session, todo_id: int) -> TodoItem:
    todo = db.query(TodoItem).filter(TodoItem.id == todo_id).first()
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return todo


@router.patch("/{todo_id}", response_model=TodoItemRead)
def update_todo(
    todo_id: int,
    payload: TodoItemUpdate,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    todo = _get_todo(db, todo_id)
    require_participant(db, todo.trip_id, current_user.id, "Only trip participants can update todos")

    if payload.completed is not None:
        todo.completed = payload.completed
    if payload.text is not None:
        text = payload.text.strip()
        if not text:
            raise HTTPException(status_code=400, detail="Todo text cannot be empty")
        todo.text = text

    db.commit()
    db.refresh(todo)
    return todo


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: int,
    current_user: SessionUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    todo = _get_todo(db, todo_id)
    require_participant(db, todo.trip_id, current_user.id, "Only trip participants can delete todos")

    db.delete(todo)
    db.commit()
