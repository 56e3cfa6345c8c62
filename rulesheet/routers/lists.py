from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..schemas import ArmyListForm, ArmyListOut
from ..services import roster_store

router = APIRouter(prefix="/lists", tags=["lists"])


def _list_out(list_id: str, roster: dict) -> ArmyListOut:
    data = {key: value for key, value in roster.items() if key not in {"id", "name", "game"}}
    return ArmyListOut(id=list_id, name=roster["name"], game=roster.get("game"), data=data)


@router.put("/{list_id}", response_model=ArmyListOut)
def store_list(list_id: str, form: ArmyListForm, db: Session = Depends(get_db)):
    list_id = list_id.strip()
    if not list_id or len(list_id) > models.LIST_ID_MAX_LENGTH:
        raise HTTPException(status_code=422, detail="Invalid army list id.")
    roster_store.save_roster(db, list_id, form.name, form.data, game=form.game)
    roster = roster_store.get_roster(db, list_id)
    return _list_out(list_id, roster)


@router.get("/{list_id}", response_model=ArmyListOut)
def read_list(list_id: str, db: Session = Depends(get_db)):
    roster = roster_store.get_roster(db, list_id)
    if roster is None:
        raise HTTPException(status_code=404, detail="Army list not found.")
    return _list_out(list_id, roster)
