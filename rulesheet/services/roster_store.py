from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)


def get_roster(db: Session, list_id: str) -> dict[str, Any] | None:
    """Return the stored roster of an army list, or ``None``."""

    army_list = db.get(models.ArmyList, list_id)
    if army_list is None:
        return None
    try:
        data = json.loads(army_list.data_json or "{}")
    except json.JSONDecodeError:
        logger.warning("Army list %s holds malformed roster data", list_id)
        return None
    if not isinstance(data, dict):
        logger.warning("Army list %s roster data is not an object", list_id)
        return None
    data["id"] = army_list.id
    data["name"] = army_list.name
    if army_list.game and not data.get("game"):
        data["game"] = army_list.game
    return data


def save_roster(
    db: Session,
    list_id: str,
    name: str,
    data: dict[str, Any],
    game: str | None = None,
) -> models.ArmyList:
    army_list = db.get(models.ArmyList, list_id)
    if army_list is None:
        army_list = models.ArmyList(id=list_id, name=name)
        db.add(army_list)
    army_list.name = name
    army_list.game = game
    payload = {key: value for key, value in data.items() if key not in {"id", "name"}}
    army_list.data_json = json.dumps(payload, ensure_ascii=False)
    db.commit()
    db.refresh(army_list)
    logger.info("Stored army list %s (%s)", list_id, name)
    return army_list
