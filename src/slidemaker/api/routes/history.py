# src/slidemaker/api/routes/history.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from slidemaker.api.deps import get_history
from slidemaker.kernel.history import DeckHistory

router = APIRouter()


@router.get("/api/history")
def list_history(history: DeckHistory = Depends(get_history)) -> Dict[str, Any]:
    """Most recent first."""
    items = [
        {
            "id": e.id,
            "title": e.title,
            "createdAt": e.created_at.isoformat(),
            "theme": e.theme.value,
            "slides": [s.model_dump(by_alias=True) for s in e.slides],
        }
        for e in history.entries()
    ]
    return {"count": len(items), "capacity": history.capacity, "items": items}


@router.delete("/api/history/{entry_id}")
def delete_history_entry(entry_id: str, history: DeckHistory = Depends(get_history)) -> Dict[str, Any]:
    if not history.remove(entry_id):
        raise HTTPException(status_code=404, detail="history entry not found")
    return {"ok": True, "id": entry_id}
