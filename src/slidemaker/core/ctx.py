# src/slidemaker/core/ctx.py
from __future__ import annotations
import contextvars
from typing import Optional, Mapping

_request_id = contextvars.ContextVar("request_id", default=None)
_deck_id    = contextvars.ContextVar("deck_id",    default=None)
_file_name  = contextvars.ContextVar("file_name",  default=None)

def set_ctx(*, request_id: Optional[str]=None, deck_id: Optional[str]=None,
            file_name: Optional[str]=None) -> None:
    if request_id is not None: _request_id.set(request_id)
    if deck_id is not None:    _deck_id.set(deck_id)
    if file_name is not None:  _file_name.set(file_name)

def get_ctx() -> Mapping[str, Optional[str]]:
    return {
        "request_id": _request_id.get(),
        "deck_id":    _deck_id.get(),
        "file_name":  _file_name.get(),
    }
