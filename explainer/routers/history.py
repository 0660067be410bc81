"""
History Router - local history of past explanations.

    GET    /api/history          entries, newest first
    POST   /api/history          record an entry (always echoed back)
    DELETE /api/history          clear everything
    GET    /api/history/usage    {used, total, entryCount}
    GET    /api/history/{id}     one entry
    DELETE /api/history/{id}     remove one entry

The store swallows storage failures, so none of these return 5xx for a
full or unavailable disk.
"""

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from explainer.services.history import (
    HistoryDraft,
    HistoryEntry,
    HistoryStore,
    format_relative_time,
    get_history_store,
)

router = APIRouter(prefix="/api/history", tags=["history"])


class HistoryItemOut(HistoryEntry):
    """A history entry plus its age as a phrase ("5 minutes ago")."""
    relative_time: str


@router.get("", response_model=List[HistoryItemOut])
def list_history(store: HistoryStore = Depends(get_history_store)):
    return [
        HistoryItemOut(**entry.model_dump(), relative_time=format_relative_time(entry.timestamp))
        for entry in store.list()
    ]


@router.post("", response_model=HistoryEntry, status_code=status.HTTP_201_CREATED)
def add_history(draft: HistoryDraft, store: HistoryStore = Depends(get_history_store)):
    return store.add(draft)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(store: HistoryStore = Depends(get_history_store)):
    store.clear()


@router.get("/usage")
def history_usage(store: HistoryStore = Depends(get_history_store)) -> Dict[str, int]:
    return store.usage()


@router.get("/{entry_id}", response_model=HistoryEntry)
def get_history_entry(entry_id: str, store: HistoryStore = Depends(get_history_store)):
    entry = store.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="History entry not found")
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_history_entry(entry_id: str, store: HistoryStore = Depends(get_history_store)):
    store.delete(entry_id)
