from fastapi import APIRouter, Depends
from typing import Optional
from aizer.core.dependencies import check_group_member, get_session_context
from aizer.core.session import SessionContext
from aizer.modules.hierarchy.schemas import SearchResult, SnapshotView
from aizer.modules.hierarchy.service import load_group_snapshot, search, snapshot_view

router = APIRouter(prefix="/groups", tags=["hierarchy"])


@router.get("/{group_id}/snapshot", response_model=SnapshotView)
async def get_group_snapshot(group_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Spaces, inventories and items of a group with per-parent counts"""
    def operation():
        check_group_member(group_id, ctx)
        return snapshot_view(load_group_snapshot(ctx.store, group_id))
    return ctx.run(operation)


@router.get("/{group_id}/search", response_model=SearchResult)
async def search_group(
    group_id: str,
    q: Optional[str] = None,
    ctx: SessionContext = Depends(get_session_context),
):
    """Case-insensitive search across spaces, inventories and items"""
    def operation():
        check_group_member(group_id, ctx)
        return search(load_group_snapshot(ctx.store, group_id), q)
    return ctx.run(operation)
