from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from api.dependencies import get_fetcher
from frontmatter_viewer.sync import DocumentFetcher, extract_metadata

router = APIRouter(tags=["metadata"])


class ExtractRequest(BaseModel):
    text: str


@router.post("/metadata/extract")
def extract(payload: ExtractRequest):
    block = extract_metadata(payload.text)
    return block.to_dict() if block else None


@router.get("/pages/{page_id}/metadata")
async def page_metadata(
    page_id: str,
    revision_id: Optional[str] = Query(None, alias="revisionId"),
    fetcher: DocumentFetcher = Depends(get_fetcher),
):
    block = await fetcher.fetch_metadata(page_id, revision_id)
    if block is None or block.is_empty:
        raise HTTPException(status_code=404, detail=f"No metadata found for page: {page_id}")
    return block.to_dict()
