"""Schema Route — serves the compiled Hyper-Schema document.

Invariants:
    - The document is compiled once at startup; requests never compile
    - ETag is the content hash of the resource model the document came from
    - If-None-Match matching the ETag (weakly, in a list, or "*") returns 304 with no body
    - Unknown definitions raise UnknownResourceError; the global handler renders the 404
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from jsonapi_schema.core.domain_types import RouteKind
from jsonapi_schema.core.errors import UnknownResourceError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/schema", tags=["schema"])

SCHEMA_MEDIA_TYPE = "application/schema+json"
WEAK_PREFIX = "W/"


def get_document_or_503(request: Request) -> dict:
    document = getattr(request.app.state, "schema_document", None)
    if document is None:
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE, detail="schema not compiled",
        )
    return document


def _etag(request: Request) -> str:
    return f'"{request.app.state.content_hash}"'


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    """Weak comparison of `etag` against an If-None-Match header value."""
    if not if_none_match:
        return False
    candidates = [c.strip() for c in if_none_match.split(",")]
    if "*" in candidates:
        return True
    return any(c.removeprefix(WEAK_PREFIX) == etag for c in candidates)


@router.get("")
async def get_schema(request: Request):
    """Full document. Honours If-None-Match against the model content hash."""
    document = get_document_or_503(request)
    etag = _etag(request)
    if etag_matches(request.headers.get("if-none-match"), etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})
    return JSONResponse(
        content=document, media_type=SCHEMA_MEDIA_TYPE, headers={"ETag": etag},
    )


@router.get("/definitions/{name}")
async def get_definition(name: str, request: Request):
    """A single entry of `definitions`: a resource type or a base definition."""
    definitions = get_document_or_503(request)["definitions"]
    if name not in definitions:
        raise UnknownResourceError(name)
    return JSONResponse(
        content=definitions[name], media_type=SCHEMA_MEDIA_TYPE,
        headers={"ETag": _etag(request)},
    )


@router.get("/links")
async def list_links(request: Request, rel: RouteKind | None = None):
    """Link descriptions, optionally narrowed to one route kind."""
    links = get_document_or_503(request)["links"]
    if rel is not None:
        links = [link for link in links if link["rel"] == rel.value]
    return {"links": links, "count": len(links)}
