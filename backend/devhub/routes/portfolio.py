"""
DevHub Backend — Portfolio Route Handlers
===========================================

What:  CRUD for portfolio links under /api/portfolio.
How:   Each handler makes one PortfolioRepository call. Validation errors,
       absent records and store failures become 400 / 404 / 500 through the
       global exception handlers in main.py.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from devhub.dependencies import get_portfolio_repository
from devhub.exceptions import NotFoundError
from devhub.schemas.common import CreatedResponse, ErrorResponse
from devhub.schemas.portfolio import PortfolioLink
from devhub.services.lookup import Found
from devhub.services.repository import PortfolioRepository

router = APIRouter(prefix="/api/portfolio", tags=["Portfolio"])

ERROR_RESPONSES = {
    400: {"description": "Invalid record", "model": ErrorResponse},
    500: {"description": "Store unavailable", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[PortfolioLink],
    summary="List portfolio links in display order",
)
async def list_links(
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> List[PortfolioLink]:
    return await repo.list()


@router.get(
    "/category/{category}",
    response_model=List[PortfolioLink],
    summary="List portfolio links of one category",
)
async def list_links_by_category(
    category: str,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> List[PortfolioLink]:
    return await repo.by_category(category)


@router.get(
    "/{link_id}",
    response_model=PortfolioLink,
    responses={404: {"description": "Link not found", "model": ErrorResponse}},
    summary="Get a portfolio link",
)
async def get_link(
    link_id: str,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> PortfolioLink:
    result = await repo.get_by_id(link_id)
    if isinstance(result, Found):
        return result.record
    raise NotFoundError(resource="portfolio link", resource_id=link_id)


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    responses=ERROR_RESPONSES,
    summary="Create a portfolio link",
)
async def create_link(
    link: PortfolioLink,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> CreatedResponse:
    return CreatedResponse(id=await repo.create(link))


@router.put(
    "/{link_id}",
    response_model=PortfolioLink,
    responses=ERROR_RESPONSES,
    summary="Replace a portfolio link",
    description="Full replace: fields missing from the body are cleared.",
)
async def update_link(
    link_id: str,
    link: PortfolioLink,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> PortfolioLink:
    return await repo.update(link_id, link)


@router.delete("/{link_id}", status_code=204, summary="Delete a portfolio link")
async def delete_link(
    link_id: str,
    repo: PortfolioRepository = Depends(get_portfolio_repository),
) -> Response:
    await repo.delete(link_id)
    return Response(status_code=204)
