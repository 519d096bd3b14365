"""The osint-search analysis function.

Relays a query to the AI gateway and returns the parsed SearchData. Served by
this app by default, but called over HTTP like any external function.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from headhunter_trace.analysis.exceptions import AnalysisError, GatewayRateLimitedError
from headhunter_trace.analysis.gateway import AIGatewayClient, get_gateway_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


class AnalysisRequest(BaseModel):
    query: str
    search_id: str | None = Field(default=None, alias="searchId")
    user_id: str | None = Field(default=None, alias="userId")


@router.post("/osint-search")
async def osint_search(
    request: AnalysisRequest,
    gateway: Annotated[AIGatewayClient, Depends(get_gateway_client)],
) -> JSONResponse:
    """Generate fictional footprint data for a query.

    **Returns:**
    - 200 `{success: true, data, searchId, query}`
    - 429 `{error}` when the gateway is rate limited
    - 500 `{success: false, error}` for any other failure
    """
    logger.info(f"Starting OSINT search for query: {request.query}")
    try:
        data = await gateway.analyze(request.query)
    except GatewayRateLimitedError as e:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"error": e.message},
        )
    except AnalysisError as e:
        logger.error(f"OSINT search error: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": e.message},
        )

    return JSONResponse(
        content={
            "success": True,
            "data": data,
            "searchId": request.search_id,
            "query": request.query,
        }
    )
