"""Search API router."""

import asyncio
import json
import logging
from typing import Annotated, AsyncGenerator
from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.responses import Response, StreamingResponse

from headhunter_trace.reports.exceptions import ReportError
from headhunter_trace.reports.renderer import ReportRenderer
from headhunter_trace.searches.dependencies import (
    get_report_renderer,
    get_search_events,
    get_search_service,
    get_search_session,
)
from headhunter_trace.searches.events import SearchEvents, is_terminal
from headhunter_trace.searches.exceptions import (
    CreditDeductionError,
    EmptyQueryError,
    NoCreditsError,
    RecordCreationError,
    SearchError,
    SearchNotCompletedError,
    SearchNotFoundError,
)
from headhunter_trace.searches.schemas import (
    DashboardResponse,
    SearchRecordResponse,
    SearchRequest,
    SearchResultsResponse,
    SearchStatus,
    record_to_response,
)
from headhunter_trace.searches.service import SearchService
from headhunter_trace.searches.session import SearchSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/searches", tags=["searches"])

KEEPALIVE_SECONDS = 15


@router.post("", response_model=SearchRecordResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_search(
    request: SearchRequest,
    background_tasks: BackgroundTasks,
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> SearchRecordResponse:
    """
    Start a search. Costs one credit.

    The record is returned in the `processing` state; the analysis runs in the
    background. Follow it with `GET /searches/{id}` or `GET /searches/{id}/events`.
    """
    try:
        record = await service.submit(session, request.query)
    except EmptyQueryError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except (NoCreditsError, CreditDeductionError) as e:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=e.message)
    except RecordCreationError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    background_tasks.add_task(
        run_background_search,
        service=service,
        search_id=record["_id"],
        query=record["query"],
        user_id=session.user_id,
    )
    return record_to_response(record)


async def run_background_search(
    service: SearchService,
    search_id: str,
    query: str,
    user_id: str,
) -> None:
    """Background task: run the analysis. Failures are already recorded on the search."""
    try:
        await service.run(search_id, query, user_id)
    except SearchError as e:
        logger.info(f"Background search {search_id} ended in failure: {e.message}")
    except Exception:
        logger.exception(f"Background search {search_id} crashed")
        try:
            await service.fail(search_id, "Search failed")
        except Exception:
            logger.exception(f"Could not mark search {search_id} as failed")


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 original (RFC 6266)."""
    fallback = "".join(c if " " <= c <= "~" and c not in '"\\' else "_" for c in filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("", response_model=list[SearchRecordResponse])
async def list_searches(
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> list[SearchRecordResponse]:
    """Recent search history of the caller, newest first."""
    records = await service.list_searches(session.user_id)
    return [record_to_response(r) for r in records]


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> DashboardResponse:
    """Credits, plan, usage stats and recent history."""
    return await service.get_dashboard(session)


@router.get("/{search_id}", response_model=SearchRecordResponse)
async def get_search(
    search_id: str,
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> SearchRecordResponse:
    try:
        record = await service.get_search(search_id, session.user_id)
    except SearchNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Search not found")
    return record_to_response(record)


@router.get("/{search_id}/results", response_model=SearchResultsResponse)
async def get_search_results(
    search_id: str,
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
) -> SearchResultsResponse:
    """The record plus its SearchData once the search has completed."""
    try:
        record, data = await service.get_search_data(search_id, session.user_id)
    except SearchNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Search not found")
    except SearchNotCompletedError:
        record = await service.get_search(search_id, session.user_id)
        return SearchResultsResponse(search=record_to_response(record), data=None)
    return SearchResultsResponse(search=record_to_response(record), data=data)


@router.get("/{search_id}/report")
async def download_report(
    search_id: str,
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
    renderer: Annotated[ReportRenderer, Depends(get_report_renderer)],
) -> Response:
    """Download the PDF report of a completed search."""
    try:
        record, data = await service.get_search_data(search_id, session.user_id)
    except SearchNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Search not found")
    except SearchNotCompletedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    try:
        report = renderer.render(record["query"], data)
    except ReportError as e:
        logger.error(f"Report generation failed for search {search_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Report generation failed",
        )

    return Response(
        content=report.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": content_disposition(report.filename),
            "X-Report-Id": report.report_id,
        },
    )


@router.get("/{search_id}/events")
async def search_events(
    search_id: str,
    session: Annotated[SearchSession, Depends(get_search_session)],
    service: Annotated[SearchService, Depends(get_search_service)],
    channel: Annotated[SearchEvents, Depends(get_search_events)],
) -> StreamingResponse:
    """Server-Sent Events stream of status changes, closed on a terminal status."""
    queue = channel.subscribe(search_id)
    try:
        record = await service.get_search(search_id, session.user_id)
    except SearchNotFoundError:
        channel.unsubscribe(search_id, queue)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Search not found")

    async def event_stream() -> AsyncGenerator[bytes, None]:
        try:
            current = {
                "search_id": search_id,
                "type": "status",
                "status": record["status"],
                "results_count": record.get("results_count", 0),
            }
            yield f"data: {json.dumps(current)}\n\n".encode("utf-8")
            if record["status"] != SearchStatus.PROCESSING.value:
                return
            while True:
                try:
                    data = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield b"event: ping\n\n"
                    continue
                yield f"data: {data}\n\n".encode("utf-8")
                if is_terminal(data):
                    return
        finally:
            channel.unsubscribe(search_id, queue)

    return StreamingResponse(event_stream(), media_type="text/event-stream")
