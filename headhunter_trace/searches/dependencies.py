"""Search module dependencies (Dependency Injection)."""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from headhunter_trace.auth.dependencies import get_current_user, get_user_repository
from headhunter_trace.config import get_settings
from headhunter_trace.database import get_database
from headhunter_trace.reports.renderer import ReportRenderer
from headhunter_trace.searches.clients.analysis import AnalysisFunctionClient, get_analysis_client
from headhunter_trace.searches.events import SearchEvents, events
from headhunter_trace.searches.repository import SearchRepository
from headhunter_trace.searches.service import SearchService
from headhunter_trace.searches.session import SearchSession
from headhunter_trace.users.repository import UserRepository


def get_search_events() -> SearchEvents:
    """Process-wide status event channel."""
    return events


def get_search_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> SearchRepository:
    return SearchRepository(db)


def get_search_service(
    repository: Annotated[SearchRepository, Depends(get_search_repository)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    analysis: Annotated[AnalysisFunctionClient, Depends(get_analysis_client)],
    search_events: Annotated[SearchEvents, Depends(get_search_events)],
) -> SearchService:
    return SearchService(
        repository=repository,
        user_repository=user_repository,
        analysis=analysis,
        events=search_events,
    )


def get_search_session(
    current_user: Annotated[dict, Depends(get_current_user)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> SearchSession:
    """The caller's session, threaded explicitly into the search flow."""
    return SearchSession(current_user, user_repository)


def get_report_renderer() -> ReportRenderer:
    return ReportRenderer(product_name=get_settings().product_name)
