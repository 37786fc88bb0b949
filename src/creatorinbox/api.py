"""Summary: FastAPI application for CreatorInbox.

Importance: Exposes HTTP endpoints for the composer UI and the daily agent.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from typing import Any, AsyncIterator

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from creatorinbox.app import build_services
from creatorinbox.capacity import InvalidArgumentError, calculate_time_commitment
from creatorinbox.config import AppConfig
from creatorinbox.models import DigestDay, DraftEditEvent


class SuggestCapacityRequest(BaseModel):
    """Summary: Request payload for capacity suggestions.

    Importance: Lets the settings screen propose a starting capacity.
    Alternatives: Compute suggestions on the client.
    """

    message_count: int = Field(ge=0)
    days: int = Field(default=30, ge=1, le=365)


class PreviewRequest(BaseModel):
    """Summary: Request payload for distribution previews.

    Importance: Shows the effect of a capacity setting before saving it.
    Alternatives: Preview only the configured capacity.
    """

    total_messages: int
    capacity: int | None = None
    faq_rate: float | None = None


class DigestRequest(BaseModel):
    """Summary: Request payload for recording a daily digest.

    Importance: Lets the daily agent report what it triaged.
    Alternatives: Have the agent write directly to storage.
    """

    day: date
    deep: int = Field(ge=0)
    faq: int = Field(ge=0)
    archived: int = Field(ge=0)


class DraftSaveRequest(BaseModel):
    """Summary: Request payload for saving a reply draft.

    Importance: Carries composer edits to the auto-save lifecycle.
    Alternatives: Save drafts only on the client device.
    """

    conversation_id: str
    message_id: str
    draft_text: str
    confidence: float = Field(default=0, ge=0, le=100)
    version: int = Field(ge=1)
    debounce_ms: int = Field(default=0, ge=0, le=60000)


class DraftEditEventRequest(BaseModel):
    """Summary: Request payload for tracking how a sent draft was edited.

    Importance: Feeds draft edit-rate analytics from the composer.
    Alternatives: Derive edits from stored draft versions.
    """

    conversation_id: str
    message_id: str
    was_edited: bool
    edit_count: int = Field(default=0, ge=0)
    time_to_edit_ms: int = Field(default=0, ge=0)
    requires_editing: bool = False
    override_applied: bool = False
    confidence: float = Field(default=0, ge=0, le=100)
    draft_version: int = Field(default=1, ge=1)


def create_app(config: AppConfig) -> FastAPI:
    """Summary: Create a FastAPI app wired to CreatorInbox services.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    services = build_services(config)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await services.drafts.flush()

    app = FastAPI(title="CreatorInbox API", version="0.1.0", lifespan=lifespan)

    def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce API key authentication when configured.

        Importance: Adds a minimal security layer for local and private deployments.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.api_key:
            return
        if x_api_key != config.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local and cloud deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok"}

    @app.post("/capacity/suggest", dependencies=[Depends(require_api_key)])
    def suggest(payload: SuggestCapacityRequest) -> dict[str, int]:
        return services.planner.suggest(payload.message_count, payload.days)

    @app.post("/capacity/preview", dependencies=[Depends(require_api_key)])
    def preview(payload: PreviewRequest) -> dict[str, int]:
        """Summary: Preview the deep, FAQ, and archived split.

        Importance: Backs the capacity settings preview.
        Alternatives: Duplicate the math in the client.
        """

        try:
            distribution = services.planner.preview(
                payload.total_messages, payload.capacity, payload.faq_rate
            )
        except InvalidArgumentError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return distribution.as_dict()

    @app.get("/capacity/time-commitment", dependencies=[Depends(require_api_key)])
    def time_commitment(capacity: int) -> dict[str, int]:
        try:
            minutes = calculate_time_commitment(capacity)
        except InvalidArgumentError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"capacity": capacity, "minutes": minutes}

    @app.post("/digests", dependencies=[Depends(require_api_key)])
    async def record_digest(payload: DigestRequest) -> dict[str, str]:
        digest = DigestDay(
            day=payload.day, deep=payload.deep, faq=payload.faq, archived=payload.archived
        )
        document_id = await services.reports.record_digest(services.user_id, digest)
        return {"id": document_id}

    @app.get("/reports/weekly", dependencies=[Depends(require_api_key)])
    async def weekly_report(capacity: int | None = None) -> dict[str, Any]:
        """Summary: Build the capacity report for the current week.

        Importance: Surfaces capacity adjustments to the creator.
        Alternatives: Only generate reports from a scheduled job.
        """

        capacity_set = config.daily_limit if capacity is None else capacity
        report = await services.reports.build_weekly_report(services.user_id, capacity_set)
        return asdict(report)

    @app.post("/drafts", dependencies=[Depends(require_api_key)])
    async def save_draft(payload: DraftSaveRequest) -> dict[str, Any]:
        """Summary: Save a reply draft, optionally debounced.

        Importance: Backs composer auto-save.
        Alternatives: Persist drafts only when the reply is sent.
        """

        result = await services.drafts.save_draft(
            payload.conversation_id,
            payload.message_id,
            payload.draft_text,
            payload.confidence,
            payload.version,
            debounce_ms=payload.debounce_ms,
        )
        return asdict(result)

    @app.get("/drafts/{conversation_id}/{message_id}", dependencies=[Depends(require_api_key)])
    async def restore_draft(conversation_id: str, message_id: str) -> dict[str, Any]:
        return asdict(await services.drafts.restore_draft(conversation_id, message_id))

    @app.get(
        "/drafts/{conversation_id}/{message_id}/history",
        dependencies=[Depends(require_api_key)],
    )
    async def draft_history(conversation_id: str, message_id: str) -> dict[str, Any]:
        return asdict(await services.drafts.get_draft_history(conversation_id, message_id))

    @app.delete("/drafts/{conversation_id}/{message_id}", dependencies=[Depends(require_api_key)])
    async def clear_drafts(conversation_id: str, message_id: str) -> dict[str, Any]:
        return asdict(await services.drafts.clear_drafts(conversation_id, message_id))

    @app.post("/drafts/{conversation_id}/purge", dependencies=[Depends(require_api_key)])
    async def purge_drafts(conversation_id: str) -> dict[str, Any]:
        return asdict(await services.drafts.purge_expired_drafts(conversation_id))

    @app.post("/analytics/draft-edits", dependencies=[Depends(require_api_key)])
    async def track_draft_edit(payload: DraftEditEventRequest) -> dict[str, Any]:
        """Summary: Record a draft edit event for the configured creator.

        Importance: Backs edit-rate analytics.
        Alternatives: Batch events on the client and upload daily.
        """

        event = DraftEditEvent(
            message_id=payload.message_id,
            conversation_id=payload.conversation_id,
            was_edited=payload.was_edited,
            edit_count=payload.edit_count,
            time_to_edit_ms=payload.time_to_edit_ms,
            requires_editing=payload.requires_editing,
            override_applied=payload.override_applied,
            confidence=payload.confidence,
            draft_version=payload.draft_version,
        )
        return asdict(await services.analytics.track_edit_event(services.user_id, event))

    @app.get("/analytics/drafts", dependencies=[Depends(require_api_key)])
    async def draft_edit_metrics(period: str = "weekly") -> dict[str, Any]:
        try:
            metrics = await services.analytics.calculate_edit_rate_metrics(
                services.user_id, period
            )
        except InvalidArgumentError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return asdict(metrics)

    @app.get("/analytics/drafts/aggregate", dependencies=[Depends(require_api_key)])
    async def draft_aggregate_metrics() -> dict[str, Any]:
        metrics = await services.analytics.get_aggregate_metrics(services.user_id)
        if metrics is None:
            raise HTTPException(status_code=404, detail="No draft edit events recorded")
        return asdict(metrics)

    return app


def main() -> None:
    """Summary: Run the API with uvicorn using environment configuration.

    Importance: Provides a console entry point for local serving.
    Alternatives: Invoke uvicorn from the shell with an import string.
    """

    config = AppConfig.from_env()
    uvicorn.run(create_app(config), host=config.api_host, port=config.api_port)
