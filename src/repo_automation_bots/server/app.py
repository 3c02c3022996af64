"""FastAPI app factory.

Endpoints are thin wrappers over the bot handlers. Signature verification is
expected to happen in front of this service (proxy or platform).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from repo_automation_bots import __version__
from repo_automation_bots.config import BotSettings
from repo_automation_bots.errors import (
    BotError,
    ConfigurationError,
    HandlerResult,
    UpstreamAPIError,
)
from repo_automation_bots.github.client import GitHubClient
from repo_automation_bots.github.factory import ClientFactory
from repo_automation_bots.label_sync.handler import handle_repository_event, repository_full_name
from repo_automation_bots.label_sync.manifest import fetch_manifest, sweep_labels
from repo_automation_bots.release_please.handler import handle_push
from repo_automation_bots.release_please.runner import CliReleaseRunner, ReleaseRunner
from repo_automation_bots.release_please.strategy import ReleasePR
from repo_automation_bots.server.deliveries import DeliveryLog

logger = logging.getLogger(__name__)

RepoClientFactory = Callable[..., GitHubClient]
# (repository, installation_id) -> runner authenticated for that repository
RunnerFactory = Callable[[str, int | None], ReleaseRunner]


def _installation_id(payload: dict[str, Any]) -> int | None:
    installation = payload.get("installation")
    if isinstance(installation, dict) and isinstance(installation.get("id"), int):
        return installation["id"]
    return None


def _default_runner_factory(settings: BotSettings, tokens: ClientFactory) -> RunnerFactory:
    def make(repository: str, installation_id: int | None) -> ReleaseRunner:
        return CliReleaseRunner(
            command=settings.release_please_command,
            token=tokens.token_for(repository, installation_id=installation_id),
            timeout_seconds=settings.release_please_timeout_seconds,
        )

    return make


def run_startup_sweep(settings: BotSettings, client_factory: RepoClientFactory) -> None:
    try:
        repos = fetch_manifest(settings.label_sync_manifest_url)
    except UpstreamAPIError as e:
        logger.error("Startup label sync skipped", extra={"error": e.message})
        return
    reports = sweep_labels(repos, client_factory, max_workers=settings.label_sync_max_workers)
    logger.info(
        "Startup label sync finished",
        extra={"repositories": len(reports), "manifest": len(repos)},
    )


def create_app(
    settings: BotSettings | None = None,
    *,
    client_factory: RepoClientFactory | None = None,
    runner_factory: RunnerFactory | None = None,
) -> FastAPI:
    settings = settings or BotSettings()
    tokens = ClientFactory(settings)
    make_client: RepoClientFactory = client_factory or tokens
    make_runner = runner_factory or _default_runner_factory(settings, tokens)
    deliveries = DeliveryLog(settings.delivery_log_size)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if settings.label_sync_on_startup:
            threading.Thread(
                target=run_startup_sweep,
                name="label-sync-startup",
                daemon=True,
                args=(settings, make_client),
            ).start()
        yield

    app = FastAPI(
        title="Repo Automation Bots",
        version=__version__,
        description="GitHub App webhooks for release-please and label-sync.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.deliveries = deliveries

    def process(event: str, payload: dict[str, Any]) -> HandlerResult:
        if event == "push":
            repository = payload.get("repository")
            full_name = repository.get("full_name") if isinstance(repository, dict) else None
            if not isinstance(full_name, str) or "/" not in full_name:
                raise ValueError("push payload requires repository.full_name")
            installation_id = _installation_id(payload)

            def runner(pr: ReleasePR) -> None:
                # Resolve credentials only once the push has passed the gate.
                make_runner(full_name, installation_id)(pr)

            github = make_client(full_name, installation_id=installation_id)
            try:
                return handle_push(
                    payload,
                    github=github,
                    runner=runner,
                    api_url=settings.github_base_url,
                )
            finally:
                github.close()

        if event == "repository":
            full_name = repository_full_name(payload)
            action = payload.get("action")
            if action != "created":
                logger.info(
                    "Ignoring repository event",
                    extra={"action": action, "repo": full_name, "outcome": "ignored"},
                )
                return HandlerResult(
                    status="ignored", message=f"repository action {action!r} not handled"
                )
            github = make_client(full_name, installation_id=_installation_id(payload))
            try:
                return handle_repository_event(
                    payload, github=github, max_workers=settings.label_sync_max_workers
                )
            finally:
                github.close()

        logger.info("Ignoring unhandled event", extra={"event": event, "outcome": "ignored"})
        return HandlerResult(status="ignored", message=f"event {event!r} not handled")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/webhook")
    async def webhook(request: Request) -> dict[str, object]:
        event = request.headers.get("X-GitHub-Event")
        delivery_id = request.headers.get("X-GitHub-Delivery", "")
        if not event:
            raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

        try:
            payload = await request.json()
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Body must be a JSON object")

        if delivery_id and not deliveries.record(delivery_id):
            logger.info(
                "Ignoring duplicate delivery",
                extra={"delivery_id": delivery_id, "event": event, "outcome": "ignored"},
            )
            return HandlerResult(status="ignored", message="duplicate delivery").to_json()

        log_ctx = {"delivery_id": delivery_id, "event": event}
        logger.info("Webhook received", extra=log_ctx)
        try:
            result = await run_in_threadpool(process, event, payload)
        except ValueError as e:
            if delivery_id:
                deliveries.forget(delivery_id)
            raise HTTPException(status_code=400, detail=str(e)) from e
        except ConfigurationError as e:
            # Nothing was dispatched; a redelivery after fixing the config may run.
            if delivery_id:
                deliveries.forget(delivery_id)
            logger.error(
                "Webhook rejected: configuration error", extra={**log_ctx, "error": e.message}
            )
            raise HTTPException(status_code=422, detail=e.message) from e
        except UpstreamAPIError as e:
            logger.error(
                "Webhook failed: upstream error",
                extra={**log_ctx, "error": e.message, "status_code": e.status_code},
            )
            raise HTTPException(status_code=502, detail=e.message) from e
        except BotError as e:
            logger.exception("Webhook failed", extra=log_ctx)
            raise HTTPException(status_code=500, detail=e.message) from e

        return result.to_json()

    return app
