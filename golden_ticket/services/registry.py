"""Builds the service graph around one store and one API client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from flask import Flask, current_app

from golden_ticket.clients.api_client import GoldenTicketApi
from golden_ticket.db import Store
from golden_ticket.domain.schedule import resolve_local_timezone
from golden_ticket.services.auth_service import AuthService
from golden_ticket.services.collection_service import CollectionService
from golden_ticket.services.draw_info_service import DrawInfoService
from golden_ticket.services.forge_service import ForgeService
from golden_ticket.services.game_rules_service import GameRulesService
from golden_ticket.services.poller import ResultPoller
from golden_ticket.services.progress_service import ProgressService
from golden_ticket.services.result_service import ResultService
from golden_ticket.services.smelter_service import SmelterService
from golden_ticket.services.sync_service import SyncService
from golden_ticket.utils.dates import Clock, utcnow


@dataclass
class Services:
    store: Store
    api: GoldenTicketApi
    rules: GameRulesService
    collection: CollectionService
    forge: ForgeService
    smelter: SmelterService
    draw_info: DrawInfoService
    results: ResultService
    poller: ResultPoller
    progress: ProgressService
    auth: AuthService
    sync: SyncService

    def close(self) -> None:
        self.sync.close()
        self.api.close()
        self.store.close()


def build_api(config: Mapping[str, Any]) -> GoldenTicketApi:
    return GoldenTicketApi(
        str(config.get("API_BASE_URL")),
        timeout_seconds=float(config.get("API_TIMEOUT_SECONDS", 15.0)),
        result_timeout_seconds=float(config.get("API_RESULT_TIMEOUT_SECONDS", 20.0)),
        retries=int(config.get("API_RETRIES", 2)),
    )


def build_services(
    store: Store,
    config: Mapping[str, Any],
    api: GoldenTicketApi | None = None,
    clock: Clock = utcnow,
) -> Services:
    api = api or build_api(config)

    rules = GameRulesService(
        store,
        clock=clock,
        cutoff_lead=timedelta(minutes=int(config.get("CUTOFF_LEAD_MINUTES", 60))),
    )
    draw_info = DrawInfoService(
        store,
        api,
        clock=clock,
        ttl_seconds=float(config.get("NEXT_DRAW_CACHE_TTL_SECONDS", 300.0)),
    )
    results = ResultService(store, api, clock=clock)
    poller = ResultPoller(
        draw_info,
        results,
        rules,
        local_tz=resolve_local_timezone(config.get("LOCAL_TIMEZONE") or None),
        interval_seconds=float(config.get("POLL_INTERVAL_SECONDS", 3600.0)),
        noon_hour=int(config.get("POLL_NOON_HOUR", 12)),
        clock=clock,
    )
    progress = ProgressService(store, clock=clock)

    return Services(
        store=store,
        api=api,
        rules=rules,
        collection=CollectionService(store, clock=clock),
        forge=ForgeService(store, api, rules, clock=clock),
        smelter=SmelterService(store, api, rules, clock=clock),
        draw_info=draw_info,
        results=results,
        poller=poller,
        progress=progress,
        auth=AuthService(api, progress, default_game=str(config.get("DEFAULT_GAME", "lotto649"))),
        sync=SyncService(store, rules, draw_info, results, poller, progress, clock=clock),
    )


def init_services(app: Flask, store: Store, api: GoldenTicketApi | None = None, clock: Clock = utcnow) -> Services:
    services = build_services(store, app.config, api=api, clock=clock)
    app.extensions["services"] = services
    return services


def get_services() -> Services:
    services: Services | None = current_app.extensions.get("services")
    if services is None:
        raise RuntimeError("Services not initialized")
    return services
