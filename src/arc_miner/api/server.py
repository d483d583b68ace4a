"""Claim history HTTP API (aiohttp)."""

from __future__ import annotations

import logging

from aiohttp import web

from arc_miner.errors import ValidationError
from arc_miner.ledger.reconciler import ClaimReconciler

log = logging.getLogger(__name__)

RECONCILER_KEY = web.AppKey("reconciler", ClaimReconciler)
RECENT_LIMIT_KEY = web.AppKey("recent_limit", int)


def _reconciler(request: web.Request) -> ClaimReconciler:
    return request.app[RECONCILER_KEY]


async def create_claim(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        return web.json_response({"error": "request body must be JSON"}, status=400)
    if not isinstance(body, dict):
        return web.json_response({"error": "request body must be an object"}, status=400)

    try:
        entry = await _reconciler(request).record_local_claim(
            wallet_address=body.get("walletAddress"),
            amount=body.get("amount"),
            transaction_hash=body.get("transactionHash"),
        )
    except ValidationError as exc:
        return web.json_response({"error": str(exc)}, status=400)
    return web.json_response(entry.to_dict())


async def recent_claims(request: web.Request) -> web.Response:
    limit = request.app[RECENT_LIMIT_KEY]
    if raw := request.query.get("limit"):
        try:
            limit = max(1, int(raw))
        except ValueError:
            return web.json_response({"error": "limit must be an integer"}, status=400)
    claims = await _reconciler(request).list_recent_claims(limit)
    return web.json_response([c.to_dict() for c in claims])


async def wallet_claims(request: web.Request) -> web.Response:
    wallet = request.match_info["walletAddress"]
    try:
        claims = await _reconciler(request).list_claims_for_wallet(wallet)
    except Exception as exc:
        log.error("Wallet history failed for %s: %s", wallet, exc, exc_info=True)
        return web.json_response({"error": str(exc)}, status=500)
    return web.json_response([c.to_dict() for c in claims])


async def total_claimed(request: web.Request) -> web.Response:
    total = await _reconciler(request).aggregate_total_claimed()
    return web.json_response(total.to_dict())


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def create_app(reconciler: ClaimReconciler, recent_limit: int = 50) -> web.Application:
    app = web.Application()
    app[RECONCILER_KEY] = reconciler
    app[RECENT_LIMIT_KEY] = recent_limit
    app.router.add_post("/api/claim-history", create_claim)
    app.router.add_get("/api/claim-history", recent_claims)
    app.router.add_get("/api/claim-history/{walletAddress}", wallet_claims)
    app.router.add_get("/api/total-claimed", total_claimed)
    app.router.add_get("/api/health", health)
    return app
