# =============================================================================
# app/routers/wallets.py - Wallet Endpoints Beyond CRUD
# =============================================================================
# Standard Wallet CRUD is generated from the routes document. This module
# supplies the hand-written handlers of the "wallets" group:
#
#   balance - opening balance plus the sum of the wallet's transactions
#
# Each handler is exposed only if a scope in the permissions document names
# its endpoint key as an action.
# =============================================================================

from typing import Callable

from fastapi import APIRouter, Request

from app.dependencies import StoreDep
from core.models.route import RouteEntry
from core.registry.permissions import PermissionRegistry
from core.registry.resolver import bind_group
from core.registry.routes import RouteRegistry

GROUP = "wallets"
WALLET = "Wallet"
TRANSACTION = "Transaction"

# Upper bound on transactions folded into one balance
MAX_TRANSACTIONS = 10_000


async def balance(request: Request, store: StoreDep) -> dict:
    """Current balance of one wallet."""
    wallet_id = next(iter(request.path_params.values()))
    wallet = store.get(WALLET, wallet_id)

    moves = [
        tx for tx in store.list(TRANSACTION, limit=MAX_TRANSACTIONS)
        if str(tx.get("wallet_id")) == str(wallet["id"])
    ]
    total = float(wallet.get("balance") or 0) + sum(float(tx.get("amount") or 0) for tx in moves)

    return {
        "id": wallet["id"],
        "currency": wallet.get("currency"),
        "balance": round(total, 8),
        "transactions": len(moves),
    }


HANDLERS = {
    "balance": balance,
}


def register(
    router: APIRouter,
    routes: RouteRegistry,
    permissions: PermissionRegistry,
    guard: Callable | None = None,
) -> list[RouteEntry]:
    return bind_group(router, routes, permissions, GROUP, HANDLERS, guard=guard)
