from __future__ import annotations

import logging
from dataclasses import dataclass, field

from route_groups import Group, logging_middleware


@dataclass
class Request:
    path: str
    headers: dict = field(default_factory=dict)


def require_token(next_handler):
    def handler(request):
        if request.headers.get("Authorization") != "Bearer demo":
            return {"status": 401}
        return next_handler(request)

    return handler


def invoice_list(request):
    return {"status": 200, "body": ["Inv-001", "Inv-002"]}


def stock_level(request):
    return {"status": 200, "body": {"item": "part-123", "qty": 42}}


def health(request):
    return {"status": 200, "body": "ok"}


# Billing is private: its token check stays inside the billing group
billing = Group("billing").attach_middleware(require_token)
billing.register("/billing/invoices", invoice_list)

inventory = Group("inventory")
inventory.register("/inventory/stock", stock_level)

# COMPOSITION: every route of the app gets the access log
app = Group("app").attach_middleware(logging_middleware())
app.register(billing, inventory, "/health", health)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    mux = app.compile()

    print("--- Service Composition Demo ---")
    print(f"Invoices (no token): {mux.dispatch(Request('/billing/invoices'))}")
    authorized = Request("/billing/invoices", {"Authorization": "Bearer demo"})
    print(f"Invoices (token): {mux.dispatch(authorized)}")
    print(f"Stock: {mux.dispatch(Request('/inventory/stock'))}")
    print(f"Health: {mux.dispatch(Request('/health'))}")

    print("\nInstalled routes:")
    for info in app.describe():
        print(f" - {info['path']} -> {info['name']} via {info['layers']}")
