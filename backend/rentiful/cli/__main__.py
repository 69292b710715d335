# backend/rentiful/cli/__main__.py
from __future__ import annotations

import argparse
import json

from rentiful.cli.seed_demo import seed_demo
from rentiful.db import SessionLocal, init_db
from rentiful.domain.property_search import search_properties
from rentiful.domain.search_filters import normalize_filters, parse_search_params
from rentiful.logging_config import configure_logging


def _pair(raw: str | None) -> list[float | None] | None:
    if not raw:
        return None
    lo, _, hi = raw.partition(":")
    return [float(lo) if lo else None, float(hi) if hi else None]


def _cmd_search(args: argparse.Namespace) -> None:
    state = {
        "priceRange": _pair(args.price),
        "squareFeet": _pair(args.square_feet),
        "beds": args.beds,
        "baths": args.baths,
        "propertyType": args.property_type,
        "amenities": args.amenity or [],
        "availableFrom": args.available_from,
        "favoriteIds": args.favorite_id or [],
        "coordinates": [args.longitude, args.latitude] if args.latitude is not None else None,
    }
    params = normalize_filters(state)

    db = SessionLocal()
    try:
        rows = search_properties(db, parse_search_params(params))
    finally:
        db.close()

    print(json.dumps({"params": params, "count": len(rows), "results": rows}, indent=2, default=str))


def main() -> None:
    p = argparse.ArgumentParser(prog="python -m rentiful.cli")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables directly (local/dev)")

    seed = sub.add_parser("seed-demo", help="demo manager, tenant, properties and a lease")
    seed.add_argument("--manager-cognito-id", default="demo-manager")
    seed.add_argument("--tenant-cognito-id", default="demo-tenant")
    seed.add_argument("--no-lease", action="store_true")

    s = sub.add_parser("search", help="run a property search the way GET /properties does")
    s.add_argument("--price", help="min:max, either side optional")
    s.add_argument("--square-feet", help="min:max, either side optional")
    s.add_argument("--beds")
    s.add_argument("--baths")
    s.add_argument("--property-type")
    s.add_argument("--amenity", action="append")
    s.add_argument("--available-from")
    s.add_argument("--favorite-id", action="append", type=int)
    s.add_argument("--latitude", type=float)
    s.add_argument("--longitude", type=float)

    args = p.parse_args()
    configure_logging()

    if args.command == "init-db":
        init_db()
        print({"ok": True})
    elif args.command == "seed-demo":
        init_db()
        out = seed_demo(
            manager_cognito_id=args.manager_cognito_id,
            tenant_cognito_id=args.tenant_cognito_id,
            create_lease=not args.no_lease,
        )
        print(
            {
                "ok": True,
                "manager_cognito_id": out.manager_cognito_id,
                "tenant_cognito_id": out.tenant_cognito_id,
                "property_ids": out.property_ids,
                "lease_id": out.lease_id,
            }
        )
    elif args.command == "search":
        _cmd_search(args)


if __name__ == "__main__":
    main()
