#!/usr/bin/env python3
# =============================================================================
# scripts/check_config.py - Validate the Route and Permission Documents
# =============================================================================
# Loads both documents exactly as the API does at startup and prints what
# would be exposed, per resource and CRUD operation.
#
# Usage:
#   python scripts/check_config.py
#   python scripts/check_config.py --routes config/routes.yaml --permissions config/permissions.yaml --strict
#
# Exit code is 1 if either document fails to load.
# =============================================================================

import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models.route import CrudOperation
from core.registry.errors import RegistryError
from core.registry.loader import load_permissions, load_routes


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate mWallet config documents")
    parser.add_argument("--routes", default="config/routes.yaml")
    parser.add_argument("--permissions", default="config/permissions.yaml")
    parser.add_argument("--strict", action="store_true", help="Missing top-level collections are errors")
    args = parser.parse_args()

    try:
        routes = load_routes(args.routes, strict=args.strict)
        permissions = load_permissions(args.permissions, strict=args.strict)
    except RegistryError as e:
        print(f"FAILED: {e}")
        return 1

    print("=" * 60)
    print(f"{len(routes)} routes in groups: {', '.join(routes.keys)}")
    print(f"{len(permissions)} permission blocks: {', '.join(permissions.resources)}")
    print("=" * 60)

    for entry in routes:
        status = entry.status if entry.status is not None else "-"
        print(f"  {','.join(entry.method_names):<10} {entry.path:<40} {status:<4} {entry.endpoint}")

    print()
    print("CRUD exposure:")
    for resource in sorted(routes.resources):
        if not permissions.crud_permissions(resource):
            print(f"  {resource}: no CRUD scopes, nothing generated")
            continue
        for operation in CrudOperation:
            entry = routes.find_operation(resource, operation)
            scopes = permissions.scopes_for(resource, operation)
            if entry is None:
                continue
            state = ", ".join(scopes) if scopes else "NOT EXPOSED (no scope)"
            print(f"  {resource}.{operation.value:<9} {entry.path:<32} {state}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
