#!/usr/bin/env python3
"""
SessionAuth — username/password registration, login and server-side sessions.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 3000 --reload
  python main.py import-users users.json

Environment variables are documented in core/config.py. The most common:
  DATABASE_URL          SQLAlchemy URL of the credential store (default sqlite:///./users.db)
  SESSION_TTL_SECONDS   Idle timeout of a session (default 3600)
  SECURE_COOKIES        Set to true when serving over HTTPS

import-users reads the flat users.json format of the original server:
  [{"login": "...", "password": "...", "firstName": "...", "lastName": "..."}]
Every entry goes through normal registration, so passwords are hashed and
duplicates are skipped.
"""

import argparse
import json
import sys
from pathlib import Path

from auth.errors import AuthServiceError, ConflictError
from auth.service import AuthService
from auth.sessions import SessionStore
from auth.store import create_credential_store
from core.config import get_settings


def _load_users(path: str) -> list[dict]:
    """Read a users.json file. Returns [] (after printing why) if unusable."""
    file_path = Path(path).resolve()
    if not file_path.is_file():
        print(f"  [!] '{path}' is not a readable file.")
        return []
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"  [!] Could not read file '{path}': {e}")
        return []
    if not isinstance(data, list):
        print(f"  [!] '{path}' must contain a JSON list of users.")
        return []
    return [entry for entry in data if isinstance(entry, dict)]


def import_users(service: AuthService, users: list[dict]) -> tuple[int, int]:
    """Register every entry; return (created, skipped)."""
    created = skipped = 0
    for entry in users:
        login = entry.get("login")
        try:
            service.register(entry.get("firstName"), entry.get("lastName"), login, entry.get("password"))
        except ConflictError:
            print(f"  [=] {login}: already registered")
            skipped += 1
        except AuthServiceError as e:
            print(f"  [!] {login or '<no login>'}: {e.message}")
            skipped += 1
        else:
            print(f"  [+] {login}")
            created += 1
    return created, skipped


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def _cmd_import_users(args: argparse.Namespace) -> int:
    users = _load_users(args.file)
    if not users:
        return 1
    settings = get_settings()
    store = create_credential_store(settings)
    try:
        service = AuthService(store, SessionStore(ttl_seconds=settings.session_ttl_seconds))
        created, skipped = import_users(service, users)
    finally:
        store.close()
    print(f"\n  {created} created, {skipped} skipped")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SessionAuth server and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting, 3000)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    serve.set_defaults(func=_cmd_serve)

    imp = sub.add_parser("import-users", help="Register users from a users.json file")
    imp.add_argument("file", help="Path to users.json")
    imp.set_defaults(func=_cmd_import_users)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
