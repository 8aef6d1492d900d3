"""
Minimal client simulator for the licensing server.

Plays both sides by hand: a desktop install registering and polling its activation status,
and an admin granting, blocking and listing installations.

Uses only Python stdlib (no requests dependency).

Examples:
  python client_sim.py register --machine-id m1
  python client_sim.py status --machine-id m1
  python client_sim.py --admin-token secret grant --machine-id m1 --days 30 --notes "trial extension"
  python client_sim.py --admin-token secret block --machine-id m1
  python client_sim.py --admin-token secret installs --limit 20
  python client_sim.py poll --machine-id m1 --duration 30 --interval 5
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass


@dataclass
class HttpResult:
    status: int
    body: dict | list | str | None
    raw: str | None


def _request(method: str, url: str, payload: dict | None = None, token: str | None = None, timeout_s: float = 10.0) -> HttpResult:
    headers = {
        "Accept": "application/json",
        # Set a UA so it's easy to spot in logs/audit.
        "User-Agent": "licensing-client-sim/1.0",
    }
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"Bearer {token}"
    req = urllib.request.Request(url=url, data=data, method=method, headers=headers)
    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
            status = getattr(resp, "status", 200)
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp else None
        status = e.code
    except urllib.error.URLError as e:
        return HttpResult(status=0, body={"error": str(e)}, raw=None)
    try:
        body = json.loads(raw) if raw else None
    except json.JSONDecodeError:
        body = raw
    return HttpResult(status=status, body=body, raw=raw)


def _print_result(label: str, r: HttpResult) -> None:
    print(f"\n== {label} ==")
    print(f"HTTP {r.status}")
    if isinstance(r.body, (dict, list)):
        print(json.dumps(r.body, indent=2))
    elif r.body is None:
        print("(no body)")
    else:
        print(r.body)


def _url(args: argparse.Namespace, path: str, query: dict | None = None) -> str:
    url = args.base_url.rstrip("/") + path
    if query:
        url += "?" + urllib.parse.urlencode({k: v for k, v in query.items() if v is not None})
    return url


def _exit_code(r: HttpResult) -> int:
    return 0 if 200 <= r.status < 300 else 1


def cmd_register(args: argparse.Namespace) -> int:
    r = _request("POST", _url(args, "/register_install"), {"machine_id": args.machine_id}, timeout_s=args.timeout)
    _print_result("register_install", r)
    return _exit_code(r)


def cmd_status(args: argparse.Namespace) -> int:
    r = _request("GET", _url(args, "/activation_status", {"machine_id": args.machine_id}), timeout_s=args.timeout)
    _print_result("activation_status", r)
    return _exit_code(r)


def cmd_grant(args: argparse.Namespace) -> int:
    payload = {"machine_id": args.machine_id, "days": args.days}
    if args.notes is not None:
        payload["notes"] = args.notes
    r = _request("POST", _url(args, "/admin/grant"), payload, token=args.admin_token, timeout_s=args.timeout)
    _print_result("admin/grant", r)
    return _exit_code(r)


def cmd_block(args: argparse.Namespace) -> int:
    path = "/admin/block" if args.cmd == "block" else "/admin/unblock"
    r = _request("POST", _url(args, path), {"machine_id": args.machine_id}, token=args.admin_token, timeout_s=args.timeout)
    _print_result(path.lstrip("/"), r)
    return _exit_code(r)


def cmd_installs(args: argparse.Namespace) -> int:
    url = _url(args, "/admin/installs", {"limit": args.limit, "offset": args.offset})
    r = _request("GET", url, token=args.admin_token, timeout_s=args.timeout)
    _print_result("admin/installs", r)
    return _exit_code(r)


def cmd_poll(args: argparse.Namespace) -> int:
    # register once, then poll status like a running app
    if cmd_register(args) != 0:
        return 1

    start = time.time()
    while True:
        if cmd_status(args) != 0:
            return 1
        if time.time() - start >= args.duration:
            break
        time.sleep(args.interval)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Licensing server client simulator")
    p.add_argument("--base-url", default="http://127.0.0.1:3000", help="Server base URL")
    p.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout (seconds)")
    p.add_argument("--admin-token", default=os.environ.get("ADMIN_TOKEN"), help="Bearer token for /admin routes")

    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("register", help="POST /register_install")
    pr.add_argument("--machine-id", required=True)
    pr.set_defaults(func=cmd_register)

    ps = sub.add_parser("status", help="GET /activation_status")
    ps.add_argument("--machine-id", required=True)
    ps.set_defaults(func=cmd_status)

    pg = sub.add_parser("grant", help="POST /admin/grant")
    pg.add_argument("--machine-id", required=True)
    pg.add_argument("--days", type=int, default=365)
    pg.add_argument("--notes")
    pg.set_defaults(func=cmd_grant)

    for name in ("block", "unblock"):
        pb = sub.add_parser(name, help=f"POST /admin/{name}")
        pb.add_argument("--machine-id", required=True)
        pb.set_defaults(func=cmd_block)

    pi = sub.add_parser("installs", help="GET /admin/installs")
    pi.add_argument("--limit", type=int)
    pi.add_argument("--offset", type=int)
    pi.set_defaults(func=cmd_installs)

    pp = sub.add_parser("poll", help="register then poll activation_status (like a running app)")
    pp.add_argument("--machine-id", required=True)
    pp.add_argument("--duration", type=float, default=30.0, help="Total polling time (seconds)")
    pp.add_argument("--interval", type=float, default=5.0, help="Status poll interval (seconds)")
    pp.set_defaults(func=cmd_poll)

    return p


def main(argv: list[str]) -> int:
    args = build_parser().parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
