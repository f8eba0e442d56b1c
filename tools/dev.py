#!/usr/bin/env python3
from __future__ import annotations

import argparse
import functools
import http.server
import subprocess
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
SITE_DIR = BASE_DIR / "site"
PORT = 8787
PREFIX = "[site]"


def run_build() -> None:
    subprocess.run([sys.executable, str(BASE_DIR / "tools" / "build_site.py")], check=True)


def serve(port: int = PORT) -> None:
    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(SITE_DIR))
    httpd = http.server.ThreadingHTTPServer(("localhost", port), handler)
    url = f"http://localhost:{port}/"
    print(f"{PREFIX} Serving {url} (site dir: {SITE_DIR})")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print(f"{PREFIX} Shutting down server.")
    finally:
        httpd.server_close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build and serve the homepage locally.")
    parser.add_argument("--once", action="store_true", help="Build once and exit without serving.")
    parser.add_argument("--port", type=int, default=PORT, help="Port for the preview server.")
    args = parser.parse_args(argv)

    try:
        run_build()
    except subprocess.CalledProcessError as exc:
        print(f"{PREFIX} Build failed (exit code {exc.returncode}).")
        return 1
    print(f"{PREFIX} Build complete. Preview at http://localhost:{args.port}/")
    if args.once:
        return 0
    if not SITE_DIR.exists():
        print(f"{PREFIX} site/ directory missing after build.")
        return 1
    serve(args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
