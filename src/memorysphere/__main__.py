from __future__ import annotations

import argparse
import logging

from .runtime.server import run


def main() -> None:
    p = argparse.ArgumentParser(prog="memorysphere", description="memorysphere: photo memories on a rotating sphere")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--no-seed", action="store_true", help="start with an empty scene")
    p.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    args = p.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    srv = run(host=args.host, port=args.port, seed=not args.no_seed, log_level=args.log_level)
    print(srv.url)

    # Block forever (so it behaves like a normal CLI server)
    import time

    while True:
        time.sleep(3600)


if __name__ == "__main__":
    main()
