"""
Command line entry point.

    family-dashboard serve     run the JSON backend
    family-dashboard client    run a headless sync client against a backend
"""

import argparse
import logging
import signal
import threading

from . import config


def serve(args):
    from .server import create_app

    app = create_app(args.data_file)

    print("\n" + "=" * 60)
    print("   Family Dashboard Server")
    print("=" * 60)
    print("\nServer Configuration:")
    print(f"  - Port: {args.port}")
    print(f"  - Data file: {args.data_file}")
    print("\nEndpoints:")
    print("  GET  /api/data")
    print("  POST /api/events | /api/groceries | /api/settings")
    print("\nPress Ctrl+C to stop")
    print("=" * 60 + "\n")

    app.run(host=args.host, port=args.port, debug=False)


def client(args):
    from .dashboard import Dashboard

    dashboard = Dashboard(api_url=args.api_url)
    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    dashboard.start()
    logging.getLogger(__name__).info("Syncing with %s", dashboard.client.api_url)
    stop.wait()
    dashboard.teardown()


def main(argv=None):
    parser = argparse.ArgumentParser(prog='family-dashboard', description="Family dashboard server and sync client")
    parser.add_argument('-v', '--verbose', action='store_true', help="debug logging")
    sub = parser.add_subparsers(dest='command', required=True)

    p_serve = sub.add_parser('serve', help="run the JSON backend")
    p_serve.add_argument('--host', default=config.SERVER_HOST)
    p_serve.add_argument('--port', type=int, default=config.SERVER_PORT)
    p_serve.add_argument('--data-file', default=config.DATA_FILE)
    p_serve.set_defaults(func=serve)

    p_client = sub.add_parser('client', help="run a headless sync client")
    p_client.add_argument('--api-url', default=config.API_URL)
    p_client.set_defaults(func=client)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    args.func(args)


if __name__ == '__main__':
    main()
