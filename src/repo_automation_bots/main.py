"""CLI entrypoint: run the webhook server or sync labels by hand."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from repo_automation_bots import __version__
from repo_automation_bots.config import BotSettings
from repo_automation_bots.errors import BotError
from repo_automation_bots.github.factory import ClientFactory
from repo_automation_bots.label_sync.manifest import fetch_manifest, sweep_labels
from repo_automation_bots.label_sync.reconciler import reconcile_labels
from repo_automation_bots.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-automation-bots",
        description="GitHub App webhooks for release-please and label-sync",
    )
    parser.add_argument(
        "--version", action="version", version=f"repo-automation-bots {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the webhook server")
    serve.add_argument("--host", default=None, help="Bind address (defaults to HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (defaults to PORT)")

    sync_labels = subparsers.add_parser(
        "sync-labels", help="Reconcile the standard labels into one repository"
    )
    sync_labels.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Target repository in the form 'owner/repo'",
    )

    sync_manifest = subparsers.add_parser(
        "sync-manifest", help="Reconcile labels for every repository in the manifest"
    )
    sync_manifest.add_argument(
        "--url", default=None, help="Manifest URL (defaults to LABEL_SYNC_MANIFEST_URL)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = BotSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "serve":
            import uvicorn

            from repo_automation_bots.server.app import create_app

            uvicorn.run(
                create_app(settings),
                host=args.host or settings.host,
                port=args.port or settings.port,
                log_config=None,
            )
            return 0

        clients = ClientFactory(settings)

        if args.command == "sync-labels":
            github = clients(args.repository)
            try:
                report = reconcile_labels(github, max_workers=settings.label_sync_max_workers)
            finally:
                github.close()
            counts = report.counts()
            print(
                f"{report.repository}: created {counts['create']}, updated {counts['update']}, "
                f"deleted {counts['delete']}, failed {counts['failed']}"
            )
            return 1 if report.failures else 0

        if args.command == "sync-manifest":
            repos = fetch_manifest(args.url or settings.label_sync_manifest_url)
            reports = sweep_labels(repos, clients, max_workers=settings.label_sync_max_workers)
            failed = [r for r in reports if r.failures]
            print(
                f"Synced {len(reports)} of {len(repos)} repositories "
                f"({len(failed)} with failed operations)"
            )
            return 1 if failed or len(reports) < len(repos) else 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except BotError as e:
        logger.error(e.message, extra={"command": args.command})
        print(e.message, file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
