"""Command line access to the analysis pipeline and comment threads.

    python -m bechdel.cli submit --title "Alien" --file alien.txt --year 1979
    python -m bechdel.cli list
    python -m bechdel.cli comment <submission-id> "Ripley and Lambert talk about the ship"
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import build_classifier, configure_logging
from .auth.jwt import BearerIdentity, bind_token
from .config import BaseConfig
from .db.repositories.factory import Repositories
from .db.session import db
from .errors import BechdelError
from .integrations.supabase_client import supabase_ext
from .services.annotation_service import AnnotationService
from .services.listing_service import ListingService
from .domain.submission import verdict_label
from .services.submission_service import SubmissionOrchestrator, verdict_message


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bechdel", description="Bechdel test analyses from the terminal")
    p.add_argument("--token", default=None, help="bearer JWT (defaults to $BECHDEL_TOKEN)")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables in the configured SQL database")

    s = sub.add_parser("submit", help="classify a script or summary and store the verdict")
    s.add_argument("--title", required=True)
    s.add_argument("--file", default="-", help="text file to read, '-' for stdin")
    s.add_argument("--year", type=int, default=None)
    s.add_argument("--timeout", type=float, default=None, help="classifier timeout in seconds")

    sub.add_parser("list", help="all analyses, newest first")

    show = sub.add_parser("show", help="one analysis with its explanation")
    show.add_argument("submission_id")

    c = sub.add_parser("comments", help="comments on an analysis, newest first")
    c.add_argument("submission_id")

    add = sub.add_parser("comment", help="add a comment to an analysis")
    add.add_argument("submission_id")
    add.add_argument("body")

    rm = sub.add_parser("uncomment", help="delete one of your comments")
    rm.add_argument("comment_id")
    return p


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


async def _run(args: argparse.Namespace, config: BaseConfig) -> int:
    db.init_app(config)
    await supabase_ext.init_app(config)
    repos = Repositories(config.REPO_BACKEND, db)
    identity = BearerIdentity(config)
    bind_token(args.token or os.getenv("BECHDEL_TOKEN"))
    classifier = build_classifier(config) if args.command == "submit" else None
    try:
        if args.command == "init-db":
            await db.create_all()
            print("Tables created.")
        elif args.command == "submit":
            orchestrator = SubmissionOrchestrator(identity, classifier, repos)
            created = await orchestrator.submit(args.title, _read_text(args.file), args.year, timeout=args.timeout)
            print(verdict_message(created))
            print(created.id)
        elif args.command == "list":
            items = await ListingService(repos).list()
            if not items:
                print("No analyses yet.")
            for s in items:
                year = f" ({s.year})" if s.year else ""
                print(f"{s.id}  {verdict_label(s.verdict):<4}  {s.title}{year}  {s.created_at:%Y-%m-%d %H:%M}")
        elif args.command == "show":
            s = await ListingService(repos).get(args.submission_id)
            print(f"{s.title}{f' ({s.year})' if s.year else ''}: {verdict_label(s.verdict)}")
            print()
            print(s.explanation)
        elif args.command == "comments":
            comments = await AnnotationService(identity, repos).list(args.submission_id)
            if not comments:
                print("No comments yet.")
            for c in comments:
                print(f"{c.id}  {c.created_at:%Y-%m-%d}  {c.author_id}: {c.body}")
        elif args.command == "comment":
            c = await AnnotationService(identity, repos).create(args.submission_id, args.body)
            print(c.id)
        elif args.command == "uncomment":
            await AnnotationService(identity, repos).delete(args.comment_id)
            print("Comment deleted.")
    finally:
        if classifier is not None:
            await classifier.aclose()
        await supabase_ext.aclose()
        await db.dispose()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = _parser().parse_args(argv)
    config = BaseConfig()
    configure_logging(config.LOG_LEVEL)
    try:
        return asyncio.run(_run(args, config))
    except BechdelError as e:
        print(f"error ({e.kind}): {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
