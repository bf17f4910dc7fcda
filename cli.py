import argparse
import getpass
import json
import sys
from pathlib import Path

from quizflow.completion.document import document_from_payload, document_to_payload
from quizflow.completion.html import render_html
from quizflow.completion.renderer import render_document
from quizflow.database import SessionLocal, init_db
from quizflow.errors import QuizFlowError
from quizflow.logging_setup import setup_console_logging
from quizflow.services.auth_service import create_user, get_user_by_email
from quizflow.services.completion_service import get_completion_document

setup_console_logging()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="QuizFlow administration")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create database tables")

    create = commands.add_parser("create-user", help="Create an admin account")
    create.add_argument("email", help="Login email")
    create.add_argument("name", help="Display name")
    create.add_argument("--password", help="Password (prompted when omitted)")

    export = commands.add_parser("export-page", help="Print a quiz's completion document as JSON")
    export.add_argument("quiz_id", help="Quiz ID")

    render = commands.add_parser("render-page", help="Render a completion document JSON file to HTML")
    render.add_argument("file", type=Path, help="Path to the document JSON")
    render.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the HTML here instead of stdout",
    )
    return parser.parse_args(argv)


def init_db_command(args: argparse.Namespace) -> int:
    init_db()
    print("Database initialized")
    return 0


def create_user_command(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        print("Password must be at least 6 characters", file=sys.stderr)
        return 1

    init_db()
    db = SessionLocal()
    try:
        if get_user_by_email(db, args.email):
            print(f"User {args.email} already exists", file=sys.stderr)
            return 1
        user = create_user(db, args.email, password, args.name)
    finally:
        db.close()
    print(f"Created user {user.id} ({user.email})")
    return 0


def export_page_command(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        document = get_completion_document(db, args.quiz_id)
    finally:
        db.close()
    print(json_dump(document_to_payload(document)))
    return 0


def render_page_command(args: argparse.Namespace) -> int:
    payload = json.loads(args.file.read_text(encoding="utf-8"))
    page = render_document(document_from_payload(payload))
    html = render_html(page)
    if args.output is None:
        print(html)
    else:
        args.output.write_text(html, encoding="utf-8")
        print(f"Saved page to {args.output}")
    return 0


COMMANDS = {
    "init-db": init_db_command,
    "create-user": create_user_command,
    "export-page": export_page_command,
    "render-page": render_page_command,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except QuizFlowError as e:
        print(e.message, file=sys.stderr)
        return 1


def json_dump(payload: dict[str, object]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


if __name__ == "__main__":
    sys.exit(main())
