import argparse
import json
import sys
from typing import Any, Dict

from .env import database_url, load_env

from . import __version__
from .database import Database, init_database
from .errors import JobBoardError
from .jobs import JobRepository
from .logger import get_logger


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2))


def _job_payload(args: argparse.Namespace, fields) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for field in fields:
        value = getattr(args, field, None)
        if value is not None:
            payload[field] = value
    for field in getattr(args, "clear", None) or []:
        payload[field] = None
    return payload


def cmd_init_db(args: argparse.Namespace) -> None:
    init_database(args.db).dispose()
    print(f"Initialized database: {args.db}")


def cmd_add_company(args: argparse.Namespace) -> None:
    db = Database.from_url(args.db)
    rows = db.query(
        """INSERT INTO companies (handle, name, num_employees, description)
           VALUES ($1, $2, $3, $4)
           RETURNING handle, name""",
        [args.handle, args.name, args.employees, args.description],
    )
    _print_json(rows[0])


def cmd_list(args: argparse.Namespace) -> None:
    filters = {"title": args.title, "minSalary": args.min_salary}
    if args.has_equity:
        filters["hasEquity"] = True
    jobs = JobRepository(Database.from_url(args.db)).find_all(filters)
    if not jobs:
        print("No jobs found.")
        return
    _print_json(jobs)


def cmd_get(args: argparse.Namespace) -> None:
    _print_json(JobRepository(Database.from_url(args.db)).get(args.id))


def cmd_create(args: argparse.Namespace) -> None:
    payload = _job_payload(args, ["title", "salary", "equity", "companyHandle"])
    _print_json(JobRepository(Database.from_url(args.db)).create(payload))


def cmd_update(args: argparse.Namespace) -> None:
    payload = _job_payload(args, ["title", "salary", "equity"])
    _print_json(JobRepository(Database.from_url(args.db)).update(args.id, payload))


def cmd_remove(args: argparse.Namespace) -> None:
    JobRepository(Database.from_url(args.db)).remove(args.id)
    print(f"Removed job {args.id}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board data layer CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=database_url(), help="Database URL (or set JOBBOARD_DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create the companies and jobs tables")
    ini.set_defaults(func=cmd_init_db)

    com = subparsers.add_parser("add-company", help="Add a company that jobs can be posted for")
    com.add_argument("--handle", required=True, help="Company handle (max 25 chars)")
    com.add_argument("--name", required=True, help="Company name")
    com.add_argument("--employees", type=int, help="Number of employees")
    com.add_argument("--description", default="", help="Short description")
    com.set_defaults(func=cmd_add_company)

    lst = subparsers.add_parser("list", help="List jobs ordered by title")
    lst.add_argument("--title", help="Case-insensitive title substring")
    lst.add_argument("--min-salary", type=int, help="Minimum salary")
    lst.add_argument("--has-equity", action="store_true", help="Only jobs offering equity")
    lst.set_defaults(func=cmd_list)

    get = subparsers.add_parser("get", help="Show one job")
    get.add_argument("id", help="Job id")
    get.set_defaults(func=cmd_get)

    cre = subparsers.add_parser("create", help="Create a job")
    cre.add_argument("--title", required=True, help="Job title")
    cre.add_argument("--salary", type=int, help="Salary")
    cre.add_argument("--equity", help="Equity as a decimal between 0 and 1 (e.g. 0.05)")
    cre.add_argument("--company", dest="companyHandle", required=True, help="Company handle")
    cre.set_defaults(func=cmd_create)

    upd = subparsers.add_parser("update", help="Update a job's title, salary or equity")
    upd.add_argument("id", help="Job id")
    upd.add_argument("--title", help="New title")
    upd.add_argument("--salary", type=int, help="New salary")
    upd.add_argument("--equity", help="New equity")
    upd.add_argument("--clear", action="append", choices=["salary", "equity"], help="Clear a field (repeatable)")
    upd.set_defaults(func=cmd_update)

    rem = subparsers.add_parser("remove", help="Delete a job")
    rem.add_argument("id", help="Job id")
    rem.set_defaults(func=cmd_remove)

    return parser


def main(argv=None) -> int:
    # Load .env if present (JOBBOARD_DATABASE_URL, JOBBOARD_LOG_LEVEL, ...)
    load_env()
    args = build_parser().parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    if not hasattr(args, "func"):
        build_parser().print_help()
        return 1

    try:
        args.func(args)
    except JobBoardError as e:
        get_logger().error(f"{args.command} failed", status=e.status)
        print(f"Error ({e.status}): {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
