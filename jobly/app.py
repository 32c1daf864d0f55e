import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from . import __version__
from .config import get_database_uri, get_log_dir, get_log_level, load_env
from .database import Database
from .errors import BadRequestError, JoblyError
from .logger import get_logger
from .repositories import companies, jobs
from .schema import (
    validate_company_filters,
    validate_company_new,
    validate_company_update,
    validate_job_filters,
    validate_job_new,
    validate_job_update,
)


def _load_payload(path: str) -> Dict[str, Any]:
    input_path = Path(path)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise BadRequestError("Payload must be a JSON object")
    return payload


def _check(errors: List[str]) -> None:
    if errors:
        raise BadRequestError("; ".join(errors))


def _emit(payload: Any) -> None:
    # Decimal equity from PostgreSQL prints as its exact string
    print(json.dumps(payload, indent=2, default=str))


def cmd_init_db(args: argparse.Namespace, db: Database) -> None:
    db.init_schema()
    print(f"Initialized schema at {db.url}")


def cmd_companies(args: argparse.Namespace, db: Database) -> None:
    filters = {
        "name": args.name,
        "minEmployees": args.min_employees,
        "maxEmployees": args.max_employees,
    }
    _check(validate_company_filters(filters))
    _emit({"companies": companies.find_all(db, filters)})


def cmd_company_get(args: argparse.Namespace, db: Database) -> None:
    _emit({"company": companies.get(db, args.handle)})


def cmd_company_create(args: argparse.Namespace, db: Database) -> None:
    data = _load_payload(args.input)
    _check(validate_company_new(data))
    _emit({"company": companies.create(db, data)})


def cmd_company_update(args: argparse.Namespace, db: Database) -> None:
    data = _load_payload(args.input)
    _check(validate_company_update(data))
    _emit({"company": companies.update(db, args.handle, data)})


def cmd_company_delete(args: argparse.Namespace, db: Database) -> None:
    companies.remove(db, args.handle)
    _emit({"deleted": args.handle})


def cmd_jobs(args: argparse.Namespace, db: Database) -> None:
    filters = {
        "title": args.title,
        "minSalary": args.min_salary,
        "hasEquity": args.has_equity,
    }
    _check(validate_job_filters(filters))
    _emit({"jobs": jobs.find_all(db, filters)})


def cmd_job_get(args: argparse.Namespace, db: Database) -> None:
    _emit({"job": jobs.get(db, args.id)})


def cmd_job_create(args: argparse.Namespace, db: Database) -> None:
    data = _load_payload(args.input)
    _check(validate_job_new(data))
    _emit({"job": jobs.create(db, data)})


def cmd_job_update(args: argparse.Namespace, db: Database) -> None:
    data = _load_payload(args.input)
    _check(validate_job_update(data))
    _emit({"job": jobs.update(db, args.id, data)})


def cmd_job_delete(args: argparse.Namespace, db: Database) -> None:
    jobs.remove(db, args.id)
    _emit({"deleted": args.id})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobly", description="Manage Jobly companies and jobs")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", help="Database URL (default: DATABASE_URL or postgresql:///jobly)")
    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser("init-db", help="Create the companies and jobs tables")
    init.set_defaults(func=cmd_init_db)

    cos = subparsers.add_parser("companies", help="List companies, optionally filtered")
    cos.add_argument("--name", help="Case-insensitive partial match on name")
    cos.add_argument("--min-employees", help="Minimum number of employees (inclusive)")
    cos.add_argument("--max-employees", help="Maximum number of employees (inclusive)")
    cos.set_defaults(func=cmd_companies)

    cget = subparsers.add_parser("company-get", help="Show one company with its jobs")
    cget.add_argument("--handle", required=True, help="Company handle")
    cget.set_defaults(func=cmd_company_get)

    cnew = subparsers.add_parser("company-create", help="Create a company from a JSON file")
    cnew.add_argument("--input", required=True, help="Path to company JSON: {handle, name, description, numEmployees, logoUrl}")
    cnew.set_defaults(func=cmd_company_create)

    cupd = subparsers.add_parser("company-update", help="Partially update a company from a JSON file")
    cupd.add_argument("--handle", required=True, help="Company handle")
    cupd.add_argument("--input", required=True, help="Path to JSON with the fields to change")
    cupd.set_defaults(func=cmd_company_update)

    cdel = subparsers.add_parser("company-delete", help="Delete a company and its jobs")
    cdel.add_argument("--handle", required=True, help="Company handle")
    cdel.set_defaults(func=cmd_company_delete)

    jls = subparsers.add_parser("jobs", help="List jobs, optionally filtered")
    jls.add_argument("--title", help="Case-insensitive partial match on title")
    jls.add_argument("--min-salary", help="Minimum salary (inclusive)")
    jls.add_argument("--has-equity", help="Pass 'true' to only list jobs with nonzero equity")
    jls.set_defaults(func=cmd_jobs)

    jget = subparsers.add_parser("job-get", help="Show one job")
    jget.add_argument("--id", type=int, required=True, help="Job id")
    jget.set_defaults(func=cmd_job_get)

    jnew = subparsers.add_parser("job-create", help="Create a job from a JSON file")
    jnew.add_argument("--input", required=True, help="Path to job JSON: {title, salary, equity, companyHandle}")
    jnew.set_defaults(func=cmd_job_create)

    jupd = subparsers.add_parser("job-update", help="Partially update a job from a JSON file")
    jupd.add_argument("--id", type=int, required=True, help="Job id")
    jupd.add_argument("--input", required=True, help="Path to JSON with the fields to change")
    jupd.set_defaults(func=cmd_job_update)

    jdel = subparsers.add_parser("job-delete", help="Delete a job")
    jdel.add_argument("--id", type=int, required=True, help="Job id")
    jdel.set_defaults(func=cmd_job_delete)

    return parser


def main(argv=None):
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    logger = get_logger(level=get_log_level(), log_dir=get_log_dir())
    db = Database(args.db or get_database_uri())
    try:
        args.func(args, db)
    except JoblyError as e:
        logger.warning("Command failed", command=args.command, status=e.status, error=e.message)
        print(f"Error ({e.status}): {e.message}", file=sys.stderr)
        raise SystemExit(2 if e.status < 500 else 1)
    finally:
        db.close()
        logger.log_metrics_summary()


if __name__ == "__main__":
    main()
