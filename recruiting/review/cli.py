"""Review CLI.

Usage:
    python cli.py review init-db
    python cli.py review add-reviewer rev-1 "Jane Doe"
    python cli.py review list --status first_pass,final_pass --page 2
    python cli.py review show 42 --status first_pass
    python cli.py review transition 42 final_pass --reviewer rev-1
    python cli.py review evaluate 42 70 80 90 --reviewer rev-1 --memo "Strong"
    python cli.py review evaluations 42
    python cli.py review delete-evaluation 7
    python cli.py review export --posting 3 > rows.jsonl
"""
import argparse
import json
import sys
from dataclasses import asdict

from ..config import get_config, setup_logging
from . import evaluation_service, query_service, transition_service
from .database import get_engine, get_session, init_db
from .errors import NotFound, ReviewError
from .reviewers import upsert_reviewer


def _filter(args) -> query_service.ApplicationFilter:
    return query_service.ApplicationFilter.parse(args.status, args.posting)


def _dump(obj) -> str:
    return json.dumps(obj, default=str, ensure_ascii=False)


def cmd_init_db(args, engine):
    init_db(engine)
    print("✅ Tables created")


def cmd_add_reviewer(args, engine):
    with get_session(engine) as session:
        upsert_reviewer(session, args.reference, args.name)
    print(f"✅ Reviewer {args.reference}: {args.name}")


def cmd_list(args, engine):
    page_size = get_config().review.page_size
    with get_session(engine) as session:
        result = query_service.list_applications(
            session, _filter(args), page=args.page, page_size=page_size
        )
    print(f"📋 Applications — page {result['page']}/{max(result['total_pages'], 1)} "
          f"({result['total']} total)")
    for item in result["data"]:
        score = item["eval_score"] if item["eval_score"] is not None else "—"
        print(f"  #{item['id']:<5} {item['status']:<11} {score:>4}  "
              f"{item['applicant_name']} · {item['posting_name']}")


def cmd_show(args, engine):
    with get_session(engine) as session:
        detail = query_service.get_application(session, args.application_id)
        try:
            nav = query_service.adjacent(session, args.application_id, _filter(args))
        except NotFound:
            nav = query_service.Adjacency(prev_id=None, next_id=None)
    detail.update(prev_id=nav.prev_id, next_id=nav.next_id)
    print(json.dumps(detail, default=str, ensure_ascii=False, indent=2))


def cmd_transition(args, engine):
    with get_session(engine) as session:
        result = transition_service.transition(
            session, args.application_id, args.status, args.reviewer
        )
    print(f"✅ Application #{result.id} → {result.status}")


def cmd_evaluate(args, engine):
    with get_session(engine) as session:
        evaluation = evaluation_service.record(
            session, args.application_id, args.c1, args.c2, args.c3,
            evaluator=args.reviewer, memo=args.memo,
        )
        total = evaluation.total_score
    print(f"✅ Evaluation recorded for #{args.application_id} (total {total})")


def cmd_evaluations(args, engine):
    with get_session(engine) as session:
        entries = evaluation_service.list_evaluations(session, args.application_id)
    for e in entries:
        print(f"  [{e['id']}] {e['total_score']:>3} = "
              f"{e['score_criteria_1']}+{e['score_criteria_2']}+{e['score_criteria_3']} "
              f"by {e['evaluated_by_name'] or e['evaluated_by']} at {e['created_at']}"
              + (f" — {e['memo']}" if e["memo"] else ""))


def cmd_delete_evaluation(args, engine):
    with get_session(engine) as session:
        evaluation_service.delete(session, args.evaluation_id)
    print(f"🗑️  Evaluation {args.evaluation_id} deleted")


def cmd_adjacent(args, engine):
    with get_session(engine) as session:
        nav = query_service.adjacent(session, args.application_id, _filter(args))
    print(_dump(asdict(nav)))


def cmd_export(args, engine):
    with get_session(engine) as session:
        for row in query_service.export_rows(session, _filter(args)):
            print(_dump(asdict(row)))


def _add_filter_args(p):
    p.add_argument("--status", help="Comma-separated statuses")
    p.add_argument("--posting", help="Comma-separated posting ids")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Application Review")
    parser.add_argument("--db", help="Database URL (default: config / DATABASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create tables")
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser("add-reviewer", help="Register a reviewer display name")
    p.add_argument("reference")
    p.add_argument("name")
    p.set_defaults(func=cmd_add_reviewer)

    p = sub.add_parser("list", help="List applications (newest first)")
    _add_filter_args(p)
    p.add_argument("--page", type=int, default=1)
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Application detail with prev/next ids")
    p.add_argument("application_id", type=int)
    _add_filter_args(p)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("transition", help="Change application status")
    p.add_argument("application_id", type=int)
    p.add_argument("status")
    p.add_argument("--reviewer", required=True, help="Acting reviewer reference")
    p.set_defaults(func=cmd_transition)

    p = sub.add_parser("evaluate", help="Record an evaluation")
    p.add_argument("application_id", type=int)
    p.add_argument("c1", type=int)
    p.add_argument("c2", type=int)
    p.add_argument("c3", type=int)
    p.add_argument("--reviewer", required=True, help="Evaluator reference")
    p.add_argument("--memo")
    p.set_defaults(func=cmd_evaluate)

    p = sub.add_parser("evaluations", help="List evaluations of an application")
    p.add_argument("application_id", type=int)
    p.set_defaults(func=cmd_evaluations)

    p = sub.add_parser("delete-evaluation", help="Delete one evaluation")
    p.add_argument("evaluation_id", type=int)
    p.set_defaults(func=cmd_delete_evaluation)

    p = sub.add_parser("adjacent", help="Prev/next ids in the filtered list")
    p.add_argument("application_id", type=int)
    _add_filter_args(p)
    p.set_defaults(func=cmd_adjacent)

    p = sub.add_parser("export", help="Export rows as JSON lines")
    _add_filter_args(p)
    p.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    engine = get_engine(args.db)
    try:
        args.func(args, engine)
    except ReviewError as e:
        print(f"❌ {e.kind}: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"❌ invalid_argument: {e}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
