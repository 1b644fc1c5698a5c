import argparse
import json
import sys
from quiz.validation import has_errors, validate_questions

def _load_json(path: str):
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)

def validate(path: str) -> int:
    try:
        payload = _load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: {path}: {exc}")
        return 1
    if not isinstance(payload, list):
        print("ERROR: expected a JSON array of questions")
        return 1

    issues = validate_questions(payload)
    for issue in issues:
        where = f"item {issue.item_index}"
        if issue.chapter is not None:
            where += f" ({issue.chapter}#{issue.question_id})"
        print(f"{issue.severity.upper()}: {where}: {issue.message}")
    if has_errors(issues):
        return 1
    print("OK")
    return 0

def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Check a question JSON file for data-quality problems.")
    parser.add_argument("path")
    args = parser.parse_args(argv)
    return validate(args.path)

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
