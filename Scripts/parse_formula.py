import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO, Tuple

import yaml

from Syntax.errors import ParseError
from Syntax.parse import FormulaParser, ParseResult
from Syntax.syntax_table import SyntaxTable, default_syntax, load_syntax_table
from Syntax.transform import tree_to_sexpr
from Utils.helpers import read_formula_lines
from Utils.logging_config import setup_logging

PROMPT = "fol-parser> "
TOO_DEEP_MSG = "Expression is nested too deeply"

logger = logging.getLogger(__name__)


def build_syntax(paths: Optional[List[str]]) -> SyntaxTable:
    """Start from the default table and extend it with each YAML file in turn."""
    syntax = default_syntax()
    for path in paths or []:
        syntax = load_syntax_table(path, base=syntax)
    return syntax


def format_result(text: str, result: ParseResult, fmt: str) -> str:
    if fmt == "sexpr":
        if isinstance(result, ParseError):
            return f"error: {result}"
        return tree_to_sexpr(result.tree)
    data: Dict[str, Any] = {"input": text, **result.to_dict()}
    return json.dumps(data, ensure_ascii=False)


def parse_line(parser: FormulaParser, text: str, fmt: str) -> Tuple[str, bool]:
    """Parse and format one formula. Returns the output line and whether it failed."""
    try:
        result = parser.try_parse(text)
    except RecursionError:
        # nested past the interpreter's recursion limit; not a formula error
        logger.warning(f"Formula of length {len(text)} is nested too deeply to parse")
        if fmt == "sexpr":
            return f"error: {TOO_DEEP_MSG}", True
        return json.dumps({"input": text, "kind": "error", "msg": "RecursionError"}, ensure_ascii=False), True
    if isinstance(result, ParseError):
        logger.info(f"{text!r}: {result.msg}")
        return format_result(text, result, fmt), True
    return format_result(text, result, fmt), False


def run_batch(parser: FormulaParser, formulas: List[str], fmt: str, out: Optional[TextIO] = None) -> int:
    """Parse each formula and print its result. Returns the number of failures."""
    out = out or sys.stdout
    failures = 0
    for text in formulas:
        line, failed = parse_line(parser, text, fmt)
        failures += failed
        out.write(line + "\n")
    return failures


def run_repl(parser: FormulaParser, fmt: str, stdin: Optional[TextIO] = None, out: Optional[TextIO] = None) -> None:
    """Read formulas line by line until end of input."""
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    while True:
        out.write(PROMPT)
        out.flush()
        line = stdin.readline()
        if not line:
            out.write("\n")
            break
        text = line.strip()
        if not text:
            continue
        out.write(parse_line(parser, text, fmt)[0] + "\n")


def main(argv: Optional[List[str]] = None) -> None:
    arg_parser = argparse.ArgumentParser(description="Parse LaTeX first-order logic formulas")
    arg_parser.add_argument("formulas", nargs="*", help="Formulas to parse. Starts a prompt when none are given.")
    arg_parser.add_argument("--input", "-i", help="File with one formula per line")
    arg_parser.add_argument(
        "--syntax",
        "-s",
        action="append",
        help="YAML file with extra predicates, functions or connectives (repeatable)",
    )
    arg_parser.add_argument("--format", "-f", choices=["json", "sexpr"], default="json", help="Output format")
    arg_parser.add_argument("--log-dir", default="logs", help="Directory for the error log")
    arg_parser.add_argument("--no-log-file", action="store_true", help="Keep no error log file")
    arg_parser.add_argument("--verbose", "-v", action="store_true", help="Log debug messages")
    args = arg_parser.parse_args(argv)

    setup_logging(
        "parse_formula",
        logging.DEBUG if args.verbose else logging.WARNING,
        None if args.no_log_file else args.log_dir,
    )

    try:
        parser = FormulaParser(build_syntax(args.syntax))
        formulas = list(args.formulas)
        if args.input:
            formulas.extend(read_formula_lines(args.input))
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error(f"Could not set up parser: {exc}")
        sys.exit(2)

    if not formulas:
        run_repl(parser, args.format)
        return

    failures = run_batch(parser, formulas, args.format)
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
