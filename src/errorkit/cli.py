"""Command-line entry point.

    errorkit make-resp-code User --cases "UserNotFound=3000,UserBlocked=3001" --locale en,uz
    errorkit sync-resp-translations --all --locale en,uz
    errorkit sync-resp-translations Main --use-messages

Exit status is 0 on success and 1 on validation errors or failed groups.
"""

import argparse
import sys
from collections.abc import Callable

from pydantic import ValidationError

from errorkit.config import Settings, get_settings
from errorkit.exceptions import CaseValidationError, CatalogWriteError
from errorkit.logging import LoggingSettings, configure_logging, get_logger
from errorkit.models import CodeGroup
from errorkit.repositories.case_catalog import DirectoryCaseCatalog
from errorkit.repositories.message_store import MessageStore
from errorkit.resp_codes import MainRespCode
from errorkit.services.generator import generate, parse_cases, validate
from errorkit.services.sync import TranslationSyncEngine

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

BUILTIN_GROUPS: dict[str, CodeGroup] = {MainRespCode.name: MainRespCode}


def normalize_locales(raw: str | None, default: list[str]) -> list[str]:
    """``"en, UZ,en"`` -> ``["en", "uz"]``; empty input falls back to ``default``."""
    locales = [part.strip().lower() for part in (raw or "").split(",") if part.strip()]
    if not locales:
        locales = [locale.strip().lower() for locale in default if locale.strip()]
    return list(dict.fromkeys(locales))


def prompt_name(ask: Callable[[str], str]) -> str:
    return ask('Enter base name (e.g. "Main" -> MainRespCode): ').strip()


def prompt_cases(ask: Callable[[str], str]) -> list[tuple[str, str]]:
    """Ask for cases until an empty name is entered."""
    print("Add cases (at least one). Leave the name empty to finish.")
    cases = []
    while True:
        name = ask("Case name (CamelCase, e.g. UserNotFound): ").strip()
        if not name:
            return cases
        code = ask(f"Code for {name} (integer, e.g. 3000): ").strip()
        cases.append((name, code))


def _build(settings: Settings) -> tuple[DirectoryCaseCatalog, TranslationSyncEngine]:
    catalog = DirectoryCaseCatalog(settings.resp_codes_dir, settings.group_suffix)
    store = MessageStore(settings.translations_base_path, settings.translations_layout)
    return catalog, TranslationSyncEngine(store, catalog, settings)


def cmd_make_resp_code(
    args: argparse.Namespace,
    settings: Settings,
    ask: Callable[[str], str],
    interactive: bool,
) -> int:
    name = args.name
    if not name and interactive:
        name = prompt_name(ask)

    cases = parse_cases(args.cases or "")
    if not cases and interactive:
        print("No cases provided via --cases. Enter at least one case interactively.")
        cases = prompt_cases(ask)

    try:
        parsed = validate(name, cases, settings.group_suffix)
    except CaseValidationError as exc:
        for error in exc.errors:
            print(f"error: {error}", file=sys.stderr)
        return EXIT_FAILURE

    locales = normalize_locales(args.locale, settings.locales)
    catalog, engine = _build(settings)
    try:
        result = generate(parsed, catalog, engine, locales, force=args.force)
    except (CatalogWriteError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if result.group_written:
        print(f"Group created: {result.path}")
    else:
        print(f"Group already exists: {result.path} (use --force to overwrite)")
    for locator in result.report.touched:
        print(f"Lang updated: {engine.store.location(locator)}")
    print(f"Translations: {result.report.added} added, {result.report.already_present} already present")
    return EXIT_OK


def cmd_sync(args: argparse.Namespace, settings: Settings) -> int:
    locales = normalize_locales(args.locale, settings.locales)
    if not locales:
        print("error: no valid locale specified (use --locale=en or set ERRORKIT_LOCALES)", file=sys.stderr)
        return EXIT_FAILURE

    catalog, engine = _build(settings)

    if args.all or not args.group:
        summary = engine.sync_all(locales, use_declared_messages=args.use_messages)
        if not summary.reports and not summary.failures:
            print(f"No response code groups found in {catalog.directory}.")
            return EXIT_OK
        for report in summary.reports:
            print(f"{report.group}: {report.added} added, {report.already_present} already present")
        for failure in summary.failures:
            print(f"{failure.group}: FAILED ({failure.error})", file=sys.stderr)
        print(f"Files touched: {sum(len(report.touched) for report in summary.reports)}")
        return EXIT_OK if summary.ok else EXIT_FAILURE

    type_name = catalog.type_name(args.group)
    group: CodeGroup | str
    if catalog.exists(args.group):
        group = args.group
    elif type_name in BUILTIN_GROUPS:
        group = BUILTIN_GROUPS[type_name]
    else:
        print(f"error: response code group {type_name} not found in {catalog.directory}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        report = engine.sync(group, locales, use_declared_messages=args.use_messages)
    except (CatalogWriteError, OSError, ValidationError) as exc:
        print(f"{type_name}: FAILED ({exc})", file=sys.stderr)
        return EXIT_FAILURE

    print(f"{report.group}: {report.added} added, {report.already_present} already present")
    print(f"Files touched: {len(report.touched)}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="errorkit", description="Response code and translation tooling")
    sub = parser.add_subparsers(dest="command", required=True)

    make = sub.add_parser("make-resp-code", help="Create a response code group and its translations")
    make.add_argument("name", nargs="?", help='Base name, e.g. "Main" -> MainRespCode')
    make.add_argument("--cases", help='Comma-separated Case=Code pairs, e.g. "NotFound=404,Forbidden:403"')
    make.add_argument("--locale", help="Comma-separated locales; defaults to ERRORKIT_LOCALES")
    make.add_argument("--force", action="store_true", help="Overwrite an existing group definition")

    sync = sub.add_parser("sync-resp-translations", help="Add missing translation keys")
    sync.add_argument("group", nargs="?", help="Group name, e.g. User or UserRespCode")
    sync.add_argument("--all", action="store_true", help="Sync every group in the configured directory")
    sync.add_argument("--locale", help="Comma-separated locales; defaults to ERRORKIT_LOCALES")
    sync.add_argument("--use-messages", action="store_true", help="Seed with the groups' own default messages")

    return parser


def main(
    argv: list[str] | None = None,
    *,
    settings: Settings | None = None,
    ask: Callable[[str], str] = input,
    interactive: bool | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(LoggingSettings(LOG_FORMAT="console"), stream=sys.stderr)
    if interactive is None:
        interactive = sys.stdin.isatty()

    if args.command == "make-resp-code":
        return cmd_make_resp_code(args, settings, ask, interactive)
    return cmd_sync(args, settings)


if __name__ == "__main__":
    sys.exit(main())
