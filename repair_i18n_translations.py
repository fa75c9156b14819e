#!/usr/bin/env python3
"""Repair locale catalogs whose entries were never actually translated.

For every target language, entries whose value is still identical to the
source-language value (or missing altogether) are sent to the translation
service in small batches and written back into the target catalog.

Detection rules:
- string value: stale when target == source, the source is not in the
  exclusion list, is not placeholder-only, and len(source) > --min-length;
- array value: stale when the target array deep-equals the source array;
- missing path: stale, unless the source value is excluded, short,
  placeholder-only or not text, in which case it is copied verbatim.

Batches are processed strictly in order with a fixed delay after each one and a
longer cool-down after a batch call raises. A failed batch falls back to one
request per item; items that still fail stay untranslated and are picked up
again by the next run. A catalog is only written when something changed.

Examples:
    python repair_i18n_translations.py --locales-dir public/locales
    python repair_i18n_translations.py --target-languages es,fr,de --dry-run
    python repair_i18n_translations.py --config i18n-repair.json --report-json out/report.json
"""

from __future__ import annotations

import argparse
import concurrent.futures
import json
import os
import re
import threading
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Protocol

from i18n_catalog import (
    DEFAULT_FILE_NAME,
    CatalogFormatError,
    CatalogKeyError,
    CatalogStore,
    FlatCatalog,
    ancestor_paths,
    flatten,
    unflatten,
)
from translation_client import (
    ChatTranslator,
    OpenAICompatClient,
    parse_api_keys,
    placeholders_preserved,
)

PLACEHOLDER_ONLY_RE = re.compile(r"^\s*(?:\{\{[^{}]*\}\}\s*)+$")
ENV_ASSIGN_RE = re.compile(
    r"^(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)$"
)

STATUS_SKIPPED = "skipped"
STATUS_CLEAN = "clean"
STATUS_REPAIRED = "repaired"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"
STATUS_DRY_RUN = "dry-run"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class RepairConfig:
    source_language: str = "en"
    target_languages: tuple[str, ...] = ("es", "fr")
    batch_size: int = 5
    exclusion_list: tuple[str, ...] = ("TechStep", "Email", "Zoom", "Google", "WhatsApp")
    min_length: int = 4
    batch_delay_sec: float = 0.5
    failure_cooldown_sec: float = 2.0
    concurrency: int = 1

    def validate(self) -> None:
        if not self.source_language:
            raise ValueError("Source language must not be empty")
        if self.source_language in self.target_languages:
            raise ValueError(
                f"Source language {self.source_language!r} is also listed as a target"
            )
        if self.batch_size <= 0:
            raise ValueError("--batch-size must be > 0")
        if self.concurrency <= 0:
            raise ValueError("--concurrency must be > 0")
        if self.min_length < 0:
            raise ValueError("--min-length must be >= 0")
        if self.batch_delay_sec < 0 or self.failure_cooldown_sec < 0:
            raise ValueError("Delays must be >= 0")


@dataclass(frozen=True)
class StaleItem:
    path: str
    source_value: str | list[str]
    is_array: bool


@dataclass(frozen=True)
class TranslationRequest:
    path: str
    text: str
    element_index: int | None
    root_index: int


@dataclass(frozen=True)
class TranslationOutcome:
    path: str
    element_index: int | None
    translated_text: str | None


@dataclass
class Detection:
    stale: list[StaleItem] = field(default_factory=list)
    copies: dict[str, Any] = field(default_factory=dict)
    conflicts: list[str] = field(default_factory=list)


@dataclass
class LanguageReport:
    language: str
    status: str
    stale: int = 0
    updated: int = 0
    copied: int = 0
    left_stale: int = 0
    failed_requests: int = 0
    error: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "status": self.status,
            "stale": self.stale,
            "updated": self.updated,
            "copied": self.copied,
            "left_stale": self.left_stale,
            "failed_requests": self.failed_requests,
            "error": self.error,
        }


class Translator(Protocol):
    def translate_batch(self, texts: list[str], target_language: str) -> list[str | None] | None:
        ...

    def translate_one(self, text: str, target_language: str) -> str:
        ...


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def parse_env_value(raw: str) -> str:
    value = raw.strip()
    if not value:
        return ""

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]

    # Drop inline comments for unquoted values: KEY=abc # comment
    for idx, ch in enumerate(value):
        if ch == "#" and (idx == 0 or value[idx - 1].isspace()):
            return value[:idx].rstrip()
    return value


def load_env_file(env_file: Path) -> int:
    if not env_file.is_file():
        return 0

    loaded = 0
    for raw_line in env_file.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        match = ENV_ASSIGN_RE.match(line)
        if not match:
            continue
        key = match.group("key")
        if key in os.environ:
            continue
        os.environ[key] = parse_env_value(match.group("value"))
        loaded += 1
    return loaded


def _string_list(raw: object, option: str) -> tuple[str, ...]:
    if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
        raise ValueError(f"Config option '{option}' must be a list of strings")
    return tuple(v.strip() for v in raw if v.strip())


def load_config_file(config_path: Path, base: RepairConfig) -> RepairConfig:
    """Apply a JSON config file on top of `base`.

    Recognized options: sourceLanguage, targetLanguages, batchSize, exclusionList.
    Keys starting with "$" (e.g. "$schema") are ignored.
    """
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Config JSON must be an object")

    changes: dict[str, Any] = {}
    for option, raw in payload.items():
        if option.startswith("$"):
            continue
        if option == "sourceLanguage":
            if not isinstance(raw, str) or not raw.strip():
                raise ValueError("Config option 'sourceLanguage' must be a non-empty string")
            changes["source_language"] = raw.strip()
        elif option == "targetLanguages":
            changes["target_languages"] = _string_list(raw, option)
        elif option == "batchSize":
            if not isinstance(raw, int) or isinstance(raw, bool):
                raise ValueError("Config option 'batchSize' must be an integer")
            changes["batch_size"] = raw
        elif option == "exclusionList":
            changes["exclusion_list"] = _string_list(raw, option)
        else:
            raise ValueError(f"Unknown config option: {option}")
    return replace(base, **changes)


def split_languages(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def is_text_array(value: object) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, str) for v in value)


def _is_translatable_text(value: str, config: RepairConfig) -> bool:
    return (
        value not in config.exclusion_list
        and len(value) > config.min_length
        and not PLACEHOLDER_ONLY_RE.match(value)
    )


def _target_prefixes(target_flat: FlatCatalog) -> set[str]:
    prefixes: set[str] = set()
    for path in target_flat:
        prefixes.update(ancestor_paths(path))
    return prefixes


def find_stale_items(
    source_flat: FlatCatalog,
    target_flat: FlatCatalog,
    config: RepairConfig,
) -> Detection:
    """Diff the source and target flat maps.

    Stale items keep the source iteration order so batches follow the order
    in which keys were discovered.
    """
    detection = Detection()
    target_prefixes = _target_prefixes(target_flat)

    for path, source_value in source_flat.items():
        if path not in target_flat:
            if path in target_prefixes:
                # An empty source section is already satisfied by a filled one.
                if source_value != {}:
                    detection.conflicts.append(path)
            elif any(
                target_flat[parent] != {}
                for parent in ancestor_paths(path)
                if parent in target_flat
            ):
                detection.conflicts.append(path)
            elif is_text_array(source_value):
                detection.stale.append(StaleItem(path, list(source_value), True))
            elif isinstance(source_value, str) and _is_translatable_text(source_value, config):
                detection.stale.append(StaleItem(path, source_value, False))
            else:
                detection.copies[path] = source_value
            continue

        target_value = target_flat[path]
        if is_text_array(source_value):
            if target_value == source_value:
                detection.stale.append(StaleItem(path, list(source_value), True))
        elif isinstance(source_value, str):
            if target_value == source_value and _is_translatable_text(source_value, config):
                detection.stale.append(StaleItem(path, source_value, False))
    return detection


def drop_filled_sections(target_flat: FlatCatalog) -> None:
    """Remove `{}` leaves that now have keys written beneath them."""
    for path in _target_prefixes(target_flat):
        if target_flat.get(path) == {}:
            del target_flat[path]


# ---------------------------------------------------------------------------
# Batching
# ---------------------------------------------------------------------------


def build_batches(items: list[StaleItem], batch_size: int) -> list[list[TranslationRequest]]:
    """Group stale items `batch_size` at a time; arrays expand to one request per element."""
    batches: list[list[TranslationRequest]] = []
    for start in range(0, len(items), batch_size):
        requests: list[TranslationRequest] = []
        for root_index, item in enumerate(items[start : start + batch_size]):
            if item.is_array:
                for element_index, text in enumerate(item.source_value):
                    requests.append(
                        TranslationRequest(item.path, text, element_index, root_index)
                    )
            else:
                requests.append(TranslationRequest(item.path, item.source_value, None, root_index))
        batches.append(requests)
    return batches


class RateLimiter:
    """Fixed pacing between batches and a longer pause after a failed batch call."""

    def __init__(
        self,
        batch_delay_sec: float,
        failure_cooldown_sec: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.batch_delay_sec = batch_delay_sec
        self.failure_cooldown_sec = failure_cooldown_sec
        self._sleep = sleep

    def pace(self) -> None:
        if self.batch_delay_sec > 0:
            self._sleep(self.batch_delay_sec)

    def cool_down(self) -> None:
        if self.failure_cooldown_sec > 0:
            self._sleep(self.failure_cooldown_sec)


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


class ConsoleReporter:
    """Prints progress lines. A failure while reporting never aborts the run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _emit(self, render: Callable[[], str]) -> None:
        try:
            message = render()
            with self._lock:
                print(message)
        except Exception as exc:  # noqa: BLE001
            print(f"[WARN] Reporter failed: {exc}")

    def source_loaded(self, language: str, key_count: int) -> None:
        if key_count == 0:
            self._emit(lambda: f"[ERROR] Source catalog '{language}' is empty or unreadable")
        else:
            self._emit(lambda: f"Source '{language}': {key_count} keys")

    def language_skipped(self, language: str, reason: str) -> None:
        self._emit(lambda: f"[{language}] Skipping ({reason})")

    def stale_found(self, language: str, detection: Detection) -> None:
        def render() -> str:
            line = (
                f"[{language}] Stale keys: {len(detection.stale)}, "
                f"copied keys: {len(detection.copies)}"
            )
            for path in detection.conflicts:
                line += f"\n[WARN] [{language}] Shape conflict, skipped: {path}"
            return line

        self._emit(render)

    def batch_failed(self, language: str, size: int, exc: Exception) -> None:
        self._emit(
            lambda: f"[WARN] [{language}] Batch of {size} failed: {exc}. Falling back to single items"
        )

    def batch_mismatch(self, language: str, expected: int, got: int | None) -> None:
        self._emit(
            lambda: f"[WARN] [{language}] Batch mismatch: expected {expected}, got {got}. "
            "Falling back to single items"
        )

    def item_failed(self, language: str, request: TranslationRequest, reason: object) -> None:
        def render() -> str:
            where = request.path
            if request.element_index is not None:
                where += f"[{request.element_index}]"
            return f"[WARN] [{language}] Skipping {where}: {reason}"

        self._emit(render)

    def progress(self, language: str, processed: int, total: int) -> None:
        self._emit(lambda: f"[{language}] Processed {processed}/{total}")

    def language_saved(self, language: str, path: Path) -> None:
        self._emit(lambda: f"[{language}] Saved {path}")

    def language_error(self, language: str, exc: Exception) -> None:
        self._emit(lambda: f"[ERROR] [{language}] {type(exc).__name__}: {exc}")

    def language_finished(self, report: LanguageReport) -> None:
        self._emit(
            lambda: f"[{report.language}] {report.status}: updated {report.updated}, "
            f"copied {report.copied}, left stale {report.left_stale}"
        )

    def summary(self, reports: list[LanguageReport]) -> None:
        def render() -> str:
            errors = [r for r in reports if r.status == STATUS_ERROR]
            return "\n".join(
                [
                    f"Languages: {len(reports)}",
                    f"Stale keys: {sum(r.stale for r in reports)}",
                    f"Updated keys: {sum(r.updated for r in reports)}",
                    f"Copied keys: {sum(r.copied for r in reports)}",
                    f"Left stale: {sum(r.left_stale for r in reports)}",
                    f"Errors: {len(errors)}",
                ]
            )

        self._emit(render)


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class BatchOrchestrator:
    """Drains the stale-item list of one language, one batch at a time."""

    def __init__(
        self,
        language: str,
        translator: Translator,
        rate_limiter: RateLimiter,
        reporter: ConsoleReporter,
        batch_size: int,
    ) -> None:
        self.language = language
        self.translator = translator
        self.rate_limiter = rate_limiter
        self.reporter = reporter
        self.batch_size = batch_size
        self.failed_requests = 0

    def run(
        self,
        items: list[StaleItem],
        source_flat: FlatCatalog,
        target_flat: FlatCatalog,
    ) -> set[str]:
        """Translate `items` into `target_flat` in place; return the updated paths."""
        updated: set[str] = set()
        batches = build_batches(items, self.batch_size)
        processed = 0
        for batch in batches:
            outcomes = self.translate_batch(batch)
            for request, outcome in zip(batch, outcomes):
                if self._apply(request, outcome, source_flat, target_flat):
                    updated.add(outcome.path)
                else:
                    self.failed_requests += 1
            processed += len({request.path for request in batch})
            self.reporter.progress(self.language, processed, len(items))
            self.rate_limiter.pace()
        return updated

    def translate_batch(self, batch: list[TranslationRequest]) -> list[TranslationOutcome]:
        texts = [request.text for request in batch]
        try:
            results = self.translator.translate_batch(texts, self.language)
        except Exception as exc:  # noqa: BLE001
            self.reporter.batch_failed(self.language, len(batch), exc)
            self.rate_limiter.cool_down()
            return self._translate_individually(batch)

        if results is None or len(results) != len(batch):
            self.reporter.batch_mismatch(
                self.language, len(batch), None if results is None else len(results)
            )
            return self._translate_individually(batch)

        return [
            TranslationOutcome(request.path, request.element_index, text or None)
            for request, text in zip(batch, results)
        ]

    def _translate_individually(
        self, batch: list[TranslationRequest]
    ) -> list[TranslationOutcome]:
        outcomes: list[TranslationOutcome] = []
        for request in batch:
            try:
                text: str | None = self.translator.translate_one(request.text, self.language)
            except Exception as exc:  # noqa: BLE001
                self.reporter.item_failed(self.language, request, exc)
                text = None
            outcomes.append(TranslationOutcome(request.path, request.element_index, text or None))
        return outcomes

    def _apply(
        self,
        request: TranslationRequest,
        outcome: TranslationOutcome,
        source_flat: FlatCatalog,
        target_flat: FlatCatalog,
    ) -> bool:
        text = outcome.translated_text
        if text is None:
            return False
        if not placeholders_preserved(request.text, text):
            self.reporter.item_failed(self.language, request, "placeholders dropped")
            return False

        path = outcome.path
        if outcome.element_index is None:
            if target_flat.get(path) == text:
                return False
            target_flat[path] = text
            return True

        source_value = source_flat[path]
        current = target_flat.get(path)
        if not isinstance(current, list) or len(current) != len(source_value):
            current = source_value
        if current[outcome.element_index] == text:
            return False
        merged = list(current)
        merged[outcome.element_index] = text
        target_flat[path] = merged
        return True


def _final_status(report: LanguageReport) -> str:
    if report.stale == 0:
        return STATUS_REPAIRED if report.copied else STATUS_CLEAN
    if report.left_stale == 0:
        return STATUS_REPAIRED
    if report.updated == 0:
        return STATUS_FAILED
    return STATUS_PARTIAL


def repair_language(
    language: str,
    *,
    store: CatalogStore,
    source_flat: FlatCatalog,
    config: RepairConfig,
    translator: Translator | None,
    reporter: ConsoleReporter,
    sleep: Callable[[float], None] = time.sleep,
    dry_run: bool = False,
) -> LanguageReport:
    if not store.exists(language):
        reporter.language_skipped(language, "file not found")
        return LanguageReport(language=language, status=STATUS_SKIPPED)
    try:
        target_catalog = store.read(language)
    except (UnicodeDecodeError, json.JSONDecodeError, CatalogFormatError) as exc:
        reporter.language_skipped(language, f"unreadable: {exc}")
        return LanguageReport(language=language, status=STATUS_SKIPPED, error=str(exc))

    target_flat = flatten(target_catalog)
    detection = find_stale_items(source_flat, target_flat, config)
    reporter.stale_found(language, detection)
    report = LanguageReport(
        language=language,
        status=STATUS_CLEAN,
        stale=len(detection.stale),
        copied=len(detection.copies),
        left_stale=len(detection.stale),
    )
    if dry_run:
        report.status = STATUS_DRY_RUN
        reporter.language_finished(report)
        return report

    updated: set[str] = set()
    if detection.stale:
        if translator is None:
            raise ValueError("A translator is required unless running dry")
        orchestrator = BatchOrchestrator(
            language,
            translator,
            RateLimiter(config.batch_delay_sec, config.failure_cooldown_sec, sleep),
            reporter,
            config.batch_size,
        )
        updated = orchestrator.run(detection.stale, source_flat, target_flat)
        report.failed_requests = orchestrator.failed_requests

    target_flat.update(detection.copies)
    report.updated = len(updated)
    report.left_stale = report.stale - report.updated
    report.status = _final_status(report)

    if updated or detection.copies:
        drop_filled_sections(target_flat)
        saved_path = store.save(language, unflatten(target_flat))
        reporter.language_saved(language, saved_path)
    reporter.language_finished(report)
    return report


def run_repair(
    config: RepairConfig,
    store: CatalogStore,
    translator: Translator | None,
    *,
    reporter: ConsoleReporter | None = None,
    sleep: Callable[[float], None] = time.sleep,
    dry_run: bool = False,
) -> list[LanguageReport]:
    """Repair every configured target language; one language never aborts another."""
    config.validate()
    reporter = reporter or ConsoleReporter()

    try:
        source_flat = flatten(store.load(config.source_language))
    except CatalogKeyError as exc:
        reporter.language_error(config.source_language, exc)
        reports = [
            LanguageReport(language=language, status=STATUS_ERROR, error=str(exc))
            for language in config.target_languages
        ]
        reporter.summary(reports)
        return reports
    reporter.source_loaded(config.source_language, len(source_flat))

    def work(language: str) -> LanguageReport:
        try:
            return repair_language(
                language,
                store=store,
                source_flat=source_flat,
                config=config,
                translator=translator,
                reporter=reporter,
                sleep=sleep,
                dry_run=dry_run,
            )
        except (OSError, ValueError) as exc:
            reporter.language_error(language, exc)
            return LanguageReport(language=language, status=STATUS_ERROR, error=str(exc))

    if config.concurrency == 1:
        reports = [work(language) for language in config.target_languages]
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=config.concurrency) as executor:
            reports = list(executor.map(work, config.target_languages))

    reporter.summary(reports)
    return reports


def write_report_json(report_path: Path, reports: list[LanguageReport]) -> None:
    payload = {
        "languages": [r.to_json() for r in reports],
        "stale": sum(r.stale for r in reports),
        "updated": sum(r.updated for r in reports),
        "copied": sum(r.copied for r in reports),
        "left_stale": sum(r.left_stale for r in reports),
        "errors": [r.language for r in reports if r.status == STATUS_ERROR],
    }
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )


def build_config(args: argparse.Namespace) -> RepairConfig:
    config = RepairConfig()
    if args.config:
        config_path = args.config.resolve()
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config = load_config_file(config_path, config)

    changes: dict[str, Any] = {}
    if args.source_language:
        changes["source_language"] = args.source_language
    if args.target_languages:
        changes["target_languages"] = split_languages(args.target_languages)
    if args.batch_size is not None:
        changes["batch_size"] = args.batch_size
    if args.exclude:
        changes["exclusion_list"] = config.exclusion_list + tuple(args.exclude)
    if args.min_length is not None:
        changes["min_length"] = args.min_length
    if args.batch_delay is not None:
        changes["batch_delay_sec"] = args.batch_delay
    if args.failure_cooldown is not None:
        changes["failure_cooldown_sec"] = args.failure_cooldown
    if args.concurrency is not None:
        changes["concurrency"] = args.concurrency
    return replace(config, **changes)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Re-translate locale entries that still equal the source language."
    )
    parser.add_argument(
        "--locales-dir",
        type=Path,
        default=Path("public/locales"),
        help="Directory holding <lang>/<file-name> catalogs. Default: public/locales",
    )
    parser.add_argument("--file-name", default=DEFAULT_FILE_NAME)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with sourceLanguage/targetLanguages/batchSize/exclusionList.",
    )
    parser.add_argument("--source-language", default=None)
    parser.add_argument(
        "--target-languages",
        default=None,
        help="Comma-separated target language codes, e.g. es,fr,de",
    )
    parser.add_argument("--batch-size", type=int, default=None)
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Extra source string that is never re-translated. Repeatable.",
    )
    parser.add_argument("--min-length", type=int, default=None)
    parser.add_argument("--batch-delay", type=float, default=None)
    parser.add_argument("--failure-cooldown", type=float, default=None)
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Languages processed in parallel. Batches within a language stay sequential.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="Path to dotenv file used for API/model defaults. Default: .env",
    )
    parser.add_argument("--model", default=None)
    parser.add_argument(
        "--api-base",
        default=None,
        help="OpenAI-compatible API base URL (without /v1/chat/completions suffix).",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key. Supports comma-separated keys for rotation.",
    )
    parser.add_argument("--timeout-sec", type=int, default=120)
    parser.add_argument("--retries", type=int, default=3)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only detect and report stale keys. No API calls, no writes.",
    )
    parser.add_argument(
        "--report-json",
        type=Path,
        default=None,
        help="Optional report output path.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    env_file = args.env_file.resolve()
    loaded_vars = load_env_file(env_file)
    if env_file.is_file():
        print(f"Loaded {loaded_vars} env var(s) from {env_file}")

    config = build_config(args)
    config.validate()
    store = CatalogStore(args.locales_dir.resolve(), args.file_name)

    translator: Translator | None = None
    if not args.dry_run:
        api_base = args.api_base or os.getenv("OPENAI_BASE_URL")
        api_key = args.api_key or os.getenv("OPENAI_API_KEY")
        if not api_base or not parse_api_keys(api_key):
            raise ValueError(
                "Missing API config. Provide --api-base/--api-key, or set "
                "OPENAI_BASE_URL/OPENAI_API_KEY in .env."
            )
        client = OpenAICompatClient(
            api_base=api_base,
            api_key=api_key,
            model=args.model or os.getenv("OPENAI_MODEL") or "gpt-4o-mini",
            timeout_sec=args.timeout_sec,
            retries=args.retries,
        )
        translator = ChatTranslator(client, config.source_language)

    reports = run_repair(config, store, translator, dry_run=args.dry_run)

    if args.report_json:
        report_path = args.report_json.resolve()
        write_report_json(report_path, reports)
        print(f"Report: {report_path}")

    if args.dry_run:
        print("Dry run only. No files were modified.")
    return 1 if any(r.status == STATUS_ERROR for r in reports) else 0


if __name__ == "__main__":
    raise SystemExit(main())
