"""Translation synchronization.

Keeps the message catalogs of every locale in step with the response code
groups: missing keys get a default message, existing messages are never
touched, and files are only rewritten when their content changes. Running a
sync twice in a row writes nothing the second time.
"""

from dataclasses import dataclass, field

from errorkit.config import Settings
from errorkit.exceptions import CatalogWriteError
from errorkit.logging import get_logger
from errorkit.models import CodeGroup, Locator
from errorkit.repositories.case_catalog import DirectoryCaseCatalog
from errorkit.repositories.message_store import MessageStore, merge_missing
from errorkit.services.keys import case_key, default_message, group_key

logger = get_logger(__name__)


@dataclass
class SyncReport:
    """Outcome of syncing one group across locales."""

    group: str
    total_cases: int = 0
    added: int = 0
    already_present: int = 0
    touched: list[Locator] = field(default_factory=list)


@dataclass
class SyncFailure:
    group: str
    error: str


@dataclass
class SyncSummary:
    """Outcome of syncing every discovered group."""

    reports: list[SyncReport] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def added(self) -> int:
        return sum(report.added for report in self.reports)


class TranslationSyncEngine:
    def __init__(self, store: MessageStore, catalog: DirectoryCaseCatalog, settings: Settings) -> None:
        self.store = store
        self.catalog = catalog
        self.settings = settings

    def file_key(self, group: CodeGroup) -> str:
        return group_key(group.name, self.settings.group_suffix)

    def sync(
        self,
        group: CodeGroup | str,
        locales: list[str] | None = None,
        *,
        use_declared_messages: bool = False,
    ) -> SyncReport:
        """Add missing keys of ``group`` to each locale's catalog.

        With ``use_declared_messages`` the group's own default messages seed the
        fallback locale instead of the generic pattern.
        """
        if isinstance(group, str):
            group = self.catalog.load_group(group)

        locales = locales or self.settings.locales
        file_key = self.file_key(group)
        declared = {case_key(case.name): case.default_message for case in group if case.default_message}
        desired = list(dict.fromkeys(case_key(case.name) for case in group))

        report = SyncReport(group=group.name, total_cases=len(desired))
        for locale in locales:
            locator = Locator(group=file_key, locale=locale)

            def make_default(key: str, locale: str = locale) -> str:
                if use_declared_messages and locale == self.settings.fallback_locale and key in declared:
                    return declared[key]
                return default_message(
                    key, locale, self.settings.message_patterns, self.settings.fallback_locale
                )

            existing = self.store.read(locator)
            merged = merge_missing(existing, desired, make_default)

            added = len(merged) - len(existing)
            report.added += added
            report.already_present += len(desired) - added

            if self.store.write(locator, merged):
                report.touched.append(locator)

        logger.info(
            "group_synced",
            group=group.name,
            locales=locales,
            added=report.added,
            already_present=report.already_present,
            touched=len(report.touched),
        )
        return report

    def sync_all(
        self,
        locales: list[str] | None = None,
        *,
        use_declared_messages: bool = False,
    ) -> SyncSummary:
        """Sync every group found in the case catalog directory.

        A failing group is recorded and does not stop the others.
        """
        summary = SyncSummary()
        for name in self.catalog.list_groups():
            try:
                report = self.sync(name, locales, use_declared_messages=use_declared_messages)
            except (CatalogWriteError, OSError, ValueError) as exc:
                logger.error("sync_group_failed", group=name, error=str(exc))
                summary.failures.append(SyncFailure(group=name, error=str(exc)))
                continue
            summary.reports.append(report)
        return summary
