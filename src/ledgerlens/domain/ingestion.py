"""Statement ingestion domain service.

Turns raw per-period statement payloads into the canonical
Company/Account/Report/LineItem graph. Each batch entry is validated on its
own; a failing entry is reported and skipped without affecting its siblings.
Only a structurally unreadable payload aborts the whole call.
"""

import json
import logging
import threading
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Any, Optional, Sequence, Union

from ledgerlens.database.base import Database
from ledgerlens.domain.entities import (
    Account,
    AccountConflictPolicy,
    BatchResult,
    Category,
    NormalizedLineItem,
    NormalizedStatement,
    Report,
    SectionKind,
)
from ledgerlens.domain.errors import (
    DomainError,
    ParseError,
    ValidationError,
    account_conflict,
    entry_error,
)
from ledgerlens.utils.amount_parser import parse_amount
from ledgerlens.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

SECTION_KEYS = {
    "revenue": SectionKind.REVENUE,
    "costOfGoodsSold": SectionKind.COST_OF_GOODS_SOLD,
    "cost_of_goods_sold": SectionKind.COST_OF_GOODS_SOLD,
    "operatingExpenses": SectionKind.OPERATING_EXPENSES,
    "operating_expenses": SectionKind.OPERATING_EXPENSES,
    "nonOperatingExpenses": SectionKind.NON_OPERATING_EXPENSES,
    "non_operating_expenses": SectionKind.NON_OPERATING_EXPENSES,
    "otherIncome": SectionKind.OTHER_INCOME,
    "other_income": SectionKind.OTHER_INCOME,
}

# Canonical field name -> accepted payload keys, camelCase first
FIELD_KEYS = {
    "companyRef": ("companyRef", "company_ref"),
    "companyName": ("companyName", "company_name"),
    "periodId": ("periodId", "period_id"),
    "periodStart": ("periodStart", "period_start"),
    "periodEnd": ("periodEnd", "period_end"),
    "grossProfit": ("grossProfit", "gross_profit"),
    "netProfit": ("netProfit", "net_profit"),
    "lineItems": ("lineItems", "line_items"),
    "accountRef": ("accountRef", "account_ref"),
}


def _get(mapping: Mapping, field: str, default: Any = None) -> Any:
    for key in FIELD_KEYS.get(field, (field,)):
        if key in mapping:
            return mapping[key]
    return default


def parse_batch(payload: Union[str, bytes, Mapping]) -> list:
    """Extract the list of entries from a batch payload.

    Args:
        payload: Batch request body, either decoded or as raw JSON text

    Returns:
        List of raw entries

    Raises:
        ParseError: If the payload is not an object with a 'data' list
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise ParseError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(payload, Mapping):
        raise ParseError("Payload must be an object with a 'data' list")

    data = payload.get("data")
    if not isinstance(data, list):
        raise ParseError("Payload 'data' must be a list of statements")
    return data


def _require(entry: Mapping, field: str, position: int) -> Any:
    value = _get(entry, field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(entry_error(position, f"Missing {field}"))
    return value


def _parse_company_ref(value: Any, position: int) -> int:
    if isinstance(value, bool):
        raise ValidationError(entry_error(position, f"Invalid companyRef {value!r}"))
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        return int(value)
    raise ValidationError(entry_error(position, f"Invalid companyRef {value!r}"))


def _parse_money(value: Any, field: str, position: int) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        raise ValidationError(entry_error(position, f"{field} must be numeric: {e}")) from e


def _parse_section_items(
    sections: Any, label: str, category: Category, position: int
) -> list[NormalizedLineItem]:
    if sections is None:
        return []
    if not isinstance(sections, list):
        raise ValidationError(entry_error(position, f"{label} must be a list of sections"))

    items: list[NormalizedLineItem] = []
    for section_num, section in enumerate(sections, start=1):
        if not isinstance(section, Mapping):
            raise ValidationError(
                entry_error(position, f"{label} section {section_num} must be an object")
            )
        raw_items = _get(section, "lineItems") or []
        if not isinstance(raw_items, list):
            raise ValidationError(
                entry_error(position, f"{label} section {section_num} lineItems must be a list")
            )

        for item_num, item in enumerate(raw_items, start=1):
            where = f"{label} section {section_num} item {item_num}"
            if not isinstance(item, Mapping):
                raise ValidationError(entry_error(position, f"{where} must be an object"))

            account_ref = _get(item, "accountRef")
            if account_ref is None or str(account_ref).strip() == "":
                raise ValidationError(entry_error(position, f"{where}: Missing accountRef"))
            account_ref = str(account_ref).strip()

            if item.get("value") is None:
                raise ValidationError(entry_error(position, f"{where}: Missing value"))
            value = _parse_money(item.get("value"), f"{where} value", position)

            name = item.get("name")
            items.append(
                NormalizedLineItem(
                    name=str(name).strip() if name else account_ref,
                    account_ref=account_ref,
                    value=value,
                    category=category,
                )
            )
    return items


def _iter_sections(entry: Mapping, position: int):
    """Yield (label, category, sections) for every section kind in an entry.

    A section kind may be given only once, either under 'sections' or as a
    top-level key in one of its spellings.
    """
    seen: dict[Any, str] = {}

    def claim(label: str, section_kind: Any) -> None:
        if section_kind in seen:
            raise ValidationError(
                entry_error(position, f"{label} duplicates section {seen[section_kind]}")
            )
        seen[section_kind] = label

    explicit = entry.get("sections") or {}
    for kind, sections in explicit.items():
        section_kind = SECTION_KEYS.get(kind)
        claim(f"sections.{kind}", section_kind or str(kind))
        category = section_kind.category if section_kind else Category.UNCATEGORIZED
        yield str(kind), category, sections

    for key, section_kind in SECTION_KEYS.items():
        if key in entry:
            claim(key, section_kind)
            yield key, section_kind.category, entry[key]


def normalize_entry(entry: Any, position: int) -> NormalizedStatement:
    """Validate and normalize one raw statement.

    Pure function: touches no storage and may run concurrently with other
    entries.

    Args:
        entry: Raw statement from the batch 'data' list
        position: 1-based position of the entry in the batch

    Returns:
        NormalizedStatement ready for persistence

    Raises:
        ValidationError: If any field of the entry is invalid
    """
    if not isinstance(entry, Mapping):
        raise ValidationError(entry_error(position, "Statement must be an object"))

    company_ref = _parse_company_ref(_require(entry, "companyRef", position), position)
    period_id = str(_require(entry, "periodId", position)).strip()

    try:
        period_start = parse_date(_require(entry, "periodStart", position))
        period_end = parse_date(_require(entry, "periodEnd", position))
    except ValidationError:
        raise
    except ValueError as e:
        raise ValidationError(entry_error(position, str(e))) from e

    if period_start > period_end:
        raise ValidationError(
            entry_error(
                position,
                f"periodStart {period_start.isoformat()} is after "
                f"periodEnd {period_end.isoformat()}",
            )
        )

    gross_profit = _parse_money(_require(entry, "grossProfit", position), "grossProfit", position)
    net_profit = _parse_money(_require(entry, "netProfit", position), "netProfit", position)

    sections_by_kind = entry.get("sections")
    if sections_by_kind is not None and not isinstance(sections_by_kind, Mapping):
        raise ValidationError(entry_error(position, "sections must be an object"))

    line_items: list[NormalizedLineItem] = []
    for label, category, sections in _iter_sections(entry, position):
        line_items.extend(_parse_section_items(sections, label, category, position))

    company_name = _get(entry, "companyName")
    return NormalizedStatement(
        position=position,
        company_ref=company_ref,
        period_id=period_id,
        period_start=period_start,
        period_end=period_end,
        gross_profit=gross_profit,
        net_profit=net_profit,
        line_items=tuple(line_items),
        company_name=str(company_name) if company_name else None,
    )


def _normalize_or_error(
    args: tuple[int, Any],
) -> Union[NormalizedStatement, ValidationError]:
    position, entry = args
    try:
        return normalize_entry(entry, position)
    except ValidationError as e:
        return e


class AccountIndex:
    """Batch-scoped index of accounts keyed by (company_id, external_account_id).

    Creating accounts is serialized by a lock so that two entries referencing
    the same new account never create it twice.
    """

    def __init__(
        self,
        db: Database,
        policy: AccountConflictPolicy = AccountConflictPolicy.FIRST_WRITE_WINS,
    ):
        self.db = db
        self.policy = policy
        self.created = 0
        self.conflicts = 0
        self._accounts: dict[tuple[int, str], Account] = {}
        self._loaded_companies: set[int] = set()
        self._lock = threading.Lock()

    def _load(self, company_id: int) -> None:
        if company_id in self._loaded_companies:
            return
        for account in self.db.list_accounts(company_id):
            self._accounts[(company_id, account.external_account_id)] = account
        self._loaded_companies.add(company_id)

    def reset(self) -> None:
        """Drop cached accounts so they are reloaded after a rollback."""
        with self._lock:
            self._accounts.clear()
            self._loaded_companies.clear()

    def _conflict_detail(self, account: Account, name: str, category: Category) -> Optional[str]:
        if account.category != category:
            return account_conflict(
                account.external_account_id, "category", account.category.value, category.value
            )
        if account.name != name:
            return account_conflict(account.external_account_id, "name", account.name, name)
        return None

    def _reconcile(self, account: Account, name: str, category: Category) -> Account:
        detail = self._conflict_detail(account, name, category)
        if detail is None:
            return account

        self.conflicts += 1
        if self.policy == AccountConflictPolicy.REJECT:
            raise ValidationError(detail)

        logger.warning("%s (policy: %s)", detail, self.policy.value)
        if self.policy == AccountConflictPolicy.LAST_WRITE_WINS:
            account = self.db.update_account(account.id, name=name, category=category)
            self._accounts[(account.company_id, account.external_account_id)] = account
        return account

    def check(self, company_id: int, items: Sequence[NormalizedLineItem]) -> None:
        """Raise ValidationError if items conflict under the REJECT policy."""
        if self.policy != AccountConflictPolicy.REJECT:
            return
        seen: dict[str, NormalizedLineItem] = {}
        with self._lock:
            self._load(company_id)
            for item in items:
                account = self._accounts.get((company_id, item.account_ref))
                if account is not None:
                    detail = self._conflict_detail(account, item.name, item.category)
                elif item.account_ref in seen:
                    first = seen[item.account_ref]
                    detail = self._conflict_detail(
                        Account(0, company_id, first.account_ref, first.name, first.category),
                        item.name,
                        item.category,
                    )
                else:
                    detail = None
                if detail is not None:
                    raise ValidationError(detail)
                seen.setdefault(item.account_ref, item)

    def resolve(self, company_id: int, account_ref: str, name: str, category: Category) -> Account:
        """Return the account for a reference, creating it if absent."""
        with self._lock:
            self._load(company_id)
            key = (company_id, account_ref)
            account = self._accounts.get(key)
            if account is None:
                account = self.db.create_account(
                    company_id=company_id,
                    external_account_id=account_ref,
                    name=name,
                    category=category,
                )
                self._accounts[key] = account
                self.created += 1
                return account
            return self._reconcile(account, name, category)


class IngestionService:
    """Service for normalizing and persisting statement batches."""

    def __init__(
        self,
        db: Database,
        account_policy: AccountConflictPolicy = AccountConflictPolicy.FIRST_WRITE_WINS,
        max_workers: int = 1,
    ):
        """Initialize ingestion service.

        Args:
            db: Database instance
            account_policy: Reconciliation policy for conflicting account data
            max_workers: Threads used to validate entries; persistence always
                runs on the calling thread in payload order
        """
        self.db = db
        self.account_policy = AccountConflictPolicy(account_policy)
        self.max_workers = max(1, int(max_workers))

    def normalize_entries(
        self, entries: Sequence[Any]
    ) -> list[Union[NormalizedStatement, ValidationError]]:
        """Validate all entries, returning a statement or the error for each."""
        jobs = list(enumerate(entries, start=1))
        if self.max_workers == 1 or len(jobs) < 2:
            return [_normalize_or_error(job) for job in jobs]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(_normalize_or_error, jobs))

    def persist_statement(
        self, statement: NormalizedStatement, index: Optional[AccountIndex] = None
    ) -> Report:
        """Persist one normalized statement.

        Accounts created or updated for the statement are committed together
        with its report. If the statement fails, they are rolled back and
        only the company record, created on first reference, is kept.

        Args:
            statement: Validated statement
            index: Batch-scoped account index; a fresh one is used if omitted

        Returns:
            Saved report

        Raises:
            DomainError: If accounts conflict under the REJECT policy or the
                report conflicts with stored data
        """
        if index is None:
            index = AccountIndex(self.db, self.account_policy)

        company = self.db.get_or_create_company(statement.company_ref, statement.company_name)
        created_accounts = index.created
        try:
            index.check(company.id, statement.line_items)

            line_items = []
            for item in statement.line_items:
                account = index.resolve(company.id, item.account_ref, item.name, item.category)
                line_items.append((account.id, item.value))

            report, created = self.db.save_report(
                company_id=company.id,
                external_report_id=statement.period_id,
                period_start=statement.period_start,
                period_end=statement.period_end,
                gross_profit=statement.gross_profit,
                net_profit=statement.net_profit,
                line_items=line_items,
            )
        except DomainError:
            self.db.rollback()
            index.reset()
            index.created = created_accounts
            raise
        if not created:
            logger.info(
                "Re-ingested report %s for company %s; line items replaced",
                statement.period_id,
                statement.company_ref,
            )
        return report

    def ingest_batch(self, payload: Union[str, bytes, Mapping]) -> BatchResult:
        """Normalize and persist a batch of period statements.

        Args:
            payload: Batch request body with a 'data' list

        Returns:
            BatchResult with processed count and per-entry error messages

        Raises:
            ParseError: If the payload itself is unreadable
        """
        entries = parse_batch(payload)
        logger.info("Ingesting batch of %d statement(s)", len(entries))

        index = AccountIndex(self.db, self.account_policy)
        processed = 0
        errors: list[str] = []

        for outcome in self.normalize_entries(entries):
            if isinstance(outcome, ValidationError):
                logger.warning("Skipping statement: %s", outcome)
                errors.append(str(outcome))
                continue
            try:
                self.persist_statement(outcome, index)
            except DomainError as e:
                message = str(e)
                if not message.startswith("Entry "):
                    message = entry_error(outcome.position, message)
                logger.warning("Skipping statement: %s", message)
                errors.append(message)
                continue
            processed += 1

        result = BatchResult(total=len(entries), processed_count=processed, errors=tuple(errors))
        logger.info(
            "Batch complete: %s (%d account(s) created, %d conflict(s))",
            result.message,
            index.created,
            index.conflicts,
        )
        return result
