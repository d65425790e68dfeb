"""Statement import: turn a bank statement into extracted transaction rows.

Two extractors share one protocol:
- JsonStatementExtractor reads documents that are already structured
  ({"transactions": [...]}).
- LLMStatementExtractor sends statement text to an OpenAI-compatible
  chat completions endpoint and parses its JSON reply.
"""

import json
import logging
import math
from collections.abc import Sequence
from typing import Any, Protocol

import pandas as pd
import requests

from budgetbook.domain.models import Money
from budgetbook.domain.statement import ExtractedTransaction

logger = logging.getLogger(__name__)


class StatementImportError(Exception):
    """The statement could not be turned into transactions."""


class StatementExtractor(Protocol):
    def extract(self, document: bytes, category_names: Sequence[str]) -> list[ExtractedTransaction]: ...


def parse_amount(raw: Any) -> Money:
    """Convert an extracted amount (units) to positive cents.

    Raises:
        ValueError: If the amount is not a finite number.
    """
    if isinstance(raw, str):
        raw = raw.replace(",", "").replace("$", "").replace("£", "").strip()
    units = float(raw)
    if not math.isfinite(units):
        raise ValueError(f"Amount must be finite, got {raw!r}")
    return Money(abs(round(units * 100)))


def parse_row(raw: dict[str, Any]) -> ExtractedTransaction | None:
    """Parse one extracted row.

    Args:
        raw: Row dictionary with date, description, amount, type and category.

    Returns:
        ExtractedTransaction, or None if the row should be skipped.
    """
    raw_date = str(raw.get("date") or "").strip()
    if not raw_date:
        return None

    try:
        day = pd.to_datetime(raw_date).date()
        amount = parse_amount(raw.get("amount"))
    except (TypeError, ValueError, pd.errors.ParserError):
        return None

    if amount == 0:
        return None

    return ExtractedTransaction(
        date=day,
        description=str(raw.get("description") or "").strip(),
        amount=amount,
        type=str(raw.get("type") or "expense"),
        category_name=raw.get("category"),
    )


def parse_extraction_payload(text: str) -> list[ExtractedTransaction]:
    """Parse an extractor's JSON reply.

    Args:
        text: JSON object with a "transactions" list.

    Returns:
        Parsed rows. Unusable rows are skipped with a warning.

    Raises:
        StatementImportError: If the payload is not a JSON object with a transactions list.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise StatementImportError(f"Extractor returned invalid JSON: {e}") from e

    rows = payload.get("transactions") if isinstance(payload, dict) else None
    if not isinstance(rows, list):
        raise StatementImportError("Extractor reply has no 'transactions' list")

    transactions: list[ExtractedTransaction] = []
    for idx, raw in enumerate(rows):
        parsed = parse_row(raw) if isinstance(raw, dict) else None
        if parsed is None:
            logger.warning("Skipping unusable statement row %d: %r", idx, raw)
            continue
        transactions.append(parsed)

    logger.info("Extracted %d of %d statement rows", len(transactions), len(rows))
    return transactions


class JsonStatementExtractor:
    """Reads pre-extracted statements stored as JSON."""

    def extract(self, document: bytes, category_names: Sequence[str]) -> list[ExtractedTransaction]:
        try:
            text = document.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StatementImportError("Statement file is not UTF-8 text") from e
        return parse_extraction_payload(text)


def build_system_prompt(category_names: Sequence[str]) -> str:
    return " ".join(
        [
            "You extract bank statement transactions.",
            "Output a JSON object with property `transactions`.",
            "Each transaction must be: { date:'YYYY-MM-DD', description:string, amount:number,"
            " type:'income'|'expense', category:string }.",
            "Amounts MUST be positive numbers. Exclude headers, balances and running totals.",
            f"For category, choose the closest from this list: {', '.join(category_names)}.",
            "Use 'Income' for money coming in and 'Uncategorized' when nothing fits.",
        ]
    )


class LLMStatementExtractor:
    """Extracts transactions from statement text with a chat completions API."""

    def __init__(self, api_base: str, model: str, api_key: str, timeout_seconds: float = 120) -> None:
        self.api_base = api_base.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    def extract(self, document: bytes, category_names: Sequence[str]) -> list[ExtractedTransaction]:
        """Send statement text to the model and parse the reply.

        Args:
            document: Statement text (UTF-8).
            category_names: Names the model may choose from.

        Returns:
            Parsed rows.

        Raises:
            StatementImportError: If the request fails or the reply is unusable.
        """
        statement_text = document.decode("utf-8", errors="replace")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": build_system_prompt(category_names)},
                {"role": "user", "content": f'Statement text:\n"""{statement_text}"""'},
            ],
            "response_format": {"type": "json_object"},
        }

        logger.debug("Posting %d characters of statement text to %s", len(statement_text), self.api_base)
        try:
            response = requests.post(
                f"{self.api_base}/chat/completions",
                headers=headers,
                json=body,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            raise StatementImportError(f"Extraction request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise StatementImportError("Unexpected response from extraction service") from e

        if not content:
            raise StatementImportError("Empty response from extraction service")
        return parse_extraction_payload(content)
