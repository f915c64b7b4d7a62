"""Semantic classification of single OCR receipt lines.

Each line gets exactly one ReceiptLineType. Checks run in a fixed order and
the first match wins: total/paid/change/payment lines usually carry numbers
that look like prices, so they are ruled out before the generic item check.

Keyword tables live in an immutable LineClassifierRules value. Defaults below
target Brazilian NFC-e/SAT receipts; locale-specific phrases can be layered in
from TOML configs (see build_line_classifier_rules).
"""

import re
import unicodedata
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any

from cupom.domain.receipt import ReceiptLineType

DEFAULT_HEADER_KEYWORDS = (
    "cnpj",
    "documento auxiliar",
    "consumidor",
    "inscric",
    "telefone",
    "fone",
    "cpf",
)
DEFAULT_TOTAL_PHRASES = ("total a pagar", "valor total r$", "valor a pagar")
DEFAULT_TOTAL_PREFIXES = ("total:", "total :")
DEFAULT_PAID_KEYWORDS = ("valor pago", "total pago")
DEFAULT_CHANGE_KEYWORDS = ("troco",)
DEFAULT_PAYMENT_METHOD_KEYWORDS = (
    "forma de pagamento",
    "cartao debito",
    "cartao credito",
    "cartao de debito",
    "cartao de credito",
    "dinheiro",
    "pix",
)
DEFAULT_DISCOUNT_KEYWORDS = ("desconto",)
DEFAULT_FOOTER_KEYWORDS = ("subtotal", "tributos", "volte sempre", "obrigado")

# "TOTAL R$ 77,70" / "TOTAL 77,70", but not "TOTAL PAGO" (a paid line) or an item count.
TOTAL_LINE = re.compile(r"^total(?!\s+(?:pago|de\s+itens|itens))\s+r?\$?")
# "QTD. TOTAL DE ITENS 3", "TOTAL DE ITENS 2", "TOTAL ITENS 2"
ITEM_COUNT_FOOTER = re.compile(r"(?:(?:qtde?\.?|quantidade)\s*|^)total\s*(?:de\s*)?itens")
CURRENCY_PRICE = re.compile(r"r?\$\s*\d+[.,]\d{2}")
TRAILING_PRICE = re.compile(r"\d+[.,]\d{2}\s*$")


def fold_accents(text: str) -> str:
    """Strip diacritics: "Cartão Débito" -> "Cartao Debito"."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@dataclass(frozen=True)
class LineClassifierRules:
    """Keyword tables used by the line classifier (lower-case, unaccented)."""

    header_keywords: tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    total_phrases: tuple[str, ...] = DEFAULT_TOTAL_PHRASES
    total_prefixes: tuple[str, ...] = DEFAULT_TOTAL_PREFIXES
    paid_keywords: tuple[str, ...] = DEFAULT_PAID_KEYWORDS
    change_keywords: tuple[str, ...] = DEFAULT_CHANGE_KEYWORDS
    payment_method_keywords: tuple[str, ...] = DEFAULT_PAYMENT_METHOD_KEYWORDS
    discount_keywords: tuple[str, ...] = DEFAULT_DISCOUNT_KEYWORDS
    footer_keywords: tuple[str, ...] = DEFAULT_FOOTER_KEYWORDS


# TOML table key -> LineClassifierRules field
_CONFIG_FIELDS = {
    "header": "header_keywords",
    "total": "total_phrases",
    "total_prefixes": "total_prefixes",
    "paid": "paid_keywords",
    "change": "change_keywords",
    "payment_method": "payment_method_keywords",
    "discount": "discount_keywords",
    "footer": "footer_keywords",
}


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize a TOML keywords value into lower-case unaccented strings."""
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return tuple()
    values = [fold_accents(str(v)).strip().lower() for v in raw]
    return tuple(v for v in values if v)


def build_line_classifier_rules(configs: Sequence[Mapping[str, Any]] | None = None) -> LineClassifierRules:
    """
    Merge keyword configs on top of the built-in defaults.

    Each config may carry a [keywords] table whose keys are line types
    (header, total, paid, change, payment_method, discount, footer,
    total_prefixes). Keywords are appended to the defaults, or replace them
    when the config sets ``replace = true``.
    """
    rules = LineClassifierRules()
    for config in configs or ():
        keywords = config.get("keywords", {})
        if not isinstance(keywords, Mapping):
            continue
        replace_defaults = bool(config.get("replace", False))
        updates: dict[str, tuple[str, ...]] = {}
        for key, field_name in _CONFIG_FIELDS.items():
            if key not in keywords:
                continue
            extra = _normalize_keywords(keywords[key])
            current: tuple[str, ...] = getattr(rules, field_name)
            if replace_defaults:
                updates[field_name] = extra
            else:
                updates[field_name] = current + tuple(kw for kw in extra if kw not in current)
        rules = replace(rules, **updates)
    return rules


@lru_cache(maxsize=1)
def _get_default_rules() -> LineClassifierRules:
    return build_line_classifier_rules()


class LineClassifier:
    """Assign a semantic role to each OCR line of a receipt."""

    def __init__(self, rules: LineClassifierRules | None = None) -> None:
        self.rules = rules or _get_default_rules()

    def classify(self, line: str) -> ReceiptLineType:
        text = fold_accents(line).strip().lower()
        if not text:
            return "unknown"

        rules = self.rules
        if any(kw in text for kw in rules.header_keywords):
            return "header"

        if (
            any(phrase in text for phrase in rules.total_phrases)
            or text.startswith(rules.total_prefixes)
            or TOTAL_LINE.match(text)
        ):
            return "total"

        if any(kw in text for kw in rules.paid_keywords):
            return "paid"

        if any(kw in text for kw in rules.change_keywords):
            return "change"

        if any(kw in text for kw in rules.payment_method_keywords):
            return "payment_method"

        if any(kw in text for kw in rules.discount_keywords):
            return "discount"

        if ITEM_COUNT_FOOTER.search(text) or any(kw in text for kw in rules.footer_keywords):
            return "footer"

        has_digit = any(ch.isdigit() for ch in text)
        if has_digit and (CURRENCY_PRICE.search(text) or TRAILING_PRICE.search(text)):
            return "item"

        return "unknown"


def classify_receipt_line(line: str, rules: LineClassifierRules | None = None) -> ReceiptLineType:
    """Classify one receipt line; see LineClassifier.classify."""
    return LineClassifier(rules).classify(line)
