"""Masking or filtering of personally identifiable information in node text."""

import re
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from ragcore.entities.node import NodeWithScore
from ragcore.entities.query import QueryBundle
from ragcore.errors import ConfigurationError

from .base import BaseNodePostprocessor


class PIIType(StrEnum):
    EMAIL = "email"
    PHONE = "phone"
    SSN = "ssn"
    CREDIT_CARD = "credit_card"
    IP_ADDRESS = "ip_address"


@dataclass(frozen=True)
class PIIPattern:
    type: str
    pattern: re.Pattern
    mask: str


@dataclass(frozen=True)
class PIIMatch:
    type: str
    value: str
    start: int
    end: int


def default_pii_patterns() -> list[PIIPattern]:
    """Built-in detectors, most specific first so longer numbers are masked whole."""
    return [
        PIIPattern(PIIType.EMAIL, re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
        PIIPattern(PIIType.CREDIT_CARD, re.compile(r"\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}"), "[CREDIT_CARD]"),
        PIIPattern(PIIType.SSN, re.compile(r"\b\d{3}[-\s]?\d{2}[-\s]?\d{4}\b"), "[SSN]"),
        PIIPattern(PIIType.IP_ADDRESS, re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), "[IP_ADDRESS]"),
        PIIPattern(
            PIIType.PHONE,
            re.compile(r"(\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}"),
            "[PHONE]",
        ),
    ]


class PIIPostprocessor(BaseNodePostprocessor):
    """
    Mask PII in node text, or drop the nodes that contain any.

    Args:
        pii_types: Only detect these types; all patterns when empty
        mask_pii: Replace matches with their mask (True) or drop the node (False)
        custom_mask: One mask used for every type instead of ``[EMAIL]`` etc.
        store_original: On masked nodes whose text changed, keep the original
            under ``original_text`` and set ``pii_masked`` in the metadata
        patterns: Detectors to use instead of ``default_pii_patterns()``
    """

    def __init__(
        self,
        pii_types: list[PIIType | str] | None = None,
        mask_pii: bool = True,
        custom_mask: str | None = None,
        store_original: bool = False,
        patterns: list[PIIPattern] | None = None,
    ):
        self.patterns = list(patterns) if patterns is not None else default_pii_patterns()
        self.pii_types = {str(t) for t in pii_types or []}
        self.mask_pii = mask_pii
        self.custom_mask = custom_mask
        self.store_original = store_original

    def add_pattern(self, pii_type: str, pattern: str, mask: str) -> None:
        """
        Register an extra detector.

        Raises:
            ConfigurationError: If ``pattern`` is not a valid regular expression
        """
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid PII pattern for '{pii_type}'", original_error=e)
        self.patterns.append(PIIPattern(str(pii_type), compiled, mask))

    def _active(self) -> list[PIIPattern]:
        if not self.pii_types:
            return self.patterns
        return [p for p in self.patterns if str(p.type) in self.pii_types]

    def detect_pii(self, text: str) -> list[PIIMatch]:
        """Every match of every active detector, grouped by detector."""
        return [
            PIIMatch(str(p.type), m.group(0), m.start(), m.end())
            for p in self._active()
            for m in p.pattern.finditer(text)
        ]

    def contains_pii(self, text: str) -> bool:
        return any(p.pattern.search(text) for p in self._active())

    def mask(self, text: str) -> str:
        for p in self._active():
            text = p.pattern.sub(self.custom_mask or p.mask, text)
        return text

    def _mask_node(self, item: NodeWithScore) -> NodeWithScore:
        masked = self.mask(item.node.text)
        if masked == item.node.text:
            return item
        node = item.node.with_text(masked)
        if self.store_original:
            node.metadata["original_text"] = item.node.text
            node.metadata["pii_masked"] = True
        return item.with_node(node)

    async def _postprocess_nodes(
        self,
        nodes: list[NodeWithScore],
        query_bundle: QueryBundle | None,
    ) -> list[NodeWithScore]:
        if self.mask_pii:
            return [self._mask_node(item) for item in nodes]

        kept = [item for item in nodes if not self.contains_pii(item.node.text)]
        if len(kept) < len(nodes):
            logger.debug(f"Dropped {len(nodes) - len(kept)} node(s) containing PII")
        return kept
