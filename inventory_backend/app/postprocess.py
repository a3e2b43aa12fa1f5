#!/usr/bin/env python3
"""
Postprocessing module for the inventory chat assistant.

This module turns query rows into the readable bullet-list replies sent on
the chat channel.
"""

import re
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

NO_DATA_MESSAGE = "No data found matching your criteria."
RESULT_HEADER = "Database Result:"


def format_key(key: str) -> str:
    """product_name -> Product Name"""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), key.replace("_", " "))


def format_value(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if hasattr(value, "isoformat"):
        return value.isoformat(sep=" ", timespec="seconds") if hasattr(value, "hour") else value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def format_rows(rows: Optional[Iterable[Mapping[str, Any]]], names_only: bool = False) -> str:
    """
    Format a row set for the chat reply.

    Args:
        rows: Mappings of column name to value
        names_only: Emit only the product name of each row

    Returns:
        Formatted text; never empty
    """
    rows = list(rows or [])
    if not rows:
        return NO_DATA_MESSAGE

    blocks = []
    for index, row in enumerate(rows, 1):
        lines = [f"Entry {index}:"]
        if names_only and "product_name" in row:
            lines.append(f"  • Product Name: {format_value(row['product_name'])}")
        else:
            for key, value in row.items():
                lines.append(f"  • {format_key(key)}: {format_value(value)}")
        blocks.append("\n".join(lines))

    return RESULT_HEADER + "\n\n" + "\n\n".join(blocks)


class Postprocessor:
    """Postprocesses LLM responses for the chat channel."""

    def format_response(self, response: str) -> str:
        """
        Format the LLM response for display.

        Args:
            response: Raw LLM response

        Returns:
            Formatted response
        """
        # Collapse runs of spaces but keep the line structure of lists
        response = re.sub(r"[ \t]+", " ", response or "")
        response = re.sub(r"\n{3,}", "\n\n", response)
        # Remove extra spaces before punctuation
        response = re.sub(r" +([,.!?;:])", r"\1", response)
        return response.strip()
