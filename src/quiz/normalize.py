from __future__ import annotations
import re

_ORDINAL_PREFIX = re.compile(r"^[0-9]+\.\s*")

def clean_option(option: str) -> str:
    """Strip a leading ordinal label such as "3. " from an option."""
    return _ORDINAL_PREFIX.sub("", option, count=1)

def option_has_prefix(option: str, label: str) -> bool:
    return option.startswith(f"{label}.")
