"""
Deterministic cleaning rules.

This file exists to make the fixed parsing and export conventions explicit.
"""

SUPPORTED_EXTENSIONS = (".csv",)

DEFAULT_DELIMITER = ","
SEMICOLON_DELIMITER = ";"

# Row signatures join normalized cells with the ASCII unit separator.
SIGNATURE_SEPARATOR = "\x1f"

EXPORT_LINE_TERMINATOR = "\n"
CLEANED_SUFFIX = "-cleaned.csv"
