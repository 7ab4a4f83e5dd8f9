"""Regular expressions shared by the VAST and VMAP schemas."""

# hh:mm:ss[.mmm]
TIME = r"(?:[1-9]\d+|0\d):[0-5]\d:[0-5]\d(?:\.\d{3})?"
# n% with n in 0-100, optional decimals
PERCENT = r"(?:[1-9]\d?|100|0)(?:\.\d+)?%"
# #m, position of the ad break opportunity
POSITION = r"#\d+"

TIME_PATTERN = rf"^{TIME}$"
TIME_OR_PERCENT_PATTERN = rf"^(?:{TIME}|{PERCENT})$"
TIME_OFFSET_PATTERN = rf"^(?:{TIME}|{PERCENT}|start|end|{POSITION})$"

# VAST accepts any text after the scheme, VMAP requires a whitespace-free URI
VAST_URI_PATTERN = r"^https?://.*$"
URI_PATTERN = r"^https?://\S+$"
CURRENCY_PATTERN = r"^[a-zA-Z]{3}$"

VAST_VERSION_PATTERN = r"^[23](?:\.\d+)?$"
VMAP_VERSION_PATTERN = r"^1(?:\.\d+)?$"


__all__ = [
    "TIME_PATTERN",
    "TIME_OR_PERCENT_PATTERN",
    "TIME_OFFSET_PATTERN",
    "VAST_URI_PATTERN",
    "URI_PATTERN",
    "CURRENCY_PATTERN",
    "VAST_VERSION_PATTERN",
    "VMAP_VERSION_PATTERN",
]
