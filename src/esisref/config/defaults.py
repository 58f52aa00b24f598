"""
esisref.config.defaults - Default configuration values.
"""

CONFIG_FILE_NAME = ".esisref.toml"

ENV_PREFIX = "ESISREF_"

DEFAULT_CONFIG = {
    "parser": {
        # Any SP-family parser: nsgmls (SP) or onsgmls (OpenSP)
        "command": "nsgmls",
        "args": ["-oline", "-oid"],
        "timeout": 30.0,
        "tolerate_errors": False,
    },
    "index": {
        # "auto" folds case for SGML and keeps it for documents with an XML declaration
        "case_sensitive": "auto",
        "strict": False,
    },
    "view": {
        "context_lines": 3,
        "style": "default",
    },
}
