"""General API information for the OpenAPI document."""

API_INFO = {
    "title": "MoneyFlow Goals API",
    "version": "1.0.0",
    "description": (
        "Financial goals for MoneyFlow organizations.\n\n"
        "- Goal progress is derived from the organization's transaction ledger.\n"
        "- Goals reaching 100% of their target are completed automatically.\n"
        "- Authenticate with the bearer token issued by the auth provider."
    ),
    "contact": {"name": "MoneyFlow"},
    "license": {"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
}

TAGS = [
    {
        "name": "Goals",
        "description": "Financial goals and their ledger-synchronized progress",
    },
    {"name": "Health", "description": "Infrastructure probes"},
]
