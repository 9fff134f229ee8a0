"""General API information rendered in the Swagger UI."""

API_INFO = {
    "title": "Finance Tracker",
    "version": "1.0.0",
    "description": (
        "Personal finance backend.\n\n"
        "- Savings goals with contributions and milestones.\n"
        "- Income and expense ledger.\n"
        "- Achievements unlocked from financial behaviour.\n"
        "- JWT authentication."
    ),
    "license": {"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
}

TAGS = [
    {"name": "Authentication", "description": "Register, log in and log out"},
    {"name": "Goals", "description": "Savings goals, contributions and status"},
    {"name": "Ledger", "description": "Income and expense entries"},
    {
        "name": "Achievements",
        "description": "Achievement catalog, evaluation and leaderboard",
    },
    {"name": "Health", "description": "Liveness probe"},
]
