"""Tax relief categories a receipt can be filed under."""

LIFESTYLE_EXPENSES = "Lifestyle Expenses"
CHILDCARE = "Childcare"
SPORT_EQUIPMENT = "Sport Equipment"
DONATIONS = "Donations"
MEDICAL = "Medical"
EDUCATION = "Education"

DEFAULT_CATEGORY = LIFESTYLE_EXPENSES

TAX_CATEGORIES: tuple[str, ...] = (
    LIFESTYLE_EXPENSES,
    CHILDCARE,
    SPORT_EQUIPMENT,
    DONATIONS,
    MEDICAL,
    EDUCATION,
)
