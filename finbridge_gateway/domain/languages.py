"""
Static per-language phrase tables.

Each table is keyed by language tag and merged over the en-US table at
lookup time, so a language only lists what differs from English.
"""

from typing import Dict, List

DEFAULT_LANGUAGE = "en-US"

SUPPORTED_LANGUAGES: Dict[str, Dict[str, str]] = {
    "en-US": {"label": "English", "voice": "en-US"},
    "ta-IN": {"label": "Tamil", "voice": "ta-IN"},
    "hi-IN": {"label": "Hindi", "voice": "hi-IN"},
    "mar-IN": {"label": "Marwadi", "voice": "hi-IN"},  # No Marwadi voice; Hindi is closest
}

NUMBER_WORDS: Dict[str, Dict[str, float]] = {
    "en-US": {
        "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
        "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
        "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
        "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
        "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
        "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
        "hundred": 100, "thousand": 1_000, "lakh": 100_000, "lakhs": 100_000,
        "million": 1_000_000, "crore": 10_000_000, "crores": 10_000_000,
        "billion": 1_000_000_000, "k": 1_000,
    },
    "ta-IN": {
        "ondru": 1, "onnu": 1, "irandu": 2, "rendu": 2, "moondru": 3, "naangu": 4,
        "aindhu": 5, "anju": 5, "aaru": 6, "ezhu": 7, "ettu": 8, "onbadhu": 9,
        "patthu": 10, "pathu": 10, "irupathu": 20, "ambathu": 50,
        "nooru": 100, "ayiram": 1_000, "aayiram": 1_000, "aiyiram": 5_000,
        "pathayiram": 10_000, "latcham": 100_000, "kodi": 10_000_000,
        "ஒன்று": 1, "இரண்டு": 2, "ஐந்து": 5, "பத்து": 10,
        "நூறு": 100, "ஆயிரம்": 1_000, "லட்சம்": 100_000, "கோடி": 10_000_000,
    },
    "hi-IN": {
        "ek": 1, "do": 2, "teen": 3, "char": 4, "paanch": 5, "panch": 5,
        "chhe": 6, "che": 6, "saat": 7, "aath": 8, "nau": 9, "das": 10,
        "bees": 20, "tees": 30, "tis": 30, "chalis": 40, "pachas": 50,
        "sau": 100, "hazaar": 1_000, "hazar": 1_000, "lakh": 100_000, "crore": 10_000_000,
        "एक": 1, "दो": 2, "पांच": 5, "पाँच": 5, "दस": 10,
        "सौ": 100, "हजार": 1_000, "हज़ार": 1_000, "लाख": 100_000, "करोड़": 10_000_000,
    },
    "mar-IN": {
        "ek": 1, "be": 2, "tran": 3, "char": 4, "paanch": 5,
        "chha": 6, "saat": 7, "aath": 8, "nau": 9, "das": 10,
        "so": 100, "hazaar": 1_000, "lakh": 100_000, "crore": 10_000_000,
    },
}

ZERO_WORDS: Dict[str, List[str]] = {
    "en-US": ["zero", "nil", "nothing"],
    "ta-IN": ["pujyam", "சுழியம்"],
    "hi-IN": ["shunya", "शून्य"],
    "mar-IN": ["shunya"],
}

# Order matters: the first category with a hit wins
KEYWORD_CATEGORIES = ["add_income", "add_expense", "check_loan", "show_dashboard", "health_query"]

KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    "en-US": {
        "add_income": ["salary", "income", "earning", "earned", "received"],
        "add_expense": ["spent", "spend", "expense", "paid", "bought", "log", "record"],
        "check_loan": ["loan", "borrow", "emi"],
        "show_dashboard": ["dashboard", "show", "overview"],
        "health_query": ["health", "advice", "financial", "how am i"],
    },
    "ta-IN": {
        "add_income": ["sambalam", "varumanam", "வருமானம்", "சம்பளம்"],
        "add_expense": ["selavu", "karchu", "poodu", "செலவு", "செலவாச்சு", "போடு"],
        "check_loan": ["kadan", "கடன்"],
        "show_dashboard": ["kaattu", "parvai", "முகப்பு", "காட்டு"],
        "health_query": ["nalam", "alochanai", "நலம்", "ஆலோசனை"],
    },
    "hi-IN": {
        "add_income": ["tankhah", "aamdani", "kamai", "आमदनी", "तनख्वाह", "कमाई"],
        "add_expense": ["kharcha", "vyay", "lagaya", "खर्चा", "व्यय", "लगाया"],
        "check_loan": ["udhaar", "karz", "लोन", "उधार", "कर्ज"],
        "show_dashboard": ["dikhao", "डैशबोर्ड", "दिखाओ"],
        "health_query": ["sehat", "salah", "सेहत", "सलाह"],
    },
    "mar-IN": {
        "add_income": ["pagar", "kamai"],
        "add_expense": ["kharcho", "lagayo"],
        "check_loan": ["udhaar", "karz"],
        "show_dashboard": ["dikhao"],
        "health_query": ["tabiyat", "salah"],
    },
}

RESPONSES: Dict[str, Dict[str, str]] = {
    "en-US": {
        "listening": "Listening...",
        "processing": "Processing...",
        "success": "Done.",
        "error": "Sorry, I could not process that.",
        "unknown": (
            'I did not understand that. Try "Spent 300 on food", '
            '"My salary is 25000" or "How is my financial health".'
        ),
        "amount_missing": "I could not detect the amount. Please say it again with a number.",
        "income_set": "Monthly income set to {amount:,.0f}.",
        "income_added": "Income of {amount:,.0f} added.",
        "expense_added": "Expense of {amount:,.0f} added.",
        "amount_reduced": "{kind} reduced by {amount:,.0f}.",
        "expense_adjusted": "Expenses adjusted to match {amount:,.0f}.",
        "expense_at_target": "Expenses are already at {amount:,.0f}.",
        "dashboard": (
            "Your health score is {health_score} out of 100. Monthly income is "
            "{income:,.0f} and expenses are {expenses:,.0f}."
        ),
        "health": (
            "Your financial health score is {health_score} out of 100. Savings rate is "
            "{savings_rate:.1f} percent. Debt-to-income ratio is {debt_to_income:.1f} percent. "
            "Financial stress probability is {stress:.0f} percent."
        ),
        "loan_summary": (
            "Your new EMI would be {emi:,.0f} per month. Debt-to-income moves from "
            "{dti_before:.1f} to {dti_after:.1f} percent. Risk level: {risk}."
        ),
    },
    "ta-IN": {
        "listening": "Kekkirathu...",
        "processing": "Seyalpaduthugirathu...",
        "success": "Mudinthathu.",
        "error": "Mannikkavum, puriyavillai.",
        "unknown": "Kattalai puriyavillai.",
        "amount_missing": "Thogai kandupidikka mudiyavillai. Thayavu seythu thogaiyai sollungal.",
        "income_set": "Maatha varumanam {amount:,.0f} aaga amaikkappattathu.",
        "expense_added": "{amount:,.0f} selavu serkkappattathu.",
        "income_added": "{amount:,.0f} varumanam serkkappattathu.",
    },
    "hi-IN": {
        "listening": "Sun raha hoon...",
        "processing": "Kaam chal raha hai...",
        "success": "Ho gaya.",
        "error": "Maaf kijiye, samajh nahi aaya.",
        "unknown": "Aadesh samajh nahi aaya.",
        "amount_missing": "Rakam samajh nahi aayi. Kripya rakam dobara boliye.",
        "income_set": "Maasik aamdani {amount:,.0f} set ho gayi.",
        "expense_added": "{amount:,.0f} ka kharcha jod diya.",
        "income_added": "{amount:,.0f} ki aamdani jod di.",
    },
    "mar-IN": {
        "listening": "Sunu chu...",
        "processing": "Kaam chalu hai...",
        "success": "Hogyo.",
        "error": "Maaf karjo, samjyo koni.",
        "unknown": "Hukam samjyo koni.",
    },
}


def normalize_language(language: str) -> str:
    return language if language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def number_lexicon(language: str) -> Dict[str, float]:
    return {**NUMBER_WORDS[DEFAULT_LANGUAGE], **NUMBER_WORDS.get(language, {})}


def zero_words(language: str) -> List[str]:
    return ZERO_WORDS.get(language, []) + ZERO_WORDS[DEFAULT_LANGUAGE]


def keyword_table(language: str) -> Dict[str, List[str]]:
    """Language keywords first, English keywords appended to every category"""
    own = KEYWORDS.get(language, {})
    default = KEYWORDS[DEFAULT_LANGUAGE]
    return {
        category: own.get(category, []) + default[category]
        for category in KEYWORD_CATEGORIES
    }


def response_text(language: str, key: str, **values) -> str:
    """Render a voice response template, falling back to English"""
    templates = {**RESPONSES[DEFAULT_LANGUAGE], **RESPONSES.get(language, {})}
    return templates[key].format(**values)
