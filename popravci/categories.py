import re
from typing import Any, Dict, List

TOP_CATEGORIES = [
    "Električne instalacije",
    "Vodoinstalacije",
    "Stolarija / Vrata / Prozori",
    "Bravarija",
    "Kupaonica",
    "Kuhinja",
    "Bijela tehnika (servis)",
    "Klima / Grijanje",
    "Zidovi / Strop",
    "Pomoć u kući / Sitni radovi",
]

SERVICE_CATEGORIES: Dict[str, List[str]] = {
    "1. Električne instalacije": [
        "Ne radi utičnica",
        "Ne radi svjetlo",
        "Zamjena prekidača ili utičnice",
        "Postavljanje rasvjete/lustre",
        "Problemi s osiguračima",
    ],
    "2. Vodoinstalacije": [
        "Curi voda (sudoper, sifon, WC...)",
        "Začepljenje odvoda",
        "Zamjena slavine ili tuša",
        "Problemi s kotlićem",
        "Ugradnja perilice/sušilice",
    ],
    "3. Stolarija / Vrata / Prozori": [
        "Podešavanje vrata/prozora",
        "Zamjena brava/kvaka",
        "Popravak namještaja",
        "Montaža kuhinje/ormara",
    ],
    "4. Bravarija": [
        "Otvaranje zaključanih vrata",
        "Zamjena cilindara",
        "Popravak rešetki, ograda",
    ],
    "5. Kupaonica": [
        "Silikoniranje tuša/kade",
        "Zamjena WC školjke",
        "Ugradnja tuš kabine",
    ],
    "6. Kuhinja": [
        "Popravak ormarića",
        "Zamjena šarki / vodilica",
        "Sitne montaže i dorade",
    ],
    "7. Bijela tehnika (servis)": [
        "Perilica rublja",
        "Sušilica",
        "Perilica suđa",
        "Hladnjak",
    ],
    "8. Klima / Grijanje": [
        "Servis klime",
        "Montaža klime",
        "Radijatori / grijanje",
    ],
    "9. Zidovi / Strop": [
        "Zakrpavanje rupa",
        "Krečenje manjih površina",
        "Postavljanje polica, slika",
    ],
    "10. Pomoć u kući / Sitni radovi": [
        "Sastavljanje namještaja (IKEA i sl.)",
        "Vješanje TV-a na zid",
        "Montaža zavjesa, roleta",
    ],
}

_ORDINAL_PREFIX = re.compile(r"^\d+\.\s*")


def strip_ordinal(category_name: str) -> str:
    """'2. Vodoinstalacije' -> 'Vodoinstalacije'."""
    return _ORDINAL_PREFIX.sub("", category_name or "")


def get_subcategories(category_name: str) -> List[str]:
    normalized = strip_ordinal(category_name)
    for name, subcategories in SERVICE_CATEGORIES.items():
        if strip_ordinal(name) == normalized or name == category_name:
            return list(subcategories)
    return []


def get_all_subcategories(categories: List[str]) -> List[str]:
    subcategories: List[str] = []
    for category in categories or []:
        subcategories.extend(get_subcategories(category))
    return subcategories


def secondary_categories(record: Any) -> List[str]:
    """Subcategories of a majstor's categories for the profile page, in taxonomy order and without repeats."""
    wanted = {strip_ordinal(c) for c in getattr(record, "categories", None) or []}
    secondary: List[str] = []
    for name, subcategories in SERVICE_CATEGORIES.items():
        if strip_ordinal(name) in wanted:
            secondary.extend(subcategories)
    return secondary
