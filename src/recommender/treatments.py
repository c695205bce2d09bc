"""
Static treatment lookup keyed by the top suggestion's ConditionKey.

Tables cover over-the-counter medicines and home-care remedies. Conditions
without an entry get no medicines and the generic home-care list.
NOTE: Informational only. Do NOT use in clinical settings.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence, Tuple

from engine import ConditionKey, Suggestion


@dataclass(frozen=True)
class Medicine:
    name: str
    type: str            # "OTC" or "Prescription"
    dosage: str
    frequency: str
    duration: str
    warnings: Tuple[str, ...]
    category: str


OTC_MEDICINES: Dict[ConditionKey, List[Medicine]] = {
    ConditionKey.COLD_FLU: [
        Medicine("Acetaminophen (Tylenol)", "OTC", "500-1000mg", "Every 6-8 hours", "3-5 days",
                 ("Do not exceed 4000mg per day", "Avoid alcohol"), "Pain Relief"),
        Medicine("Ibuprofen (Advil, Motrin)", "OTC", "200-400mg", "Every 6 hours", "3-5 days",
                 ("Take with food", "Avoid if allergic to NSAIDs"), "Anti-inflammatory"),
        Medicine("Dextromethorphan (Robitussin DM)", "OTC", "15-30mg", "Every 4 hours", "7 days max",
                 ("Do not exceed recommended dose", "May cause drowsiness"), "Cough Suppressant"),
    ],
    ConditionKey.GASTROENTERITIS: [
        Medicine("Loperamide (Imodium)", "OTC", "2mg", "After each loose stool", "2 days max",
                 ("Do not use if fever present", "Maximum 8mg per day"), "Anti-diarrheal"),
        Medicine("Oral Rehydration Solution", "OTC", "200-400ml", "After each episode", "Until symptoms resolve",
                 ("Follow package instructions",), "Rehydration"),
    ],
    ConditionKey.TENSION_HEADACHE: [
        Medicine("Acetaminophen (Tylenol)", "OTC", "500-1000mg", "Every 6 hours", "3 days max",
                 ("Do not exceed daily limit",), "Pain Relief"),
        Medicine("Aspirin", "OTC", "325-650mg", "Every 4 hours", "3 days max",
                 ("Take with food", "Avoid if under 18"), "Pain Relief"),
    ],
    ConditionKey.ALLERGIC_REACTION: [
        Medicine("Loratadine (Claritin)", "OTC", "10mg", "Once daily", "As needed",
                 ("May cause mild drowsiness",), "Antihistamine"),
        Medicine("Diphenhydramine (Benadryl)", "OTC", "25-50mg", "Every 6 hours", "As needed",
                 ("Causes drowsiness", "Do not drive"), "Antihistamine"),
    ],
}

HOME_REMEDIES: Dict[ConditionKey, List[str]] = {
    ConditionKey.COLD_FLU: [
        "Drink plenty of warm fluids like tea with honey",
        "Gargle with warm salt water for sore throat",
        "Use a humidifier or breathe steam from hot shower",
        "Get adequate rest (7-9 hours of sleep)",
        "Eat chicken soup for hydration and comfort",
    ],
    ConditionKey.GASTROENTERITIS: [
        "Follow BRAT diet (Bananas, Rice, Applesauce, Toast)",
        "Drink clear fluids in small, frequent sips",
        "Avoid dairy, caffeine, alcohol, and fatty foods",
        "Rest and avoid solid foods until vomiting stops",
        "Try ginger tea for nausea relief",
    ],
    ConditionKey.TENSION_HEADACHE: [
        "Apply cold or warm compress to head/neck",
        "Practice relaxation techniques and deep breathing",
        "Massage temples and neck muscles gently",
        "Stay hydrated and maintain regular sleep schedule",
        "Reduce screen time and take breaks from work",
    ],
    ConditionKey.ALLERGIC_REACTION: [
        "Identify and avoid known allergens",
        "Use saline nasal rinse to clear allergens",
        "Keep windows closed during high pollen days",
        "Shower after being outdoors",
        "Use HEPA air filters in your home",
    ],
}

DEFAULT_HOME_REMEDIES: List[str] = [
    "Stay hydrated with plenty of water",
    "Get adequate rest and sleep",
    "Eat nutritious, easily digestible foods",
    "Monitor symptoms and track changes",
]


class TreatmentRecommender:
    """
    Treatment suggestions for the primary (highest-ranked) suggestion.

    Methods:
        recommend(suggestions): returns a dict with OTC medicines and home remedies
    """

    def __init__(
        self,
        medicines: Dict[ConditionKey, List[Medicine]] = None,
        home_remedies: Dict[ConditionKey, List[str]] = None,
        default_remedies: List[str] = None,
    ):
        self.medicines = OTC_MEDICINES if medicines is None else medicines
        self.home_remedies = HOME_REMEDIES if home_remedies is None else home_remedies
        self.default_remedies = DEFAULT_HOME_REMEDIES if default_remedies is None else default_remedies

    def recommend(self, suggestions: Sequence[Suggestion]) -> Dict[str, Any]:
        """
        Look up treatments for suggestions[0].

        Returns:
            { "condition": str | None, "key": str | None,
              "otc_medicines": [dict], "home_remedies": [str] }
        """
        if not suggestions:
            return {
                "condition": None,
                "key": None,
                "otc_medicines": [],
                "home_remedies": list(self.default_remedies),
            }

        primary = suggestions[0]
        return {
            "condition": primary.condition,
            "key": primary.key.value,
            "otc_medicines": [asdict(m) for m in self.medicines.get(primary.key, [])],
            "home_remedies": list(self.home_remedies.get(primary.key, self.default_remedies)),
        }
