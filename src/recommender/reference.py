"""
Static reference tables of conditions and treatment plans.

Both tables are searchable by free text and filterable by category; they are
browsed in the app and are independent of the suggestion engine.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

ALL_CATEGORIES = "all"

CATEGORIES: Tuple[str, ...] = (
    "Respiratory",
    "Cardiovascular",
    "Endocrine",
    "Neurological",
    "Gastrointestinal",
    "Mental Health",
)


@dataclass(frozen=True)
class ConditionInfo:
    condition: str
    category: str
    symptoms: Tuple[str, ...]
    risk_factors: Tuple[str, ...]
    prevalence: str
    accuracy: int
    common_age: str
    severity: str
    description: str


@dataclass(frozen=True)
class Medication:
    name: str
    type: str
    dosage: str
    frequency: str
    price: str


@dataclass(frozen=True)
class TreatmentPlan:
    condition: str
    category: str
    medications: Tuple[Medication, ...]
    home_remedies: Tuple[str, ...]
    lifestyle: Tuple[str, ...]
    duration: str
    effectiveness: int
    side_effects: Tuple[str, ...]
    precautions: Tuple[str, ...]


CONDITIONS: Tuple[ConditionInfo, ...] = (
    ConditionInfo("Common Cold", "Respiratory",
                  ("Runny nose", "Sneezing", "Cough", "Mild fever", "Fatigue"),
                  ("Seasonal changes", "Weakened immunity", "Close contact"),
                  "2-3 times per year", 95, "All ages", "low",
                  "Viral infection of the upper respiratory tract"),
    ConditionInfo("Hypertension", "Cardiovascular",
                  ("Headaches", "Dizziness", "Chest pain", "Shortness of breath"),
                  ("Age >40", "Obesity", "Sedentary lifestyle", "High sodium diet"),
                  "45% of adults", 88, "40+ years", "high",
                  "Elevated blood pressure requiring management"),
    ConditionInfo("Type 2 Diabetes", "Endocrine",
                  ("Excessive thirst", "Frequent urination", "Fatigue", "Blurred vision"),
                  ("Obesity", "Family history", "Age >45", "Sedentary lifestyle"),
                  "11% of adults", 92, "45+ years", "high",
                  "Metabolic disorder affecting blood sugar regulation"),
    ConditionInfo("Migraine", "Neurological",
                  ("Severe headache", "Nausea", "Light sensitivity", "Visual disturbances"),
                  ("Family history", "Stress", "Hormonal changes", "Certain foods"),
                  "12% of population", 89, "20-50 years", "medium",
                  "Recurrent severe headaches with associated symptoms"),
    ConditionInfo("Gastroenteritis", "Gastrointestinal",
                  ("Nausea", "Vomiting", "Diarrhea", "Abdominal pain", "Fever"),
                  ("Food contamination", "Poor hygiene", "Travel", "Contact with infected person"),
                  "1-2 episodes per year", 91, "All ages", "medium",
                  "Inflammation of stomach and intestines"),
    ConditionInfo("Anxiety Disorder", "Mental Health",
                  ("Excessive worry", "Restlessness", "Fatigue", "Sleep problems"),
                  ("Stress", "Trauma", "Family history", "Medical conditions"),
                  "18% of adults", 85, "18-65 years", "medium",
                  "Persistent excessive worry and fear"),
    ConditionInfo("Pneumonia", "Respiratory",
                  ("Cough with phlegm", "Fever", "Chills", "Difficulty breathing"),
                  ("Age >65", "Weakened immunity", "Chronic diseases", "Smoking"),
                  "5-10 per 1000 adults", 93, "65+ years", "high",
                  "Infection causing inflammation in lung air sacs"),
    ConditionInfo("Allergic Rhinitis", "Respiratory",
                  ("Sneezing", "Itchy eyes", "Runny nose", "Congestion"),
                  ("Allergen exposure", "Family history", "Asthma", "Environmental factors"),
                  "25% of population", 90, "All ages", "low",
                  "Allergic reaction affecting nasal passages"),
)

TREATMENT_PLANS: Tuple[TreatmentPlan, ...] = (
    TreatmentPlan(
        "Common Cold", "Respiratory",
        (Medication("Acetaminophen", "OTC", "500mg", "Every 6 hours", "$5-8"),
         Medication("Dextromethorphan", "OTC", "15mg", "Every 4 hours", "$8-12"),
         Medication("Phenylephrine", "OTC", "10mg", "Every 4 hours", "$6-10")),
        ("Warm salt water gargle", "Honey and ginger tea", "Steam inhalation", "Adequate rest"),
        ("Increase fluid intake", "Get plenty of sleep", "Avoid smoking", "Use humidifier"),
        "7-10 days", 85,
        ("Drowsiness", "Dry mouth", "Nausea"),
        ("Do not exceed recommended dose", "Avoid alcohol", "Consult if symptoms worsen"),
    ),
    TreatmentPlan(
        "Hypertension", "Cardiovascular",
        (Medication("Lisinopril", "Prescription", "10mg", "Once daily", "$15-25"),
         Medication("Amlodipine", "Prescription", "5mg", "Once daily", "$10-20"),
         Medication("Aspirin", "OTC", "81mg", "Once daily", "$3-6")),
        ("Regular exercise", "Meditation", "Deep breathing", "Limit sodium"),
        ("DASH diet", "Weight management", "Limit alcohol", "Quit smoking"),
        "Lifelong management", 90,
        ("Dizziness", "Fatigue", "Cough"),
        ("Monitor blood pressure regularly", "Check kidney function", "Watch for drug interactions"),
    ),
    TreatmentPlan(
        "Type 2 Diabetes", "Endocrine",
        (Medication("Metformin", "Prescription", "500mg", "Twice daily", "$20-30"),
         Medication("Glipizide", "Prescription", "5mg", "Once daily", "$25-35"),
         Medication("Insulin", "Prescription", "Variable", "As needed", "$50-100")),
        ("Cinnamon tea", "Apple cider vinegar", "Regular exercise", "Stress management"),
        ("Low carb diet", "Regular meal timing", "Weight loss", "Blood sugar monitoring"),
        "Lifelong management", 88,
        ("Nausea", "Hypoglycemia", "Weight gain"),
        ("Monitor blood sugar", "Regular eye exams", "Foot care", "Kidney function tests"),
    ),
    TreatmentPlan(
        "Migraine", "Neurological",
        (Medication("Ibuprofen", "OTC", "400mg", "Every 6 hours", "$5-10"),
         Medication("Sumatriptan", "Prescription", "50mg", "As needed", "$40-60"),
         Medication("Acetaminophen", "OTC", "1000mg", "Every 6 hours", "$5-8")),
        ("Cold compress", "Dark quiet room", "Peppermint oil", "Hydration"),
        ("Identify triggers", "Regular sleep", "Stress management", "Regular meals"),
        "4-72 hours per episode", 80,
        ("Drowsiness", "Nausea", "Dizziness"),
        ("Avoid overuse", "Track triggers", "Gradual dose reduction"),
    ),
    TreatmentPlan(
        "Gastroenteritis", "Gastrointestinal",
        (Medication("Loperamide", "OTC", "2mg", "After each loose stool", "$8-12"),
         Medication("Ondansetron", "Prescription", "4mg", "Every 8 hours", "$30-45"),
         Medication("Oral rehydration salts", "OTC", "1 packet", "Every 2 hours", "$5-8")),
        ("BRAT diet", "Clear fluids", "Ginger tea", "Rest"),
        ("Gradual food reintroduction", "Hand hygiene", "Food safety", "Hydration"),
        "3-7 days", 85,
        ("Constipation", "Drowsiness", "Dry mouth"),
        ("Monitor dehydration", "Avoid dairy initially", "Seek help if severe"),
    ),
    TreatmentPlan(
        "Anxiety Disorder", "Mental Health",
        (Medication("Sertraline", "Prescription", "50mg", "Once daily", "$25-40"),
         Medication("Lorazepam", "Prescription", "0.5mg", "As needed", "$15-25"),
         Medication("L-theanine", "OTC", "200mg", "Twice daily", "$15-20")),
        ("Deep breathing", "Meditation", "Chamomile tea", "Regular exercise"),
        ("Therapy", "Sleep hygiene", "Limit caffeine", "Social support"),
        "Variable, often long-term", 75,
        ("Drowsiness", "Nausea", "Sexual dysfunction"),
        ("Gradual dose changes", "Monitor mood", "Avoid alcohol", "Regular follow-up"),
    ),
)


def _in_category(category: str, selected: str) -> bool:
    return selected == ALL_CATEGORIES or category == selected


def filter_conditions(term: str = "", category: str = ALL_CATEGORIES,
                      conditions: Sequence[ConditionInfo] = CONDITIONS) -> List[ConditionInfo]:
    """Conditions whose name or any symptom contains term (case-insensitive), within category."""
    term = (term or "").strip().lower()
    return [
        c for c in conditions
        if _in_category(c.category, category)
        and (term in c.condition.lower() or any(term in s.lower() for s in c.symptoms))
    ]


def filter_treatments(term: str = "", category: str = ALL_CATEGORIES,
                      plans: Sequence[TreatmentPlan] = TREATMENT_PLANS) -> List[TreatmentPlan]:
    """Treatment plans whose condition or any medication name contains term, within category."""
    term = (term or "").strip().lower()
    return [
        p for p in plans
        if _in_category(p.category, category)
        and (term in p.condition.lower() or any(term in m.name.lower() for m in p.medications))
    ]


def condition_stats(conditions: Sequence[ConditionInfo] = CONDITIONS) -> dict:
    if not conditions:
        return {"total": 0, "avg_accuracy": 0, "high_risk": 0, "categories": len(CATEGORIES)}
    return {
        "total": len(conditions),
        "avg_accuracy": round(sum(c.accuracy for c in conditions) / len(conditions)),
        "high_risk": sum(1 for c in conditions if c.severity == "high"),
        "categories": len(CATEGORIES),
    }


def treatment_stats(plans: Sequence[TreatmentPlan] = TREATMENT_PLANS) -> dict:
    if not plans:
        return {"plans": 0, "otc_medications": 0, "avg_effectiveness": 0, "home_remedies": 0}
    return {
        "plans": len(plans),
        "otc_medications": sum(1 for p in plans for m in p.medications if m.type == "OTC"),
        "avg_effectiveness": round(sum(p.effectiveness for p in plans) / len(plans)),
        "home_remedies": sum(len(p.home_remedies) for p in plans),
    }
