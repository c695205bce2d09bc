# app.py
import logging
import time
from dataclasses import asdict

import pandas as pd
import streamlit as st

from config import APP, LOGGING, UI
from engine import get_engine
from questionnaire import SCALE_MAX, SCALE_MIN, QuestionnaireSession
from src.records.store import APPOINTMENT_STATUSES, RecordStore
from src.recommender.reference import (
    ALL_CATEGORIES,
    CATEGORIES,
    condition_stats,
    filter_conditions,
    filter_treatments,
    treatment_stats,
)
from src.recommender.treatments import TreatmentRecommender

logging.basicConfig(level=LOGGING["level"], format=LOGGING["format"])
logger = logging.getLogger("symptomcheck.app")

st.set_page_config(page_title=APP["title"], layout="wide")
st.title(APP["title"])

SEVERITY_BADGE = {"low": "🟢 Low", "medium": "🟡 Medium", "high": "🔴 High"}


def get_session() -> QuestionnaireSession:
    if "questionnaire" not in st.session_state:
        st.session_state["questionnaire"] = QuestionnaireSession()
    return st.session_state["questionnaire"]


@st.cache_resource
def get_store() -> RecordStore:
    return RecordStore()


# ---------- Symptom checker ----------
def render_question(session: QuestionnaireSession):
    question = session.current_question
    current = session.current_answer()
    st.caption(f"Question {session.current_step + 1} of {len(session.questions)} · {round(session.progress)}% Complete")
    st.progress(int(session.progress))
    st.subheader(f"[{question.category}] {question.prompt}")

    widget_key = f"q_{question.id.value}"
    if question.kind == "single":
        index = question.options.index(current) if current in question.options else None
        value = st.radio("Choose one", question.options, index=index, key=widget_key)
        record = value is not None
    elif question.kind == "multiple":
        default = [o for o in question.options if current and o in current]
        value = st.multiselect("Choose all that apply", question.options, default=default, key=widget_key)
        # an emptied selection replaces the earlier answer; an untouched one stays unanswered
        record = bool(value) or session.is_answered()
    else:
        levels = list(range(SCALE_MIN, SCALE_MAX + 1))
        value = st.radio(
            "Mild (1) · Moderate (5) · Severe (10)",
            levels,
            index=levels.index(current) if current in levels else None,
            horizontal=True,
            key=widget_key,
        )
        record = value is not None

    if record:
        try:
            session.answer(value)
        except ValueError as exc:
            logger.warning("Rejected answer for %s: %s", question.id.value, exc)
            st.error(str(exc))

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Previous", disabled=session.current_step == 0, key="nav_previous"):
            session.previous_step()
            st.rerun()
    with col2:
        label = "Get Diagnosis" if session.is_last_step else "Next"
        if st.button(label, disabled=not session.is_answered(), type="primary", key="nav_next"):
            session.next_step()
            st.rerun()

    st.warning(f"**Emergency Notice:** {APP['emergency_notice']}")


def render_results(session: QuestionnaireSession):
    if "suggestions" not in st.session_state:
        with st.spinner("Analyzing your symptoms..."):
            time.sleep(UI["result_delay"])
            st.session_state["suggestions"] = get_engine().evaluate(session.answer_set())
    suggestions = st.session_state["suggestions"]

    st.subheader("Diagnosis Results")
    for i, s in enumerate(suggestions, 1):
        with st.container(border=True):
            st.markdown(f"**#{i} Most Likely: {s.condition}** ({s.probability}%)")
            st.write(s.description)
            col1, col2, col3 = st.columns(3)
            col1.write(f"**Severity:** {SEVERITY_BADGE[s.severity.value]}")
            col2.write(f"**Category:** {s.category}")
            col3.write(f"**Matching symptoms:** {', '.join(s.symptoms[:3])}")
            with st.expander("Recommendations"):
                for r in s.recommendations:
                    st.markdown(f"- {r}")

            rating = st.feedback("stars", key=f"rating_{s.key.value}")
            if rating is not None:
                # st.feedback returns a 0-based index
                session.rate(s.condition, rating + 1)
                st.caption("Thank you for your feedback!")

    treatments = TreatmentRecommender().recommend(suggestions)
    st.subheader("Treatment Recommendations")
    if treatments["otc_medicines"]:
        st.markdown("#### Over-the-Counter Medications")
        for m in treatments["otc_medicines"]:
            st.markdown(f"**{m['name']}** · {m['category']}")
            st.write(f"Dosage: {m['dosage']} | Frequency: {m['frequency']} | Duration: {m['duration']}")
            if m["warnings"]:
                st.info("**Important Warnings:** " + "; ".join(m["warnings"]))
    st.markdown("#### Home Care")
    for remedy in treatments["home_remedies"]:
        st.markdown(f"- {remedy}")

    st.info(f"**Medical Disclaimer:** {APP['disclaimer']}")
    if st.button("Start New Assessment"):
        session.restart()
        for key in [k for k in st.session_state if k.startswith(("q_", "rating_"))]:
            del st.session_state[key]
        st.session_state.pop("suggestions", None)
        st.rerun()


def render_symptom_checker():
    session = get_session()
    if session.is_complete:
        render_results(session)
    else:
        render_question(session)


# ---------- Patients ----------
def render_patients():
    store = get_store()

    with st.expander("Add Patient"):
        with st.form("patient_form", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                first_name = st.text_input("First name")
                last_name = st.text_input("Last name")
                date_of_birth = st.text_input("Date of birth (YYYY-MM-DD)")
                gender = st.selectbox("Gender", ["", "male", "female", "other"])
                phone = st.text_input("Phone")
                email = st.text_input("Email")
            with col2:
                address = st.text_input("Address")
                blood_type = st.selectbox("Blood type", ["", "A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"])
                allergies = st.text_input("Allergies (comma-separated)")
                chronic = st.text_input("Chronic conditions (comma-separated)")
                ec_name = st.text_input("Emergency contact name")
                ec_phone = st.text_input("Emergency contact phone")
            if st.form_submit_button("Add Patient"):
                try:
                    store.add_patient({
                        "first_name": first_name,
                        "last_name": last_name,
                        "date_of_birth": date_of_birth,
                        "gender": gender,
                        "phone": phone,
                        "email": email,
                        "address": address,
                        "blood_type": blood_type,
                        "allergies": allergies,
                        "chronic_conditions": chronic,
                        "emergency_contact_name": ec_name,
                        "emergency_contact_phone": ec_phone,
                    })
                    st.success("Patient added successfully")
                except (ValueError, OSError) as exc:
                    logger.exception("Error adding patient")
                    st.error(f"Failed to add patient: {exc}")

    patients = store.list_patients()
    with st.expander("Schedule Appointment"):
        with st.form("appointment_form", clear_on_submit=True):
            names = {p["id"]: f"{p['first_name']} {p['last_name']}" for p in patients}
            patient_id = st.selectbox("Patient", [""] + list(names), format_func=lambda pid: names.get(pid, ""))
            appointment_date = st.date_input("Date", value=None)
            appointment_time = st.time_input("Time", value=None)
            duration = st.number_input("Duration (minutes)", min_value=5, max_value=240, value=30, step=5)
            purpose = st.text_input("Purpose")
            doctor_name = st.text_input("Doctor")
            department = st.text_input("Department")
            status = st.selectbox("Status", APPOINTMENT_STATUSES)
            notes = st.text_area("Notes")
            if st.form_submit_button("Schedule"):
                try:
                    store.add_appointment({
                        "patient_id": patient_id,
                        "appointment_date": appointment_date.isoformat() if appointment_date else "",
                        "appointment_time": appointment_time.strftime("%H:%M") if appointment_time else "",
                        "duration": duration,
                        "purpose": purpose,
                        "doctor_name": doctor_name,
                        "department": department,
                        "status": status,
                        "notes": notes,
                    })
                    st.success("Appointment scheduled successfully")
                except (ValueError, OSError) as exc:
                    logger.exception("Error adding appointment")
                    st.error(f"Failed to schedule appointment: {exc}")

    term = st.text_input("Search patients by name or email")
    st.markdown("#### Patients")
    st.dataframe(pd.DataFrame(store.search_patients(term)), use_container_width=True)
    st.markdown("#### Upcoming Appointments")
    st.dataframe(pd.DataFrame(store.list_appointments()), use_container_width=True)
    st.markdown("#### Medical Records")
    st.dataframe(pd.DataFrame(store.list_medical_records()), use_container_width=True)


# ---------- Analytics (static sample data) ----------
HEALTH_TRENDS = pd.DataFrame({
    "month": ["Jan", "Feb", "Mar", "Apr", "May", "Jun"],
    "diagnoses": [145, 168, 189, 203, 234, 267],
    "accuracy": [92, 94, 91, 95, 93, 96],
    "patients": [234, 267, 298, 324, 356, 389],
})

CONDITION_DISTRIBUTION = pd.DataFrame({
    "category": ["Respiratory", "Cardiovascular", "Neurological", "Gastrointestinal", "Mental Health", "Endocrine"],
    "share": [35, 25, 18, 12, 7, 3],
})

AGE_GROUPS = pd.DataFrame({
    "age_group": ["0-18", "19-35", "36-50", "51-65", "65+"],
    "count": [45, 156, 98, 54, 23],
})


def render_analytics():
    st.caption("Sample data for demonstration only.")
    st.markdown("#### Monthly diagnoses and patients")
    st.line_chart(HEALTH_TRENDS.set_index("month")[["diagnoses", "patients"]])
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("#### Condition distribution (%)")
        st.bar_chart(CONDITION_DISTRIBUTION.set_index("category"))
    with col2:
        st.markdown("#### Patients by age group")
        st.bar_chart(AGE_GROUPS.set_index("age_group"))


# ---------- Reference tables ----------
def _search_controls(prefix: str, placeholder: str):
    col1, col2 = st.columns([2, 1])
    term = col1.text_input("Search", placeholder=placeholder, key=f"{prefix}_search")
    category = col2.selectbox("Category", (ALL_CATEGORIES,) + CATEGORIES, key=f"{prefix}_category")
    return term, category


def render_conditions():
    stats = condition_stats()
    cols = st.columns(4)
    cols[0].metric("Total Conditions", stats["total"])
    cols[1].metric("Avg Accuracy", f"{stats['avg_accuracy']}%")
    cols[2].metric("High Risk Cases", stats["high_risk"])
    cols[3].metric("Categories", stats["categories"])

    term, category = _search_controls("conditions", "Search conditions or symptoms")
    matches = filter_conditions(term, category)
    if not matches:
        st.info("No conditions match your search.")
    for c in matches:
        with st.expander(f"{c.condition} · {c.category} · {SEVERITY_BADGE[c.severity]}"):
            st.write(c.description)
            st.write(f"**Symptoms:** {', '.join(c.symptoms)}")
            st.write(f"**Risk factors:** {', '.join(c.risk_factors)}")
            st.write(f"**Prevalence:** {c.prevalence} | **Common age:** {c.common_age} | **Accuracy:** {c.accuracy}%")


def render_treatments():
    stats = treatment_stats()
    cols = st.columns(4)
    cols[0].metric("Treatment Plans", stats["plans"])
    cols[1].metric("OTC Medications", stats["otc_medications"])
    cols[2].metric("Avg Effectiveness", f"{stats['avg_effectiveness']}%")
    cols[3].metric("Home Remedies", stats["home_remedies"])

    term, category = _search_controls("treatments", "Search conditions or medications")
    matches = filter_treatments(term, category)
    if not matches:
        st.info("No treatment plans match your search.")
    for p in matches:
        with st.expander(f"{p.condition} · {p.category} · {p.effectiveness}% effective"):
            st.dataframe(pd.DataFrame([asdict(m) for m in p.medications]), use_container_width=True)
            st.write(f"**Home remedies:** {', '.join(p.home_remedies)}")
            st.write(f"**Lifestyle:** {', '.join(p.lifestyle)}")
            st.write(f"**Typical duration:** {p.duration}")
            st.write(f"**Side effects:** {', '.join(p.side_effects)}")
            st.warning("**Precautions:** " + "; ".join(p.precautions))


checker_tab, conditions_tab, treatments_tab, patients_tab, analytics_tab = st.tabs(
    ["Symptom Checker", "Conditions", "Treatments", "Patients", "Analytics"]
)
with checker_tab:
    render_symptom_checker()
with conditions_tab:
    render_conditions()
with treatments_tab:
    render_treatments()
with patients_tab:
    render_patients()
with analytics_tab:
    render_analytics()
