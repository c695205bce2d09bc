import threading

import pytest

from src.records.store import RecordStore, split_csv_field


@pytest.fixture
def store(tmp_path):
    return RecordStore(tmp_path / "data")


def test_split_csv_field():
    assert split_csv_field("Penicillin, Peanuts,, ") == ["Penicillin", "Peanuts"]
    assert split_csv_field("") == []
    assert split_csv_field(None) == []


def test_empty_tables_are_created_on_read(store):
    assert store.list_patients() == []
    assert (store.data_dir / "patients.csv").exists()


def test_add_patient_round_trips_list_fields(store):
    pid = store.add_patient({
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.org",
        "allergies": "Penicillin, Peanuts",
        "chronic_conditions": "",
    })
    [patient] = store.list_patients()
    assert patient["id"] == pid
    assert patient["allergies"] == ["Penicillin", "Peanuts"]
    assert patient["chronic_conditions"] == []
    assert patient["created_at"] == patient["updated_at"]


def test_patient_requires_name(store):
    with pytest.raises(ValueError):
        store.add_patient({"first_name": "Ada", "last_name": " "})


def test_appointments_ordered_by_date_with_defaults(store):
    store.add_appointment({"patient_id": "p1", "appointment_date": "2024-05-03", "purpose": "Follow-up"})
    store.add_appointment({"patient_id": "p1", "appointment_date": "2024-05-01", "purpose": "Checkup"})
    rows = store.list_appointments()
    assert [r["purpose"] for r in rows] == ["Checkup", "Follow-up"]
    assert rows[0]["status"] == "scheduled"
    assert rows[0]["duration"] == "30"


def test_appointment_validation(store):
    with pytest.raises(ValueError):
        store.add_appointment({"appointment_date": "2024-05-03"})
    with pytest.raises(ValueError):
        store.add_appointment({"patient_id": "p1"})
    with pytest.raises(ValueError):
        store.add_appointment({"patient_id": "p1", "appointment_date": "2024-05-03", "status": "lost"})


def test_medical_records_newest_visit_first(store):
    store.add_medical_record({"patient_id": "p1", "visit_date": "2024-01-10", "condition_name": "Flu",
                              "symptoms": ["Fever", "Cough"]})
    store.add_medical_record({"patient_id": "p1", "visit_date": "2024-03-02", "condition_name": "Migraine",
                              "severity": "high"})
    rows = store.list_medical_records()
    assert [r["condition_name"] for r in rows] == ["Migraine", "Flu"]
    assert rows[1]["symptoms"] == ["Fever", "Cough"]
    assert rows[0]["status"] == "active"


def test_select_descending_and_unknown_names(store):
    store.insert("patients", {"first_name": "B", "last_name": "x"})
    store.insert("patients", {"first_name": "A", "last_name": "y"})
    assert [r["first_name"] for r in store.select("patients", order_by="first_name")] == ["A", "B"]
    assert [r["first_name"] for r in store.select("patients", order_by="first_name", ascending=False)] == ["B", "A"]
    with pytest.raises(ValueError):
        store.select("patients", order_by="shoe_size")
    with pytest.raises(ValueError):
        store.select("invoices")
    with pytest.raises(ValueError):
        store.insert("patients", {"shoe_size": 42})


def test_search_patients(store):
    store.add_patient({"first_name": "Grace", "last_name": "Hopper", "email": "grace@navy.mil"})
    store.add_patient({"first_name": "Alan", "last_name": "Turing", "email": "alan@bletchley.uk"})
    assert [p["last_name"] for p in store.search_patients("HOPPER")] == ["Hopper"]
    assert [p["last_name"] for p in store.search_patients("bletchley")] == ["Turing"]
    assert len(store.search_patients("")) == 2


def test_list_column_rejects_scalar(store):
    with pytest.raises(ValueError):
        store.insert("patients", {"first_name": "A", "last_name": "B", "allergies": 5})
    assert store.list_patients() == []


def test_list_column_accepts_tuple(store):
    store.insert("patients", {"first_name": "A", "last_name": "B", "allergies": ("Latex",)})
    assert store.list_patients()[0]["allergies"] == ["Latex"]


def test_concurrent_inserts_keep_every_row(store):
    def add(n):
        for i in range(5):
            store.insert("patients", {"first_name": f"T{n}", "last_name": str(i)})

    threads = [threading.Thread(target=add, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.list_patients()) == 20
