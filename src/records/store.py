"""
CSV-backed record store for patients, appointments and medical records.

One CSV file per table under the configured data directory. List-valued
columns are stored as JSON strings and decoded again on select.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from config import STORAGE

logger = logging.getLogger(__name__)


TABLE_COLUMNS: Dict[str, List[str]] = {
    "patients": [
        "id",
        "first_name",
        "last_name",
        "date_of_birth",
        "gender",
        "phone",
        "email",
        "address",
        "blood_type",
        "allergies",
        "chronic_conditions",
        "emergency_contact_name",
        "emergency_contact_phone",
        "created_at",
        "updated_at",
    ],
    "appointments": [
        "id",
        "patient_id",
        "appointment_date",
        "appointment_time",
        "duration",
        "purpose",
        "doctor_name",
        "department",
        "status",
        "notes",
        "created_at",
        "updated_at",
    ],
    "medical_records": [
        "id",
        "patient_id",
        "visit_date",
        "condition_name",
        "diagnosis",
        "symptoms",
        "treatment",
        "medications",
        "notes",
        "status",
        "severity",
        "created_at",
        "updated_at",
    ],
}

LIST_COLUMNS = {"allergies", "chronic_conditions", "symptoms", "medications"}

APPOINTMENT_STATUSES = ("scheduled", "confirmed", "completed", "cancelled", "no_show")
RECORD_STATUSES = ("active", "resolved", "chronic")


def split_csv_field(value: Optional[str]) -> List[str]:
    """'a, b,,c' -> ['a', 'b', 'c']"""
    if not value:
        return []
    return [item.strip() for item in str(value).split(",") if item.strip()]


def _list_value(column: str, value: Any) -> List[str]:
    if value is None or isinstance(value, str):
        return split_csv_field(value)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"{column} must be a comma-separated string or a list, got {type(value).__name__}")
    return [str(item) for item in value]


def parse_json_column(value, fallback):
    if pd.isna(value) or value == "":
        return fallback
    try:
        return json.loads(value)
    except (TypeError, json.JSONDecodeError):
        return fallback


class RecordStore:
    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else Path(STORAGE["data_dir"])
        # serialises the read-concat-write in insert within this process
        self._lock = threading.Lock()

    def _path(self, table: str) -> Path:
        if table not in TABLE_COLUMNS:
            raise ValueError(f"Unknown table: {table}")
        return self.data_dir / f"{table}.csv"

    def _ensure_table(self, table: str) -> Path:
        path = self._path(table)
        if not path.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            pd.DataFrame(columns=TABLE_COLUMNS[table]).to_csv(path, index=False)
        return path

    def _load(self, table: str) -> pd.DataFrame:
        path = self._ensure_table(table)
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        for col in TABLE_COLUMNS[table]:
            if col not in df.columns:
                df[col] = ""
        return df[TABLE_COLUMNS[table]]

    def insert(self, table: str, row: Mapping[str, Any]) -> str:
        columns = TABLE_COLUMNS.get(table)
        if columns is None:
            raise ValueError(f"Unknown table: {table}")
        unknown = set(row) - set(columns)
        if unknown:
            raise ValueError(f"Unknown column(s) for {table}: {', '.join(sorted(unknown))}")

        record_id = str(uuid.uuid4())
        record = {col: "" for col in columns}
        for key, value in row.items():
            if key in LIST_COLUMNS:
                record[key] = json.dumps(_list_value(key, value))
            elif value is None:
                record[key] = ""
            else:
                record[key] = str(value)
        with self._lock:
            df = self._load(table)
            now = datetime.now().isoformat(timespec="microseconds")
            record.update({"id": record_id, "created_at": now, "updated_at": now})
            new_row = pd.DataFrame([record], columns=columns)
            updated = new_row if df.empty else pd.concat([df, new_row], ignore_index=True)
            updated.to_csv(self._path(table), index=False)
        logger.info("Inserted %s row %s", table, record_id)
        return record_id

    def select(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Dict[str, Any]]:
        df = self._load(table)
        if order_by is not None:
            if order_by not in df.columns:
                raise ValueError(f"Unknown column for {table}: {order_by}")
            df = df.sort_values(order_by, ascending=ascending, kind="mergesort")
        rows = df.to_dict(orient="records")
        for row in rows:
            for col in LIST_COLUMNS.intersection(row):
                row[col] = parse_json_column(row[col], [])
        return rows

    # ----- patient-facing helpers -----
    def add_patient(self, form: Mapping[str, Any]) -> str:
        if not str(form.get("first_name", "")).strip() or not str(form.get("last_name", "")).strip():
            raise ValueError("Patient first and last name are required")
        # comma-separated allergies / chronic conditions are split on insert
        return self.insert("patients", form)

    def add_appointment(self, form: Mapping[str, Any]) -> str:
        if not str(form.get("patient_id", "")).strip():
            raise ValueError("Appointment requires a patient")
        if not str(form.get("appointment_date", "")).strip():
            raise ValueError("Appointment requires a date")
        data = {"duration": 30, "status": "scheduled"}
        data.update({k: v for k, v in form.items() if v not in (None, "")})
        if data["status"] not in APPOINTMENT_STATUSES:
            raise ValueError(f"Unknown appointment status: {data['status']}")
        return self.insert("appointments", data)

    def add_medical_record(self, form: Mapping[str, Any]) -> str:
        if not str(form.get("patient_id", "")).strip():
            raise ValueError("Medical record requires a patient")
        data = {"status": "active"}
        data.update({k: v for k, v in form.items() if v not in (None, "")})
        if data["status"] not in RECORD_STATUSES:
            raise ValueError(f"Unknown record status: {data['status']}")
        return self.insert("medical_records", data)

    def list_patients(self) -> List[Dict[str, Any]]:
        return self.select("patients", order_by="created_at", ascending=False)

    def list_appointments(self) -> List[Dict[str, Any]]:
        return self.select("appointments", order_by="appointment_date", ascending=True)

    def list_medical_records(self) -> List[Dict[str, Any]]:
        return self.select("medical_records", order_by="visit_date", ascending=False)

    def search_patients(self, term: str) -> List[Dict[str, Any]]:
        term = (term or "").strip().lower()
        patients = self.list_patients()
        if not term:
            return patients
        return [
            p for p in patients
            if term in f"{p['first_name']} {p['last_name']}".lower() or term in str(p.get("email", "")).lower()
        ]
