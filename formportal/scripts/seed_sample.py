from __future__ import annotations

import json

from sqlalchemy.orm import Session

from formportal.db.models.bank import Bank
from formportal.db.models.section import Section
from formportal.db.models.question import Question, QuestionType


# Predefined insurance companies offered as banks on a fresh install.
INSURANCE_COMPANIES = [
    ("Life Insurance Corporation of India (LIC)", "https://upload.wikimedia.org/wikipedia/commons/5/55/LIC_of_India.svg"),
    ("HDFC Life Insurance", "https://upload.wikimedia.org/wikipedia/commons/2/28/HDFC_Bank_Logo.svg"),
    ("ICICI Prudential Life Insurance", "https://upload.wikimedia.org/wikipedia/commons/1/12/ICICI_Bank_Logo.svg"),
    ("SBI Life Insurance", "https://upload.wikimedia.org/wikipedia/commons/c/cc/SBI-logo.svg"),
    ("Max Life Insurance", "https://upload.wikimedia.org/wikipedia/en/6/64/Max_Life_Insurance_logo.svg"),
    ("Bajaj Allianz Life Insurance", "https://upload.wikimedia.org/wikipedia/commons/2/20/Bajaj_Allianz_logo.png"),
    ("Kotak Mahindra Life Insurance", "https://upload.wikimedia.org/wikipedia/commons/9/98/Kotak_Mahindra_Bank_logo.svg"),
    ("Tata AIA Life Insurance", "https://upload.wikimedia.org/wikipedia/commons/8/8e/Tata_logo.svg"),
]

STARTER_QUESTIONS = [
    {"type": QuestionType.TEXT, "label": "Full name", "required": True},
    {"type": QuestionType.EMAIL, "label": "Email", "required": True},
    {"type": QuestionType.PHONE, "label": "Phone", "required": True},
    {"type": QuestionType.DATE, "label": "Date of birth", "required": False},
    {
        "type": QuestionType.DROPDOWN,
        "label": "Policy type",
        "required": True,
        "options": [
            {"id": "term", "label": "Term life", "value": "term"},
            {"id": "health", "label": "Health", "value": "health"},
            {"id": "motor", "label": "Motor", "value": "motor"},
        ],
    },
    {"type": QuestionType.NUMBER, "label": "Sum assured", "required": False},
]


def _get_or_create_bank(db: Session, name: str, logo: str) -> tuple[Bank, bool]:
    bank = db.query(Bank).filter(Bank.name == name).first()
    if bank:
        return bank, False
    bank = Bank(name=name, logo=logo, description=f"{name} policy enquiries")
    db.add(bank)
    db.flush()  # populate bank.id
    return bank, True


def _add_starter_section(db: Session, bank: Bank) -> Section:
    s = Section(bank_id=bank.id, title="Applicant details", description="Basic details about the applicant", order=0)
    db.add(s)
    db.flush()
    for i, qdef in enumerate(STARTER_QUESTIONS):
        q = Question(
            section_id=s.id,
            type=qdef["type"],
            label=qdef["label"],
            required=qdef["required"],
            order=i,
        )
        if "options" in qdef:
            q.options_json = json.dumps(qdef["options"], ensure_ascii=False)
        db.add(q)
    return s


def seed_sample(db: Session) -> None:
    """Idempotent: banks that already exist are left as they are."""
    for name, logo in INSURANCE_COMPANIES:
        bank, created = _get_or_create_bank(db, name, logo)
        if created:
            _add_starter_section(db, bank)
    db.flush()
