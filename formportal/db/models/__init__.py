# Import all models so SQLAlchemy metadata is fully populated on startup.
from formportal.db.models.bank import Bank
from formportal.db.models.user import User
from formportal.db.models.section import Section
from formportal.db.models.question import Question
from formportal.db.models.form_response import FormResponse


__all__ = [
    "Bank",
    "User",
    "Section",
    "Question",
    "FormResponse",
]
