"""
Excel import/export for the member roster and event registrations
"""

import io
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from church_site.schemas.member import MemberRecord
from church_site.schemas.registration import RegistrationRecord

ROSTER_COLUMNS = {
    "first name": "first_name",
    "last name": "last_name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip code": "zip_code",
    "birth date": "birth_date",
}

OPTIONAL_ROSTER_COLUMNS = {
    "membership type": "membership_type",
    "spouse name": "spouse_name",
    "anniversary date": "anniversary_date",
    "children": "children",
    "ministry interests": "ministry_interests",
    "notes": "notes",
}

def _to_xlsx(df: pd.DataFrame, sheet_name: str) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buffer.getvalue()

def _cell(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    if isinstance(value, (datetime, pd.Timestamp)):
        return value.date().isoformat()
    text = str(value).strip()
    return text or None

class ExcelService:
    """Service for handling Excel operations"""

    @staticmethod
    def export_registrations(event_title: str, registrations: List[RegistrationRecord]) -> bytes:
        """Registration list for one event, one row per registration"""
        rows = [
            {
                'First Name': r.first_name,
                'Last Name': r.last_name,
                'Email': r.email,
                'Phone': r.phone,
                'Attendees': r.number_of_attendees,
                'Special Requests': r.special_requests or '',
                'Registered At': r.created_at.strftime('%Y-%m-%d %H:%M'),
            }
            for r in registrations
        ]
        df = pd.DataFrame(rows, columns=[
            'First Name', 'Last Name', 'Email', 'Phone', 'Attendees', 'Special Requests', 'Registered At'
        ])
        # Excel caps sheet names at 31 characters
        return _to_xlsx(df, sheet_name=(event_title or 'Registrations')[:31])

    @staticmethod
    def export_members(members: List[MemberRecord]) -> bytes:
        """Member roster without credentials"""
        rows = [
            {
                'Membership Type': m.membership_type,
                'First Name': m.first_name,
                'Last Name': m.last_name,
                'Email': m.email,
                'Phone': m.phone,
                'Address': m.address,
                'City': m.city,
                'State': m.state,
                'Zip Code': m.zip_code,
                'Birth Date': m.birth_date.isoformat(),
                'Spouse Name': m.spouse_name or '',
                'Anniversary Date': m.anniversary_date.isoformat() if m.anniversary_date else '',
                'Children': m.children or '',
                'Ministry Interests': m.ministry_interests or '',
                'Notes': m.notes or '',
            }
            for m in members
        ]
        return _to_xlsx(pd.DataFrame(rows), sheet_name='Members')

    @staticmethod
    def validate_roster_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate roster spreadsheet columns"""
        errors = []

        normalized_columns = [str(col).lower().strip() for col in df.columns]
        missing_columns = [col for col in ROSTER_COLUMNS if col not in normalized_columns]

        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def parse_roster(file_content: bytes) -> Tuple[bool, List[str], List[MemberRecord]]:
        """Read a roster spreadsheet into member records.

        Imported members have no password and cannot sign in until one is set.
        Nothing is returned unless every row is valid.
        """
        try:
            df = pd.read_excel(io.BytesIO(file_content))
        except Exception as e:
            return False, [f"Error reading Excel file: {str(e)}"], []

        valid_structure, structure_errors = ExcelService.validate_roster_structure(df)
        if not valid_structure:
            return False, structure_errors, []

        column_mapping = {}
        for col in df.columns:
            key = str(col).lower().strip()
            field = ROSTER_COLUMNS.get(key) or OPTIONAL_ROSTER_COLUMNS.get(key)
            if field:
                column_mapping[field] = col

        errors: List[str] = []
        members: List[MemberRecord] = []
        for index, row in df.iterrows():
            data = {field: _cell(row[col]) for field, col in column_mapping.items()}
            if not any(data.values()):
                continue
            data["membership_type"] = (data.get("membership_type") or "individual").lower()

            try:
                members.append(MemberRecord(
                    **data,
                    id=str(uuid.uuid4()),
                    created_at=datetime.utcnow(),
                ))
            except ValidationError as e:
                # Spreadsheet row numbers start at 2 below the header
                fields = ", ".join(str(err["loc"][0]) for err in e.errors())
                errors.append(f"Row {index + 2}: invalid {fields}")

        if errors:
            return False, errors, []
        return True, [], members
