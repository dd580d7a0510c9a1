"""
Request and response models for the widget service API.

Inbound models accept numbers wherever a text field is expected; the logs
store everything as text.
"""

from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List, Dict, Any


class OkResponse(BaseModel):
    ok: bool = True
    file: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool
    time: str
    version: str
    submissions: int


class SubmissionResponse(OkResponse):
    rating: Optional[str] = None


class SubmissionListResponse(BaseModel):
    header: List[str]
    rows: List[Dict[str, Any]]
    total: int


class SubmissionUpdateResponse(BaseModel):
    ok: bool = True
    id: int
    row: Dict[str, str]


class AnnotationRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    note: Optional[str] = ""
    teacher: Optional[str] = ""

    @field_validator('id', mode='before')
    @classmethod
    def id_to_string(cls, v):
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v


class AnnotationResponse(BaseModel):
    ok: bool = True
    id: str
    note: str
    teacher: str
    updatedAt: str


class QALogRow(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    stepId: Optional[str] = ""
    result: Optional[str] = ""


class QALogRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    component: Optional[str] = ""
    rows: List[QALogRow] = []


class QATicketRequest(BaseModel):
    """Free-form ticket; every field is stored as given."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    tester: Optional[str] = ""
    component: Optional[str] = ""
    stepId: Optional[str] = ""
    stepText: Optional[str] = ""
    severity: Optional[str] = ""
    steps: Optional[str] = ""
    expected: Optional[str] = ""
    actual: Optional[str] = ""
    notes: Optional[str] = ""
