"""
Schemas for the Model Casting Submission API

Pydantic models describing a casting submission as it arrives from the web
form. Wire names are camelCase (``fullName``, ``sleeveLength``...), Python
attributes are snake_case.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


SizeOption = Literal["XS", "S", "M", "L", "XL", "XXL", "XXXL"]
Gender = Literal["male", "female"]

SIZE_OPTIONS: Tuple[str, ...] = get_args(SizeOption)
GENDERS: Tuple[str, ...] = get_args(Gender)

MEASUREMENT_FIELDS = (
    "height",
    "chest",
    "waist",
    "hips",
    "shoulders",
    "inseam",
    "sleeve_length",
    "neck_circumference",
)

# Suggestions shown by the form, not enforced server-side
MORPHOLOGIES: Dict[str, List[str]] = {
    "male": ["Slim", "Fit", "Athletic", "Muscular", "Broad", "Triangle", "Rectangle"],
    "female": ["Slim", "Fit", "Pear", "Hourglass", "Rectangle", "Inverted Triangle", "Curvy"],
}

_MALE_ITEMS = ["T-Shirt", "Hoodie", "Oversized Hoodie", "Jacket", "Sleeveless Jacket", "Pants", "Jeans"]
CLOTHING_ITEMS: Dict[str, List[str]] = {
    "male": _MALE_ITEMS,
    "female": _MALE_ITEMS + ["Skirt"],
}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClothingSize(CamelModel):
    item: str = Field(..., description="Garment name, e.g. 'T-Shirt'")
    real_size: SizeOption = Field(..., description="Size the model actually measures to")
    comfort_size: SizeOption = Field(..., description="Size the model prefers to wear")


class ModelSubmission(CamelModel):
    full_name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=5)
    address: str = Field(..., min_length=5)

    # Body measurements, all in cm
    height: float = Field(..., ge=100, le=250)
    chest: float = Field(..., ge=50, le=200)
    waist: float = Field(..., ge=40, le=200)
    hips: float = Field(..., ge=50, le=200)
    shoulders: float = Field(..., ge=30, le=100)
    inseam: float = Field(..., ge=50, le=120)
    sleeve_length: float = Field(..., ge=40, le=100)
    neck_circumference: float = Field(..., ge=25, le=60)

    gender: Gender
    morphology: str = Field(..., min_length=1, description="e.g. Slim, Athletic, Hourglass")
    clothing_sizes: List[ClothingSize] = Field(..., description="May be empty")
    notes: Optional[str] = None

    @field_validator(*MEASUREMENT_FIELDS, mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        # lax float mode would turn true/false into 1.0/0.0
        if isinstance(value, bool):
            raise PydanticCustomError("float_type", "Input should be a valid number")
        return value


class SubmissionWithImage(ModelSubmission):
    image_base64: Optional[str] = Field(None, description="Data URI or bare base64 payload")
    image_name: Optional[str] = Field(None, description="Original upload file name")


class StoredSubmission(SubmissionWithImage):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="uuid4")
    submitted_at: datetime


# --------------------- Validation ---------------------

FIELD_LABELS: Dict[str, str] = {
    "fullName": "Full name",
    "email": "Email",
    "phone": "Phone number",
    "address": "Physical address",
    "height": "Height",
    "chest": "Chest",
    "waist": "Waist",
    "hips": "Hips",
    "shoulders": "Shoulders",
    "inseam": "Inseam",
    "sleeveLength": "Sleeve length",
    "neckCircumference": "Neck circumference",
    "gender": "Gender",
    "morphology": "Morphology",
    "clothingSizes": "Clothing sizes",
    "notes": "Notes",
}

REQUIRED_MESSAGES: Dict[str, str] = {
    "fullName": "Full name is required",
    "email": "Valid email is required",
    "phone": "Phone number is required",
    "address": "Physical address is required",
    "morphology": "Please select a body morphology",
}


def format_number(value: float) -> str:
    """170.0 -> '170', 170.5 -> '170.5'"""
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def _error_message(field: Optional[str], err: Dict[str, Any]) -> str:
    kind = err.get("type")
    ctx = err.get("ctx") or {}

    if field in REQUIRED_MESSAGES and kind in ("missing", "string_too_short", "string_type", "value_error"):
        return REQUIRED_MESSAGES[field]

    label = FIELD_LABELS.get(field or "", field or "Value")
    if kind == "missing":
        return f"{label} is required"
    if kind == "greater_than_equal":
        return f"{label} must be at least {format_number(ctx['ge'])} cm"
    if kind == "less_than_equal":
        return f"{label} must be at most {format_number(ctx['le'])} cm"
    if kind in ("float_parsing", "float_type"):
        return f"{label} must be a number"

    nested = [str(p) for p in err.get("loc", ())[1:]]
    if nested:
        return f"{label} ({'.'.join(nested)}): {err.get('msg')}"
    return str(err.get("msg"))


def flatten_errors(errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Collapse pydantic error dicts into {formErrors: [...], fieldErrors: {field: [...]}}.

    Every error is kept; nested errors are grouped under their top-level field.
    A leading 'body' location segment (as added by FastAPI) is ignored.
    """
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}
    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]
        err = {**err, "loc": tuple(loc)}
        if loc and isinstance(loc[0], str):
            field = loc[0]
            field_errors.setdefault(field, []).append(_error_message(field, err))
        else:
            form_errors.append(_error_message(None, err))
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def validate_submission(raw: Any) -> Tuple[Optional[SubmissionWithImage], Optional[Dict[str, Any]]]:
    """
    Validate an untyped payload.

    Returns (submission, None) on success or (None, flattened_errors) on failure.
    The image fields are not part of the schema: they are picked off the
    payload when they are strings and ignored otherwise.
    """
    try:
        data = ModelSubmission.model_validate(raw)
    except ValidationError as e:
        return None, flatten_errors(e.errors())

    image_base64 = raw.get("imageBase64")
    image_name = raw.get("imageName")
    submission = SubmissionWithImage(
        **data.model_dump(),
        image_base64=image_base64 if isinstance(image_base64, str) and image_base64 else None,
        image_name=image_name if isinstance(image_name, str) else None,
    )
    return submission, None
