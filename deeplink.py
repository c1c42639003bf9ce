from typing import Optional
from urllib.parse import quote

from config import Settings, get_settings
from schemas import ModelSubmission, format_number

NO_SIZES_TEXT = "No clothing sizes provided"

# Characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def compose_whatsapp_message(submission: ModelSubmission) -> str:
    if submission.clothing_sizes:
        sizes_text = "\n".join(
            f"{s.item}: Real {s.real_size} / Comfort {s.comfort_size}" for s in submission.clothing_sizes
        )
    else:
        sizes_text = NO_SIZES_TEXT

    return (
        "New Model Submission!\n\n"
        f"Name: {submission.full_name}\n"
        f"Email: {submission.email}\n"
        f"Phone: {submission.phone}\n"
        f"Gender: {submission.gender}\n"
        f"Morphology: {submission.morphology}\n\n"
        f"Height: {format_number(submission.height)}cm\n"
        f"Chest: {format_number(submission.chest)}cm\n"
        f"Waist: {format_number(submission.waist)}cm\n"
        f"Hips: {format_number(submission.hips)}cm\n\n"
        "Clothing Sizes:\n"
        f"{sizes_text}"
    )


def compose_whatsapp_link(submission: ModelSubmission, settings: Optional[Settings] = None) -> str:
    """Pre-filled wa.me link to the operator's number; only the text comes from the submission."""
    s = settings or get_settings()
    text = quote(compose_whatsapp_message(submission), safe=_URI_COMPONENT_SAFE)
    return f"{s.WHATSAPP_BASE_URL.rstrip('/')}/{s.WHATSAPP_NUMBER}?text={text}"
