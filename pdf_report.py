import base64
import io
import logging
from dataclasses import dataclass
from typing import Optional

from fpdf import FPDF, XPos, YPos
from PIL import Image

from schemas import ModelSubmission, format_number

logger = logging.getLogger(__name__)

# Layout, in mm from the top-left corner of an A4 page
A4_HEIGHT_MM = 297.0
MARGIN_LEFT = 20.0
TOP_MARGIN = 20.0
LINE_HEIGHT = 7.0
SECTION_GAP = 10.0
PRINTABLE_WIDTH = 170.0
TABLE_BREAK_Y = 270.0
NOTES_BREAK_Y = 250.0
BOTTOM_LIMIT = 280.0
IMAGE_SIZE = 50.0
SECOND_COLUMN_X = 110.0
TABLE_COLUMNS = (20.0, 90.0, 140.0)
TABLE_RIGHT = 180.0

TITLE_COLOR = (192, 192, 192)
BODY_COLOR = (128, 128, 128)
RULE_COLOR = (64, 64, 64)

FONT = "helvetica"


@dataclass
class RenderedDocument:
    content: bytes
    data_uri: str
    page_count: int = 1
    has_image: bool = False


def _latin1(text: str) -> str:
    # core fonts only cover latin-1
    return text.encode("latin-1", errors="replace").decode("latin-1")


def decode_image(data: str) -> Image.Image:
    """
    Turn an uploaded image (data URI or bare base64) into a fully loaded RGB image.

    Raises whatever Pillow or base64 raise on unreadable input.
    """
    payload = data.split(",", 1)[1] if "," in data else data
    raw = base64.b64decode("".join(payload.split()), validate=True)
    if not raw:
        raise ValueError("Empty image payload")
    with Image.open(io.BytesIO(raw)) as img:
        return img.convert("RGB")


class SubmissionPDF(FPDF):
    def __init__(self):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.set_margins(MARGIN_LEFT, TOP_MARGIN, MARGIN_LEFT)
        self.set_auto_page_break(auto=True, margin=A4_HEIGHT_MM - BOTTOM_LIMIT)
        self.set_draw_color(*RULE_COLOR)
        self.add_page()

    def break_if_past(self, threshold: float) -> None:
        if self.get_y() > threshold:
            self.add_page()

    def title_line(self, title: str) -> None:
        self.set_font(FONT, size=20)
        self.set_text_color(*TITLE_COLOR)
        self.cell(0, 10, _latin1(title), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(5)

    def heading(self, title: str) -> None:
        self.set_font(FONT, size=14)
        self.set_text_color(*TITLE_COLOR)
        self.cell(0, LINE_HEIGHT + 2, _latin1(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font(FONT, size=10)
        self.set_text_color(*BODY_COLOR)

    def paragraph(self, text: str, width: float = PRINTABLE_WIDTH) -> None:
        self.multi_cell(width, LINE_HEIGHT, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def end_section(self) -> None:
        self.ln(SECTION_GAP - LINE_HEIGHT)

    def two_columns(self, left: str, right: Optional[str]) -> None:
        self.cell(SECOND_COLUMN_X - MARGIN_LEFT, LINE_HEIGHT, _latin1(left))
        self.cell(0, LINE_HEIGHT, _latin1(right or ""), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def embed_image(self, image_base64: str) -> bool:
        try:
            img = decode_image(image_base64)
            x = self.w / 2 - IMAGE_SIZE / 2
            self.image(img, x=x, y=self.get_y(), w=IMAGE_SIZE, h=IMAGE_SIZE)
        except Exception as e:
            logger.warning("Could not add image to PDF: %s: %s", type(e).__name__, e)
            return False
        self.set_y(self.get_y() + IMAGE_SIZE + 10)
        return True

    def clothing_table(self, submission: ModelSubmission) -> None:
        item_x, real_x, comfort_x = TABLE_COLUMNS
        self.break_if_past(TABLE_BREAK_Y)
        self.cell(real_x - item_x, LINE_HEIGHT, "Item")
        self.cell(comfort_x - real_x, LINE_HEIGHT, "Real Size")
        self.cell(TABLE_RIGHT - comfort_x, LINE_HEIGHT, "Comfort Size", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.line(MARGIN_LEFT, self.get_y(), TABLE_RIGHT, self.get_y())

        for size in submission.clothing_sizes:
            self.break_if_past(TABLE_BREAK_Y)
            row_y = self.get_y()
            self.set_xy(real_x, row_y)
            self.cell(comfort_x - real_x, LINE_HEIGHT, size.real_size)
            self.cell(TABLE_RIGHT - comfort_x, LINE_HEIGHT, size.comfort_size)
            # long item names wrap inside the first column and flow onto new pages
            self.set_xy(item_x, row_y)
            self.paragraph(size.item or " ", width=real_x - item_x - 2)


def _measurement_lines(submission: ModelSubmission):
    return [
        f"Height: {format_number(submission.height)} cm",
        f"Chest/Bust: {format_number(submission.chest)} cm",
        f"Waist: {format_number(submission.waist)} cm",
        f"Hips: {format_number(submission.hips)} cm",
        f"Shoulders: {format_number(submission.shoulders)} cm",
        f"Inseam: {format_number(submission.inseam)} cm",
        f"Sleeve Length: {format_number(submission.sleeve_length)} cm",
        f"Neck: {format_number(submission.neck_circumference)} cm",
    ]


def render_submission_pdf(
    submission: ModelSubmission,
    image_base64: Optional[str] = None,
    filename: str = "model-submission.pdf",
) -> RenderedDocument:
    pdf = SubmissionPDF()
    pdf.title_line("Model Submission Form")

    has_image = pdf.embed_image(image_base64) if image_base64 else False

    pdf.heading("Personal Information")
    pdf.paragraph(f"Full Name: {submission.full_name}")
    pdf.paragraph(f"Email: {submission.email}")
    pdf.paragraph(f"Phone: {submission.phone}")
    pdf.paragraph(f"Address: {submission.address}")
    pdf.end_section()

    pdf.heading("Body Measurements (cm)")
    measurements = _measurement_lines(submission)
    for i in range(0, len(measurements), 2):
        pdf.two_columns(measurements[i], measurements[i + 1] if i + 1 < len(measurements) else None)
    pdf.end_section()

    pdf.heading("Body Profile")
    pdf.paragraph(f"Gender: {submission.gender.capitalize()}")
    pdf.paragraph(f"Body Morphology: {submission.morphology}")
    pdf.end_section()

    pdf.heading("Clothing Sizes")
    pdf.clothing_table(submission)
    pdf.end_section()

    if submission.notes and submission.notes.strip():
        pdf.break_if_past(NOTES_BREAK_Y)
        pdf.heading("Additional Notes")
        pdf.paragraph(submission.notes)

    content = bytes(pdf.output())
    encoded = base64.b64encode(content).decode("ascii")
    return RenderedDocument(
        content=content,
        data_uri=f"data:application/pdf;filename={filename};base64,{encoded}",
        page_count=pdf.page_no(),
        has_image=has_image,
    )
