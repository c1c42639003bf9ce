import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

import main
from database import SubmissionStore, get_store


@pytest.fixture
def payload():
    return {
        "fullName": "Jane Doe",
        "email": "jane@example.com",
        "phone": "12345",
        "address": "1 Main St",
        "height": 170,
        "chest": 90,
        "waist": 70,
        "hips": 95,
        "shoulders": 40,
        "inseam": 75,
        "sleeveLength": 60,
        "neckCircumference": 35,
        "gender": "female",
        "morphology": "Hourglass",
        "clothingSizes": [{"item": "T-Shirt", "realSize": "M", "comfortSize": "L"}],
        "notes": "",
    }


@pytest.fixture
def png_data_uri():
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), (200, 30, 30)).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def store():
    return SubmissionStore()


@pytest.fixture
def client(store):
    main.app.dependency_overrides[get_store] = lambda: store
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()
