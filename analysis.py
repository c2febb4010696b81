# analysis.py
"""Plant image intake.

Images are written to the upload folder and handed to an ImageAnalyzer.
The default analyzer does not look at the picture at all, it returns a
fixed healthy-plant message in the request language.
"""
import os
import time
from dataclasses import dataclass

CANNED_ANALYSIS = {
    "en": "Image Analysis: The plant appears healthy with no signs of diseases.",
    "ar": "تحليل الصورة: النبات يبدو صحيًا، لا توجد علامات على الأمراض.",
}


@dataclass
class AnalysisResult:
    text: str
    healthy: bool = True


class ImageAnalyzer:
    """Interface for plant image analysis."""

    def analyze(self, image: bytes, locale: str = "en") -> AnalysisResult:
        raise NotImplementedError


class CannedAnalyzer(ImageAnalyzer):

    def analyze(self, image, locale="en"):
        return AnalysisResult(text=CANNED_ANALYSIS.get(locale, CANNED_ANALYSIS["en"]))


def save_image(folder, greenhouse_id, data):
    """Write ``data`` as greenhouse_<id>_<millis>.jpg under ``folder``."""
    os.makedirs(folder, exist_ok=True)
    filename = f"greenhouse_{greenhouse_id}_{int(time.time() * 1000)}.jpg"
    path = os.path.join(folder, filename)
    with open(path, "wb") as fh:
        fh.write(data)
    return path
