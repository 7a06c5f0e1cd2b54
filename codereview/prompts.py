from typing import Optional

from codereview.constants import REVIEW_PROMPT_TEMPLATE
from codereview.service import validate_prompt


def build_review_prompt(code: str, language: Optional[str] = None) -> str:
    """Wrap editor code in the review request sent upstream. Blank code is rejected."""
    validate_prompt(code)
    language = (language or "").strip()

    return REVIEW_PROMPT_TEMPLATE.format(
        language=language or "provided",
        fence=language.lower(),
        code=code,
    )
