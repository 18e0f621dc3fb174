import random

import google.generativeai as genai

from config import GEMINI_API_KEY, GEMINI_MODEL
from utils.logger import setup_api_logger

logger = setup_api_logger()

PROMPT_TEMPLATE = """You are a travel content generator.
Give me a random tourist destination or city from anywhere in the world.
Avoid repeating popular cities; vary the country and continent every time. Here is a random number for variety: {seed}.

Output must follow this EXACT format:
Line 1: City, Country
Line 2: One sentence description.
Line 3: One sentence description.
Line 4: One sentence description.
Line 5: One sentence description.
Line 6: One sentence description.

Rules:
- No bold text, no markdown, no numbering, no extra lines, no lists.
- Each sentence should be engaging, informative, and under 25 words.
- Do not include any headings or introductions before the city name."""


class DestinationError(Exception):
    pass


def build_prompt(seed: float | None = None) -> str:
    if seed is None:
        seed = random.random() * 10000
    return PROMPT_TEMPLATE.format(seed=seed)


def parse_destination(text: str) -> dict:
    """Split the model reply into the destination line and its description."""
    lines = [line.strip() for line in (text or "").strip().split("\n") if line.strip()]
    if not lines:
        raise DestinationError("Empty response from model")
    return {
        "destination": lines[0],
        "description": "\n".join(lines[1:]),
    }


def generate_destination_text(prompt: str) -> str:
    if not GEMINI_API_KEY:
        raise DestinationError("GEMINI_API_KEY is not configured")
    genai.configure(api_key=GEMINI_API_KEY)
    model = genai.GenerativeModel(GEMINI_MODEL)
    response = model.generate_content(prompt)
    return response.text


def random_destination() -> dict:
    text = generate_destination_text(build_prompt())
    logger.info("Gemini raw output: %r", text)
    return parse_destination(text)
