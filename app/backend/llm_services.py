import os
import logging
from typing import Any, Dict
from fastapi import HTTPException
from google import genai
from google.genai import types

from errors import ConfigurationError, UpstreamError
from portfolio_schema import PORTFOLIO_RESPONSE_SCHEMA

logger = logging.getLogger(__name__)

# --- Configure the SDK ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")


def require_api_key() -> str:
    """Returns the Gemini credential, or raises if the server was started without one."""
    if not GEMINI_API_KEY:
        raise ConfigurationError("Server missing GEMINI_API_KEY")
    return GEMINI_API_KEY


# --- Prompt ---

def build_portfolio_prompt(resume_text: str) -> str:
    """
    Builds the instruction that turns raw resume/LinkedIn text into the portfolio JSON.
    The caller is responsible for rejecting empty text before calling this.
    """
    return f"""
You are an expert career coach and professional resume writer. Your task is to analyze the provided resume/LinkedIn profile text and transform it into a structured, HR-friendly JSON object for a modern portfolio website.

**Your Task & Strict Instructions:**
1.  Enhance the content by using strong action verbs, quantifying achievements where the source text allows, and ensuring a professional tone.
2.  Generate SEO metadata (a page title and a meta description of around 155 characters).
3.  Extract certifications and coding profiles like LeetCode and HackerRank if available.
4.  For each skill, provide a `level` from 0-100 representing proficiency, where 100 is an expert. This must be an objective estimation based on the provided text.
5.  Use 'Present' as the `endDate` for ongoing positions or studies.
6.  The `imageUrl` field in projects and `profilePictureUrl` in personalDetails must be left as an empty string. These are provided by user upload; never invent URLs for them.
7.  Do not fabricate information. If a field like `leetcode`, `hackerrank`, or `resumeUrl` is not present in the text, omit it from the JSON.

**User's resume/LinkedIn profile content:**
---
{resume_text}
---

The output MUST be a single valid JSON object matching the provided schema, with no other text, explanations, or markdown.
"""


# --- API Call ---

def call_gemini_api(prompt: str, schema: Dict[str, Any] = PORTFOLIO_RESPONSE_SCHEMA, model: str = None) -> str:
    """Calls the Google Gemini API, constraining the output to `schema`, and returns the raw text."""
    api_key = require_api_key()
    model_name = model or GEMINI_MODEL

    try:
        client = genai.Client(api_key=api_key)
        generation_config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        )
        response = client.models.generate_content(
            model=model_name,
            contents=prompt,
            config=generation_config,
        )

        text = getattr(response, "text", None)
        if not text:
            finish_reason_name = "UNKNOWN"
            if getattr(response, "candidates", None) and hasattr(response.candidates[0].finish_reason, "name"):
                finish_reason_name = response.candidates[0].finish_reason.name
            raise UpstreamError(f"No response text from model (Finish Reason: {finish_reason_name}).")

        return text

    except HTTPException:
        raise
    except Exception as e:
        logger.error("An error occurred with the Gemini API: %s", e)
        message = getattr(e, "message", None) or str(e) or type(e).__name__
        raise UpstreamError(f"An error occurred with the Gemini API: {message}")
