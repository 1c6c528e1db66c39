"""
Resume Parser Service using Gemini for structured data extraction.
Sends extracted resume text to the model, then recovers and validates the JSON it returns.
"""
import asyncio
import json
import logging
import re
from typing import Any

import httpx
from fastapi import Depends
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..schemas.resume import ParsedResume
from .errors import (
    LLMNotConfiguredError,
    LLMRequestError,
    EmptyModelOutputError,
    ResponseParseError,
    SchemaMismatchError,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Resume Parsing Prompt
# ============================================================================

SYSTEM_INSTRUCTION = "You are a helpful resume parser."

RESUME_PARSER_PROMPT = """
Extract structured information from the following resume text.
Return ONLY valid JSON with no additional text, explanations, comments, or markdown formatting.

IMPORTANT INSTRUCTIONS:
- For experiences, if a company is mentioned (like "Kainos", "University of Birmingham"), use that as the company
- For university projects, use the university name as the company
- Extract any dates mentioned and format as YYYY-MM-DD (e.g., "2024-06-01" for June 2024, use 01 for day when only month/year given)
- If no specific dates are given for experiences, try to infer from education timeline or leave as null
- For ongoing activities, use null for end_date
- Include all technical skills mentioned
- Attach to each experience the skills that were used in it
- proficiency must be one of "Beginner", "Intermediate", "Advanced" or null
- DO NOT include any comments (// or /* */) in the JSON output
- Return only pure, valid JSON that can be parsed directly

Use this exact JSON structure:
{{
  "skills": [{{"name": "skill", "proficiency": "Beginner | Intermediate | Advanced | null", "source": "resume"}}],
  "education": [{{"institution": "name", "period": "dates"}}],
  "experiences": [{{
    "title": "job title",
    "company": "company name",
    "start_date": "YYYY-MM-DD or null",
    "end_date": "YYYY-MM-DD or null",
    "description": "description",
    "skills": [{{"name": "skill", "proficiency": "Beginner | Intermediate | Advanced | null", "source": "resume"}}]
  }}]
}}

Resume text:
{resume_text}
"""


def build_prompt(resume_text: str) -> str:
    return RESUME_PARSER_PROMPT.format(resume_text=resume_text)


# ============================================================================
# Model client
# ============================================================================

class GeminiResumeExtractor:
    """
    Sends resume text to Gemini and returns the raw response text.

    One request per call. Transport/API failures are retried up to
    settings.gemini_max_retries times (0 by default); nothing else is.
    """

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.settings.gemini_api_key:
                raise LLMNotConfiguredError("Gemini API not configured. Please set GEMINI_API_KEY.")
            from google import genai
            self._client = genai.Client(
                api_key=self.settings.gemini_api_key,
                http_options=genai.types.HttpOptions(
                    timeout=int(self.settings.gemini_timeout_seconds * 1000)
                ),
            )
        return self._client

    async def complete(self, resume_text: str) -> str:
        from google import genai
        from google.genai import errors as genai_errors

        client = self._get_client()
        config = genai.types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=0.1,
        )
        prompt = build_prompt(resume_text)

        attempts = self.settings.gemini_max_retries + 1
        for attempt in range(attempts):
            try:
                response = await client.aio.models.generate_content(
                    model=self.settings.gemini_model,
                    contents=prompt,
                    config=config,
                )
                break
            except (genai_errors.APIError, httpx.HTTPError) as e:
                logger.warning(f"Gemini attempt {attempt + 1}/{attempts} failed: {e}")
                if attempt + 1 >= attempts:
                    raise LLMRequestError(f"Model request failed: {e}") from e
                await asyncio.sleep(1 * (attempt + 1))

        raw_output = getattr(response, "text", None)
        if not raw_output:
            raise EmptyModelOutputError()
        return raw_output


# ============================================================================
# Response normalization
# ============================================================================

_FENCED_OBJECT = re.compile(r"```[a-zA-Z]*\s*(\{[\s\S]*?\})\s*```")
# A JSON string literal (kept) or a // comment running to end of line (dropped)
_STRING_OR_COMMENT = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*')


def _strip_line_comments(text: str) -> str:
    return _STRING_OR_COMMENT.sub(lambda m: m.group(1) or "", text)


def extract_json_text(raw_output: str) -> str:
    """Pull the JSON object text out of a model response that may be wrapped in prose or code fences."""
    json_string = raw_output.strip()

    if "```" in json_string:
        match = _FENCED_OBJECT.search(json_string)
        if match:
            json_string = match.group(1).strip()
        else:
            fence_start = json_string.find("```")
            fence_end = json_string.rfind("```")
            if fence_start < fence_end:
                code = json_string[fence_start + 3:fence_end].strip()
                first_newline = code.find("\n")
                # Drop a language tag line such as "json"
                if first_newline != -1 and "{" not in code[:first_newline]:
                    json_string = code[first_newline + 1:].strip()
                else:
                    json_string = code

    if not json_string.startswith("{"):
        first_brace = json_string.find("{")
        last_brace = json_string.rfind("}")
        if first_brace != -1 and first_brace < last_brace:
            json_string = json_string[first_brace:last_brace + 1]

    return _strip_line_comments(json_string).strip()


def normalize_llm_response(raw_output: str) -> Any:
    """
    Recover the JSON value from raw model output.

    Raises:
        ResponseParseError: the extracted text is not valid JSON
    """
    json_string = extract_json_text(raw_output)
    logger.debug(f"Extracted JSON string: {json_string[:100]}...")

    try:
        return json.loads(json_string)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}")
        logger.error(f"Raw response: {raw_output[:500]}...")
        raise ResponseParseError(str(e), json_string) from e


def validate_parsed_resume(data: Any) -> ParsedResume:
    """Check untrusted model JSON against the resume schema."""
    if not isinstance(data, dict):
        raise SchemaMismatchError(f"expected a JSON object, got {type(data).__name__}")
    try:
        return ParsedResume.model_validate(data)
    except ValidationError as e:
        raise SchemaMismatchError(str(e)) from e


async def parse_resume_text(resume_text: str, extractor: GeminiResumeExtractor) -> ParsedResume:
    """
    Run extracted resume text through the model and return validated structured data.

    Dates on experiences come back canonicalized to "YYYY-MM-DD" (or None).
    """
    raw_output = await extractor.complete(resume_text)
    data = normalize_llm_response(raw_output)
    return validate_parsed_resume(data)


def get_resume_extractor(settings: Settings = Depends(get_settings)) -> GeminiResumeExtractor:
    """FastAPI dependency providing the model client for the current settings."""
    return GeminiResumeExtractor(settings)
