"""
Gemini blueprint service.

Asks Gemini for six structured photography blueprints via the
generateContent REST endpoint with a JSON response schema.
"""
import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from promptengine.config import settings
from promptengine.models import GenerationResult, ProductInput, ScenarioType
from promptengine.utils.images import split_data_url

logger = logging.getLogger(__name__)


class GeminiServiceError(Exception):
    """Gemini call failed"""
    pass


class MissingCredentialsError(GeminiServiceError):
    """No API key configured; raised before any network activity"""
    pass


class MalformedResponseError(GeminiServiceError):
    """Gemini answered, but not with a usable GenerationResult"""
    pass


SYSTEM_INSTRUCTION = """You are a World-Class E-commerce Prompt Engineer and Commercial Photographer.
Your objective is to generate exactly 6 distinct, professional AI image generation blueprints based on a product's name and category.

PROMPT BLUEPRINT STRUCTURE (11 MANDATORY SECTIONS):
1. HEADER: A clear, concise summary of the shot.
2. SCENE & ENVIRONMENT: Detailed description of the background, atmosphere, and setting.
3. PLACEMENT & INTERACTION: How the product @img1 is positioned. Include specific hand interactions or model poses if relevant (natural skin, realistic pores, candid expressions).
4. SUPPORTING PROPS: Specific items that complement the product without cluttering.
5. PRODUCT INTEGRITY RULES: (CRITICAL) Mention @img1 specifically. Instructions to never change labels, logos, colors, or proportions.
6. LIGHTING GEOMETRY: Technical lighting setup (e.g., Rembrandt, Butterfly, Rim lighting, Profoto softboxes).
7. CAMERA & COMPOSITION: Specific gear (Sony A7R V, Hasselblad), lens focal length, and framing (Rule of thirds, golden ratio).
8. STYLE & COLOR GRADING: Film-like softness, natural saturation, specific color palettes, or e-commerce clean aesthetics.
9. TECH SPECS: 8K, RAW, ray-tracing, shutter speeds (especially for pets/action).
10. QUALITY METRICS: Masterpiece quality, high-fidelity, photorealistic.
11. NEGATIVE PROMPTS: Specific anti-AI terms (plastic skin, airbrushed, CGI, bad anatomy, artificial fur).

Produce exactly one blueprint for each scenario type: Lifestyle Hero, Macro Texture, Environmental Story, Human Connection, Artistic Flat-lay, Catalog Standard.

CATEGORY-SPECIFIC LOGIC:
- FASHION/WEARABLES: Focus on "Editorial" looks. Models must look natural, diverse, and have "authentic skin texture" (no plastic looks).
- WATCHES/JEWELRY: Focus on "Luxury" looks. High-end lighting (Rim/Spot), macro clarity, and expensive environments.
- PET SUPPLIES: Focus on "Active/Heartfelt" looks. Freeze-action shutter speeds, natural fur textures (moist noses, intelligent eyes).
- TECH/ELECTRONICS: Focus on "Minimal/Modern" looks. Clean lines, studio precision, cold or warm accent lighting.

Every prompt MUST use '@img1' to refer to the product to ensure the AI knows to preserve the uploaded reference."""

BLUEPRINT_FIELDS: Dict[str, Optional[str]] = {
    "header": None,
    "scene": "Scene & Environment details",
    "placement": "Placement & Interaction (Hand/Model interaction)",
    "supportingProps": None,
    "dynamicElements": "Product Integrity Rules (must use @img1)",
    "lighting": "Lighting Geometry",
    "camera": "Camera & Composition",
    "color": "Style & Color Grading",
    "techSpecs": None,
    "quality": "Quality Metrics",
    "negativePrompts": None,
}


def build_response_schema() -> Dict[str, Any]:
    """OpenAPI-style schema for Gemini structured output"""
    properties: Dict[str, Any] = {
        "scenarioType": {"type": "STRING", "enum": [s.value for s in ScenarioType]},
    }
    for name, description in BLUEPRINT_FIELDS.items():
        prop = {"type": "STRING"}
        if description:
            prop["description"] = description
        properties[name] = prop

    return {
        "type": "OBJECT",
        "properties": {
            "blueprints": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": properties,
                    "required": ["scenarioType", *BLUEPRINT_FIELDS.keys()],
                },
            },
            "analysis": {"type": "STRING", "description": "Brief visual identity report."},
        },
        "required": ["blueprints"],
    }


def build_user_prompt(product: ProductInput) -> str:
    return (
        f"Product: {product.name}\n"
        f"Category: {product.category}\n"
        "Generate 6 bespoke commercial photography blueprints using the 11-section format. "
        "Refer to the product as @img1. Ensure the prompts are category-intelligent "
        "(e.g., if it's a wearable, include natural human skin instructions; if it's a pet product, "
        "focus on fur and movement). Ensure 0% AI-monotony and 100% natural, high-end photography standards."
    )


def build_request_payload(product: ProductInput) -> Dict[str, Any]:
    """
    Build the generateContent request body.

    Args:
        product: Product name, category and optional reference image

    Returns:
        JSON-serializable request body
    """
    parts: List[Dict[str, Any]] = [{"text": build_user_prompt(product)}]

    if product.image:
        mime_type, data = split_data_url(product.image)
        parts.append({"inlineData": {"mimeType": mime_type, "data": data}})

    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": build_response_schema(),
        },
    }


def _extract_json_from_text(content: str) -> str:
    """Strip a ```json ... ``` wrapper if the model added one"""
    fenced = re.search(r'```(?:json)?\s*\n?(.+?)\n?```', content, re.DOTALL)
    if fenced:
        logger.debug("Extracted JSON from code block")
        return fenced.group(1).strip()
    return content.strip()


def _response_text(body: Dict[str, Any]) -> str:
    candidates = body.get("candidates") or []
    if not candidates:
        feedback = body.get("promptFeedback", {})
        raise MalformedResponseError(f"No candidates in response (feedback: {feedback})")

    content = candidates[0].get("content") or {}
    texts = [part["text"] for part in content.get("parts", []) if isinstance(part.get("text"), str)]
    if not texts:
        finish_reason = candidates[0].get("finishReason")
        raise MalformedResponseError(f"No text in first candidate (finishReason: {finish_reason})")
    return "".join(texts)


def parse_generation_response(body: Dict[str, Any]) -> GenerationResult:
    """
    Turn a generateContent response body into a GenerationResult.

    Raises:
        MalformedResponseError: If the body has no text, the text is not
            JSON, or the JSON does not satisfy GenerationResult
    """
    text = _extract_json_from_text(_response_text(body))
    try:
        data = json.loads(text or "{}")
    except json.JSONDecodeError as e:
        logger.debug(f"Raw content: {text[:500]}")
        raise MalformedResponseError(f"Failed to parse JSON response: {e}") from e

    try:
        return GenerationResult.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Response does not match blueprint schema: {e}") from e


class GeminiPromptService:
    """Generates photography blueprints with Gemini"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.PROMPT_MODEL
        self.base_url = (base_url or settings.GEMINI_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.PROMPT_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self.api_key or "",
            "Content-Type": "application/json",
        }

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/models/{self.model}:generateContent"

        async with aiohttp.ClientSession() as session:
            async with session.post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise GeminiServiceError(f"API error: {response.status} - {error_text[:500]}")
                try:
                    return await response.json()
                except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
                    raise MalformedResponseError(f"Response body is not JSON: {e}") from e

    async def generate_professional_prompts(self, product: ProductInput) -> GenerationResult:
        """
        Ask Gemini for six blueprints.

        Args:
            product: Product name, category and optional reference image

        Returns:
            Validated GenerationResult

        Raises:
            MissingCredentialsError: No API key configured (no request is made)
            GeminiServiceError: Non-200 answer
            MalformedResponseError: Unusable response body
            aiohttp.ClientError, asyncio.TimeoutError: Network failures
        """
        if not self.api_key or not self.api_key.strip():
            raise MissingCredentialsError("API Key missing")

        payload = build_request_payload(product)
        logger.info(
            f"Requesting blueprints from {self.model} for: {product.name[:50]} "
            f"({product.category}) | reference image: {'yes' if product.image else 'no'}"
        )

        body = await self._post(payload)
        result = parse_generation_response(body)

        logger.info(f"Received {len(result.blueprints)} blueprints from {self.model}")
        return result

    async def test_connection(self) -> bool:
        """Test Gemini API connection"""
        if not self.api_key:
            return False
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    f"{self.base_url}/models",
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=10)
                ) as response:
                    return response.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Gemini connection test failed: {e}")
            return False
