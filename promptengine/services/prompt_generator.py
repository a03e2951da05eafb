"""
Blueprint generator: Gemini first, deterministic fallback on any failure
"""
import logging
from typing import Optional

from promptengine.models import GenerationResult, ProductInput
from promptengine.services.blueprint_synthesizer import get_fallback_blueprints
from promptengine.services.gemini import GeminiPromptService

logger = logging.getLogger(__name__)

FALLBACK_ANALYSIS = "API simulation active. Using deterministic fallback engine for prompt generation."


class PromptGenerator:
    """Produces a GenerationResult for a product, whatever state the AI service is in"""

    def __init__(self, gemini: Optional[GeminiPromptService] = None):
        self.gemini = gemini or GeminiPromptService()

    async def generate(self, product: ProductInput) -> GenerationResult:
        """
        Generate six blueprints for the product.

        Any failure of the Gemini call (missing key, network, service error,
        malformed response) is logged and replaced with the fallback result.

        Args:
            product: Product name, category and optional reference image

        Returns:
            GenerationResult, never raises for service failures
        """
        try:
            result = await self.gemini.generate_professional_prompts(product)
            logger.info(f"Successfully generated blueprints for: {product.name[:50]}")
            return result
        except Exception as e:
            logger.error(f"Error generating blueprints: {type(e).__name__}: {e}", exc_info=True)
            return self._fallback_response(product)

    def _fallback_response(self, product: ProductInput) -> GenerationResult:
        """Fallback if generation fails"""
        logger.warning(f"Using fallback blueprints for: {product.name[:50]} ({product.category})")
        return GenerationResult(
            blueprints=get_fallback_blueprints(product.name, product.category),
            analysis=FALLBACK_ANALYSIS,
        )
