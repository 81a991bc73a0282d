"""Service for estimating token counts and parsing costs for resume text.

Uses `tiktoken` to provide estimations before sending requests to AI models,
falling back to a character-based approximation when the encoding cannot be
loaded (e.g. offline).
Bounded Context: Token Management
"""

import logging
from dataclasses import dataclass
from typing import Optional

import tiktoken

from talentmatch.domain.models.common import TokenCount

logger = logging.getLogger(__name__)

DEFAULT_TOKENIZER_MODEL = "cl100k_base"
APPROX_CHARS_PER_TOKEN = 4

# gpt-4o-mini pricing, USD per 1K tokens
INPUT_COST_PER_1K_TOKENS = 0.00015
OUTPUT_COST_PER_1K_TOKENS = 0.0006
DEFAULT_MAX_OUTPUT_TOKENS = 2000


class TokenEstimator:
    """Estimates token counts using tiktoken or approximation."""

    def __init__(self, tokenizer_model_name: Optional[str] = None):
        self.tokenizer_name = tokenizer_model_name or DEFAULT_TOKENIZER_MODEL
        self.tokenizer = None
        try:
            self.tokenizer = tiktoken.get_encoding(self.tokenizer_name)
            logger.debug(f"TokenEstimator initialized with tiktoken model: {self.tokenizer_name}")
        except Exception as e:
            # get_encoding may need to download the BPE file
            logger.warning(f"Failed to load tiktoken model '{self.tokenizer_name}': {e}. Falling back to approximation.")

    def estimate_tokens(self, text: str) -> TokenCount:
        """Estimates the token count for a single string of text."""
        if not text:
            return TokenCount(0)
        if self.tokenizer is not None:
            return TokenCount(len(self.tokenizer.encode(text)))
        return TokenCount(len(text) // APPROX_CHARS_PER_TOKEN)


@dataclass
class CostEstimate:
    """Estimated cost (USD) of parsing one resume with OpenAI."""
    input_tokens: int
    input_cost: float
    output_cost: float

    @property
    def total(self) -> float:
        return self.input_cost + self.output_cost


def estimate_parsing_cost(
    text: str,
    estimator: Optional[TokenEstimator] = None,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> CostEstimate:
    """Estimates the worst-case cost of one parse (output assumed at max tokens)."""
    estimator = estimator or TokenEstimator()
    input_tokens = int(estimator.estimate_tokens(text))
    return CostEstimate(
        input_tokens=input_tokens,
        input_cost=(input_tokens / 1000) * INPUT_COST_PER_1K_TOKENS,
        output_cost=(max_output_tokens / 1000) * OUTPUT_COST_PER_1K_TOKENS,
    )
