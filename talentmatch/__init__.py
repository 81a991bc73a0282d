"""talentmatch: resilient resume parsing over AWS Bedrock with OpenAI fallback."""

__version__ = "0.1.0"
