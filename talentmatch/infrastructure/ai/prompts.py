"""Prompt templates shared by the resume parsers."""

RESUME_JSON_STRUCTURE = """{
  "skills": ["skill1", "skill2", "skill3"],
  "experience": "summary of work experience",
  "education": "educational background",
  "summary": "professional summary",
  "yearsOfExperience": number,
  "currentRole": "current job title",
  "location": "location if mentioned",
  "salaryExpectation": number if mentioned,
  "languages": ["language1", "language2"],
  "certifications": ["cert1", "cert2"],
  "projects": ["project1", "project2"]
}"""

EXTRACTION_INSTRUCTIONS = """Instructions:
- Extract all technical and soft skills
- Calculate years of experience from work history
- Identify current or most recent role
- Include location if mentioned
- Extract any certifications or projects
- Be specific and accurate
- Return only valid JSON, no additional text"""


def build_resume_prompt(text: str, language: str = "en") -> str:
    """Single-turn prompt used with Bedrock (Messages and legacy completion APIs)."""
    return (
        "Human: Parse this resume text and extract the following information in JSON format.\n"
        "Be accurate and comprehensive in your analysis.\n\n"
        f"Required JSON structure:\n{RESUME_JSON_STRUCTURE}\n\n"
        f"Resume text ({language}):\n{text}\n\n"
        f"{EXTRACTION_INSTRUCTIONS}\n\n"
        "Assistant:"
    )


OPENAI_SYSTEM_PROMPT = (
    "You are an expert resume parser. Extract structured information from resume text "
    "and return it as valid JSON.\n\n"
    f"Return ONLY valid JSON with this structure:\n{RESUME_JSON_STRUCTURE}\n\n"
    f"{EXTRACTION_INSTRUCTIONS}"
)


def build_openai_user_message(text: str, language: str = "en") -> str:
    return f"Parse this resume ({language}) and extract the structured information:\n\n{text}"
