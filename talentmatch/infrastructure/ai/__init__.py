"""Resume Parser Implementations.

Contains adapters for the AI providers (AWS Bedrock, OpenAI), each
implementing the `ResumeParser` interface from the domain layer.
"""
