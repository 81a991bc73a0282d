"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (AWS Bedrock, OpenAI, the
console, configuration files) by implementing the interfaces defined in the
domain layer. Also includes the resilience utilities.
"""
