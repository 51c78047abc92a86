"""
Services package - Core business logic and integrations

Organized by domain responsibility:

Media (Roast Generation):
    - media: Classification, storylines, video/thumbnail generation over xAI

Infrastructure (Technical Concerns):
    - infrastructure/cache: In-memory TTL cache
    - infrastructure/polling: Backoff poller for asynchronous media jobs
    - infrastructure/llm: Provider interface and the xAI HTTP transport
    - infrastructure/parsing: JSON recovery from model output

Use Cases (Application Layer):
    - use_cases: Single-request and batch orchestration

Architecture Principles:
    - Single Responsibility: Each module/file does one thing
    - Dependency Injection: Services accept dependencies, nothing is a global
    - Async-first: All I/O operations use async/await
    - Error Recovery: Soft failures default and log, hard failures propagate

Import from the subpackages directly, e.g.:
    from roastcast.services.media import MediaGenerationClient
    from roastcast.services.use_cases import GenerationUseCase
"""
