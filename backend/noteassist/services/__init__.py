# Services package init
"""
NoteAssist Backend — Services Layer
=====================================

Service Inventory:
    - LLMProvider (abstract): text-in/text-out generative model
    - GeminiProvider: LLMProvider backed by Google Gemini
    - AssistService: prompts + parsing for summarize / fix-grammar / auto-tag
    - extraction: best-effort JSON extraction from model replies
    - NoteService: owner-scoped CRUD over the notes table
"""
