"""
AI components for the keyword suggestion backend.

1. Keyword generation (single-shot LLM workflow)
   - Prompt, response parsing and static fallback table live in
     backend/agents/keywords/
   - Orchestration (crawl, retry, fallback) lives in
     backend/services/keyword_generation_service.py
   - Uses Gemini through the Google Gen AI SDK; no agent framework
"""
