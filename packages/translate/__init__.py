from .gemini import GeminiTranslator, build_payload, extract_rule_text, DEFAULT_MODEL

__all__ = ["GeminiTranslator", "build_payload", "extract_rule_text", "DEFAULT_MODEL"]
