from .validator import DictionaryValidator, ValidationCache, DICT_API_URL

__all__ = ["DictionaryValidator", "ValidationCache", "DICT_API_URL"]
