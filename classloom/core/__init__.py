# Lazy imports so `classloom.core.ast_parser` can be used without the
# translator and vice versa.

__all__ = [
    "Translator",
    "translate",
    "parse_source",
    "parse_file",
]

_IMPORT_MAP = {
    "Translator": ".translator",
    "translate": ".translator",
    "parse_source": ".ast_parser",
    "parse_file": ".ast_parser",
}


def __getattr__(name):
    if name in _IMPORT_MAP:
        import importlib
        module = importlib.import_module(_IMPORT_MAP[name], __package__)
        return getattr(module, name)
    raise AttributeError(f"module 'classloom.core' has no attribute {name}")
