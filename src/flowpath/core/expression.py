"""Normalization of expression sub-documents.

An expression can be written in four equivalent dialects::

    # 1. wrapped, explicit            # 2. wrapped, shorthand
    expression:                       expression:
      simple:                           simple: ${body}
        expression: ${body}
        trim: true

    # 3. inline, explicit             # 4. inline, shorthand
    simple:                           simple: ${body}
      expression: ${body}

parse_expression() reads any of them into one ExpressionModel and
serialize_expression() always writes dialect 1, removing every other
language key from the holder so at most one language is present.

Both functions are pure transforms over the holder passed in; no state is
kept between calls.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional

EXPRESSION_KEY = "expression"


@dataclass(frozen=True)
class LanguageDefinition:
    """Catalog entry for an expression language.

    Attributes:
        name: Language identifier (e.g. ``bean``).
        model_name: Key used for the language in flow documents (e.g. ``method``).
        title: Human readable title.
        description: Short description.
    """

    name: str
    model_name: str
    title: Optional[str] = None
    description: Optional[str] = None


# (name, model_name, title); ``simple`` leads since it wins ambiguous holders.
_DEFAULT_LANGUAGES = (
    ("simple", "simple", "Simple"),
    ("constant", "constant", "Constant"),
    ("csimple", "csimple", "CSimple"),
    ("datasonnet", "datasonnet", "DataSonnet"),
    ("exchangeProperty", "exchangeProperty", "ExchangeProperty"),
    ("groovy", "groovy", "Groovy"),
    ("header", "header", "Header"),
    ("hl7terser", "hl7terser", "HL7 Terser"),
    ("java", "java", "Java"),
    ("joor", "joor", "jOOR"),
    ("jq", "jq", "JQ"),
    ("js", "js", "JavaScript"),
    ("jsonpath", "jsonpath", "JSONPath"),
    ("bean", "method", "Bean Method"),
    ("mvel", "mvel", "MVEL"),
    ("ognl", "ognl", "OGNL"),
    ("python", "python", "Python"),
    ("ref", "ref", "Ref"),
    ("spel", "spel", "SpEL"),
    ("tokenize", "tokenize", "Tokenize"),
    ("variable", "variable", "Variable"),
    ("wasm", "wasm", "Wasm"),
    ("xpath", "xpath", "XPath"),
    ("xquery", "xquery", "XQuery"),
    ("xtokenize", "xtokenize", "XML Tokenize"),
    ("language", "language", "Language"),
)


class LanguageRegistry:
    """Ordered lookup of expression languages.

    Declaration order is the precedence used when a holder carries more
    than one recognized language key.
    """

    def __init__(self, languages: Optional[Iterable[LanguageDefinition]] = None):
        self._languages: Dict[str, LanguageDefinition] = {}
        for language in languages or ():
            self.register(language)

    @classmethod
    def default(cls) -> "LanguageRegistry":
        return cls(
            LanguageDefinition(name=name, model_name=model_name, title=title)
            for name, model_name, title in _DEFAULT_LANGUAGES
        )

    def register(self, language: LanguageDefinition) -> None:
        """Add a language, or replace a same-named one in place."""
        self._languages[language.name] = language

    def merged(self, overrides: Iterable[LanguageDefinition]) -> "LanguageRegistry":
        registry = LanguageRegistry(self._languages.values())
        for language in overrides:
            registry.register(language)
        return registry

    def get(self, name: Optional[str]) -> Optional[LanguageDefinition]:
        if not name:
            return None
        return self._languages.get(name)

    def by_model_name(self, model_name: str) -> Optional[LanguageDefinition]:
        for language in self._languages.values():
            if language.model_name == model_name:
                return language
        return None

    def lookup(self, name_or_model: Optional[str]) -> Optional[LanguageDefinition]:
        """Find a language by identifier, falling back to its model name."""
        if not name_or_model:
            return None
        return self.get(name_or_model) or self.by_model_name(name_or_model)

    def model_names(self) -> List[str]:
        return [language.model_name for language in self._languages.values()]

    def is_known(self, name_or_model: Optional[str]) -> bool:
        return self.lookup(name_or_model) is not None

    def __iter__(self) -> Iterator[LanguageDefinition]:
        return iter(list(self._languages.values()))

    def __len__(self) -> int:
        return len(self._languages)


class ExpressionModel(NamedTuple):
    """Canonical form of an expression sub-document.

    Attributes:
        language_id: Language identifier, or None when no expression is set.
        model: Language payload, always in ``{"expression": ...}`` form.
    """

    language_id: Optional[str]
    model: Optional[Dict[str, Any]]


EMPTY_EXPRESSION = ExpressionModel(None, None)


def _payload(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {EXPRESSION_KEY: value}


def _language_id(key: str, registry: LanguageRegistry) -> str:
    language = registry.by_model_name(key)
    return language.name if language is not None else key


def _wrapper_key(wrapper: Dict[str, Any], registry: LanguageRegistry) -> Optional[str]:
    if len(wrapper) == 1:
        return next(iter(wrapper))
    for model_name in registry.model_names():
        if model_name in wrapper:
            return model_name
    return None


def parse_expression(holder: Any, registry: LanguageRegistry) -> ExpressionModel:
    """Read the expression carried by a holder, whatever its dialect.

    Args:
        holder: Step definition (or any object) carrying the expression.
        registry: Known languages, in precedence order.

    Returns:
        The canonical ExpressionModel, or EMPTY_EXPRESSION when the holder
        carries no recognizable expression.
    """
    if not isinstance(holder, dict):
        return EMPTY_EXPRESSION

    wrapper = holder.get(EXPRESSION_KEY)
    if isinstance(wrapper, dict) and wrapper:
        key = _wrapper_key(wrapper, registry)
        if key is not None:
            return ExpressionModel(_language_id(key, registry), _payload(wrapper[key]))

    for language in registry:
        value = holder.get(language.model_name)
        if value is not None:
            return ExpressionModel(language.name, _payload(value))

    return EMPTY_EXPRESSION


def serialize_expression(
    holder: Dict[str, Any],
    language_id: Optional[str],
    model: Optional[Dict[str, Any]],
    registry: LanguageRegistry,
) -> Dict[str, Any]:
    """Write an expression into a holder using the wrapped, explicit dialect.

    Every known language key is removed from the holder first. An empty
    or unknown ``language_id`` clears the expression entirely.

    Args:
        holder: Step definition to update in place.
        language_id: Language identifier or model name.
        model: Language payload, e.g. ``{"expression": "${body}"}``.
        registry: Known languages.

    Returns:
        The updated holder.
    """
    for model_name in registry.model_names():
        holder.pop(model_name, None)

    language = registry.lookup(language_id)
    if language is None:
        holder.pop(EXPRESSION_KEY, None)
        return holder

    holder[EXPRESSION_KEY] = {language.model_name: model if model is not None else {}}
    return holder


class ExpressionService:
    """Registry-bound front end for the expression normalizer.

    Example:
        >>> service = ExpressionService(LanguageRegistry.default())
        >>> service.parse({"simple": "${body}"})
        ExpressionModel(language_id='simple', model={'expression': '${body}'})
    """

    def __init__(self, registry: LanguageRegistry):
        self._registry = registry

    @property
    def registry(self) -> LanguageRegistry:
        return self._registry

    def parse(self, holder: Any) -> ExpressionModel:
        return parse_expression(holder, self._registry)

    def serialize(
        self,
        holder: Dict[str, Any],
        language_id: Optional[str],
        model: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        return serialize_expression(holder, language_id, model, self._registry)

    def language_of(self, holder: Any) -> Optional[LanguageDefinition]:
        """Catalog entry of the language a holder uses, if known."""
        return self._registry.get(self.parse(holder).language_id)
